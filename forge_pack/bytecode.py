"""
Split a bytecode around its library slots, and put addresses back into it
"""
import logging
from collections import namedtuple
from typing import Dict, List, Tuple

from Crypto.Hash import keccak

from forge_pack.artifact import LinkSlots
from forge_pack.exceptions import MalformedArtifact
from forge_pack.utils.naming import combine_filename_name, make_identifier

LOGGER = logging.getLogger("ForgePack")

HEX_SEGMENT = "hex"
LIBRARY_SEGMENT = "lib"

# kind is HEX_SEGMENT (value: hex literal) or LIBRARY_SEGMENT (value: identifier)
Segment = namedtuple("Segment", ["kind", "value"])

# A library address the bytecode needs, in order of first appearance
LibraryParameter = namedtuple("LibraryParameter", ["name", "filename", "library"])

# A flattened slot
_Placeholder = namedtuple("_Placeholder", ["start", "length", "filename", "library"])


def library_placeholder(filename: str, library: str) -> str:
    """Return the placeholder solc (0.5.x and above) writes in the bytecode of an unlinked library:
    __$ + keccak256("file:Library")[:34] + $__

    Args:
        filename (str): file declaring the library
        library (str): library name

    Returns:
        str: 40 characters placeholder
    """
    sha3_result = keccak.new(digest_bits=256)
    sha3_result.update(combine_filename_name(filename, library).encode("utf-8"))
    return "__$" + sha3_result.hexdigest()[:34] + "$__"


def _flatten(link_slots: LinkSlots) -> List[_Placeholder]:
    placeholders = [
        _Placeholder(slot.start, slot.length, filename, library)
        for filename, libraries in link_slots.items()
        for library, slots in libraries.items()
        for slot in slots
    ]
    placeholders.sort(key=lambda placeholder: placeholder.start)
    return placeholders


def _check_placeholder(bytecode: str, placeholder: _Placeholder) -> None:
    """Warn if the slot holds a solc placeholder that belongs to another library

    Args:
        bytecode (str): hex bytecode
        placeholder (_Placeholder): slot to check
    """
    found = bytecode[placeholder.start * 2 : (placeholder.start + placeholder.length) * 2]
    if not found.startswith("__$"):
        return
    expected = library_placeholder(placeholder.filename, placeholder.library)
    if found != expected:
        LOGGER.warning(
            "Slot at byte %d holds %s, expected %s for %s",
            placeholder.start,
            found,
            expected,
            combine_filename_name(placeholder.filename, placeholder.library),
        )


def segment_bytecode(
    bytecode: str, link_slots: LinkSlots
) -> Tuple[List[Segment], List[LibraryParameter]]:
    """Split a bytecode into hex literals and library placeholders

    Placeholders are named with the bare identifier of their library (MathLib -> mathLib).
    The same library may appear several times in the segments, but only once in the
    returned parameters.

    Args:
        bytecode (str): hex bytecode, without 0x
        link_slots (LinkSlots): slots of the bytecode

    Raises:
        MalformedArtifact: If a slot is out of the bytecode, or overlaps the previous one

    Returns:
        Tuple[List[Segment], List[LibraryParameter]]: segments,
            and the libraries in order of first use
    """
    placeholders = _flatten(link_slots)
    if not placeholders:
        return [Segment(HEX_SEGMENT, bytecode)], []

    parameters: Dict[str, LibraryParameter] = {}
    segments: List[Segment] = []
    cursor = 0

    for placeholder in placeholders:
        hex_start = placeholder.start * 2
        hex_end = (placeholder.start + placeholder.length) * 2
        key = combine_filename_name(placeholder.filename, placeholder.library)
        if placeholder.start < 0 or placeholder.length <= 0 or hex_end > len(bytecode):
            raise MalformedArtifact(
                f"Link reference of {key} at byte {placeholder.start} "
                f"(length {placeholder.length}) is outside the bytecode"
            )
        if hex_start < cursor:
            raise MalformedArtifact(
                f"Link reference of {key} at byte {placeholder.start} overlaps the previous one"
            )
        _check_placeholder(bytecode, placeholder)

        if key not in parameters:
            parameters[key] = LibraryParameter(
                make_identifier(placeholder.library), placeholder.filename, placeholder.library
            )

        if hex_start > cursor:
            segments.append(Segment(HEX_SEGMENT, bytecode[cursor:hex_start]))
        segments.append(Segment(LIBRARY_SEGMENT, parameters[key].name))
        cursor = hex_end

    if cursor < len(bytecode):
        segments.append(Segment(HEX_SEGMENT, bytecode[cursor:]))

    return segments, list(parameters.values())


def link_segments(segments: List[Segment], addresses: Dict[str, str]) -> str:
    """Reassemble a bytecode, replacing every placeholder by its address

    Args:
        segments (List[Segment]): segments from segment_bytecode
        addresses (Dict[str, str]): identifier -> address (with or without 0x)

    Raises:
        KeyError: If an address is missing
        ValueError: If an address is not 20 bytes

    Returns:
        str: linked hex bytecode, without 0x
    """
    linked = []
    for segment in segments:
        if segment.kind == HEX_SEGMENT:
            linked.append(segment.value)
            continue
        address = addresses[segment.value]
        if address.startswith("0x"):
            address = address[2:]
        if len(address) != 40:
            raise ValueError(f"{segment.value}: {address} is not a 20 bytes address")
        linked.append(address.lower())
    return "".join(linked)
