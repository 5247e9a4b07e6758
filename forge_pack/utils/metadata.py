"""
Decode the CBOR metadata that solc appends to the bytecode
https://docs.soliditylang.org/en/latest/metadata.html#encoding-of-the-metadata-hash-in-the-bytecode
"""
import logging
from typing import Dict, Optional

import cbor2

LOGGER = logging.getLogger("ForgePack")

# Keys solc uses for the source hash, in order of preference
HASH_KINDS = ["ipfs", "bzzr1", "bzzr0"]


def decode_metadata_trailer(bytecode: str) -> Optional[Dict]:
    """Decode the CBOR map at the end of a hex bytecode

    The last two bytes hold the length of the CBOR payload that precedes them.

    Args:
        bytecode (str): hex bytecode, without 0x

    Returns:
        Optional[Dict]: decoded map, or None if there is no valid trailer
    """
    if len(bytecode) < 4:
        return None
    try:
        length = int(bytecode[-4:], 16)
    except ValueError:
        return None
    start = len(bytecode) - 4 - 2 * length
    if length == 0 or start < 0:
        return None
    try:
        decoded = cbor2.loads(bytes.fromhex(bytecode[start:-4]))
    except (ValueError, cbor2.CBORDecodeError):
        return None
    if not isinstance(decoded, dict):
        return None
    return decoded


def bytecode_hash_kind(trailer: Optional[Dict]) -> Optional[str]:
    """Return the kind of hash stored in a metadata trailer

    Args:
        trailer (Optional[Dict]): decoded trailer

    Returns:
        Optional[str]: "ipfs", "bzzr1", "bzzr0", "none" if solc was told not to hash,
            None without trailer
    """
    if trailer is None:
        return None
    for kind in HASH_KINDS:
        if kind in trailer:
            return kind
    return "none"


def solc_version_of(trailer: Optional[Dict]) -> Optional[str]:
    """Return the solc version stored in a metadata trailer

    Release builds store three bytes (major, minor, patch), pre-releases a string.

    Args:
        trailer (Optional[Dict]): decoded trailer

    Returns:
        Optional[str]: version, such as "0.8.20"
    """
    if trailer is None:
        return None
    version = trailer.get("solc")
    if isinstance(version, bytes) and len(version) == 3:
        return ".".join(str(part) for part in version)
    if isinstance(version, str):
        return version
    return None
