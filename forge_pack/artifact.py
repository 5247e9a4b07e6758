"""
Module handling the build artifact of a single contract
"""
import json
import logging
import re
from collections import namedtuple
from typing import Dict, List, Optional, Tuple, Union

from forge_pack.compiler.compiler import CompilerVersion
from forge_pack.exceptions import MalformedArtifact
from forge_pack.utils.metadata import bytecode_hash_kind, decode_metadata_trailer, solc_version_of

LOGGER = logging.getLogger("ForgePack")

NON_HEX = re.compile(r"[^0-9a-f]")

# Offsets are in bytes, not in hex characters
LinkSlot = namedtuple("LinkSlot", ["start", "length"])

# declaring file -> library name -> slots
LinkSlots = Dict[str, Dict[str, List[LinkSlot]]]


class AbiParam:
    """
    Model an ABI parameter (input, output or struct component)
    """

    def __init__(self, param: Dict):
        self._name: str = param.get("name", "") or ""
        self._type: str = param.get("type", "")
        self._internal_type: Optional[str] = param.get("internalType", None)
        self._components: Optional[List["AbiParam"]] = None
        if param.get("components") is not None:
            self._components = [AbiParam(component) for component in param["components"]]
        self._indexed: bool = param.get("indexed", False)

    @property
    def name(self) -> str:
        """Return the parameter name. Empty for positional parameters

        Returns:
            str: name
        """
        return self._name

    @property
    def type(self) -> str:
        """Return the declared ABI type (ex: uint256, tuple[])

        Returns:
            str: ABI type
        """
        return self._type

    @property
    def internal_type(self) -> Optional[str]:
        """Return the internal type (ex: "struct Pool.Config", "contract IERC20")

        Returns:
            Optional[str]: internal type, if the compiler emitted it
        """
        return self._internal_type

    @property
    def components(self) -> Optional[List["AbiParam"]]:
        """Return the nested components of a tuple

        Returns:
            Optional[List[AbiParam]]: components
        """
        return self._components

    @property
    def indexed(self) -> bool:
        """Return true if the parameter is an indexed event parameter

        Returns:
            bool: indexed
        """
        return self._indexed


class AbiEntry:
    """
    Model an ABI entry (constructor, function, event, error, ...)
    """

    def __init__(self, entry: Dict):
        self._type: str = entry.get("type", "function")
        self._name: Optional[str] = entry.get("name", None)
        self._inputs: List[AbiParam] = [AbiParam(param) for param in entry.get("inputs", [])]
        self._outputs: List[AbiParam] = [AbiParam(param) for param in entry.get("outputs", [])]
        self._state_mutability: Optional[str] = entry.get("stateMutability", None)
        # Pre 0.5 ABIs only carry the boolean
        if self._state_mutability is None and entry.get("payable", False):
            self._state_mutability = "payable"

    @property
    def type(self) -> str:
        """Return the kind of entry

        Returns:
            str: constructor, function, event, error, fallback or receive
        """
        return self._type

    @property
    def name(self) -> Optional[str]:
        """Return the entry name (None for the constructor)

        Returns:
            Optional[str]: name
        """
        return self._name

    @property
    def inputs(self) -> List[AbiParam]:
        """Return the inputs

        Returns:
            List[AbiParam]: inputs, in declaration order
        """
        return self._inputs

    @property
    def outputs(self) -> List[AbiParam]:
        """Return the outputs

        Returns:
            List[AbiParam]: outputs, in declaration order
        """
        return self._outputs

    @property
    def state_mutability(self) -> Optional[str]:
        """Return the state mutability

        Returns:
            Optional[str]: pure, view, nonpayable or payable
        """
        return self._state_mutability

    @property
    def is_payable(self) -> bool:
        """Return true if the entry accepts ether

        Returns:
            bool: True if payable
        """
        return self._state_mutability == "payable"


# pylint: disable=too-many-instance-attributes,too-many-arguments
class Artifact:
    """The Artifact class represents one compiled contract, as written by the build tool

    Attributes
    ----------
    contract_name: str
        The contract's name
    abi: List[AbiEntry]
        The application binary interface (ABI) of the contract
    bytecode: str
        The creation bytecode, lowercase hex without 0x. Empty for interfaces
    link_slots: LinkSlots
        The unresolved library slots, per declaring file and library name
    source_path: Optional[str]
        The file the contract was compiled from
    compiler_version: CompilerVersion
        The compiler settings, where known
    """

    def __init__(
        self,
        contract_name: str,
        abi: List[AbiEntry],
        bytecode: str,
        link_slots: LinkSlots,
        source_path: Optional[str],
        compiler_version: CompilerVersion,
    ):
        """Initialize the Artifact class"""

        self._contract_name: str = contract_name
        self._abi: List[AbiEntry] = abi
        self._bytecode: str = bytecode
        self._link_slots: LinkSlots = link_slots
        self._source_path: Optional[str] = source_path
        self._compiler_version: CompilerVersion = compiler_version

    # region Getters
    ###################################################################################
    ###################################################################################

    @property
    def contract_name(self) -> str:
        """Return the name of the contract

        Returns:
            str: Contract name
        """
        return self._contract_name

    @property
    def abi(self) -> List[AbiEntry]:
        """Return the ABI of the contract

        Returns:
            List[AbiEntry]: ABI
        """
        return self._abi

    @property
    def bytecode(self) -> str:
        """Return the creation bytecode of the contract

        Returns:
            str: lowercase hex, without 0x
        """
        return self._bytecode

    @property
    def link_slots(self) -> LinkSlots:
        """Return the unresolved library slots

        Returns:
            LinkSlots: declaring file -> library name -> slots
        """
        return self._link_slots

    @property
    def source_path(self) -> Optional[str]:
        """Return the source file of the contract

        Returns:
            Optional[str]: source path, if recorded
        """
        return self._source_path

    @property
    def compiler_version(self) -> CompilerVersion:
        """Return the compiler settings

        Returns:
            CompilerVersion: compiler settings
        """
        return self._compiler_version

    @property
    def has_bytecode(self) -> bool:
        """Return true if the contract can be deployed

        Returns:
            bool: False for interfaces and abstract contracts
        """
        return bool(self._bytecode)

    @property
    def constructor(self) -> Optional[AbiEntry]:
        """Return the constructor entry

        Returns:
            Optional[AbiEntry]: constructor, None if the contract declares none
        """
        return next((entry for entry in self._abi if entry.type == "constructor"), None)

    # endregion
    ###################################################################################
    ###################################################################################

    def library_ids(self) -> List[Tuple[str, str]]:
        """Return the libraries linked by the contract, without duplicates

        Returns:
            List[Tuple[str, str]]: (declaring file, library name), in encounter order
        """
        return [
            (filename, library)
            for filename, libraries in self._link_slots.items()
            for library in libraries
        ]


def _load_document(document: Union[str, bytes, Dict]) -> Dict:
    if isinstance(document, dict):
        return document
    try:
        loaded = json.loads(document)
    except ValueError as exception:
        # JSONDecodeError, or UnicodeDecodeError for bytes
        raise MalformedArtifact(f"Artifact is not valid JSON: {exception}") from exception
    if not isinstance(loaded, dict):
        raise MalformedArtifact("Artifact is not a JSON object")
    return loaded


def _parse_abi(abi: object) -> List[AbiEntry]:
    if abi is None:
        return []
    if not isinstance(abi, list) or not all(isinstance(entry, dict) for entry in abi):
        raise MalformedArtifact("abi must be a list of objects")
    return [AbiEntry(entry) for entry in abi]


def _parse_link_slots(link_references: object) -> LinkSlots:
    """Convert the linkReferences json to LinkSlots

    Args:
        link_references (object): file -> library -> [{start, length}]

    Raises:
        MalformedArtifact: If the references are not nested objects, or a reference is missing
            its offsets

    Returns:
        LinkSlots: parsed slots
    """
    if not isinstance(link_references, dict):
        raise MalformedArtifact("linkReferences must be an object")
    link_slots: LinkSlots = {}
    for filename, libraries in link_references.items():
        if not isinstance(libraries, dict):
            raise MalformedArtifact(f"linkReferences of {filename} must be an object")
        link_slots[filename] = {}
        for library, references in libraries.items():
            if not isinstance(references, list):
                raise MalformedArtifact(f"Link references of {filename}:{library} must be a list")
            try:
                link_slots[filename][library] = [
                    LinkSlot(start=int(ref["start"]), length=int(ref["length"]))
                    for ref in references
                ]
            except (KeyError, TypeError, ValueError) as exception:
                raise MalformedArtifact(
                    f"Invalid link reference for {filename}:{library}: {exception}"
                ) from exception
    return link_slots


def _check_bytecode(bytecode: str, link_slots: LinkSlots) -> None:
    """Check that the bytecode is hex, once the link slots are left out

    Args:
        bytecode (str): lowercase bytecode, without 0x
        link_slots (LinkSlots): slots holding the library placeholders

    Raises:
        MalformedArtifact: If the bytecode has an odd length or a non hex character
    """
    if len(bytecode) % 2:
        raise MalformedArtifact(f"Bytecode has an odd length ({len(bytecode)})")
    masked = bytecode
    for libraries in link_slots.values():
        for slots in libraries.values():
            for slot in slots:
                start = max(slot.start * 2, 0)
                end = min((slot.start + slot.length) * 2, len(masked))
                if start < end:
                    masked = masked[:start] + "0" * (end - start) + masked[end:]
    invalid = NON_HEX.search(masked)
    if invalid:
        raise MalformedArtifact(
            f"Bytecode holds {invalid.group()!r} at byte {invalid.start() // 2}, "
            "outside of any link reference"
        )


def _parse_metadata(raw: Dict) -> Dict:
    metadata = raw.get("metadata", None)
    if metadata is None:
        metadata = raw.get("rawMetadata", None)
    if isinstance(metadata, str):
        try:
            metadata = json.loads(metadata)
        except json.JSONDecodeError:
            LOGGER.debug("Ignoring unreadable metadata")
            return {}
    if not isinstance(metadata, dict):
        return {}
    if not isinstance(metadata.get("settings", {}), dict):
        raise MalformedArtifact("metadata.settings must be an object")
    return metadata


def _parse_compiler_version(metadata: Dict, bytecode: str) -> CompilerVersion:
    settings = metadata.get("settings", {})
    optimizer = settings.get("optimizer", {})
    trailer = decode_metadata_trailer(bytecode)

    version = metadata.get("compiler", {}).get("version", None)
    if version is None:
        version = solc_version_of(trailer)

    bytecode_hash = settings.get("metadata", {}).get("bytecodeHash", None)
    if bytecode_hash is None:
        bytecode_hash = bytecode_hash_kind(trailer)

    return CompilerVersion(
        compiler=metadata.get("language", "Solidity").lower().replace("solidity", "solc"),
        version=version,
        optimize_runs=optimizer.get("runs", None),
        via_ir=settings.get("viaIR", None),
        evm_version=settings.get("evmVersion", None),
        bytecode_hash=bytecode_hash,
    )


def _parse_raw(raw: Dict, contract_name: str) -> Artifact:
    abi = _parse_abi(raw.get("abi", None))

    bytecode_json = raw.get("bytecode", None)
    if isinstance(bytecode_json, dict):
        bytecode = bytecode_json.get("object", "") or ""
        link_references = bytecode_json.get("linkReferences", None)
    else:
        bytecode = bytecode_json or ""
        link_references = None
    if link_references is None:
        link_references = raw.get("linkReferences", {}) or {}
    if not isinstance(bytecode, str):
        raise MalformedArtifact("bytecode must be a hex string")

    if bytecode.startswith("0x"):
        bytecode = bytecode[2:]
    bytecode = bytecode.lower()
    link_slots = _parse_link_slots(link_references)
    _check_bytecode(bytecode, link_slots)

    metadata = _parse_metadata(raw)
    compilation_target = metadata.get("settings", {}).get("compilationTarget", None)
    source_path = next(iter(compilation_target), None) if compilation_target else None
    if source_path is None:
        source_path = raw.get("sourceName", None)

    return Artifact(
        contract_name=contract_name,
        abi=abi,
        bytecode=bytecode,
        link_slots=link_slots,
        source_path=source_path,
        compiler_version=_parse_compiler_version(metadata, bytecode),
    )


def parse_artifact(document: Union[str, bytes, Dict], contract_name: str) -> Artifact:
    """Parse the json artifact of a contract. Handles the Foundry layout
    (bytecode.object, bytecode.linkReferences) and the Hardhat one (bytecode string,
    top level linkReferences)

    Args:
        document (Union[str, bytes, Dict]): json document, or its loaded content
        contract_name (str): name of the contract

    Raises:
        MalformedArtifact: If the document is not a json object, does not have the artifact
            shape, or has a bytecode that is not hex

    Returns:
        Artifact: parsed artifact
    """
    raw = _load_document(document)
    try:
        return _parse_raw(raw, contract_name)
    except (AttributeError, TypeError) as exception:
        # nested values of an unexpected type (ex: "compiler": "0.8.20")
        raise MalformedArtifact(
            f"Artifact of {contract_name} has an unexpected shape: {exception}"
        ) from exception
