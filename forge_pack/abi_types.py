"""
Map ABI constructor parameters to Solidity declarations
"""
import re
from collections import namedtuple
from typing import Dict, List, Set, Tuple

from forge_pack.artifact import AbiParam

CONTRACT_PREFIX = "contract "
ENUM_PREFIX = "enum "
STRUCT_PREFIX = "struct "

ARRAY_SUFFIX = re.compile(r"(\[\d*\])+$")
ELEMENTARY_TYPE = re.compile(
    r"^(u?int\d*|address( payable)?|bool|string|bytes\d*|u?fixed(\d+x\d+)?|function)(\[\d*\])*$"
)

# memory is True when the parameter must be declared with a data location
RenderedParam = namedtuple("RenderedParam", ["type", "name", "memory"])


class StructDefinition:
    """
    A struct to declare in the generated file
    """

    def __init__(self, name: str, fields: List[Tuple[str, str]]):
        self.name: str = name
        # (type, name)
        self.fields: List[Tuple[str, str]] = fields

    def __repr__(self) -> str:
        return f"<StructDefinition {self.name}>"


def strip_array_suffix(solidity_type: str) -> str:
    """Remove every array dimension: Pool.Config[2][] -> Pool.Config

    Args:
        solidity_type (str): type

    Returns:
        str: base type
    """
    return ARRAY_SUFFIX.sub("", solidity_type)


def extract_struct_name(internal_type: str) -> str:
    """Return the bare struct name of an internal type: "struct Pool.Config[]" -> Config

    Args:
        internal_type (str): internal type

    Returns:
        str: struct name, without qualifier nor array suffix
    """
    name = strip_array_suffix(re.sub(r"^struct\s+", "", internal_type))
    return name[name.rfind(".") + 1 :]


def abi_type_to_solidity(param: AbiParam) -> str:
    """Return the Solidity type of a parameter

    Contracts become addresses, enums their underlying integer, structs their bare name.
    User defined value types have a non elementary internal type, and fall back to the ABI type.

    Args:
        param (AbiParam): parameter

    Returns:
        str: Solidity type
    """
    internal_type = param.internal_type
    if not internal_type:
        return param.type
    if internal_type.startswith(CONTRACT_PREFIX):
        return "address" + param.type[len("address") :]
    if internal_type.startswith(ENUM_PREFIX):
        return param.type
    if internal_type.startswith(STRUCT_PREFIX):
        return extract_struct_name(internal_type) + re.sub(r"^tuple", "", param.type)
    if not ELEMENTARY_TYPE.match(internal_type):
        return param.type
    return internal_type


def collect_struct_definitions(params: List[AbiParam]) -> List[StructDefinition]:
    """Collect the structs used anywhere in the parameters

    A struct is recorded after the structs of its fields, and only once.

    Args:
        params (List[AbiParam]): constructor parameters

    Returns:
        List[StructDefinition]: struct definitions
    """
    seen: Dict[str, StructDefinition] = {}

    def walk(param: AbiParam) -> None:
        internal_type = param.internal_type or ""
        if not internal_type.startswith(STRUCT_PREFIX) or param.components is None:
            return
        name = extract_struct_name(internal_type)
        if name in seen:
            return

        for component in param.components:
            walk(component)

        seen[name] = StructDefinition(
            name,
            [
                (abi_type_to_solidity(component), component.name or f"field{i}")
                for i, component in enumerate(param.components)
            ],
        )

    for param in params:
        walk(param)
    return list(seen.values())


def needs_memory_location(solidity_type: str) -> bool:
    """Return true for the dynamically sized and array types

    Args:
        solidity_type (str): type

    Returns:
        bool: True if the type needs a data location
    """
    if solidity_type in ("string", "bytes"):
        return True
    return ARRAY_SUFFIX.search(solidity_type) is not None


def is_struct_type(solidity_type: str, struct_names: Set[str]) -> bool:
    """Return true if the type is one of the collected structs (or an array of it)

    Args:
        solidity_type (str): type
        struct_names (Set[str]): names of the collected structs

    Returns:
        bool: True if the type is a struct
    """
    return strip_array_suffix(solidity_type) in struct_names


def parameter_name(param: AbiParam, index: int) -> str:
    """Return the parameter name, argN for positional ones

    Args:
        param (AbiParam): parameter
        index (int): position of the parameter

    Returns:
        str: name
    """
    return param.name or f"arg{index}"


def render_params(params: List[AbiParam], struct_names: Set[str]) -> List[RenderedParam]:
    """Render the constructor parameters

    Args:
        params (List[AbiParam]): constructor parameters
        struct_names (Set[str]): names of the collected structs

    Returns:
        List[RenderedParam]: type, name and data location of each parameter
    """
    rendered = []
    for i, param in enumerate(params):
        solidity_type = abi_type_to_solidity(param)
        memory = needs_memory_location(solidity_type) or is_struct_type(solidity_type, struct_names)
        rendered.append(RenderedParam(solidity_type, parameter_name(param, i), memory))
    return rendered
