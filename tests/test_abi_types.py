"""
Test the mapping of ABI parameters to Solidity declarations
"""
import pytest

from forge_pack.abi_types import (
    RenderedParam,
    abi_type_to_solidity,
    collect_struct_definitions,
    extract_struct_name,
    needs_memory_location,
    render_params,
)
from forge_pack.artifact import AbiParam

INNER = {
    "name": "inner",
    "type": "tuple",
    "internalType": "struct Pool.Inner",
    "components": [{"name": "flag", "type": "bool", "internalType": "bool"}],
}
OUTER = {
    "name": "config",
    "type": "tuple",
    "internalType": "struct Pool.Config",
    "components": [
        INNER,
        {"name": "fee", "type": "uint24", "internalType": "uint24"},
        {"name": "", "type": "address", "internalType": "contract IERC20"},
    ],
}


@pytest.mark.parametrize(
    "param, expected",
    [
        ({"type": "uint256", "internalType": "uint256"}, "uint256"),
        ({"type": "uint256"}, "uint256"),
        ({"type": "address", "internalType": "contract IERC20"}, "address"),
        ({"type": "address[]", "internalType": "contract IERC20[]"}, "address[]"),
        ({"type": "uint8", "internalType": "enum Pool.Kind"}, "uint8"),
        ({"type": "tuple", "internalType": "struct Pool.Config"}, "Config"),
        ({"type": "tuple[2][]", "internalType": "struct Pool.Config[2][]"}, "Config[2][]"),
        ({"type": "uint256", "internalType": "Price"}, "uint256"),
        ({"type": "bytes32[]", "internalType": "bytes32[]"}, "bytes32[]"),
        ({"type": "address", "internalType": "address payable"}, "address payable"),
    ],
)
def test_abi_type_to_solidity(param, expected) -> None:
    assert abi_type_to_solidity(AbiParam(param)) == expected


def test_extract_struct_name() -> None:
    assert extract_struct_name("struct Config") == "Config"
    assert extract_struct_name("struct Pool.Config[]") == "Config"


@pytest.mark.parametrize(
    "solidity_type, expected",
    [
        ("string", True),
        ("bytes", True),
        ("uint256[]", True),
        ("address[3]", True),
        ("bytes32", False),
        ("address", False),
        ("bool", False),
    ],
)
def test_needs_memory_location(solidity_type, expected) -> None:
    assert needs_memory_location(solidity_type) == expected


def test_nested_structs_are_declared_first() -> None:
    structs = collect_struct_definitions([AbiParam(OUTER), AbiParam(OUTER)])

    assert [struct.name for struct in structs] == ["Inner", "Config"]
    assert structs[0].fields == [("bool", "flag")]
    assert structs[1].fields == [("Inner", "inner"), ("uint24", "fee"), ("address", "field2")]


def test_struct_array_is_collected() -> None:
    param = dict(OUTER, type="tuple[]", internalType="struct Pool.Config[]")
    structs = collect_struct_definitions([AbiParam(param)])
    assert [struct.name for struct in structs] == ["Inner", "Config"]


def test_render_params() -> None:
    params = [
        AbiParam({"name": "name", "type": "string", "internalType": "string"}),
        AbiParam({"name": "", "type": "uint256", "internalType": "uint256"}),
        AbiParam(OUTER),
        AbiParam({"name": "owners", "type": "address[]", "internalType": "address[]"}),
    ]

    rendered = render_params(params, {"Config", "Inner"})

    assert rendered == [
        RenderedParam("string", "name", True),
        RenderedParam("uint256", "arg1", False),
        RenderedParam("Config", "config", True),
        RenderedParam("address[]", "owners", True),
    ]
