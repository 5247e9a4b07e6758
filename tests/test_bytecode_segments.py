"""
Test the splitting of bytecodes around library slots
"""
import logging

import pytest

from forge_pack.artifact import LinkSlot
from forge_pack.bytecode import (
    HEX_SEGMENT,
    LIBRARY_SEGMENT,
    LibraryParameter,
    Segment,
    library_placeholder,
    link_segments,
    segment_bytecode,
)
from forge_pack.exceptions import MalformedArtifact

MATH_LIB = library_placeholder("src/MathLib.sol", "MathLib")
ADDRESS = "0x" + "11" * 20


def test_placeholder_shape() -> None:
    assert len(MATH_LIB) == 40
    assert MATH_LIB.startswith("__$")
    assert MATH_LIB.endswith("$__")
    assert MATH_LIB != library_placeholder("src/Other.sol", "MathLib")


def test_no_slots() -> None:
    segments, params = segment_bytecode("6080604052", {})
    assert segments == [Segment(HEX_SEGMENT, "6080604052")]
    assert params == []


def test_single_slot() -> None:
    bytecode = "608073" + MATH_LIB + "5050"
    link_slots = {"src/MathLib.sol": {"MathLib": [LinkSlot(3, 20)]}}

    segments, params = segment_bytecode(bytecode, link_slots)

    assert segments == [
        Segment(HEX_SEGMENT, "608073"),
        Segment(LIBRARY_SEGMENT, "mathLib"),
        Segment(HEX_SEGMENT, "5050"),
    ]
    assert params == [LibraryParameter("mathLib", "src/MathLib.sol", "MathLib")]


def test_same_library_twice() -> None:
    bytecode = "60" + MATH_LIB + "61" + MATH_LIB + "62"
    link_slots = {"src/MathLib.sol": {"MathLib": [LinkSlot(22, 20), LinkSlot(1, 20)]}}

    segments, params = segment_bytecode(bytecode, link_slots)

    assert [segment.kind for segment in segments] == [
        HEX_SEGMENT,
        LIBRARY_SEGMENT,
        HEX_SEGMENT,
        LIBRARY_SEGMENT,
        HEX_SEGMENT,
    ]
    assert [segment.value for segment in segments if segment.kind == LIBRARY_SEGMENT] == [
        "mathLib",
        "mathLib",
    ]
    assert len(params) == 1


def test_slots_at_both_ends() -> None:
    bytecode = MATH_LIB + "00" + MATH_LIB
    link_slots = {"src/MathLib.sol": {"MathLib": [LinkSlot(0, 20), LinkSlot(21, 20)]}}

    segments, _ = segment_bytecode(bytecode, link_slots)

    assert segments == [
        Segment(LIBRARY_SEGMENT, "mathLib"),
        Segment(HEX_SEGMENT, "00"),
        Segment(LIBRARY_SEGMENT, "mathLib"),
    ]


def test_params_in_order_of_first_use() -> None:
    other = library_placeholder("src/Strings.sol", "Strings")
    bytecode = "60" + other + "61" + MATH_LIB
    link_slots = {
        "src/MathLib.sol": {"MathLib": [LinkSlot(22, 20)]},
        "src/Strings.sol": {"Strings": [LinkSlot(1, 20)]},
    }

    _, params = segment_bytecode(bytecode, link_slots)

    assert [param.name for param in params] == ["strings", "mathLib"]


def test_same_name_in_two_files() -> None:
    first = library_placeholder("a/MathLib.sol", "MathLib")
    second = library_placeholder("b/MathLib.sol", "MathLib")
    bytecode = "60" + first + "61" + second
    link_slots = {
        "a/MathLib.sol": {"MathLib": [LinkSlot(1, 20)]},
        "b/MathLib.sol": {"MathLib": [LinkSlot(22, 20)]},
    }

    _, params = segment_bytecode(bytecode, link_slots)

    # one parameter per library, both named after the bare library name
    assert params == [
        LibraryParameter("mathLib", "a/MathLib.sol", "MathLib"),
        LibraryParameter("mathLib", "b/MathLib.sol", "MathLib"),
    ]


def test_slot_outside_bytecode() -> None:
    with pytest.raises(MalformedArtifact):
        segment_bytecode("6080", {"src/MathLib.sol": {"MathLib": [LinkSlot(1, 20)]}})


def test_overlapping_slots() -> None:
    link_slots = {
        "src/MathLib.sol": {"MathLib": [LinkSlot(0, 20)]},
        "src/Strings.sol": {"Strings": [LinkSlot(10, 20)]},
    }
    with pytest.raises(MalformedArtifact):
        segment_bytecode("00" * 40, link_slots)


def test_wrong_placeholder_is_reported(caplog) -> None:
    bytecode = "60" + library_placeholder("src/Strings.sol", "Strings")
    link_slots = {"src/MathLib.sol": {"MathLib": [LinkSlot(1, 20)]}}

    with caplog.at_level(logging.WARNING, logger="ForgePack"):
        segment_bytecode(bytecode, link_slots)

    assert "src/MathLib.sol:MathLib" in caplog.text


def test_link_segments() -> None:
    bytecode = "608073" + MATH_LIB + "5050"
    segments, _ = segment_bytecode(bytecode, {"src/MathLib.sol": {"MathLib": [LinkSlot(3, 20)]}})

    assert link_segments(segments, {"mathLib": ADDRESS}) == "608073" + "11" * 20 + "5050"
    assert link_segments(segments, {"mathLib": "AB" * 20}) == "608073" + "ab" * 20 + "5050"


def test_link_segments_errors() -> None:
    segments, _ = segment_bytecode(
        "60" + MATH_LIB, {"src/MathLib.sol": {"MathLib": [LinkSlot(1, 20)]}}
    )
    with pytest.raises(KeyError):
        link_segments(segments, {})
    with pytest.raises(ValueError):
        link_segments(segments, {"mathLib": "0x1234"})


def test_link_segments_several_libraries() -> None:
    libraries = {
        "mathLib": ("src/Math.sol", "MathLib", "0x" + "11" * 20),
        "safeCast": ("src/Math.sol", "SafeCast", "0x" + "22" * 20),
        "strings": ("src/Strings.sol", "Strings", "0x" + "33" * 20),
    }
    layout = ["6080", "mathLib", "01", "safeCast", "0203", "strings", "04", "mathLib", "05"]

    bytecode = ""
    linked = ""
    link_slots = {}
    for part in layout:
        if part not in libraries:
            bytecode += part
            linked += part
            continue
        filename, library, address = libraries[part]
        link_slots.setdefault(filename, {}).setdefault(library, []).append(
            LinkSlot(len(bytecode) // 2, 20)
        )
        bytecode += library_placeholder(filename, library)
        linked += address[2:]

    segments, params = segment_bytecode(bytecode, link_slots)

    assert [param.name for param in params] == ["mathLib", "safeCast", "strings"]
    assert sum(segment.kind == LIBRARY_SEGMENT for segment in segments) == 4
    addresses = {name: address for name, (_, _, address) in libraries.items()}
    assert link_segments(segments, addresses) == linked
