"""
Test the decoding of the CBOR metadata appended by solc
"""
import cbor2

from forge_pack.utils.metadata import bytecode_hash_kind, decode_metadata_trailer, solc_version_of


def _append(bytecode: str, payload: bytes) -> str:
    return bytecode + payload.hex() + f"{len(payload):04x}"


def test_decode_release_trailer() -> None:
    trailer = {"ipfs": b"\x12\x20" + b"\x00" * 32, "solc": b"\x00\x08\x18"}
    bytecode = _append("6080", cbor2.dumps(trailer))
    trailer = decode_metadata_trailer(bytecode)

    assert trailer is not None
    assert bytecode_hash_kind(trailer) == "ipfs"
    assert solc_version_of(trailer) == "0.8.24"


def test_decode_prerelease_trailer() -> None:
    bytecode = _append("6080", cbor2.dumps({"bzzr0": b"\x00" * 32, "solc": "0.8.25-nightly"}))
    trailer = decode_metadata_trailer(bytecode)

    assert bytecode_hash_kind(trailer) == "bzzr0"
    assert solc_version_of(trailer) == "0.8.25-nightly"


def test_trailer_without_hash() -> None:
    trailer = decode_metadata_trailer(_append("6080", cbor2.dumps({"solc": b"\x00\x08\x14"})))
    assert bytecode_hash_kind(trailer) == "none"


def test_no_trailer() -> None:
    assert decode_metadata_trailer("") is None
    assert decode_metadata_trailer("6080604052") is None
    assert decode_metadata_trailer("60806040" + "0000") is None
    assert bytecode_hash_kind(None) is None
    assert solc_version_of(None) is None


def test_unlinked_trailer_region() -> None:
    # placeholders are not hex, the trailer cannot be decoded
    assert decode_metadata_trailer("__$" + "0" * 34 + "$__" + "0012") is None
