"""
Test the artifact lookup of the supported platforms
"""
import json

import pytest

from forge_pack.exceptions import AmbiguousArtifact, ArtifactNotFound
from forge_pack.platform.foundry import Foundry
from forge_pack.platform.hardhat import Hardhat


def _metadata(version: str) -> dict:
    return {"compiler": {"version": version}, "settings": {}}


def test_foundry_lookup(tmp_path, build_artifact, write_foundry_artifact) -> None:
    path = write_foundry_artifact("Token.sol", "Token", build_artifact())
    write_foundry_artifact("Token.sol", "TokenBase", build_artifact())

    platform = Foundry(str(tmp_path), out_directory="out")

    assert platform.find_artifact("Token") == path
    assert json.loads(platform.lookup_artifact("Token")) == build_artifact()


def test_foundry_not_found(tmp_path, build_artifact, write_foundry_artifact) -> None:
    write_foundry_artifact("Token.sol", "Token", build_artifact())
    platform = Foundry(str(tmp_path), out_directory="out")

    with pytest.raises(ArtifactNotFound):
        platform.find_artifact("Vault")


def test_foundry_missing_out_directory(tmp_path) -> None:
    with pytest.raises(ArtifactNotFound):
        Foundry(str(tmp_path), out_directory="out").find_artifact("Token")


def test_foundry_ambiguous(tmp_path, build_artifact, write_foundry_artifact) -> None:
    write_foundry_artifact("Token.sol", "Token", build_artifact())
    write_foundry_artifact("TokenV2.sol", "Token", build_artifact())
    platform = Foundry(str(tmp_path), out_directory="out")

    with pytest.raises(AmbiguousArtifact) as exception:
        platform.find_artifact("Token")
    assert len(exception.value.candidates) == 2
    assert "--solc" in str(exception.value)


def test_foundry_narrowed_by_source_file(tmp_path, build_artifact, write_foundry_artifact) -> None:
    write_foundry_artifact("MathLib.sol", "MathLib", build_artifact())
    path = write_foundry_artifact("MathLibV2.sol", "MathLib", build_artifact())
    platform = Foundry(str(tmp_path), out_directory="out")

    assert platform.find_artifact("MathLib", source_file="src/v2/MathLibV2.sol") == path


def test_foundry_narrowed_by_solc(tmp_path, build_artifact, write_foundry_artifact) -> None:
    write_foundry_artifact(
        "Token.sol", "Token.0.8.19", build_artifact(metadata=_metadata("0.8.19+commit.7dd6d404"))
    )
    path = write_foundry_artifact(
        "Token.sol", "Token.0.8.20", build_artifact(metadata=_metadata("0.8.20+commit.a1b79de6"))
    )
    platform = Foundry(str(tmp_path), out_directory="out")

    with pytest.raises(AmbiguousArtifact):
        platform.find_artifact("Token")
    assert platform.find_artifact("Token", solc_version="0.8.20") == path
    with pytest.raises(ArtifactNotFound):
        platform.find_artifact("Token", solc_version="0.7")


def test_foundry_detection(tmp_path) -> None:
    assert not Foundry.is_supported(str(tmp_path))
    (tmp_path / "foundry.toml").write_text("[profile.default]\n", encoding="utf8")
    (tmp_path / "src").mkdir()
    assert Foundry.is_supported(str(tmp_path))
    assert Foundry.locate_project_root(str(tmp_path / "src")) == tmp_path.resolve()


def test_hardhat_lookup(tmp_path, build_artifact) -> None:
    (tmp_path / "hardhat.config.ts").write_text("export default {};\n", encoding="utf8")
    directory = tmp_path / "artifacts" / "contracts" / "Vault.sol"
    directory.mkdir(parents=True)
    path = directory / "Vault.json"
    path.write_text(json.dumps(build_artifact(hardhat=True)), encoding="utf8")
    build_info = tmp_path / "artifacts" / "build-info"
    build_info.mkdir()
    (build_info / "Vault.json").write_text("{}", encoding="utf8")

    assert Hardhat.is_supported(str(tmp_path))
    platform = Hardhat(str(tmp_path))

    assert platform.artifacts_directory == tmp_path.resolve() / "artifacts"
    assert platform.find_artifact("Vault") == path.resolve()
