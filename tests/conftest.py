"""
Shared fixtures: synthetic artifacts, Foundry out directories and library loaders
"""
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from forge_pack.artifact import Artifact, parse_artifact
from forge_pack.bytecode import library_placeholder
from forge_pack.utils.naming import combine_filename_name

LOGGER = logging.getLogger(__name__)


def _build_artifact(
    bytecode: str = "6080604052",
    link_references: Optional[Dict] = None,
    abi: Optional[List[Dict]] = None,
    metadata: Optional[Dict] = None,
    hardhat: bool = False,
) -> Dict:
    """Build the json of an artifact, Foundry layout unless hardhat is set"""
    link_references = link_references or {}
    if hardhat:
        artifact = {
            "_format": "hh-sol-artifact-1",
            "abi": abi or [],
            "bytecode": bytecode,
            "linkReferences": link_references,
        }
    else:
        artifact = {
            "abi": abi or [],
            "bytecode": {"object": bytecode, "linkReferences": link_references},
        }
    if metadata is not None:
        artifact["metadata"] = metadata
    return artifact


@pytest.fixture
def build_artifact():
    return _build_artifact


@pytest.fixture
def write_foundry_artifact(tmp_path: Path):
    """Write an artifact to tmp_path/out/<source>/<name>.json"""

    def _write(source: str, name: str, artifact: Dict) -> Path:
        directory = tmp_path / "out" / source
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{name}.json"
        path.write_text(json.dumps(artifact), encoding="utf8")
        LOGGER.info("Wrote %s", path)
        return path.resolve()

    return _write


def _linked_artifact(
    name: str, links: Optional[List[Tuple[str, str]]] = None, abi: Optional[List[Dict]] = None
) -> Artifact:
    """Build an artifact whose bytecode holds one placeholder per (file, library) link"""
    bytecode = "6080"
    link_references: Dict = {}
    for filename, library in links or []:
        start = len(bytecode) // 2
        bytecode += library_placeholder(filename, library) + "50"
        link_references.setdefault(filename, {}).setdefault(library, []).append(
            {"start": start, "length": 20}
        )
    return parse_artifact(_build_artifact(bytecode, link_references, abi), name)


@pytest.fixture
def linked_artifact():
    return _linked_artifact


@pytest.fixture
def library_loader():
    """Return a loader over a dict "file:Library" -> Artifact, recording every load"""

    def _loader(libraries: Dict[str, Artifact]):
        def load(filename: str, library: str) -> Artifact:
            key = combine_filename_name(filename, library)
            load.calls.append(key)  # type: ignore
            return libraries[key]

        load.calls = []  # type: ignore
        return load

    return _loader
