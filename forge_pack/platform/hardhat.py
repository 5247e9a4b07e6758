"""
Hardhat platform
"""
import logging
from pathlib import Path
from typing import List, Optional

from forge_pack.platform.abstract_platform import AbstractPlatform
from forge_pack.platform.types import Type
from forge_pack.utils.subprocess import run

LOGGER = logging.getLogger("ForgePack")

CONFIG_FILES = [
    "hardhat.config.js",
    "hardhat.config.ts",
    "hardhat.config.cjs",
    "hardhat.config.mjs",
]


class Hardhat(AbstractPlatform):
    """
    Hardhat platform. Artifacts live in artifacts/<source path>/<File.sol>/<Contract>.json
    """

    NAME = "Hardhat"
    PROJECT_URL = "https://github.com/nomiclabs/hardhat"
    TYPE = Type.HARDHAT

    def __init__(self, target: str, **kwargs: str):
        """Init the platform

        Args:
            target (str): path to the project
            **kwargs: optional arguments. Used: "out_directory", "npx_disable"
        """
        super().__init__(target, **kwargs)

        project_root = Hardhat.locate_project_root(target)
        self._project_root: Path = project_root if project_root else Path(target).resolve()
        self._artifacts_directory = Path(
            self._project_root, kwargs.get("out_directory", None) or "artifacts"
        )
        self._npx_disable = bool(kwargs.get("npx_disable", False))

    @property
    def artifacts_directory(self) -> Path:
        """Return the artifacts directory

        Returns:
            Path: artifacts directory
        """
        return self._artifacts_directory

    def build(self) -> None:
        """Run hardhat compile"""
        base_cmd = ["hardhat"]
        if not self._npx_disable:
            base_cmd = ["npx"] + base_cmd
        run(base_cmd + ["compile"], cwd=self._project_root)

    def artifact_candidates(self, contract_name: str) -> List[Path]:
        """Return the artifacts named after the contract, skipping build-info and debug files

        Args:
            contract_name (str): contract name

        Returns:
            List[Path]: artifact paths, sorted
        """
        if not self._artifacts_directory.is_dir():
            return []
        return sorted(
            path
            for path in self._artifacts_directory.rglob(f"{contract_name}.json")
            if "build-info" not in path.relative_to(self._artifacts_directory).parts
        )

    @staticmethod
    def locate_project_root(file_or_dir: str) -> Optional[Path]:
        """Determine the project root, the closest directory with a hardhat config

        Args:
            file_or_dir (str): path to the target

        Returns:
            Optional[Path]: path to the project root, if found
        """
        target = Path(file_or_dir).resolve()
        for directory in [target] + list(target.parents):
            if any((directory / config).is_file() for config in CONFIG_FILES):
                return directory
        return None

    @staticmethod
    def is_supported(target: str, **kwargs: str) -> bool:
        """Check if the target is a hardhat project

        Args:
            target (str): path to the target
            **kwargs: optional arguments. Not used

        Returns:
            bool: True if the target is a hardhat project
        """
        return Hardhat.locate_project_root(target) is not None
