"""
Foundry platform
"""
import json
import logging
import re
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Union

from forge_pack.platform.abstract_platform import AbstractPlatform
from forge_pack.platform.types import Type
from forge_pack.utils.subprocess import run

LOGGER = logging.getLogger("ForgePack")


class Foundry(AbstractPlatform):
    """
    Foundry platform. Artifacts live in out/<File.sol>/<Contract>.json,
    or out/<File.sol>/<Contract>.<solc version>.json when several compilers were used
    """

    NAME = "Foundry"
    PROJECT_URL = "https://github.com/foundry-rs/foundry"
    TYPE = Type.FOUNDRY

    def __init__(self, target: str, **kwargs: str):
        """Init the platform

        Args:
            target (str): path to the project (or to a file inside it)
            **kwargs: optional arguments. Used: "out_directory"
        """
        super().__init__(target, **kwargs)

        project_root = Foundry.locate_project_root(target)
        self._project_root: Path = project_root if project_root else Path(target).resolve()

        out_directory = kwargs.get("out_directory", None)
        if not out_directory:
            out_directory = Foundry.out_directory(self._project_root)
        self._out_directory: Path = Path(self._project_root, out_directory)

    @property
    def artifacts_directory(self) -> Path:
        """Return the out directory

        Returns:
            Path: out directory
        """
        return self._out_directory

    def build(self) -> None:
        """Run forge build"""
        run(["forge", "build"], cwd=self._project_root)

    def artifact_candidates(self, contract_name: str) -> List[Path]:
        """Return the artifacts named after the contract, in every source directory

        Args:
            contract_name (str): contract name

        Returns:
            List[Path]: artifact paths, sorted
        """
        if not self._out_directory.is_dir():
            return []
        pattern = re.compile(rf"^{re.escape(contract_name)}(\.\d+\.\d+\.\d+)?\.json$")
        return sorted(
            path
            for directory in self._out_directory.iterdir()
            if directory.is_dir()
            for path in directory.iterdir()
            if pattern.match(path.name)
        )

    @staticmethod
    def locate_project_root(file_or_dir: str) -> Optional[Path]:
        """Determine the project root (if the target is a Foundry project)

        Foundry projects are detected through the presence of their
        configuration file. See the following for reference:

        https://github.com/foundry-rs/foundry/blob/6983a938580a1eb25d9dbd61eb8cad8cd137a86d/crates/config/README.md#foundrytoml

        Args:
            file_or_dir (str): path to the target

        Returns:
            Optional[Path]: path to the project root, if found
        """

        target = Path(file_or_dir).resolve()

        # if the target is a directory, see if it has a foundry config
        if target.is_dir() and (target / "foundry.toml").is_file():
            return target

        # if the target is a file, it might be a specific contract
        # within a foundry project. Look in parent directories for a
        # config file
        for p in target.parents:
            if (p / "foundry.toml").is_file():
                return p

        return None

    @staticmethod
    def is_supported(target: str, **kwargs: str) -> bool:
        """Check if the target is a foundry project

        Args:
            target (str): path to the target
            **kwargs: optional arguments. Not used

        Returns:
            bool: True if the target is a foundry project
        """
        return Foundry.locate_project_root(target) is not None

    @staticmethod
    def out_directory(working_dir: Union[str, Path]) -> str:
        """Return the out directory configured in the project, "out" if forge is not available

        Args:
            working_dir (Union[str, Path]): project root

        Returns:
            str: out directory, relative to the project root
        """
        if shutil.which("forge") is None or not (Path(working_dir) / "foundry.toml").is_file():
            return "out"
        LOGGER.info("'forge config --json' running")
        try:
            json_config = json.loads(
                subprocess.run(
                    ["forge", "config", "--json"],
                    cwd=working_dir,
                    stdout=subprocess.PIPE,
                    check=True,
                ).stdout
            )
        except (subprocess.CalledProcessError, json.JSONDecodeError) as exception:
            LOGGER.error("Impossible to read the foundry config, using out: %s", exception)
            return "out"
        return json_config.get("out", "out") or "out"
