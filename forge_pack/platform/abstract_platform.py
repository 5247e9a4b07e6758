"""
Abstract Platform

This gives the skeleton for any build tool whose artifacts forge-pack can read
"""
import abc
import json
import logging
from pathlib import Path
from typing import List, Optional

from forge_pack.compiler.compiler import CompilerVersion
from forge_pack.exceptions import AmbiguousArtifact, ArtifactNotFound
from forge_pack.platform.types import Type

LOGGER = logging.getLogger("ForgePack")


class IncorrectPlatformInitialization(Exception):
    """
    Exception raises if a platform was not properly defined
    """

    # pylint: disable=unnecessary-pass
    pass


class AbstractPlatform(metaclass=abc.ABCMeta):
    """
    This is the abstract class for the platform
    """

    NAME: str = ""
    PROJECT_URL: str = ""
    TYPE: Type = Type.NOT_IMPLEMENTED

    def __init__(self, target: str, **_kwargs: str):
        """Init the object

        Args:
            target (str): path to the project
            **_kwargs: optional arguments.

        Raises:
            IncorrectPlatformInitialization: If the Platform was not correctly designed
        """
        if not self.NAME:
            raise IncorrectPlatformInitialization(
                f"NAME is not initialized {self.__class__.__name__}"
            )

        if not self.PROJECT_URL:
            raise IncorrectPlatformInitialization(
                f"PROJECT_URL is not initialized {self.__class__.__name__}"
            )

        if self.TYPE == Type.NOT_IMPLEMENTED:
            raise IncorrectPlatformInitialization(
                f"TYPE is not initialized {self.__class__.__name__}"
            )

        self._target: str = target

    # region Properties.
    ###################################################################################
    ###################################################################################

    @property
    def target(self) -> str:
        """Return the target name

        Returns:
            str: The target name
        """
        return self._target

    # endregion
    ###################################################################################
    ###################################################################################
    # region Abstract methods
    ###################################################################################
    ###################################################################################

    @abc.abstractmethod
    def build(self) -> None:
        """Run the upstream build"""
        return

    @staticmethod
    @abc.abstractmethod
    def is_supported(target: str, **kwargs: str) -> bool:
        """Check if the target is a project supported by this platform

        Args:
            target (str): path to the target
            **kwargs: optional arguments.

        Returns:
            bool: True if the target is supported
        """
        return False

    @property
    @abc.abstractmethod
    def artifacts_directory(self) -> Path:
        """Return the directory holding the artifacts

        Returns:
            Path: artifacts directory
        """
        return Path()

    @abc.abstractmethod
    def artifact_candidates(self, contract_name: str) -> List[Path]:
        """Return every artifact file that may hold the contract

        Args:
            contract_name (str): contract name

        Returns:
            List[Path]: artifact paths, sorted
        """
        return []

    # endregion
    ###################################################################################
    ###################################################################################
    # region Lookup
    ###################################################################################
    ###################################################################################

    @staticmethod
    def _compiler_version_of(path: Path) -> CompilerVersion:
        with open(path, encoding="utf8") as file_desc:
            try:
                raw = json.load(file_desc)
            except json.JSONDecodeError:
                return CompilerVersion("solc", None)
        metadata = raw.get("metadata", None) if isinstance(raw, dict) else None
        if isinstance(metadata, str):
            try:
                metadata = json.loads(metadata)
            except json.JSONDecodeError:
                return CompilerVersion("solc", None)
        if not isinstance(metadata, dict) or not isinstance(metadata.get("compiler"), dict):
            return CompilerVersion("solc", None)
        return CompilerVersion("solc", metadata["compiler"].get("version", None))

    def find_artifact(
        self,
        contract_name: str,
        source_file: Optional[str] = None,
        solc_version: Optional[str] = None,
    ) -> Path:
        """Find the artifact of a contract

        Candidates are narrowed by the declaring file, then by the compiler version.

        Args:
            contract_name (str): contract name
            source_file (Optional[str]): file declaring the contract, if known
            solc_version (Optional[str]): compiler version prefix, such as "0.8.20"

        Raises:
            ArtifactNotFound: If no artifact matches
            AmbiguousArtifact: If several artifacts match

        Returns:
            Path: artifact path
        """
        candidates = self.artifact_candidates(contract_name)
        if not candidates:
            raise ArtifactNotFound(
                f'No artifact found for "{contract_name}" in {self.artifacts_directory}. '
                "Run `forge build` first."
            )

        if source_file is not None and len(candidates) > 1:
            same_file = [c for c in candidates if c.parent.name == Path(source_file).name]
            if same_file:
                candidates = same_file

        if solc_version is not None and len(candidates) > 1:
            candidates = [
                c
                for c in candidates
                if self._compiler_version_of(c).matches(solc_version)
            ]
            if not candidates:
                raise ArtifactNotFound(
                    f'No artifact for "{contract_name}" compiled with solc {solc_version}.'
                )

        if len(candidates) > 1:
            raise AmbiguousArtifact(contract_name, [str(c) for c in candidates])

        return candidates[0]

    def lookup_artifact(
        self,
        contract_name: str,
        source_file: Optional[str] = None,
        solc_version: Optional[str] = None,
    ) -> str:
        """Return the raw json document of a contract

        Args:
            contract_name (str): contract name
            source_file (Optional[str]): file declaring the contract, if known
            solc_version (Optional[str]): compiler version prefix

        Returns:
            str: json document
        """
        path = self.find_artifact(contract_name, source_file, solc_version)
        LOGGER.debug("Reading %s", path)
        with open(path, encoding="utf8") as file_desc:
            return file_desc.read()

    # endregion
    ###################################################################################
    ###################################################################################

