"""
ForgePack main module. Turn build artifacts into deployer libraries.
"""
import inspect
import logging
import os
from typing import Dict, List, Optional, Tuple, Type, Union

from forge_pack.artifact import Artifact, parse_artifact
from forge_pack.bytecode import link_segments, segment_bytecode
from forge_pack.codegen.deploy_helper import DEPLOY_HELPER_FILENAME, DEPLOY_HELPER_SOL
from forge_pack.codegen.deployer import (
    DEFAULT_PRAGMA,
    GenerateOptions,
    deployer_name,
    generate_deployer,
)
from forge_pack.exceptions import ForgePackError
from forge_pack.platform import all_platforms
from forge_pack.platform.abstract_platform import AbstractPlatform
from forge_pack.platform.foundry import Foundry
from forge_pack.resolver import ResolvedLibrary, resolve_libraries
from forge_pack.utils.create2 import compute_create2_address
from forge_pack.utils.naming import combine_filename_name

LOGGER = logging.getLogger("ForgePack")


def get_platforms() -> List[Type[AbstractPlatform]]:
    """Return the available platforms classes

    Returns:
        List[Type[AbstractPlatform]]: Available platforms
    """
    platforms = [getattr(all_platforms, name) for name in dir(all_platforms)]
    platforms = [d for d in platforms if inspect.isclass(d) and issubclass(d, AbstractPlatform)]
    return sorted(platforms, key=lambda platform: platform.TYPE)


# pylint: disable=too-many-instance-attributes
class ForgePack:
    """
    Main class.
    """

    def __init__(self, target: Union[str, AbstractPlatform] = ".", **kwargs: str):
        """Target is the project directory. It can be an AbstractPlatform for custom setup

        Args:
            target (Union[str, AbstractPlatform]): Target
            **kwargs: optional arguments. Used: "framework", "out_directory", "solc",
                "pragma", "no_metadata", "no_disambiguate", "build"
        """
        if isinstance(target, str):
            platform = self._init_platform(target, **kwargs)
        else:
            platform = target
        self._platform: AbstractPlatform = platform

        self._solc_version: Optional[str] = kwargs.get("solc", None)
        self._pragma: str = kwargs.get("pragma", None) or DEFAULT_PRAGMA
        self._include_metadata: bool = not kwargs.get("no_metadata", False)
        self._disambiguate: bool = not kwargs.get("no_disambiguate", False)

        # (contract name, declaring file) -> artifact, shared by every contract of the batch
        self._artifacts: Dict[Tuple[str, Optional[str]], Artifact] = {}
        self._libraries: Dict[str, List[ResolvedLibrary]] = {}
        self._deployers: Dict[str, str] = {}
        self._errors: Dict[str, ForgePackError] = {}

        if kwargs.get("build", False):
            LOGGER.info("Running %s build...", self._platform.NAME)
            self._platform.build()

    # pylint: disable=no-self-use
    def _init_platform(self, target: str, **kwargs: str) -> AbstractPlatform:
        """Init the platform

        Args:
            target (str): path to the target
            **kwargs: optional arguments. Used: "framework"

        Returns:
            AbstractPlatform: Underlying platform
        """
        platforms = get_platforms()
        platform = None

        framework: Optional[str] = kwargs.get("framework", None)
        if framework:
            platform = next(
                (p(target, **kwargs) for p in platforms if p.NAME.lower() == framework.lower()),
                None,
            )

        if not platform:
            platform = next(
                (p(target, **kwargs) for p in platforms if p.is_supported(target)), None
            )

        if not platform:
            platform = Foundry(target, **kwargs)

        return platform

    # region Properties
    ###################################################################################
    ###################################################################################

    @property
    def platform(self) -> AbstractPlatform:
        """Return the underlying platform

        Returns:
            AbstractPlatform: Underlying platform
        """
        return self._platform

    @property
    def deployers(self) -> Dict[str, str]:
        """Return the deployers generated so far

        Returns:
            Dict[str, str]: contract name -> Solidity source
        """
        return self._deployers

    @property
    def errors(self) -> Dict[str, ForgePackError]:
        """Return the failures of the batch

        Returns:
            Dict[str, ForgePackError]: contract name -> error
        """
        return self._errors

    def libraries_of(self, contract_name: str) -> List[ResolvedLibrary]:
        """Return the libraries resolved for a generated contract

        Args:
            contract_name (str): contract name

        Returns:
            List[ResolvedLibrary]: libraries in deployment order
        """
        return self._libraries.get(contract_name, [])

    # endregion
    ###################################################################################
    ###################################################################################
    # region Generation
    ###################################################################################
    ###################################################################################

    def load_artifact(self, contract_name: str, source_file: Optional[str] = None) -> Artifact:
        """Lookup and parse an artifact, once per batch

        Args:
            contract_name (str): contract name
            source_file (Optional[str]): file declaring the contract, if known

        Returns:
            Artifact: parsed artifact
        """
        key = (contract_name, source_file)
        if key not in self._artifacts:
            document = self._platform.lookup_artifact(
                contract_name, source_file, self._solc_version
            )
            self._artifacts[key] = parse_artifact(document, contract_name)
        return self._artifacts[key]

    def _load_library(self, filename: str, library: str) -> Artifact:
        return self.load_artifact(library, filename)

    def generate(self, contract_name: str) -> str:
        """Generate the deployer of a contract

        Args:
            contract_name (str): contract name

        Returns:
            str: Solidity source of the deployer
        """
        artifact = self.load_artifact(contract_name)

        libraries: List[ResolvedLibrary] = []
        if artifact.has_bytecode and artifact.link_slots:
            libraries = resolve_libraries(
                artifact.link_slots, self._load_library, self._disambiguate
            )
            LOGGER.info(
                "[%s] Resolved %d library dep(s): %s",
                contract_name,
                len(libraries),
                ", ".join(library.library for library in libraries),
            )
        self._libraries[contract_name] = libraries

        options = GenerateOptions(
            pragma=self._pragma, libraries=libraries, include_metadata=self._include_metadata
        )
        source = generate_deployer(artifact, options)
        self._deployers[contract_name] = source
        return source

    def generate_all(self, contract_names: List[str]) -> Dict[str, str]:
        """Generate every deployer. A failure is recorded in errors and does not stop the batch

        Args:
            contract_names (List[str]): contract names

        Returns:
            Dict[str, str]: contract name -> Solidity source, for the contracts that succeeded
        """
        for contract_name in contract_names:
            try:
                self.generate(contract_name)
            except ForgePackError as exception:
                LOGGER.error("Error [%s]: %s", contract_name, exception)
                self._errors[contract_name] = exception
        return {name: self._deployers[name] for name in contract_names if name in self._deployers}

    # endregion
    ###################################################################################
    ###################################################################################
    # region Export
    ###################################################################################
    ###################################################################################

    def export(self, export_dir: str) -> List[str]:
        """Write the generated deployers, and DeployHelper.sol if it does not exist yet

        Args:
            export_dir (str): output directory

        Returns:
            List[str]: List of the filenames generated
        """
        generated = []
        utils_dir = os.path.join(export_dir, "utils")
        if not os.path.exists(utils_dir):
            os.makedirs(utils_dir)

        helper_path = os.path.join(utils_dir, DEPLOY_HELPER_FILENAME)
        if not os.path.exists(helper_path):
            with open(helper_path, "w", encoding="utf8") as file_desc:
                file_desc.write(DEPLOY_HELPER_SOL)
            LOGGER.info("Generated %s", helper_path)
            generated.append(helper_path)

        for contract_name, source in self._deployers.items():
            path = os.path.join(export_dir, f"{deployer_name(contract_name)}.sol")
            with open(path, "w", encoding="utf8") as file_desc:
                file_desc.write(source)
            LOGGER.info("Generated %s", path)
            generated.append(path)

        return generated

    # endregion
    ###################################################################################
    ###################################################################################


def predict_library_addresses(libraries: List[ResolvedLibrary], deployer: str) -> Dict[str, str]:
    """Return where DeployHelper.deployLibrary puts each library when called from deployer

    Args:
        libraries (List[ResolvedLibrary]): libraries in deployment order
        deployer (str): address of the contract running the deployer library

    Returns:
        Dict[str, str]: library identifier -> checksummed address
    """
    by_key: Dict[str, str] = {}
    addresses: Dict[str, str] = {}
    for library in libraries:
        segments, params = segment_bytecode(library.artifact.bytecode, library.artifact.link_slots)
        linked = link_segments(
            segments,
            {
                param.name: by_key[combine_filename_name(param.filename, param.library)]
                for param in params
            },
        )
        address = compute_create2_address(deployer, linked)
        by_key[library.key] = address
        addresses[library.identifier] = address
    return addresses
