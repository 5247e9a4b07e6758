"""
Generate the deployer library of a contract
"""
import logging
from collections import Counter
from typing import Dict, List, Optional

from forge_pack.abi_types import RenderedParam, collect_struct_definitions, render_params
from forge_pack.artifact import Artifact
from forge_pack.bytecode import LibraryParameter, segment_bytecode
from forge_pack.codegen.deploy_helper import DEPLOY_HELPER_FILENAME
from forge_pack.codegen.fragments import (
    Fragment,
    FunctionBlock,
    Header,
    LibraryUnit,
    MetadataComment,
    StructBlock,
    initcode_expression,
)
from forge_pack.exceptions import MissingBytecode
from forge_pack.resolver import ResolvedLibrary
from forge_pack.utils.naming import combine_filename_name

LOGGER = logging.getLogger("ForgePack")

DEFAULT_PRAGMA = ">=0.8.0"
DEPLOYER_SUFFIX = "Deployer"
# locals and parameters of the generated deploy functions
GENERATED_NAMES = {"salt", "args", "initcode_", "deployed"}


def deployer_name(contract_name: str) -> str:
    """Return the name of the generated library: Token -> TokenDeployer

    Args:
        contract_name (str): contract name

    Returns:
        str: library name
    """
    return contract_name + DEPLOYER_SUFFIX


class GenerateOptions:  # pylint: disable=too-few-public-methods
    """
    Options of the generation
    """

    def __init__(
        self,
        pragma: str = DEFAULT_PRAGMA,
        libraries: Optional[List[ResolvedLibrary]] = None,
        include_metadata: bool = True,
        helper_path: str = "./utils/" + DEPLOY_HELPER_FILENAME,
    ):
        """Init the options

        Args:
            pragma (str): pragma range of the generated file
            libraries (Optional[List[ResolvedLibrary]]): libraries to deploy
                inline, in deployment order
            include_metadata (bool): add the compiler settings comment
            helper_path (str): import path of DeployHelper.sol
        """
        self.pragma = pragma
        self.libraries: List[ResolvedLibrary] = libraries or []
        self.include_metadata = include_metadata
        self.helper_path = helper_path


def metadata_entries(artifact: Artifact) -> List[str]:
    """Return the lines of the metadata comment

    Args:
        artifact (Artifact): artifact

    Returns:
        List[str]: lines, empty if nothing is known
    """
    compiler = artifact.compiler_version
    entries = []
    if artifact.source_path:
        entries.append(f"@notice Source Contract: {artifact.source_path}")
    if compiler.version:
        entries.append(f"- solc: {compiler.version}")
    if compiler.optimize_runs is not None:
        entries.append(f"- optimizer_runs: {compiler.optimize_runs}")
    if compiler.via_ir is not None:
        entries.append(f"- viaIR: {str(compiler.via_ir).lower()}")
    if compiler.evm_version:
        entries.append(f"- evm_version: {compiler.evm_version}")
    if compiler.bytecode_hash:
        entries.append(f"- bytecodeHash: {compiler.bytecode_hash}")
    return entries


def _warn_name_clashes(owner: str, params: List[RenderedParam], library_names: List[str]) -> None:
    reserved = GENERATED_NAMES | set(library_names)
    for param in params:
        if param.name in reserved:
            LOGGER.warning(
                "%s constructor parameter %s clashes with a name of the generated deployer, "
                "it will not compile",
                owner,
                param.name,
            )


def _warn_duplicate_parameters(owner: str, parameters: List[LibraryParameter]) -> None:
    counts = Counter(parameter.name for parameter in parameters)
    for name, count in counts.items():
        if count > 1:
            LOGGER.warning(
                "%s links %d different libraries named %s, the generated initcode will not compile",
                owner,
                count,
                name,
            )


# pylint: disable=too-many-instance-attributes
class DeployerGenerator:
    """
    Build the fragments of one deployer. Use generate_deployer
    """

    def __init__(self, artifact: Artifact, options: GenerateOptions):
        """Init the generator

        Args:
            artifact (Artifact): contract to deploy
            options (GenerateOptions): generation options

        Raises:
            MissingBytecode: If the contract or one of its libraries has no bytecode
        """
        if not artifact.has_bytecode:
            raise MissingBytecode(
                f'No bytecode found for "{artifact.contract_name}". '
                "Is it an abstract contract or interface?"
            )
        for library in options.libraries:
            if not library.artifact.has_bytecode:
                raise MissingBytecode(f"No bytecode found for library {library.key}")

        self._artifact = artifact
        self._options = options

        constructor = artifact.constructor
        self._constructor_params = constructor.inputs if constructor else []
        self._payable = constructor.is_payable if constructor else False
        self._structs = collect_struct_definitions(self._constructor_params)
        self._params = render_params(
            self._constructor_params, {struct.name for struct in self._structs}
        )

        self._segments, self._library_params = segment_bytecode(
            artifact.bytecode, artifact.link_slots
        )
        _warn_duplicate_parameters(artifact.contract_name, self._library_params)

        self._inline = bool(self._library_params) and bool(options.libraries)
        self._resolved: Dict[str, ResolvedLibrary] = (
            {library.key: library for library in options.libraries} if self._inline else {}
        )
        _warn_name_clashes(
            artifact.contract_name,
            self._params,
            [library.identifier for library in self._resolved.values()]
            + [param.name for param in self._library_params],
        )
        # addresses the caller has to provide, in order of first use
        self._caller_addresses: List[str] = []

    def _address_of(self, parameter: LibraryParameter) -> str:
        """Return the variable holding the address of a library.
        Libraries that are not deployed inline become parameters of the deploy functions

        Args:
            parameter (LibraryParameter): library used by a bytecode

        Returns:
            str: variable name
        """
        resolved = self._resolved.get(combine_filename_name(parameter.filename, parameter.library))
        if resolved is not None:
            return resolved.identifier
        if parameter.name not in self._caller_addresses:
            self._caller_addresses.append(parameter.name)
        return parameter.name

    def _library_initcode_functions(self) -> List[Fragment]:
        functions: List[Fragment] = []
        for library in self._options.libraries if self._inline else []:
            segments, params = segment_bytecode(
                library.artifact.bytecode, library.artifact.link_slots
            )
            _warn_duplicate_parameters(library.library, params)
            functions.append(
                FunctionBlock(
                    f"_{library.identifier}Initcode",
                    [f"address {param.name}" for param in params],
                    "private",
                    [f"return {initcode_expression(segments)};"],
                    mutability="pure",
                    returns="bytes memory",
                )
            )
        return functions

    def _library_deployments(self) -> List[str]:
        lines = []
        for library in self._options.libraries if self._inline else []:
            _, params = segment_bytecode(library.artifact.bytecode, library.artifact.link_slots)
            arguments = ", ".join(self._address_of(param) for param in params)
            lines.append(
                f"address {library.identifier} = "
                f"DeployHelper.deployLibrary(_{library.identifier}Initcode({arguments}));"
            )
        return lines

    def _deploy_body(self, salt: str) -> List[str]:
        lines = self._library_deployments()
        initcode_arguments = ", ".join(self._address_of(param) for param in self._library_params)

        if self._params:
            encoded = ", ".join(param.name for param in self._params)
            lines.append(f"bytes memory args = abi.encode({encoded});")
            lines.append(
                f"bytes memory initcode_ = abi.encodePacked(initcode({initcode_arguments}), args);"
            )
        else:
            lines.append(f"bytes memory initcode_ = initcode({initcode_arguments});")

        if self._payable:
            lines.append(f"deployed = DeployHelper.deploy(initcode_, {salt}, msg.value);")
        elif salt == "bytes32(0)":
            lines.append("deployed = DeployHelper.deploy(initcode_);")
        else:
            lines.append(f"deployed = DeployHelper.deploy(initcode_, {salt});")
        return lines

    def _deploy_functions(self) -> List[Fragment]:
        # the bodies register the caller provided addresses, build them first
        deploy_body = self._deploy_body("bytes32(0)")
        deploy2_body = self._deploy_body("salt")

        params = [
            f"{param.type}{' memory' if param.memory else ''} {param.name}"
            for param in self._params
        ]
        params += [f"address {name}" for name in self._caller_addresses]

        return [
            FunctionBlock("deploy", params, "internal", deploy_body, returns="address deployed"),
            FunctionBlock(
                "deploy2",
                params + ["bytes32 salt"],
                "internal",
                deploy2_body,
                returns="address deployed",
            ),
        ]

    def _initcode_function(self) -> Fragment:
        return FunctionBlock(
            "initcode",
            [f"address {param.name}" for param in self._library_params],
            "internal",
            [f"return {initcode_expression(self._segments)};"],
            mutability="pure",
            returns="bytes memory",
        )

    def build(self) -> LibraryUnit:
        """Build the fragments of the file

        Returns:
            LibraryUnit: the deployer library
        """
        members: List[Fragment] = []
        if self._options.include_metadata:
            entries = metadata_entries(self._artifact)
            if entries:
                members.append(MetadataComment("autogenerated by forge-pack", entries))
        members += [StructBlock(struct) for struct in self._structs]
        members += self._deploy_functions()
        members += self._library_initcode_functions()
        members.append(self._initcode_function())

        header = Header(self._options.pragma, [("DeployHelper", self._options.helper_path)])
        return LibraryUnit(deployer_name(self._artifact.contract_name), header, members)


def generate_deployer(artifact: Artifact, options: Optional[GenerateOptions] = None) -> str:
    """Generate the Solidity deployer of a contract

    Args:
        artifact (Artifact): contract to deploy
        options (Optional[GenerateOptions]): generation options

    Returns:
        str: source of <Contract>Deployer.sol
    """
    return DeployerGenerator(artifact, options or GenerateOptions()).build().render()
