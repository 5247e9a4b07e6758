"""
Module handling the cli arguments
"""
from argparse import ArgumentParser

from forge_pack.packparser import DEFAULTS_FLAG_IN_CONFIG


def init(parser: ArgumentParser) -> None:
    """
    Add forge-pack arguments to the parser

    :param parser:
    :return:
    """
    _init_project(parser)
    _init_generation(parser)


def _init_project(parser: ArgumentParser) -> None:
    group_project = parser.add_argument_group("Project options")
    group_project.add_argument(
        "--target",
        help="Project directory (default: .)",
        action="store",
        dest="target",
        default=DEFAULTS_FLAG_IN_CONFIG["target"],
    )

    group_project.add_argument(
        "--framework",
        help="Force the framework used to read the artifacts (foundry, hardhat)",
        action="store",
        dest="framework",
        default=DEFAULTS_FLAG_IN_CONFIG["framework"],
    )

    group_project.add_argument(
        "--out",
        help="Artifacts directory (default: out for foundry, artifacts for hardhat)",
        action="store",
        dest="out_directory",
        default=DEFAULTS_FLAG_IN_CONFIG["out_directory"],
    )

    group_project.add_argument(
        "--build",
        help="Run the framework build (forge build) before reading artifacts",
        action="store_true",
        dest="build",
        default=DEFAULTS_FLAG_IN_CONFIG["build"],
    )

    group_project.add_argument(
        "--npx-disable",
        help="Do not use npx to run hardhat",
        action="store_true",
        dest="npx_disable",
        default=DEFAULTS_FLAG_IN_CONFIG["npx_disable"],
    )

    group_project.add_argument(
        "--solc",
        help="Select the artifact compiled with this solc version when several exist",
        action="store",
        dest="solc",
        default=DEFAULTS_FLAG_IN_CONFIG["solc"],
    )


def _init_generation(parser: ArgumentParser) -> None:
    group_generation = parser.add_argument_group("Generation options")
    group_generation.add_argument(
        "--output",
        help="Where to write the deployer .sol files (default: ./deployers)",
        action="store",
        dest="export_dir",
        default=DEFAULTS_FLAG_IN_CONFIG["export_dir"],
    )

    group_generation.add_argument(
        "--pragma",
        help="Solidity pragma for generated files (default: >=0.8.0)",
        action="store",
        dest="pragma",
        default=DEFAULTS_FLAG_IN_CONFIG["pragma"],
    )

    group_generation.add_argument(
        "--no-metadata",
        help="Do not add the compiler settings comment",
        action="store_true",
        dest="no_metadata",
        default=DEFAULTS_FLAG_IN_CONFIG["no_metadata"],
    )

    group_generation.add_argument(
        "--no-disambiguate",
        help="Fail instead of renaming libraries whose identifiers collide",
        action="store_true",
        dest="no_disambiguate",
        default=DEFAULTS_FLAG_IN_CONFIG["no_disambiguate"],
    )

    group_generation.add_argument(
        "--deployer",
        help="Log the addresses the libraries get when deployed from this contract address",
        action="store",
        dest="deployer",
        default=DEFAULTS_FLAG_IN_CONFIG["deployer"],
    )
