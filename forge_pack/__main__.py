"""
This is the forge-pack cli script
"""
import argparse
import json
import logging
import os
import sys
from importlib.metadata import version
from typing import Any, List, Optional

from forge_pack.exceptions import ForgePackError
from forge_pack.forge_pack import ForgePack, get_platforms, predict_library_addresses
from forge_pack.packparser import DEFAULTS_FLAG_IN_CONFIG, packparser

logging.basicConfig()
LOGGER = logging.getLogger("ForgePack")
LOGGER.setLevel(logging.INFO)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Create a argparse object and parse the arguments

    Args:
        argv (Optional[List[str]]): arguments, sys.argv[1:] by default

    Returns:
        argparse.Namespace: parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="forge-pack. Generate self-contained Solidity deployers from build artifacts",
        usage="forge-pack <ContractName...> [flag]",
    )

    parser.add_argument("contracts", help="Contract names", nargs="*")

    parser.add_argument(
        "--config-file",
        help="Provide a config file (default: forge_pack.config.json)",
        action="store",
        dest="config_file",
        default="forge_pack.config.json",
    )

    parser.add_argument(
        "--version",
        help="displays the current version",
        version=version("forge-pack"),
        action="version",
    )

    parser.add_argument(
        "--supported-platforms",
        help="Shows the platforms supported",
        action=ShowPlatforms,
        nargs=0,
        default=False,
    )

    packparser.init(parser)

    args = parser.parse_args(argv)
    if not args.contracts:
        parser.print_help(sys.stderr)
        sys.exit(1)

    # If there is a config file provided, update the values with the one in the config file
    if os.path.isfile(args.config_file):
        try:
            with open(args.config_file, encoding="utf8") as f_config:
                config = json.load(f_config)
                for key, elem in config.items():
                    if key not in DEFAULTS_FLAG_IN_CONFIG:
                        LOGGER.info("%s has an unknown key: %s : %s", args.config_file, key, elem)
                        continue
                    if getattr(args, key) == DEFAULTS_FLAG_IN_CONFIG[key]:
                        setattr(args, key, elem)
        except json.decoder.JSONDecodeError as exception:
            LOGGER.error(
                "Impossible to read %s, please check the file %s", args.config_file, exception
            )

    return args


class ShowPlatforms(argparse.Action):  # pylint: disable=too-few-public-methods
    """
    This class is used to print the different platforms supported to the log
    See --supported-platforms
    """

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        args: Any,
        values: Any,
        option_string: Optional[str] = None,
    ) -> None:
        """Action performed

        Args:
            parser (argparse.ArgumentParser): argument parser
            args (Any):  not used
            values (Any): not used
            option_string (Optional[str], optional): not used. Defaults to None.
        """
        platforms = get_platforms()
        LOGGER.info("\n" + "\n".join([f"- {x.NAME}: {x.PROJECT_URL}" for x in platforms]))
        parser.exit()


def _log_library_addresses(forge_pack: ForgePack, deployer: str) -> bool:
    """Log where the libraries of each generated contract land

    Args:
        forge_pack (ForgePack): generated project
        deployer (str): address running the deployer libraries

    Returns:
        bool: False if the deployer address is invalid
    """
    for contract_name in forge_pack.deployers:
        libraries = forge_pack.libraries_of(contract_name)
        if not libraries:
            continue
        try:
            addresses = predict_library_addresses(libraries, deployer)
        except ValueError as exception:
            LOGGER.error("Invalid deployer %s: %s", deployer, exception)
            return False
        for identifier, address in addresses.items():
            LOGGER.info("[%s] %s -> %s", contract_name, identifier, address)
    return True


def main(argv: Optional[List[str]] = None) -> None:
    """Main function run from the cli

    Args:
        argv (Optional[List[str]]): arguments, sys.argv[1:] by default
    """
    args = parse_args(argv)
    try:
        forge_pack = ForgePack(**vars(args))
    except ForgePackError as exception:
        LOGGER.error(exception)
        sys.exit(1)

    forge_pack.generate_all(args.contracts)
    forge_pack.export(args.export_dir)

    success = not forge_pack.errors
    if args.deployer:
        success = _log_library_addresses(forge_pack, args.deployer) and success

    if not success:
        sys.exit(1)


if __name__ == "__main__":
    main()
