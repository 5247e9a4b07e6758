"""Handle the compiler settings recorded in an artifact
"""
from typing import Optional


# pylint: disable=too-few-public-methods,too-many-arguments
class CompilerVersion:
    """
    Class representing the compiler information
    """

    def __init__(
        self,
        compiler: str,
        version: Optional[str],
        optimize_runs: Optional[int] = None,
        via_ir: Optional[bool] = None,
        evm_version: Optional[str] = None,
        bytecode_hash: Optional[str] = None,
    ) -> None:
        """
        Initialize a compiler version object

        Args:
            compiler (str): compiler (in most of the case use "solc")
            version (Optional[str]): compiler version
            optimize_runs (Optional[int]): optimize runs number
            via_ir (Optional[bool]): true if the IR pipeline was used
            evm_version (Optional[str]): targeted EVM version
            bytecode_hash (Optional[str]): kind of metadata hash appended to the bytecode
        """
        self.compiler: str = compiler
        self.version: Optional[str] = version
        self.optimize_runs: Optional[int] = optimize_runs
        self.via_ir: Optional[bool] = via_ir
        self.evm_version: Optional[str] = evm_version
        self.bytecode_hash: Optional[str] = bytecode_hash

    def matches(self, prefix: str) -> bool:
        """Check if the compiler version starts with the given prefix (ex: "0.8.2")

        Args:
            prefix (str): version prefix

        Returns:
            bool: True if the version is known and matches
        """
        return self.version is not None and self.version.startswith(prefix)
