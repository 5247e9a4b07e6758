"""
Handle the platform type
"""

from enum import IntEnum


class Type(IntEnum):
    """
    Represent the different platform
    """

    NOT_IMPLEMENTED = 0
    FOUNDRY = 1
    HARDHAT = 2

    def __str__(self) -> str:
        """Return a string representation

        Raises:
            ValueError: If the type is missing in __str__ (it should not happen)

        Returns:
            str: string representation
        """
        if self == Type.FOUNDRY:
            return "Foundry"
        if self == Type.HARDHAT:
            return "Hardhat"
        raise ValueError
