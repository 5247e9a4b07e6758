"""
Errors raised while turning build artifacts into deployer sources
"""
from typing import List


class ForgePackError(Exception):
    """
    Base exception. Every failure that concerns a single contract derives from it,
    so a batch can report it and move on to the next contract
    """


class MalformedArtifact(ForgePackError):
    """
    Raised if an artifact cannot be parsed, or if its link references do not fit its bytecode
    """


class MissingBytecode(ForgePackError):
    """
    Raised if an artifact has no bytecode (interface or abstract contract)
    """


class ArtifactNotFound(ForgePackError):
    """
    Raised if no artifact exists for a contract name
    """


class AmbiguousArtifact(ForgePackError):
    """
    Raised if several artifacts match a contract name
    """

    def __init__(self, contract_name: str, candidates: List[str]):
        """Init the exception

        Args:
            contract_name (str): name looked up
            candidates (List[str]): paths of the matching artifacts
        """
        self.contract_name = contract_name
        self.candidates = candidates
        listing = "\n".join(f"  {candidate}" for candidate in candidates)
        super().__init__(
            f'Multiple artifacts found for "{contract_name}". '
            f"Use --solc to disambiguate:\n{listing}"
        )


class CircularDependency(ForgePackError):
    """
    Raised if a library transitively links against itself
    """

    def __init__(self, key: str):
        """Init the exception

        Args:
            key (str): "file:Library" key visited twice on the same path
        """
        self.key = key
        super().__init__(f"Circular library dependency detected: {key}")


class CollidingIdentifier(ForgePackError):
    """
    Raised if two libraries map to the same identifier and renaming is disabled
    """

    def __init__(self, identifier: str, keys: List[str]):
        """Init the exception

        Args:
            identifier (str): identifier shared by the libraries
            keys (List[str]): "file:Library" keys of the libraries
        """
        self.identifier = identifier
        self.keys = keys
        super().__init__(f"Libraries {', '.join(keys)} all map to the identifier {identifier}")


class UpstreamBuildFailed(ForgePackError):
    """
    Raised if the upstream build command returned an error
    """
