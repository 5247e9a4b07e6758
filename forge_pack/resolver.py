"""
Resolve the libraries a contract links against, recursively, in deployment order
"""
from collections import Counter
from enum import IntEnum
from typing import Callable, Dict, Iterator, List, Tuple

from forge_pack.artifact import Artifact, LinkSlots
from forge_pack.exceptions import CircularDependency, CollidingIdentifier
from forge_pack.utils.naming import combine_filename_name, make_identifier

# (declaring file, library name) -> parsed artifact of the library
ArtifactLoader = Callable[[str, str], Artifact]


class VisitState(IntEnum):
    """
    State of a library during the traversal
    """

    UNVISITED = 0
    IN_PROGRESS = 1
    RESOLVED = 2


class ResolvedLibrary:
    """
    A library to deploy before the contract that links against it
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        identifier: str,
        filename: str,
        library: str,
        artifact: Artifact,
        dependencies: List[str],
    ):
        self.identifier: str = identifier
        self.filename: str = filename
        self.library: str = library
        self.artifact: Artifact = artifact
        # identifiers of the libraries this one links against
        self.dependencies: List[str] = dependencies

    @property
    def key(self) -> str:
        """Return the "file:Library" key of the library

        Returns:
            str: key
        """
        return combine_filename_name(self.filename, self.library)

    def __repr__(self) -> str:
        return f"<ResolvedLibrary {self.key} as {self.identifier}>"


class _Frame:  # pylint: disable=too-few-public-methods
    """
    A library being visited, and the dependencies left to visit
    """

    def __init__(self, filename: str, library: str, artifact: Artifact):
        self.filename = filename
        self.library = library
        self.artifact = artifact
        self.pending: Iterator[Tuple[str, str]] = iter(artifact.library_ids())
        self.dependency_keys: List[str] = []


class LibraryResolver:
    """
    Depth first traversal over the link references. One resolver serves one resolution:
    its states are not shared with other contracts
    """

    def __init__(self, load_artifact: ArtifactLoader, disambiguate: bool = True):
        """Init the resolver

        Args:
            load_artifact (ArtifactLoader): returns the artifact of (declaring file, library)
            disambiguate (bool): rename colliding identifiers instead of failing
        """
        self._load_artifact = load_artifact
        self._disambiguate = disambiguate
        self._states: Dict[str, VisitState] = {}
        self._resolved: Dict[str, ResolvedLibrary] = {}
        self._dependency_keys: Dict[str, List[str]] = {}

    def _state(self, key: str) -> VisitState:
        return self._states.get(key, VisitState.UNVISITED)

    def _enter(self, filename: str, library: str) -> _Frame:
        self._states[combine_filename_name(filename, library)] = VisitState.IN_PROGRESS
        return _Frame(filename, library, self._load_artifact(filename, library))

    def _finish(self, frame: _Frame) -> str:
        key = combine_filename_name(frame.filename, frame.library)
        self._states[key] = VisitState.RESOLVED
        self._dependency_keys[key] = frame.dependency_keys
        self._resolved[key] = ResolvedLibrary(
            identifier=make_identifier(frame.library),
            filename=frame.filename,
            library=frame.library,
            artifact=frame.artifact,
            dependencies=[self._resolved[dep].identifier for dep in frame.dependency_keys],
        )
        return key

    def _visit(self, filename: str, library: str) -> None:
        """Resolve a library and everything it links against

        Iterative, so deep library chains do not hit the recursion limit.

        Args:
            filename (str): declaring file
            library (str): library name

        Raises:
            CircularDependency: If a library is reached again while it is being visited
        """
        root_key = combine_filename_name(filename, library)
        if self._state(root_key) == VisitState.RESOLVED:
            return
        stack: List[_Frame] = [self._enter(filename, library)]

        while stack:
            frame = stack[-1]
            child = next(frame.pending, None)
            if child is None:
                stack.pop()
                key = self._finish(frame)
                if stack:
                    stack[-1].dependency_keys.append(key)
                continue

            child_key = combine_filename_name(*child)
            state = self._state(child_key)
            if state == VisitState.IN_PROGRESS:
                raise CircularDependency(child_key)
            if state == VisitState.RESOLVED:
                frame.dependency_keys.append(child_key)
                continue
            stack.append(self._enter(*child))

    def _rename_collisions(self) -> None:
        """Append 2, 3, ... to identifiers already taken, in resolution order,
        then refresh the dependency lists

        Raises:
            CollidingIdentifier: If a collision exists and renaming is disabled
        """
        libraries = list(self._resolved.values())
        counts = Counter(library.identifier for library in libraries)
        collisions = {identifier for identifier, count in counts.items() if count > 1}
        if not collisions:
            return

        if not self._disambiguate:
            identifier = sorted(collisions)[0]
            raise CollidingIdentifier(
                identifier, [lib.key for lib in libraries if lib.identifier == identifier]
            )

        taken = {library.identifier for library in libraries}
        seen: Dict[str, int] = {}
        for library in libraries:
            if library.identifier not in collisions:
                continue
            index = seen.get(library.identifier, 0) + 1
            seen[library.identifier] = index
            if index == 1:
                continue
            candidate = f"{library.identifier}{index}"
            while candidate in taken:
                index += 1
                candidate = f"{library.identifier}{index}"
            seen[library.identifier] = index
            taken.add(candidate)
            library.identifier = candidate

        for key, library in self._resolved.items():
            library.dependencies = [
                self._resolved[dep].identifier for dep in self._dependency_keys[key]
            ]

    def resolve(self, link_slots: LinkSlots) -> List[ResolvedLibrary]:
        """Resolve every library reachable from the link slots

        Args:
            link_slots (LinkSlots): slots of the root contract

        Returns:
            List[ResolvedLibrary]: libraries, each one after all of its dependencies
        """
        for filename, libraries in link_slots.items():
            for library in libraries:
                self._visit(filename, library)
        self._rename_collisions()
        return list(self._resolved.values())


def resolve_libraries(
    link_slots: LinkSlots, load_artifact: ArtifactLoader, disambiguate: bool = True
) -> List[ResolvedLibrary]:
    """Resolve the libraries of a contract, leaves first

    Args:
        link_slots (LinkSlots): slots of the root contract
        load_artifact (ArtifactLoader): returns the artifact of (declaring file, library)
        disambiguate (bool): rename colliding identifiers instead of failing

    Returns:
        List[ResolvedLibrary]: libraries in deployment order
    """
    return LibraryResolver(load_artifact, disambiguate).resolve(link_slots)
