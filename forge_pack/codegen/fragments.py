"""
Typed pieces of a generated Solidity file. Each fragment renders itself; the library
fragment assembles them
"""
import abc
from typing import List, Optional, Tuple

from forge_pack.abi_types import StructDefinition
from forge_pack.bytecode import HEX_SEGMENT, Segment

INDENT = "    "


def indent(lines: List[str], level: int = 1) -> List[str]:
    """Indent non empty lines

    Args:
        lines (List[str]): lines
        level (int): number of indentations

    Returns:
        List[str]: indented lines
    """
    return [INDENT * level + line if line else line for line in lines]


class Fragment(metaclass=abc.ABCMeta):
    """
    A piece of source code
    """

    @abc.abstractmethod
    def lines(self) -> List[str]:
        """Return the lines of the fragment, without indentation

        Returns:
            List[str]: lines
        """
        return []

    def render(self, level: int = 0) -> str:
        """Render the fragment

        Args:
            level (int): indentation level

        Returns:
            str: source code, without trailing newline
        """
        return "\n".join(indent(self.lines(), level))


class Header(Fragment):
    """
    License, pragma and imports
    """

    def __init__(self, pragma: str, imports: List[Tuple[str, str]], license_id: str = "MIT"):
        self.pragma = pragma
        # (symbol, path)
        self.imports = imports
        self.license_id = license_id

    def lines(self) -> List[str]:
        lines = [
            f"// SPDX-License-Identifier: {self.license_id}",
            f"pragma solidity {self.pragma};",
        ]
        if self.imports:
            lines.append("")
            lines += [f'import {{{symbol}}} from "{path}";' for symbol, path in self.imports]
        return lines


class MetadataComment(Fragment):
    """
    NatSpec block describing how the bytecode was built
    """

    def __init__(self, title: str, entries: List[str]):
        self.title = title
        self.entries = entries

    def lines(self) -> List[str]:
        lines = ["/**", f" * @dev {self.title}", " *"]
        lines += [f" * {entry}" for entry in self.entries]
        return lines + [" */"]


class StructBlock(Fragment):
    """
    A struct declaration
    """

    def __init__(self, definition: StructDefinition):
        self.definition = definition

    def lines(self) -> List[str]:
        fields = [
            f"{field_type} {field_name};" for field_type, field_name in self.definition.fields
        ]
        return [f"struct {self.definition.name} {{"] + indent(fields) + ["}"]


class FunctionBlock(Fragment):
    """
    A function declaration
    """

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        name: str,
        params: List[str],
        visibility: str,
        body: List[str],
        mutability: Optional[str] = None,
        returns: Optional[str] = None,
    ):
        self.name = name
        self.params = params
        self.visibility = visibility
        self.body = body
        self.mutability = mutability
        self.returns = returns

    def signature(self) -> str:
        """Return the declaration line, without the opening brace

        Returns:
            str: signature
        """
        signature = f"function {self.name}({', '.join(self.params)}) {self.visibility}"
        if self.mutability:
            signature += f" {self.mutability}"
        if self.returns:
            signature += f" returns ({self.returns})"
        return signature

    def lines(self) -> List[str]:
        return [self.signature() + " {"] + indent(self.body) + ["}"]


class LibraryUnit(Fragment):
    """
    A whole file: header, then one library holding the members
    """

    def __init__(self, name: str, header: Header, members: List[Fragment]):
        self.name = name
        self.header = header
        self.members = members

    def lines(self) -> List[str]:
        lines = self.header.lines() + ["", f"library {self.name} {{"]
        for i, member in enumerate(self.members):
            if i:
                lines.append("")
            lines += indent(member.lines())
        lines.append("}")
        return lines

    def render(self, level: int = 0) -> str:
        return super().render(level) + "\n"


def initcode_expression(segments: List[Segment]) -> str:
    """Return the expression rebuilding the bytecode from its segments

    Args:
        segments (List[Segment]): segments of the bytecode

    Returns:
        str: a hex literal, or an abi.encodePacked of literals and addresses
    """
    if len(segments) == 1 and segments[0].kind == HEX_SEGMENT:
        return f'hex"{segments[0].value}"'
    parts = [f'hex"{seg.value}"' if seg.kind == HEX_SEGMENT else seg.value for seg in segments]
    return f"abi.encodePacked({', '.join(parts)})"
