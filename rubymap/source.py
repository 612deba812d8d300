"""
Source extents and lazy source text resolution.

A declaration node does not keep the parser's tree alive. It holds an
``Extent`` (file path plus inclusive 1-indexed line range) and resolves its
text on demand through a ``SourceCache`` shared by every node of a scan.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

from tree_sitter import Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Extent:
    """Inclusive 1-indexed line range of a declaration within a file."""

    file_path: str
    first_line: int
    last_line: int

    @classmethod
    def from_syntax_node(cls, node: Node, file_path: str) -> "Extent":
        """Build the extent covered by a tree-sitter node.

        A node ending at column 0 stops at the newline of the previous line
        and does not cover the line it nominally ends on.
        """
        first_line = node.start_point.row + 1
        end_row = node.end_point.row
        if node.end_point.column == 0 and end_row > node.start_point.row:
            end_row -= 1
        return cls(file_path=file_path, first_line=first_line, last_line=end_row + 1)

    def contains(self, other: "Extent") -> bool:
        return (
            self.file_path == other.file_path
            and self.first_line <= other.first_line
            and other.last_line <= self.last_line
        )


def split_source_lines(text: str) -> List[str]:
    """Split text on ``\\n`` the way the parser counts rows."""
    lines = text.split("\n")
    if lines and lines[-1] == "" and len(lines) > 1:
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class SourceCache:
    """File-content cache keyed by file path.

    Files are read the first time one of their lines is requested. Sources
    that never touched the disk are added with ``register``.
    """

    def __init__(self):
        self._lines: Dict[str, List[str]] = {}

    def register(self, file_path: str, text: str) -> None:
        self._lines[file_path] = split_source_lines(text)

    def __contains__(self, file_path: str) -> bool:
        return file_path in self._lines

    def lines(self, file_path: str) -> List[str]:
        """Return every line of ``file_path``, loading it if needed."""
        cached = self._lines.get(file_path)
        if cached is not None:
            return cached
        with open(file_path, "rb") as f:
            text = f.read().decode("utf-8", errors="replace")
        logger.debug(f"Loaded source text for {file_path}")
        self._lines[file_path] = split_source_lines(text)
        return self._lines[file_path]

    def slice(self, extent: Extent) -> List[str]:
        """Return the lines covered by ``extent``, never past end of file."""
        lines = self.lines(extent.file_path)
        return lines[extent.first_line - 1:extent.last_line]

    def numbered_slice(self, extent: Extent) -> List[Tuple[int, str]]:
        return list(
            zip(range(extent.first_line, extent.last_line + 1), self.slice(extent))
        )
