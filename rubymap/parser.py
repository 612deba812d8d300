"""
Tree-sitter parser initialization and file parsing utilities.

This module provides functions to initialize the Ruby parser and parse
source files. Malformed input is reported as a ``ParseFailure`` carrying
the location of the first syntax error tree-sitter recovered from.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import tree_sitter_ruby as tsruby
from tree_sitter import Language, Node, Parser, Tree

from rubymap.config import ERROR_NODE, IN_MEMORY_PATH

# Configure logging
logger = logging.getLogger(__name__)

# Module-level language constant
RUBY_LANGUAGE = Language(tsruby.language())

# Longest snippet of offending source quoted in an error message
_SNIPPET_LIMIT = 40


class ParseFailure(Exception):
    """Raised when a Ruby source cannot be parsed without errors.

    Attributes:
        message: Short description of the offending construct.
        file_path: Path of the source that failed to parse.
        line: 1-indexed line of the first error.
        column: 1-indexed column of the first error.
    """

    def __init__(self, message: str, file_path: str, line: int, column: int):
        self.message = message
        self.file_path = file_path
        self.line = line
        self.column = column
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"syntax error at {self.line}:{self.column}: {self.message}"


@dataclass
class ParsedSource:
    """A successfully parsed source file.

    Attributes:
        file_path: Path the source was read from (or a pseudo path).
        tree: The parsed tree-sitter tree.
        source_bytes: Raw source bytes the tree was built from.
    """

    file_path: str
    tree: Tree
    source_bytes: bytes

    @property
    def root_node(self) -> Node:
        return self.tree.root_node


def create_parser() -> Parser:
    """Create and configure a tree-sitter parser for Ruby.

    Returns:
        A Parser instance configured with the Ruby language.

    Example:
        >>> parser = create_parser()
        >>> tree = parser.parse(b"class Foo; end")
    """
    parser = Parser(RUBY_LANGUAGE)
    logger.debug("Created tree-sitter Ruby parser")
    return parser


def find_first_error(node: Node) -> Optional[Node]:
    """Return the first ``ERROR`` or ``MISSING`` node in document order."""
    if node.type == ERROR_NODE or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = find_first_error(child)
        if found is not None:
            return found
    return None


def count_error_nodes(tree: Tree) -> int:
    """Count ``ERROR`` and ``MISSING`` nodes in a parsed tree."""
    count = 0
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type == ERROR_NODE or node.is_missing:
            count += 1
        if node.has_error:
            stack.extend(node.children)
    return count


def _describe_error(node: Node) -> str:
    if node.is_missing:
        return f"missing '{node.type}'"
    text = (node.text or b"").decode("utf-8", errors="replace").strip()
    snippet = text.splitlines()[0] if text else ""
    if len(snippet) > _SNIPPET_LIMIT:
        snippet = snippet[:_SNIPPET_LIMIT] + "..."
    if not snippet:
        return "unexpected end of input"
    return f"unexpected '{snippet}'"


def parse_bytes(source: bytes, file_path: str = IN_MEMORY_PATH) -> ParsedSource:
    """Parse raw bytes of Ruby source code.

    Args:
        source: UTF-8 encoded bytes of Ruby source code.
        file_path: Path reported for the source in errors and nodes.

    Returns:
        A ParsedSource wrapping the error-free tree.

    Raises:
        TypeError: If source is not bytes.
        ParseFailure: If the tree contains syntax errors.

    Example:
        >>> parsed = parse_bytes(b"def foo; end")
        >>> parsed.root_node.type
        'program'
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    parser = create_parser()
    tree = parser.parse(source)

    if tree.root_node.has_error:
        error_node = find_first_error(tree.root_node) or tree.root_node
        row, column = error_node.start_point
        failure = ParseFailure(
            _describe_error(error_node),
            file_path=file_path,
            line=row + 1,
            column=column + 1,
        )
        logger.debug(
            "Parsed tree for %s contains %d error nodes",
            file_path,
            count_error_nodes(tree),
        )
        raise failure

    logger.debug(f"Parsed {len(source)} bytes of Ruby code from {file_path}")
    return ParsedSource(file_path=file_path, tree=tree, source_bytes=source)


def parse_source(text: str, file_path: str = IN_MEMORY_PATH) -> ParsedSource:
    """Parse a Ruby source string. See ``parse_bytes``."""
    return parse_bytes(text.encode("utf-8"), file_path=file_path)


def parse_file(file_path: str) -> ParsedSource:
    """Parse a Ruby source file from disk.

    Args:
        file_path: Path to the ``.rb`` file.

    Returns:
        A ParsedSource whose ``file_path`` is the path as given.

    Raises:
        FileNotFoundError: If the file does not exist.
        OSError: If the file cannot be read.
        ParseFailure: If the file contains syntax errors.
    """
    try:
        with open(file_path, "rb") as f:
            source_bytes = f.read()
    except FileNotFoundError:
        logger.error(f"File not found: {file_path}")
        raise
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}")
        raise

    parsed = parse_bytes(source_bytes, file_path=file_path)
    logger.info(f"Successfully parsed file: {file_path}")
    return parsed
