"""
Ruby declaration map

Tree-sitter-based extraction of the module, class and method declarations
of a Ruby source tree, with exact source line extents.
"""

from rubymap.nodes import DeclarationNode, MissingExtentError, NodeKind
from rubymap.source import Extent, SourceCache
from rubymap.parser import (
    ParsedSource,
    ParseFailure,
    create_parser,
    parse_bytes,
    parse_file,
    parse_source,
    count_error_nodes,
)
from rubymap.visitor import build_declaration, traverse
from rubymap.builder import (
    ScanStats,
    build_from_directory,
    build_from_file,
    build_from_path,
    build_from_source,
    discover_ruby_files,
    scan_path,
)

__all__ = [
    # Data model
    "DeclarationNode",
    "MissingExtentError",
    "NodeKind",
    "Extent",
    "SourceCache",
    # Low-level parsing
    "ParsedSource",
    "ParseFailure",
    "create_parser",
    "parse_bytes",
    "parse_file",
    "parse_source",
    "count_error_nodes",
    # Tree construction
    "build_declaration",
    "traverse",
    # High-level orchestration
    "ScanStats",
    "build_from_directory",
    "build_from_file",
    "build_from_path",
    "build_from_source",
    "discover_ruby_files",
    "scan_path",
]
