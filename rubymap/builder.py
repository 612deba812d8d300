"""
High-level orchestrator for building declaration trees.

This module provides the entry points that turn a single Ruby file or an
entire directory tree into one root ``DeclarationNode``. Files that fail to
parse are reported and skipped; they never abort a scan.
"""

import logging
import os
import re
import sys
from typing import List, Optional, TextIO, Tuple

from core.scan_config import ScanConfig
from core.structured_logging import file_scope, scan_scope
from rubymap.config import IN_MEMORY_PATH
from rubymap.nodes import DeclarationNode
from rubymap.parser import ParseFailure, parse_file, parse_source
from rubymap.source import SourceCache
from rubymap.visitor import traverse

logger = logging.getLogger(__name__)


class ScanStats:
    """Statistics for a scan operation."""

    def __init__(self):
        self.files_processed = 0
        self.files_failed = 0
        self.declarations_found = 0

    def to_dict(self) -> dict:
        return {
            "files_processed": self.files_processed,
            "files_failed": self.files_failed,
            "declarations_found": self.declarations_found,
        }

    def __str__(self) -> str:
        return (
            f"ScanStats(processed={self.files_processed}, "
            f"failed={self.files_failed}, declarations={self.declarations_found})"
        )


def discover_ruby_files(
    directory: str,
    extensions=None,
    exclude: Optional[re.Pattern] = None,
) -> List[str]:
    """Recursively discover Ruby source files in a directory.

    Hidden directories and hidden files are skipped. Paths are joined onto ``directory`` as
    given, so a relative directory yields relative paths.

    Args:
        directory: Root directory to search.
        extensions: File suffixes to accept. Defaults to the configured ones.
        exclude: Compiled pattern searched against each full path
            (with ``/`` separators); matching files are dropped.

    Returns:
        Sorted list of file paths.
    """
    if extensions is None:
        extensions = ScanConfig().extensions

    logger.info(f"Discovering Ruby files in {directory}")

    ruby_files = []
    for root, dirs, files in os.walk(directory):
        dirs[:] = sorted(d for d in dirs if not d.startswith("."))

        for file in files:
            if file.startswith("."):
                continue
            if os.path.splitext(file)[1] not in extensions:
                continue
            path = os.path.join(root, file)
            if exclude is not None and exclude.search(path.replace(os.sep, "/")):
                logger.debug(f"Excluded {path}")
                continue
            ruby_files.append(path)

    logger.info(f"Found {len(ruby_files)} Ruby files")
    return sorted(ruby_files)


def _list_candidates(path: str, config: ScanConfig) -> List[str]:
    if os.path.isfile(path):
        return [path]
    return discover_ruby_files(
        path,
        extensions=config.extensions,
        exclude=config.exclude_regex(),
    )


def _add_file(
    root: DeclarationNode,
    file_path: str,
    stats: ScanStats,
    diagnostics: TextIO,
) -> None:
    before = len(root.children)
    with file_scope(file_path):
        try:
            parsed = parse_file(file_path)
        except (ParseFailure, OSError) as e:
            stats.files_failed += 1
            logger.warning("Skipping %s: %s", file_path, e)
            print(f"{file_path}: {e}", file=diagnostics)
            return

        traverse(parsed.root_node, root, file_path, root.sources)
        stats.files_processed += 1
        added = root.children[before:]
        stats.declarations_found += sum(
            sum(1 for _ in child.walk()) for child in added
        )
        logger.info("Found %d top-level declarations in %s", len(added), file_path)


def scan_path(
    path: str,
    config: Optional[ScanConfig] = None,
    diagnostics: Optional[TextIO] = None,
) -> Tuple[DeclarationNode, ScanStats]:
    """Build the declaration tree for a file or directory.

    Args:
        path: A Ruby source file or a directory to scan recursively.
        config: Extensions and exclusion pattern for directory scans.
        diagnostics: Stream receiving one ``<file>: <error>`` line per file
            that failed to parse. Defaults to ``sys.stderr``.

    Returns:
        A tuple of (root, stats) where root's ``file_path`` is ``path``.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Source not found: {path}")

    config = config or ScanConfig()
    if diagnostics is None:
        diagnostics = sys.stderr

    root = DeclarationNode.root(path)
    stats = ScanStats()

    with scan_scope(path):
        candidates = _list_candidates(path, config)
        if not candidates:
            logger.warning(f"No Ruby files found in {path}")

        for file_path in candidates:
            _add_file(root, file_path, stats, diagnostics)

    logger.info(f"Scan of {path} complete: {stats}")
    return root, stats


def build_from_path(
    path: str,
    config: Optional[ScanConfig] = None,
    diagnostics: Optional[TextIO] = None,
) -> DeclarationNode:
    """Build the declaration tree for a file or directory. See ``scan_path``."""
    root, _ = scan_path(path, config=config, diagnostics=diagnostics)
    return root


def build_from_file(
    file_path: str,
    diagnostics: Optional[TextIO] = None,
) -> DeclarationNode:
    """Build a root holding the declarations of a single file."""
    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")
    return build_from_path(file_path, diagnostics=diagnostics)


def build_from_directory(
    directory: str,
    config: Optional[ScanConfig] = None,
    diagnostics: Optional[TextIO] = None,
) -> DeclarationNode:
    """Build a root holding the declarations of every file under ``directory``."""
    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Directory not found: {directory}")
    return build_from_path(directory, config=config, diagnostics=diagnostics)


def build_from_source(text: str, file_path: str = IN_MEMORY_PATH) -> DeclarationNode:
    """Build a root from an in-memory Ruby source string.

    Raises:
        ParseFailure: If the source contains syntax errors.
    """
    parsed = parse_source(text, file_path=file_path)
    sources = SourceCache()
    sources.register(file_path, text)
    root = DeclarationNode.root(file_path, sources)
    return traverse(parsed.root_node, root, file_path, sources)
