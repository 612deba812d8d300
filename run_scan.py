#!/usr/bin/env python3
"""
Command-line front end for the Ruby declaration map.

Prints the declaration outline of a Ruby file or directory, or the
declarations matching a name, optionally with their numbered source lines.

Usage:
    python run_scan.py path/to/project
    python run_scan.py lib/ --find initialize --kind "instance method"
    python run_scan.py lib/shapes.rb --find Circle --show-source
    python run_scan.py lib/ --config rubymap.yml --verbose
"""

import argparse
import logging
import sys
from typing import List, Optional

from core.scan_config import ConfigValidationError, load_scan_config
from core.structured_logging import configure_structured_logging, set_scan_id
from rubymap.builder import scan_path
from rubymap.nodes import DeclarationNode

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Ruby declaration map",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_scan.py ./lib\n"
            "  python run_scan.py ./lib --find initialize --show-source\n"
        ),
    )

    parser.add_argument("path", help="Ruby file or directory to scan.")
    parser.add_argument(
        "--find",
        metavar="NAME",
        default=None,
        help="Only list declarations with this name.",
    )
    parser.add_argument(
        "--kind",
        default=None,
        choices=["module", "class", "class method", "instance method"],
        help="Only list declarations of this kind (with --find).",
    )
    parser.add_argument(
        "--show-source",
        action="store_true",
        default=False,
        help="Print numbered source lines under each listed declaration.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML file with 'extensions' and 'exclude_pattern' settings.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Log progress at DEBUG level.",
    )

    return parser.parse_args(argv)


def describe(node: DeclarationNode) -> str:
    """One-line label of a node: kind, name and location."""
    if node.is_root:
        return f"{node.human_name} {node.file_path}"
    label = f"{node.human_name} {node.name}" if node.name else node.human_name
    return f"{label} ({node.file_path}:{node.first_line}-{node.last_line})"


def format_outline(root: DeclarationNode, indent: str = "  ") -> List[str]:
    """Render the tree below ``root`` as indented lines, preorder."""
    lines: List[str] = []

    def visit(node: DeclarationNode, depth: int) -> None:
        lines.append(f"{indent * depth}{describe(node)}")
        for child in node.children:
            visit(child, depth + 1)

    visit(root, 0)
    return lines


def format_matches(
    root: DeclarationNode,
    name: str,
    kind: Optional[str] = None,
    show_source: bool = False,
) -> List[str]:
    """Render every declaration named ``name`` (and of ``kind``, if given)."""
    matches = root.find_all(
        lambda node: node.name == name and (kind is None or node.human_name == kind)
    )
    lines: List[str] = []
    for node in matches:
        lines.append(describe(node))
        if show_source:
            width = len(str(node.last_line))
            for number, text in node.source_lines_with_numbers():
                lines.append(f"{number:>{width}} | {text}")
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    args = parse_args(argv)
    configure_structured_logging(level=logging.DEBUG if args.verbose else logging.WARNING)
    set_scan_id()

    try:
        config = load_scan_config(args.config)
        root, stats = scan_path(args.path, config=config)
    except FileNotFoundError as e:
        logger.error(f"File error: {e}")
        return 1
    except ConfigValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    if args.find is not None:
        lines = format_matches(root, args.find, args.kind, args.show_source)
    else:
        lines = format_outline(root)

    for line in lines:
        print(line)

    logger.info(f"Scan stats: {stats}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
