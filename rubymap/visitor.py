"""
Syntax tree traversal and declaration node construction.

This module walks a tree-sitter-ruby syntax tree and attaches a
``DeclarationNode`` for every module, class and method definition to the
nearest enclosing declaration.
"""

import logging
from typing import Optional

from tree_sitter import Node

from rubymap.config import (
    CLASS_METHOD_NODE,
    CLASS_NODE,
    DECLARATION_KIND_MAP,
    INSTANCE_METHOD_NODE,
    MODULE_NODE,
    SCOPE_RESOLUTION_NODE,
)
from rubymap.nodes import DeclarationNode, NodeKind
from rubymap.source import Extent, SourceCache

logger = logging.getLogger(__name__)

# Declarations whose bodies are searched for nested declarations
SCOPE_NODES = {MODULE_NODE, CLASS_NODE}

# Declarations whose bodies are not searched
METHOD_NODES = {INSTANCE_METHOD_NODE, CLASS_METHOD_NODE}


def _node_text(node: Node) -> str:
    return (node.text or b"").decode("utf-8", errors="replace")


def extract_constant_name(node: Node) -> Optional[str]:
    """Extract the constant name of a ``module`` or ``class`` node.

    For a scoped definition such as ``class Outer::Inner`` the last segment
    (``Inner``) is returned.

    Args:
        node: A ``module`` or ``class`` node.

    Returns:
        The constant name, or None if the node has no name field.
    """
    name_node = node.child_by_field_name("name")
    if name_node is None:
        logger.debug(f"{node.type} at line {node.start_point.row + 1} has no name")
        return None
    if name_node.type == SCOPE_RESOLUTION_NODE:
        segment = name_node.child_by_field_name("name")
        if segment is not None:
            name_node = segment
    return _node_text(name_node) or None


def extract_method_name(node: Node) -> Optional[str]:
    """Extract the identifier of a ``method`` or ``singleton_method`` node."""
    name_node = node.child_by_field_name("name")
    if name_node is None:
        logger.debug(f"Method at line {node.start_point.row + 1} has no name")
        return None
    return _node_text(name_node) or None


def extract_declaration_name(node: Node) -> Optional[str]:
    if node.type in SCOPE_NODES:
        return extract_constant_name(node)
    if node.type in METHOD_NODES:
        return extract_method_name(node)
    return None


def build_declaration(
    node: Node,
    file_path: str,
    sources: SourceCache,
) -> Optional[DeclarationNode]:
    """Build the declaration node for a declaration-introducing syntax node.

    Args:
        node: A ``module``, ``class``, ``method`` or ``singleton_method`` node.
        file_path: Path of the file the node was parsed from.
        sources: Cache used by the new node to resolve its text.

    Returns:
        The new unattached DeclarationNode, or None if ``node`` does not
        introduce a declaration or carries no usable name.
    """
    kind_value = DECLARATION_KIND_MAP.get(node.type)
    if kind_value is None:
        return None

    name = extract_declaration_name(node)
    if not name:
        logger.debug(
            f"Skipping unnamed {node.type} at {file_path}:{node.start_point.row + 1}"
        )
        return None

    declaration = DeclarationNode(
        kind=NodeKind(kind_value),
        extent=Extent.from_syntax_node(node, file_path),
        sources=sources,
        name=name,
    )
    logger.debug(
        f"Found {declaration.human_name} {name} at "
        f"{file_path}:{declaration.first_line}-{declaration.last_line}"
    )
    return declaration


def build_generic_node(
    node: Node,
    file_path: str,
    sources: SourceCache,
) -> DeclarationNode:
    """Bind a generic declaration node to any syntax node."""
    return DeclarationNode(
        kind=NodeKind.GENERIC,
        extent=Extent.from_syntax_node(node, file_path),
        sources=sources,
    )


def traverse(
    node: Node,
    parent: DeclarationNode,
    file_path: str,
    sources: SourceCache,
) -> DeclarationNode:
    """Recursively attach every declaration below ``node`` to the tree.

    Modules and classes become the parent of the declarations found in
    their bodies. Methods are leaves: their bodies are not searched.
    Any other construct is transparent and its declarations attach to
    ``parent``.

    Args:
        node: The current syntax node.
        parent: Nearest enclosing declaration node.
        file_path: Path of the file being traversed.
        sources: Cache shared by the nodes of this scan.

    Returns:
        ``parent``, with the new declarations attached.
    """
    declaration = build_declaration(node, file_path, sources)

    if declaration is not None:
        parent.add_child(declaration)
        if node.type in METHOD_NODES:
            return parent
        for child in node.named_children:
            traverse(child, declaration, file_path, sources)
        return parent

    for child in node.named_children:
        traverse(child, parent, file_path, sources)
    return parent
