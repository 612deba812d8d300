"""
Configuration constants for Ruby declaration extraction.

Defines the tree-sitter-ruby node type strings that introduce declarations
and the fixed labels attached to each declaration kind.
"""

# Syntax node types that open a new declaration scope
MODULE_NODE: str = "module"
CLASS_NODE: str = "class"

# Method definitions (leaves of the declaration tree)
INSTANCE_METHOD_NODE: str = "method"
CLASS_METHOD_NODE: str = "singleton_method"

# Scoped constant path, e.g. the ``A::B`` in ``class A::B``
SCOPE_RESOLUTION_NODE: str = "scope_resolution"

# Error markers produced by tree-sitter error recovery
ERROR_NODE: str = "ERROR"

# Declaration kind mapping (syntax node type -> declaration kind value)
DECLARATION_KIND_MAP: dict = {
    MODULE_NODE: "module",
    CLASS_NODE: "class",
    CLASS_METHOD_NODE: "class_method",
    INSTANCE_METHOD_NODE: "instance_method",
}

# Human readable label per declaration kind
HUMAN_NAMES: dict = {
    "root": "root",
    "module": "module",
    "class": "class",
    "class_method": "class method",
    "instance_method": "instance method",
    "generic": "node",
}

# Pseudo file path used for sources parsed from memory
IN_MEMORY_PATH: str = "(string)"
