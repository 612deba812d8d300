"""
Declaration tree model.

A ``DeclarationNode`` represents a Ruby module, class, class method or
instance method found in a source file, or the synthetic root of a scan.
Each node knows its line extent and resolves its source text lazily.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, List, Optional, Tuple

from rubymap.config import HUMAN_NAMES
from rubymap.source import Extent, SourceCache


class MissingExtentError(RuntimeError):
    """Raised when line accessors are used on a node without an extent."""


class NodeKind(str, Enum):
    """Closed set of declaration kinds."""

    ROOT = "root"
    MODULE = "module"
    CLASS = "class"
    CLASS_METHOD = "class_method"
    INSTANCE_METHOD = "instance_method"
    GENERIC = "generic"


NAMED_KINDS = frozenset(
    {NodeKind.MODULE, NodeKind.CLASS, NodeKind.CLASS_METHOD, NodeKind.INSTANCE_METHOD}
)


@dataclass(eq=False)
class DeclarationNode:
    """A node in the declaration tree.

    Attributes:
        kind: Declaration kind tag.
        extent: Line range in the originating file, None for the root.
        sources: Cache used to resolve source text.
        name: Constant or method name, None for root and generic nodes.
        scan_path: Path that was scanned, set on the root only.
    """

    kind: NodeKind
    extent: Optional[Extent]
    sources: SourceCache = field(repr=False)
    name: Optional[str] = None
    scan_path: Optional[str] = None
    _children: List["DeclarationNode"] = field(
        default_factory=list, init=False, repr=False
    )

    def __post_init__(self):
        if self.kind is NodeKind.ROOT:
            if self.extent is not None:
                raise ValueError("root node cannot have an extent")
        elif self.extent is None:
            raise ValueError(f"{self.kind.value} node requires an extent")
        if self.kind in NAMED_KINDS and not self.name:
            raise ValueError(f"{self.kind.value} node requires a name")

    @classmethod
    def root(cls, scan_path: str, sources: Optional[SourceCache] = None) -> "DeclarationNode":
        return cls(
            kind=NodeKind.ROOT,
            extent=None,
            sources=sources if sources is not None else SourceCache(),
            scan_path=scan_path,
        )

    @property
    def is_root(self) -> bool:
        return self.kind is NodeKind.ROOT

    @property
    def human_name(self) -> str:
        return HUMAN_NAMES[self.kind.value]

    @property
    def children(self) -> Tuple["DeclarationNode", ...]:
        return tuple(self._children)

    def add_child(self, child: "DeclarationNode") -> "DeclarationNode":
        """Attach ``child`` as the last child. Used during construction only."""
        if child is self:
            raise ValueError("a node cannot be its own child")
        if (
            self.extent is not None
            and child.extent is not None
            and not self.extent.contains(child.extent)
        ):
            raise ValueError(
                f"{child!r} lies outside the extent of {self!r}"
            )
        self._children.append(child)
        return child

    @property
    def file_path(self) -> Optional[str]:
        if self.extent is None:
            return self.scan_path
        return self.extent.file_path

    @property
    def first_line(self) -> Optional[int]:
        return self.extent.first_line if self.extent is not None else None

    @property
    def last_line(self) -> Optional[int]:
        return self.extent.last_line if self.extent is not None else None

    def _require_extent(self) -> Extent:
        if self.extent is None:
            raise MissingExtentError(
                f"{self.human_name} node for {self.file_path} has no source extent"
            )
        return self.extent

    def source_lines(self) -> List[str]:
        return self.sources.slice(self._require_extent())

    def source_lines_with_numbers(self) -> List[Tuple[int, str]]:
        return self.sources.numbered_slice(self._require_extent())

    @property
    def source(self) -> Optional[str]:
        if self.extent is None:
            return None
        return "\n".join(self.source_lines())

    def walk(self) -> Iterator["DeclarationNode"]:
        """Yield this node and its descendants in preorder."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    def find_all(
        self, predicate: Callable[["DeclarationNode"], bool]
    ) -> List["DeclarationNode"]:
        """Return every node in this subtree matching ``predicate``, in preorder."""
        return [node for node in self.walk() if predicate(node)]

    def __repr__(self) -> str:
        label = self.human_name
        if self.name:
            label = f"{label} {self.name}"
        if self.extent is None:
            return f"<DeclarationNode {label} {self.file_path}>"
        return (
            f"<DeclarationNode {label} "
            f"{self.file_path}:{self.first_line}-{self.last_line}>"
        )
