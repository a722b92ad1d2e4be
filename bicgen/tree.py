"""Syntax tree nodes, with chains of nodes in place of linked lists."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

CHAIN_HEAD = "CHAIN_HEAD"
T_IDENTIFIER = "T_IDENTIFIER"

ID_STR = "ID_STR"
PTR_EXP = "PTR_EXP"


class TreeTypeMismatch(Exception):
    """Raised when a tree does not have the type it was checked against."""

    def __init__(self, have: str, expected: str) -> None:
        super().__init__(f"Tree type miss-match; have {have}, should be {expected}")
        self.have = have
        self.expected = expected


@dataclass
class Locus:
    """Where in a source file a tree came from."""

    line_no: int = 0
    column_no: int = 0
    file: Tree | None = None


@dataclass(eq=False)
class Tree:
    """A node of the syntax tree.

    ``props`` holds the node's properties by accessor name (``ID_STR``,
    ``PTR_EXP`` and so on).  Every node also carries a chain of nodes,
    which is how chain heads hold their members.
    """

    type: str
    props: dict[str, Any] = field(default_factory=dict)
    locus: Locus = field(default_factory=Locus)
    items: list[Tree] = field(default_factory=list)

    def append(self, item: Tree) -> None:
        """Add ``item`` to the end of this node's chain."""
        self.items.append(item)

    def splice(self, other: Tree) -> None:
        """Move every member of ``other``'s chain to the end of this chain."""
        moved, other.items = other.items, []
        self.items.extend(moved)

    def is_a(self, type: str) -> bool:
        return self.type == type

    def check(self, type: str) -> Tree:
        """Return this node, raising if it is not of ``type``."""
        if self.type != type:
            raise TreeTypeMismatch(self.type, type)
        return self

    def copy_from(self, other: Tree) -> None:
        """Overwrite this node with a shallow copy of ``other``."""
        self.type = other.type
        self.props = dict(other.props)
        self.locus = Locus(other.locus.line_no, other.locus.column_no, other.locus.file)
        self.items = list(other.items)

    def __iter__(self) -> Iterator[Tree]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __bool__(self) -> bool:
        return True


def tree_make(type: str) -> Tree:
    """Return a new node of ``type`` with an empty chain."""
    return Tree(type)


def get_identifier(name: str) -> Tree:
    """Return a new identifier node naming ``name``."""
    node = tree_make(T_IDENTIFIER)
    node.props[ID_STR] = name
    return node


def chain_head(tree: Tree) -> Tree:
    """Return a new chain head whose chain starts with ``tree``."""
    head = tree_make(CHAIN_HEAD)
    head.items.insert(0, tree)
    return head


def make_pointer_type(ptr: Tree | None, type: Tree) -> Tree:
    """Attach ``type`` to the innermost pointer of ``ptr``.

    With no pointer the result is ``type`` itself.
    """
    if ptr is None:
        return type
    innermost = ptr
    while innermost.props.get(PTR_EXP) is not None:
        innermost = innermost.props[PTR_EXP]
    innermost.props[PTR_EXP] = type
    return ptr