"""Helpers for completing identifiers and compound member accesses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


def is_compound_access(text: str) -> bool:
    """Tell whether ``text`` accesses a member with ``.`` or ``->``."""
    if len(text) < 2:
        return False
    rest = text[1:]
    return "." in rest or "->" in rest


@dataclass(frozen=True)
class CompoundAccess:
    """An expression split at its last member access operator."""

    obj_expr: str
    access_operator: str
    member_prefix: str
    needs_deref: bool

    def object_expression(self) -> str:
        """Return a statement evaluating to the accessed compound object."""
        expr = f"*({self.obj_expr})" if self.needs_deref else self.obj_expr
        return expr + ";"

    def full_expressions(self, members: Iterable[str]) -> list[str]:
        """Return the complete access expression for each matching member."""
        access = self.obj_expr + self.access_operator
        return [access + name for name in match_prefix(members, self.member_prefix)]


def split_compound_access(text: str) -> CompoundAccess | None:
    """Split ``text`` at its rightmost ``.`` or ``->``, or return None."""
    for i in range(len(text) - 1, 0, -1):
        if text[i] == ".":
            return CompoundAccess(text[:i], ".", text[i + 1 :], False)
        if text.startswith("->", i):
            return CompoundAccess(text[:i], "->", text[i + 2 :], True)
    return None


def match_prefix(names: Iterable[str], prefix: str) -> list[str]:
    """Return the names that start with ``prefix``, in their original order."""
    return [name for name in names if name.startswith(prefix)]


def create_matches(original_text: str, matches: Iterable[str]) -> list[str]:
    """Build a completion list.

    A single match replaces the text outright; with several, the first
    entry is the original text, followed by every match.
    """
    found = list(matches)
    if len(found) <= 1:
        return found
    return [original_text, *found]