"""Registry of the type names the parser must treat as types."""

from __future__ import annotations

from bicgen.tree import ID_STR, Tree

BUILTIN_TYPENAMES = ("__builtin_va_list", "_Float128")


def _name_of(name: str | Tree) -> str:
    return name.props[ID_STR] if isinstance(name, Tree) else name


class TypenameRegistry:
    """Type names, kept apart for those declared inside included files."""

    def __init__(self) -> None:
        self._names: list[str] = []
        self._include_names: list[str] = []
        self._in_include_file = False
        for builtin in BUILTIN_TYPENAMES:
            self.add(builtin)

    def add(self, name: str | Tree) -> None:
        """Record ``name`` as a type name."""
        target = self._include_names if self._in_include_file else self._names
        target.append(_name_of(name))

    def set_include_file(self) -> None:
        self._in_include_file = True

    def unset_include_file(self) -> None:
        self._in_include_file = False

    def reset_include_typenames(self) -> None:
        """Forget every type name added while inside an included file."""
        self._include_names = []

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, (str, Tree)):
            return False
        key = _name_of(name)
        return key in self._names or key in self._include_names