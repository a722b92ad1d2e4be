"""Reader for the language description files that drive the tree generators.

A description is a sequence of parenthesised forms::

    (defbasetypes (integer "mpz_t") (string "char *"))
    (deftype T_INTEGER "integer" "tINT" (("VAL" integer)))
    (defctype D_T_PTR "pointer" "void *" "p" "D_T_PTR" "tDTPTR" ("EXP"))

Properties of a tree type are laid out as members of a shared data
union.  Members are pooled per base type, so different tree types reuse
the same storage slots.
"""

from __future__ import annotations

import enum
import re
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator


class LangParseError(Exception):
    """Raised when a language description cannot be parsed."""

    def __init__(self, message: str, line: int, col: int, where: str) -> None:
        super().__init__(f"{line}:{col}: Parse error in {where}: {message}")
        self.message = message
        self.line = line
        self.col = col
        self.where = where


class TokenKind(enum.Enum):
    LPAREN = "("
    RPAREN = ")"
    DEFTYPE = "deftype"
    DEFCTYPE = "defctype"
    DEFBASETYPES = "defbasetypes"
    IDENTIFIER = "identifier"
    STRING = "string"
    EOF = "end of input"


@dataclass(frozen=True)
class Token:
    """A lexical token with the position where it starts."""

    kind: TokenKind
    value: str
    line: int
    col: int


_KEYWORDS = {
    "deftype": TokenKind.DEFTYPE,
    "defctype": TokenKind.DEFCTYPE,
    "defbasetypes": TokenKind.DEFBASETYPES,
}

_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
    | (?P<comment>;[^\n]*)
    | (?P<lparen>\()
    | (?P<rparen>\))
    | (?P<string>"(?:[^"\\]|\\.)*")
    | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    """,
    re.VERBOSE | re.DOTALL,
)


def tokenize(text: str) -> Iterator[Token]:
    """Yield the tokens of ``text``, finishing with a single EOF token."""
    pos = 0
    line = 1
    col = 1
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            if text[pos] == '"':
                raise LangParseError("Unterminated string", line, col, "tokenize")
            raise LangParseError(
                f"Unexpected character {text[pos]!r}", line, col, "tokenize"
            )
        group = match.lastgroup
        lexeme = match.group()
        if group == "lparen":
            yield Token(TokenKind.LPAREN, lexeme, line, col)
        elif group == "rparen":
            yield Token(TokenKind.RPAREN, lexeme, line, col)
        elif group == "string":
            yield Token(TokenKind.STRING, lexeme[1:-1], line, col)
        elif group == "ident":
            kind = _KEYWORDS.get(lexeme.lower(), TokenKind.IDENTIFIER)
            yield Token(kind, lexeme, line, col)

        newlines = lexeme.count("\n")
        if newlines:
            line += newlines
            col = len(lexeme) - lexeme.rfind("\n")
        else:
            col += len(lexeme)
        pos = match.end()
    yield Token(TokenKind.EOF, "", line, col)


@dataclass(frozen=True)
class BaseType:
    """A base type declared in the description: C type and short name."""

    type: str
    name: str
    is_tree: bool = False


@dataclass(frozen=True)
class InstantiatedType:
    """A member of the data union holding values of one base type."""

    member_name: str
    base_type: BaseType


@dataclass
class TreeType:
    name: str
    friendly_name: str
    props: dict[str, InstantiatedType] = field(default_factory=dict)


@dataclass
class CType(TreeType):
    ctype: str = ""
    format_string: str = ""
    ff_union_member_name: str = ""


@dataclass
class TypePool:
    """All union members allocated so far for one base type."""

    base_type: BaseType
    members: list[InstantiatedType] = field(default_factory=list)

    def alloc(self) -> InstantiatedType:
        """Create a new member, named after the base type and its index."""
        member = InstantiatedType(
            member_name=f"{self.base_type.name}{len(self.members)}",
            base_type=self.base_type,
        )
        self.members.append(member)
        return member

    def allocator(self) -> TypeAllocator:
        return TypeAllocator(self)

    def emit_declarations(self) -> str:
        """Return one C member declaration line per member."""
        return "".join(
            f"    {member.base_type.type} {member.member_name};\n"
            for member in self.members
        )


class TypeAllocator:
    """Hands out existing pool members first, then grows the pool."""

    def __init__(self, pool: TypePool) -> None:
        self._pool = pool
        self._pending = deque(pool.members)

    def alloc(self) -> InstantiatedType:
        if self._pending:
            return self._pending.popleft()
        return self._pool.alloc()


@dataclass
class Language:
    tree_types: list[TreeType] = field(default_factory=list)
    ctypes: list[CType] = field(default_factory=list)
    base_type_pools: dict[str, TypePool] = field(default_factory=dict)
    tree_pool: TypePool = field(
        default_factory=lambda: TypePool(BaseType(type="tree", name="t", is_tree=True))
    )


class _Parser:
    def __init__(self, text: str) -> None:
        self._tokens = tokenize(text)
        self._current = Token(TokenKind.EOF, "", 1, 1)
        self.lang = Language()

    def _next(self) -> Token:
        self._current = next(self._tokens)
        return self._current

    def _fail(self, message: str, where: str) -> None:
        tok = self._current
        raise LangParseError(message, tok.line, tok.col, where)

    def _expect(self, kind: TokenKind, where: str) -> str:
        tok = self._next()
        if tok.kind is not kind:
            label = kind.value if kind in (TokenKind.LPAREN, TokenKind.RPAREN) else kind.name
            if kind in (TokenKind.LPAREN, TokenKind.RPAREN):
                label = f"'{label}'"
            self._fail(f"Expected {label}", where)
        return tok.value

    def parse(self) -> Language:
        while True:
            tok = self._next()
            if tok.kind is TokenKind.EOF:
                return self.lang
            if tok.kind is not TokenKind.LPAREN:
                self._fail("Expected '('", "lang_parse")
            tok = self._next()
            if tok.kind is TokenKind.DEFTYPE:
                self._deftype()
            elif tok.kind is TokenKind.DEFCTYPE:
                self._defctype()
            elif tok.kind is TokenKind.DEFBASETYPES:
                self._defbasetypes()
            else:
                self._fail("Unexpected toplevel construct", "lang_parse")

    def _defbasetypes(self) -> None:
        where = "defbasetypes"
        while True:
            tok = self._next()
            if tok.kind is TokenKind.RPAREN:
                return
            if tok.kind is not TokenKind.LPAREN:
                self._fail("Expected '('", where)
            name = self._expect(TokenKind.IDENTIFIER, where)
            ctype = self._expect(TokenKind.STRING, where)
            self._expect(TokenKind.RPAREN, where)
            self.lang.base_type_pools.setdefault(
                name, TypePool(BaseType(type=ctype, name=name))
            )

    def _deftype(self) -> None:
        where = "deftype"
        name = self._expect(TokenKind.IDENTIFIER, where)
        friendly = self._expect(TokenKind.STRING, where)
        tree_type = TreeType(name=name, friendly_name=friendly)
        self._finish_type(tree_type, where)
        self.lang.tree_types.append(tree_type)

    def _defctype(self) -> None:
        where = "defctype"
        name = self._expect(TokenKind.IDENTIFIER, where)
        friendly = self._expect(TokenKind.STRING, where)
        ctype = self._expect(TokenKind.STRING, where)
        format_string = self._expect(TokenKind.STRING, where)
        union_member = self._expect(TokenKind.STRING, where)
        c_type = CType(
            name=name,
            friendly_name=friendly,
            ctype=ctype,
            format_string=format_string,
            ff_union_member_name=union_member,
        )
        self._finish_type(c_type, where)
        self.lang.ctypes.append(c_type)

    def _finish_type(self, tree_type: TreeType, where: str) -> None:
        tok = self._next()
        if tok.kind is TokenKind.RPAREN:
            return
        self._prop_list(tree_type, tok)
        self._expect(TokenKind.RPAREN, where)

    def _prop_list(self, tree_type: TreeType, tok: Token) -> None:
        where = "prop_list"
        allocators = {
            name: pool.allocator() for name, pool in self.lang.base_type_pools.items()
        }
        tree_allocator = self.lang.tree_pool.allocator()

        if tok.kind is not TokenKind.STRING:
            self._fail("Expected STRING or ')'", where)
        prefix = tok.value + "_"
        self._expect(TokenKind.LPAREN, where)

        while True:
            tok = self._next()
            if tok.kind is TokenKind.RPAREN:
                return
            if tok.kind is TokenKind.LPAREN:
                prop_name = self._expect(TokenKind.STRING, where)
                type_name = self._expect(TokenKind.IDENTIFIER, where)
                self._expect(TokenKind.RPAREN, where)
                allocator = allocators.get(type_name)
                if allocator is None:
                    self._fail(f"Unknown base type '{type_name}'", where)
                tree_type.props.setdefault(prefix + prop_name, allocator.alloc())
            elif tok.kind is TokenKind.STRING:
                tree_type.props.setdefault(prefix + tok.value, tree_allocator.alloc())
            else:
                self._fail("Expected '(' ')' or STRING", where)


def parse_lang(text: str) -> Language:
    """Parse a language description held in a string."""
    return _Parser(text).parse()


def read_lang(path: str | Path) -> Language:
    """Read and parse the language description file at ``path``."""
    return parse_lang(Path(path).read_text())