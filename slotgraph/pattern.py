"""Patterns and recursive expressions, with their textual syntax.

The syntax is s-expression based: ``(op child ...)``, slots ``$x``,
pattern variables ``?x`` and substitutions ``b[x := t]``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from .lang import Language, SyntaxElem
from .slot import Slot
from .types import AppliedId


class ParseError(ValueError):
    """Raised when text cannot be parsed; ``kind`` says why, ``rest`` what was left."""

    TOKEN_STATE = "token_state"
    PARSE_STATE = "parse_state"
    REMAINING_REST = "remaining_rest"
    FROM_SYNTAX_FAILED = "from_syntax_failed"
    EXPECTED_COLON_EQUALS = "expected_colon_equals"
    EXPECTED_RBRACKET = "expected_rbracket"

    def __init__(self, kind: str, rest: Any) -> None:
        self.kind = kind
        self.rest = rest if isinstance(rest, str) else tuple(rest)
        shown = self.rest if isinstance(self.rest, str) else " ".join(map(str, self.rest))
        super().__init__(f"{kind}: {shown!r}")


# --- tokens --------------------------------------------------------------------


class _Kind(Enum):
    SLOT = auto()
    IDENT = auto()
    PVAR = auto()
    COLON_EQUALS = auto()
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()


@dataclass(frozen=True)
class _Token:
    kind: _Kind
    value: Any = None

    def __str__(self) -> str:
        if self.kind is _Kind.PVAR:
            return f"?{self.value}"
        if self.kind in (_Kind.SLOT, _Kind.IDENT):
            return str(self.value)
        return _SPELLING[self.kind]


_PUNCTUATION = {
    "(": _Kind.LPAREN,
    ")": _Kind.RPAREN,
    "[": _Kind.LBRACKET,
    "]": _Kind.RBRACKET,
}
_SPELLING = {kind: text for text, kind in _PUNCTUATION.items()}
_SPELLING[_Kind.COLON_EQUALS] = ":="


def _ident_char(c: str) -> bool:
    return not c.isspace() and c not in "()[]"


def _crop_ident(text: str) -> tuple[str, str]:
    end = next((i for i, c in enumerate(text) if not _ident_char(c)), len(text))
    if end == 0:
        raise ParseError(ParseError.TOKEN_STATE, text)
    return text[:end], text[end:]


def _tokenize(text: str) -> list[_Token]:
    tokens = []
    rest = text.lstrip()
    while rest:
        head = rest[0]
        if head in _PUNCTUATION:
            tokens.append(_Token(_PUNCTUATION[head]))
            rest = rest[1:]
        elif rest.startswith(":="):
            tokens.append(_Token(_Kind.COLON_EQUALS))
            rest = rest[2:]
        elif head == "?":
            name, rest = _crop_ident(rest[1:])
            tokens.append(_Token(_Kind.PVAR, name))
        elif head == "$":
            name, rest = _crop_ident(rest[1:])
            tokens.append(_Token(_Kind.SLOT, Slot.named(name)))
        else:
            name, rest = _crop_ident(rest)
            tokens.append(_Token(_Kind.IDENT, name))
        rest = rest.lstrip()
    return tokens


# --- patterns and expressions ---------------------------------------------------


class Pattern:
    """A pattern to match against, or the right-hand side of a rewrite.

    It is one of :class:`ENodePattern`, :class:`PVar` (``?x``) and
    :class:`SubstPattern` (``b[x := t]``).
    """

    __slots__ = ()

    @classmethod
    def parse(cls, text: str, language: type[Language]) -> Pattern:
        """Parse ``text`` into a pattern over ``language``."""
        parser = _Parser(_tokenize(text), language)
        pattern = parser.pattern()
        if not parser.at_end():
            raise ParseError(ParseError.REMAINING_REST, parser.rest())
        return pattern

    def __repr__(self) -> str:
        return str(self)


@dataclass(frozen=True, repr=False)
class ENodePattern(Pattern):
    """An e-node whose child invocations are replaced by ``children``, in order."""

    node: Language
    children: tuple[Pattern, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))

    def __str__(self) -> str:
        syntax = self.node.to_syntax()
        children = iter(self.children)
        parts = []
        for elem in syntax:
            if isinstance(elem, AppliedId):
                child = next(children, None)
                if child is None:
                    raise ValueError("ENodePattern: fewer children than child positions")
                parts.append(str(child))
            else:
                parts.append(str(elem))
        body = " ".join(parts)
        return body if len(syntax) == 1 else f"({body})"


@dataclass(frozen=True, repr=False)
class PVar(Pattern):
    """A pattern variable ``?name`` that matches anything."""

    name: str

    def __str__(self) -> str:
        return f"?{self.name}"


@dataclass(frozen=True, repr=False)
class SubstPattern(Pattern):
    """The substitution ``body[var := term]``."""

    body: Pattern
    var: Pattern
    term: Pattern

    def __str__(self) -> str:
        return f"{self.body}[{self.var} := {self.term}]"


@dataclass(frozen=True, repr=False)
class RecExpr:
    """A term: an e-node whose child invocations are replaced by ``children``."""

    node: Language
    children: tuple[RecExpr, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))

    @classmethod
    def parse(cls, text: str, language: type[Language]) -> RecExpr:
        """Parse ``text`` into a term over ``language``."""
        return pattern_to_re(Pattern.parse(text, language))

    def __str__(self) -> str:
        return str(re_to_pattern(self))

    def __repr__(self) -> str:
        return str(self)


def pattern_to_re(pattern: Pattern) -> RecExpr:
    """Turn a pattern made only of e-nodes into a term."""
    if not isinstance(pattern, ENodePattern):
        raise ValueError(f"pattern_to_re: not a plain term: {pattern}")
    return RecExpr(pattern.node, tuple(pattern_to_re(c) for c in pattern.children))


def re_to_pattern(re: RecExpr) -> Pattern:
    return ENodePattern(re.node, tuple(re_to_pattern(c) for c in re.children))


# --- parser ---------------------------------------------------------------------


class _Parser:
    def __init__(self, tokens: list[_Token], language: type[Language]) -> None:
        self._tokens = tokens
        self._pos = 0
        self._language = language

    def at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    def rest(self) -> tuple[_Token, ...]:
        return tuple(self._tokens[self._pos:])

    def _peek(self) -> _Token | None:
        return None if self.at_end() else self._tokens[self._pos]

    def _peek_kind(self) -> _Kind | None:
        tok = self._peek()
        return None if tok is None else tok.kind

    def _advance(self) -> _Token:
        tok = self._tokens[self._pos]
        self._pos += 1
        return tok

    def _expect(self, kind: _Kind, error: str) -> None:
        if self._peek_kind() is not kind:
            raise ParseError(error, self.rest())
        self._advance()

    def pattern(self) -> Pattern:
        pattern = self._pattern_nosubst()
        while self._peek_kind() is _Kind.LBRACKET:
            self._advance()
            var = self.pattern()
            self._expect(_Kind.COLON_EQUALS, ParseError.EXPECTED_COLON_EQUALS)
            term = self.pattern()
            self._expect(_Kind.RBRACKET, ParseError.EXPECTED_RBRACKET)
            pattern = SubstPattern(pattern, var, term)
        return pattern

    def _from_syntax(self, elems: list[SyntaxElem]) -> Language:
        node = self._language.from_syntax(elems)
        if node is None:
            raise ParseError(ParseError.FROM_SYNTAX_FAILED, elems)
        return node

    def _pattern_nosubst(self) -> Pattern:
        kind = self._peek_kind()
        if kind is _Kind.PVAR:
            return PVar(self._advance().value)
        if kind is _Kind.LPAREN:
            self._advance()
            if self._peek_kind() is not _Kind.IDENT:
                raise ParseError(ParseError.PARSE_STATE, self.rest())
            op = self._advance().value
            mock: list[SyntaxElem] = [op]
            children: list[Pattern] = []
            while self._peek_kind() is not _Kind.RPAREN:
                if self.at_end():
                    raise ParseError(ParseError.PARSE_STATE, ())
                if self._peek_kind() is _Kind.SLOT:
                    mock.append(self._advance().value)
                else:
                    children.append(self.pattern())
                    mock.append(AppliedId.null())
            self._advance()
            return ENodePattern(self._from_syntax(mock), tuple(children))
        if kind is not _Kind.IDENT:
            raise ParseError(ParseError.PARSE_STATE, self.rest())
        op = self._advance().value
        return ENodePattern(self._from_syntax([op]), ())