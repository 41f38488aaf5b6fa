"""Pattern tokenizer — source pattern string → Segment sequence.

Two passes, the way path-to-regexp does it:
  source → _lex() → tokens → _Parser.parse() → segments

Grammar:
  \\x              escaped character, always literal
  :name            named parameter ([A-Za-z0-9_]+)
  :name(pattern)   named parameter with a custom pattern
  (pattern)        unnamed group, captured positionally
  {prefix...}      grouping with its own prefix/suffix text
  ? * +            modifier, only valid right after a parameter or group

A ``/`` or ``.`` directly before a parameter becomes its prefix; any other
character stays in the preceding literal.

scan_template() is the lenient counterpart used for destination and header
templates: it only recognises ``:name`` references and never fails.
"""

from __future__ import annotations

from dataclasses import dataclass

from routec._types import (
    DEFAULT_PATTERN,
    Literal,
    LiteralGroup,
    Param,
    ParamCatchAll,
    ParamCatchAllRequired,
    ParamRef,
    PatternError,
    RegexFragment,
    Segment,
)

MAX_PATTERN_LENGTH = 4096

NAME_CHARS = frozenset(
    "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz_"
)
MODIFIERS = frozenset("?*+")

# Characters folded into a following parameter's prefix
_PREFIXES = frozenset("./")

# Token kinds
_CHAR = "CHAR"
_ESCAPED_CHAR = "ESCAPED_CHAR"
_MODIFIER = "MODIFIER"
_NAME = "NAME"
_PATTERN = "PATTERN"
_OPEN = "OPEN"
_CLOSE = "CLOSE"
_END = "END"


@dataclass(frozen=True, slots=True)
class _Token:
    kind: str
    index: int
    value: str


def tokenize(source: str) -> tuple[Segment, ...]:
    """Parse a source pattern into segments.

    Raises:
        PatternError: empty or oversized source, malformed parameter or
            group, stray modifier, or a parameter name used twice.
    """
    if not source:
        raise PatternError(source, "source pattern is empty")
    if len(source) > MAX_PATTERN_LENGTH:
        msg = f"pattern length {len(source)} exceeds maximum {MAX_PATTERN_LENGTH}"
        raise PatternError(source, msg)

    segments = _Parser(source, _lex(source)).parse()

    seen: set[str] = set()
    for segment in segments:
        match segment:
            case Param(name=name) | ParamCatchAll(name=name) | ParamCatchAllRequired(name=name):
                if name in seen:
                    raise PatternError(source, f"duplicate parameter name {name!r}")
                seen.add(name)
    return segments


def scan_template(text: str) -> tuple[str | ParamRef, ...]:
    """Split a template into literal runs and ``:name`` references.

    A modifier character right after the name is recorded on the reference;
    the caller decides whether it belongs to the reference.

    >>> scan_template("/a/:id*/b")
    ('/a/', ParamRef(name='id', modifier='*', raw=':id*'), '/b')
    """
    parts: list[str | ParamRef] = []
    literal_start = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] != ":":
            i += 1
            continue
        j = i + 1
        while j < n and text[j] in NAME_CHARS:
            j += 1
        if j == i + 1:
            i += 1
            continue
        if literal_start < i:
            parts.append(text[literal_start:i])
        modifier = text[j] if j < n and text[j] in MODIFIERS else ""
        end = j + len(modifier)
        parts.append(ParamRef(name=text[i + 1 : j], modifier=modifier, raw=text[i:end]))
        i = literal_start = end
    if literal_start < n:
        parts.append(text[literal_start:])
    return tuple(parts)


# ═══════════════════════════════════════════════════════════════════════════════
# Lexer
# ═══════════════════════════════════════════════════════════════════════════════


def _lex(source: str) -> list[_Token]:
    tokens: list[_Token] = []
    i = 0
    n = len(source)
    while i < n:
        char = source[i]
        if char in MODIFIERS:
            tokens.append(_Token(_MODIFIER, i, char))
            i += 1
        elif char == "\\":
            if i + 1 >= n:
                raise PatternError(source, "dangling escape character", i)
            tokens.append(_Token(_ESCAPED_CHAR, i, source[i + 1]))
            i += 2
        elif char == "{":
            tokens.append(_Token(_OPEN, i, char))
            i += 1
        elif char == "}":
            tokens.append(_Token(_CLOSE, i, char))
            i += 1
        elif char == ":":
            j = i + 1
            while j < n and source[j] in NAME_CHARS:
                j += 1
            if j == i + 1:
                raise PatternError(source, "missing parameter name", i)
            tokens.append(_Token(_NAME, i, source[i + 1 : j]))
            i = j
        elif char == "(":
            pattern, end = _lex_group(source, i)
            tokens.append(_Token(_PATTERN, i, pattern))
            i = end
        else:
            tokens.append(_Token(_CHAR, i, char))
            i += 1
    tokens.append(_Token(_END, n, ""))
    return tokens


def _lex_group(source: str, start: int) -> tuple[str, int]:
    """Read a balanced ``(...)`` group starting at ``start``.

    Returns the inner pattern and the offset just past the closing paren.
    """
    n = len(source)
    j = start + 1
    if j < n and source[j] == "?":
        raise PatternError(source, 'pattern cannot start with "?"', j)

    depth = 1
    chars: list[str] = []
    while j < n:
        char = source[j]
        if char == "\\":
            chars.append(source[j : j + 2])
            j += 2
            continue
        if char == ")":
            depth -= 1
            if depth == 0:
                j += 1
                break
        elif char == "(":
            depth += 1
            if source[j + 1 : j + 2] != "?":
                raise PatternError(
                    source, "capturing groups are not allowed inside a pattern", j
                )
        chars.append(char)
        j += 1

    if depth:
        raise PatternError(source, "unbalanced pattern", start)
    pattern = "".join(chars)
    if not pattern:
        raise PatternError(source, "missing pattern", start)
    return pattern, j


# ═══════════════════════════════════════════════════════════════════════════════
# Parser
# ═══════════════════════════════════════════════════════════════════════════════


class _Parser:
    def __init__(self, source: str, tokens: list[_Token]) -> None:
        self._source = source
        self._tokens = tokens
        self._pos = 0

    def parse(self) -> tuple[Segment, ...]:
        segments: list[Segment] = []
        path = ""
        while self._pos < len(self._tokens):
            char = self._try_consume(_CHAR)
            name = self._try_consume(_NAME)
            pattern = self._try_consume(_PATTERN)

            if name or pattern:
                prefix = char or ""
                if prefix and prefix not in _PREFIXES:
                    path += prefix
                    prefix = ""
                if path:
                    segments.append(Literal(path))
                    path = ""
                modifier = self._try_consume(_MODIFIER) or ""
                segments.append(_param_segment(name, pattern, prefix, "", modifier))
                continue

            value = char or self._try_consume(_ESCAPED_CHAR)
            if value:
                path += value
                continue

            if path:
                segments.append(Literal(path))
                path = ""

            if self._try_consume(_OPEN) is not None:
                prefix = self._consume_text()
                name = self._try_consume(_NAME)
                pattern = self._try_consume(_PATTERN)
                suffix = self._consume_text()
                self._must_consume(_CLOSE)
                modifier = self._try_consume(_MODIFIER) or ""
                if name or pattern:
                    segments.append(
                        _param_segment(name, pattern, prefix, suffix, modifier)
                    )
                else:
                    segments.append(LiteralGroup(prefix + suffix, modifier))
                continue

            self._must_consume(_END)
        return tuple(segments)

    def _try_consume(self, kind: str) -> str | None:
        if self._pos < len(self._tokens) and self._tokens[self._pos].kind == kind:
            token = self._tokens[self._pos]
            self._pos += 1
            return token.value
        return None

    def _must_consume(self, kind: str) -> str:
        value = self._try_consume(kind)
        if value is not None:
            return value
        token = self._tokens[self._pos]
        msg = f"unexpected {token.kind}, expected {kind}"
        raise PatternError(self._source, msg, token.index)

    def _consume_text(self) -> str:
        text = ""
        while True:
            value = self._try_consume(_CHAR) or self._try_consume(_ESCAPED_CHAR)
            if not value:
                return text
            text += value


def _param_segment(
    name: str | None, pattern: str | None, prefix: str, suffix: str, modifier: str
) -> Segment:
    """Pick the segment variant for a parameter or group token."""
    if not name:
        # Only reachable with a pattern: unnamed groups always carry one.
        return RegexFragment(pattern or "", prefix, suffix, modifier)
    pattern = pattern or DEFAULT_PATTERN
    match modifier:
        case "*":
            return ParamCatchAll(name, prefix, suffix, pattern)
        case "+":
            return ParamCatchAllRequired(name, prefix, suffix, pattern)
        case _:
            return Param(name, prefix, suffix, pattern, optional=modifier == "?")
