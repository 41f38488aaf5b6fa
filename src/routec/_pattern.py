"""Pattern compiler — Segment sequence → anchored regex + ParamRegistry.

Emission rules (prefix/suffix are regex-escaped first):

| Segment                      | With prefix/suffix                                  |
|------------------------------|-----------------------------------------------------|
| Param                        | (?:{p}({pat}){s})  + "?" when optional             |
| ParamCatchAll                | (?:{p}((?:{pat})(?:{s}{p}(?:{pat}))*){s})?         |
| ParamCatchAllRequired        | (?:{p}((?:{pat})(?:{s}{p}(?:{pat}))*){s})          |
| RegexFragment                | as the parameter forms, chosen by its modifier     |

Without prefix or suffix every capturing segment emits ``({pat}){modifier}``.
The leading separator always sits in the non-capturing wrapper so a
substituted ``$n`` never carries the slash.

Output is always anchored ``^...$``; there is no partial-match mode.
"""

from __future__ import annotations

import re

from routec._tokenizer import tokenize
from routec._types import (
    CompiledPattern,
    Literal,
    LiteralGroup,
    Param,
    ParamCatchAll,
    ParamCatchAllRequired,
    ParamEntry,
    ParamRegistry,
    RegexFragment,
    Segment,
)

_ESCAPE_RE = re.compile(r"([.+*?=^!:${}()[\]|/\\])")


def escape_literal(text: str) -> str:
    """Backslash-escape regex metacharacters, including ``/``."""
    return _ESCAPE_RE.sub(r"\\\1", text)


class RegistryBuilder:
    """Append-only builder for a ParamRegistry.

    Every capturing segment claims the next group index, named or not, so
    the registry always points at the real capture group.
    """

    def __init__(self) -> None:
        self._entries: list[ParamEntry] = []
        self._groups = 0

    def capture(self, name: str | None = None, modifier: str = "") -> int:
        """Claim the next capture group; register it when named."""
        self._groups += 1
        if name is not None:
            self._entries.append(ParamEntry(name, self._groups, modifier))
        return self._groups

    def build(self) -> ParamRegistry:
        return ParamRegistry(tuple(self._entries))


def compile_pattern(source: str) -> CompiledPattern:
    """Compile a source pattern into an anchored regex and its registry.

    >>> compile_pattern("/old/:segment/path").regex_source
    '^\\\\/old(?:\\\\/([^\\\\/#\\\\?]+?))\\\\/path$'

    Raises:
        PatternError: if the source cannot be tokenized.
    """
    segments = tokenize(source)
    builder = RegistryBuilder()
    body = "".join(_compile_segment(segment, builder) for segment in segments)
    return CompiledPattern(
        source=source,
        regex_source=f"^{body}$",
        registry=builder.build(),
        segments=segments,
    )


def _compile_segment(segment: Segment, builder: RegistryBuilder) -> str:
    match segment:
        case Literal(text=text):
            return escape_literal(text)
        case LiteralGroup(text=text, modifier=modifier):
            return f"(?:{escape_literal(text)}){modifier}"
        case Param(name=name, prefix=prefix, suffix=suffix, pattern=pattern, optional=optional):
            modifier = "?" if optional else ""
            builder.capture(name, modifier)
            return _single(prefix, suffix, pattern, modifier)
        case ParamCatchAll(name=name, prefix=prefix, suffix=suffix, pattern=pattern):
            builder.capture(name, "*")
            return _repeated(prefix, suffix, pattern, "*")
        case ParamCatchAllRequired(name=name, prefix=prefix, suffix=suffix, pattern=pattern):
            builder.capture(name, "+")
            return _repeated(prefix, suffix, pattern, "+")
        case RegexFragment(pattern=pattern, prefix=prefix, suffix=suffix, modifier=modifier):
            builder.capture(None, modifier)
            if modifier in ("*", "+"):
                return _repeated(prefix, suffix, pattern, modifier)
            return _single(prefix, suffix, pattern, modifier)
        case _:  # pragma: no cover
            msg = f"unknown segment type: {type(segment).__name__}"
            raise TypeError(msg)


def _single(prefix: str, suffix: str, pattern: str, modifier: str) -> str:
    prefix, suffix = escape_literal(prefix), escape_literal(suffix)
    if prefix or suffix:
        return f"(?:{prefix}({pattern}){suffix}){modifier}"
    return f"({pattern}){modifier}"


def _repeated(prefix: str, suffix: str, pattern: str, modifier: str) -> str:
    prefix, suffix = escape_literal(prefix), escape_literal(suffix)
    if prefix or suffix:
        optional = "?" if modifier == "*" else ""
        return (
            f"(?:{prefix}((?:{pattern})(?:{suffix}{prefix}(?:{pattern}))*){suffix})"
            f"{optional}"
        )
    return f"({pattern}){modifier}"
