"""Core types for routec.

The pattern pipeline works on three layers of data:
- Segment is the tokenized form of a source pattern (one variant per token shape)
- ParamRegistry maps parameter names to positional capture indices
- CompiledPattern pairs the anchored regex source with its registry

RouteError is the root of every error raised by the package.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

# Default parameter pattern: one run that never crosses a path, hash or
# query delimiter. Lazy so a trailing literal can still match.
DEFAULT_PATTERN = r"[^\/#\?]+?"


class RouteError(Exception):
    """Base class for errors raised while compiling routes."""


class PatternError(RouteError):
    """A source pattern could not be tokenized or compiled.

    ``position`` is the offset into ``source`` where the problem was found,
    ``index`` the position of the offending rule in its batch (set by the
    rule assemblers).
    """

    def __init__(
        self,
        source: str,
        message: str,
        position: int | None = None,
        index: int | None = None,
    ) -> None:
        self.source = source
        self.message = message
        self.position = position
        self.index = index
        detail = message if position is None else f"{message} at {position}"
        where = f"rule {index}: " if index is not None else ""
        super().__init__(f"{where}invalid source {source!r}: {detail}")


# ═══════════════════════════════════════════════════════════════════════════════
# Segments
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Literal:
    """Plain text, escaped on compile."""

    text: str


@dataclass(frozen=True, slots=True)
class LiteralGroup:
    """A ``{...}`` group with no parameter inside, e.g. ``{.html}?``."""

    text: str
    modifier: str = ""


@dataclass(frozen=True, slots=True)
class Param:
    """``:name`` (or ``:name?`` when optional) capturing one run."""

    name: str
    prefix: str = ""
    suffix: str = ""
    pattern: str = DEFAULT_PATTERN
    optional: bool = False


@dataclass(frozen=True, slots=True)
class ParamCatchAll:
    """``:name*`` — zero or more prefix-joined runs."""

    name: str
    prefix: str = ""
    suffix: str = ""
    pattern: str = DEFAULT_PATTERN


@dataclass(frozen=True, slots=True)
class ParamCatchAllRequired:
    """``:name+`` — one or more prefix-joined runs."""

    name: str
    prefix: str = ""
    suffix: str = ""
    pattern: str = DEFAULT_PATTERN


@dataclass(frozen=True, slots=True)
class RegexFragment:
    """An unnamed ``(...)`` group, inserted verbatim.

    It still captures, so it consumes a positional index even though it
    never appears in the registry.
    """

    pattern: str
    prefix: str = ""
    suffix: str = ""
    modifier: str = ""


type Segment = (
    Literal | LiteralGroup | Param | ParamCatchAll | ParamCatchAllRequired | RegexFragment
)


@dataclass(frozen=True, slots=True)
class ParamRef:
    """A ``:name`` reference found while scanning a template."""

    name: str
    modifier: str
    raw: str


# ═══════════════════════════════════════════════════════════════════════════════
# Registry and compiled output
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ParamEntry:
    """A named parameter and the capture group it lands in."""

    name: str
    index: int
    modifier: str = ""

    @property
    def reference(self) -> str:
        """Positional capture reference, e.g. ``$1``."""
        return f"${self.index}"


@dataclass(frozen=True, slots=True)
class ParamRegistry:
    """Ordered name → capture index mapping for one compiled pattern.

    Entries are in declaration order; indices are 1-based and strictly
    increasing. Index 0 is the whole match and is never assigned.

    An index is the real capture group number, so indices are not always
    contiguous: an unnamed ``(...)`` group takes a number without getting an
    entry. In ``/(.*)/:a`` the only entry is ``a`` at index 2 (``$2``).
    """

    entries: tuple[ParamEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ParamEntry]:
        return iter(self.entries)

    def __contains__(self, name: object) -> bool:
        return any(e.name == name for e in self.entries)

    def get(self, name: str) -> ParamEntry | None:
        """Look up an entry by parameter name."""
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None

    def names(self) -> tuple[str, ...]:
        return tuple(e.name for e in self.entries)


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """Result of compiling one source pattern."""

    source: str
    regex_source: str
    registry: ParamRegistry
    segments: tuple[Segment, ...] = ()
