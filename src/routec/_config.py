"""Author-facing rule types and their dict parsers.

Rules arrive as JSON-shaped dicts (the same camelCase shape a superstatic
config uses) and are parsed into frozen dataclasses before compilation:

  dict → parse_redirect() / parse_rewrite() / parse_header_rule() → rule
  dict → parse_routing_config() → RoutingConfig

| Config key      | Rule type     |
|-----------------|---------------|
| redirects[]     | Redirect      |
| rewrites[]      | Rewrite       |
| headers[]       | HeaderRule    |
| cleanUrls       | bool          |
| trailingSlash   | bool          |
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from routec._types import RouteError

if TYPE_CHECKING:
    from collections.abc import Callable

# ═══════════════════════════════════════════════════════════════════════════════
# Rule types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Redirect:
    """Redirect matching requests to ``destination``.

    ``status_code`` of None means the default permanent redirect (308).
    """

    source: str
    destination: str
    status_code: int | None = None


@dataclass(frozen=True, slots=True)
class Rewrite:
    """Serve ``destination`` for matching requests."""

    source: str
    destination: str


@dataclass(frozen=True, slots=True)
class HeaderEntry:
    key: str
    value: str


@dataclass(frozen=True, slots=True)
class HeaderRule:
    """Attach headers to matching responses. Keys and values are templates."""

    source: str
    headers: tuple[HeaderEntry, ...]


type Rule = Redirect | Rewrite | HeaderRule


@dataclass(frozen=True, slots=True)
class RoutingConfig:
    """A whole superstatic-style routing config.

    None means the key was absent, which differs from an empty list or
    False: absent sections emit nothing at all.
    """

    clean_urls: bool | None = None
    trailing_slash: bool | None = None
    redirects: tuple[Redirect, ...] | None = None
    rewrites: tuple[Rewrite, ...] | None = None
    headers: tuple[HeaderRule, ...] | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing (dict → rule types)
# ═══════════════════════════════════════════════════════════════════════════════


class ConfigParseError(RouteError):
    """Error parsing a config dict into rule types."""


def parse_redirect(data: dict[str, Any]) -> Redirect:
    """Parse ``{source, destination, statusCode?}`` into a Redirect.

    Raises:
        ConfigParseError: If the dict is malformed.
    """
    _require_dict(data, "redirect")
    source = _require_str(data, "source", "redirect")
    destination = _require_str(data, "destination", "redirect")

    status_code = data.get("statusCode")
    if status_code is not None and (
        isinstance(status_code, bool) or not isinstance(status_code, int)
    ):
        msg = f"redirect 'statusCode' must be an integer, got {type(status_code).__name__}"
        raise ConfigParseError(msg)

    return Redirect(source=source, destination=destination, status_code=status_code)


def parse_rewrite(data: dict[str, Any]) -> Rewrite:
    """Parse ``{source, destination}`` into a Rewrite."""
    _require_dict(data, "rewrite")
    return Rewrite(
        source=_require_str(data, "source", "rewrite"),
        destination=_require_str(data, "destination", "rewrite"),
    )


def parse_header_rule(data: dict[str, Any]) -> HeaderRule:
    """Parse ``{source, headers: [{key, value}, ...]}`` into a HeaderRule."""
    _require_dict(data, "header rule")
    source = _require_str(data, "source", "header rule")

    raw_headers = data.get("headers")
    if raw_headers is None:
        msg = "header rule missing required field 'headers'"
        raise ConfigParseError(msg)
    if not isinstance(raw_headers, list):
        msg = f"header rule 'headers' must be a list, got {type(raw_headers).__name__}"
        raise ConfigParseError(msg)

    entries = []
    for raw in raw_headers:
        _require_dict(raw, "header")
        entries.append(
            HeaderEntry(
                key=_require_str(raw, "key", "header"),
                value=_require_str(raw, "value", "header"),
            )
        )
    return HeaderRule(source=source, headers=tuple(entries))


def parse_routing_config(data: dict[str, Any]) -> RoutingConfig:
    """Parse a superstatic-style config dict.

    This is the main entry point for config loading. Unrelated keys are
    ignored so a full project config can be passed as-is.

    Raises:
        ConfigParseError: If a routing key is malformed.
    """
    if not isinstance(data, dict):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    return RoutingConfig(
        clean_urls=_optional_bool(data, "cleanUrls"),
        trailing_slash=_optional_bool(data, "trailingSlash"),
        redirects=_optional_list(data, "redirects", parse_redirect),
        rewrites=_optional_list(data, "rewrites", parse_rewrite),
        headers=_optional_list(data, "headers", parse_header_rule),
    )


def _require_dict(data: Any, kind: str) -> None:
    if not isinstance(data, dict):
        msg = f"{kind} must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)


def _require_str(data: dict[str, Any], name: str, kind: str) -> str:
    if name not in data:
        msg = f"{kind} missing required field {name!r}"
        raise ConfigParseError(msg)
    value = data[name]
    if not isinstance(value, str):
        msg = f"{kind} {name!r} must be a string, got {type(value).__name__}"
        raise ConfigParseError(msg)
    return value


def _optional_bool(data: dict[str, Any], name: str) -> bool | None:
    value = data.get(name)
    if value is not None and not isinstance(value, bool):
        msg = f"{name!r} must be a boolean, got {type(value).__name__}"
        raise ConfigParseError(msg)
    return value


def _optional_list[T](
    data: dict[str, Any], name: str, parse: Callable[[dict[str, Any]], T]
) -> tuple[T, ...] | None:
    value = data.get(name)
    if value is None:
        return None
    if not isinstance(value, list):
        msg = f"{name!r} must be a list, got {type(value).__name__}"
        raise ConfigParseError(msg)
    return tuple(parse(item) for item in value)
