"""Rule assemblers — superstatic-style rules → route descriptors.

Each assembler is a pure function of its input and returns a fresh list.
Rules may be typed (routec._config) or JSON-shaped dicts, which are parsed
first.

| Assembler              | Emits          |
|------------------------|----------------|
| convert_redirects      | RedirectRoute  |
| convert_rewrites       | RewriteRoute   |
| convert_headers        | HeaderRoute    |
| convert_clean_urls     | RedirectRoute  |
| convert_trailing_slash | RedirectRoute  |
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from routec._config import (
    HeaderRule,
    Redirect,
    Rewrite,
    parse_header_rule,
    parse_redirect,
    parse_rewrite,
)
from routec._pattern import compile_pattern
from routec._rewrite import rewrite_destination, rewrite_template
from routec._routes import (
    DEFAULT_REDIRECT_STATUS,
    HeaderRoute,
    RedirectRoute,
    RewriteRoute,
)
from routec._types import CompiledPattern, PatternError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


@dataclass(frozen=True, slots=True)
class CleanUrl:
    """An ``.html`` file path and its extension-less form."""

    html: str
    clean: str


def get_clean_urls(file_paths: Iterable[str]) -> list[CleanUrl]:
    """Map relative ``.html`` file paths to their clean URLs.

    Other files are skipped; order is preserved.
    """
    return [
        CleanUrl(html=f"/{path}", clean=f"/{path.removesuffix('.html')}")
        for path in file_paths
        if path.endswith(".html")
    ]


def convert_clean_urls(enabled: bool, trailing_slash: bool = False) -> list[RedirectRoute]:
    """Redirect ``/index[.html]`` to its directory and ``*.html`` to the clean path."""
    if not enabled:
        return []
    location = "/$1/" if trailing_slash else "/$1"
    return [
        RedirectRoute(
            src=r"^/(?:(.+)/)?index(?:\.html)?/?$",
            headers={"Location": location},
            status=DEFAULT_REDIRECT_STATUS,
        ),
        RedirectRoute(
            src=r"^/(.*)\.html/?$",
            headers={"Location": location},
            status=DEFAULT_REDIRECT_STATUS,
        ),
    ]


def convert_trailing_slash(enabled: bool) -> list[RedirectRoute]:
    """Enforce (``enabled``) or strip (not ``enabled``) a trailing slash."""
    if enabled:
        route = RedirectRoute(
            src=r"^/(.*[^\/])$",
            headers={"Location": "/$1/"},
            status=DEFAULT_REDIRECT_STATUS,
        )
    else:
        route = RedirectRoute(
            src=r"^/(.*)\/$",
            headers={"Location": "/$1"},
            status=DEFAULT_REDIRECT_STATUS,
        )
    return [route]


def convert_redirects(redirects: Iterable[Redirect | dict[str, Any]]) -> list[RedirectRoute]:
    """Compile redirect rules. The default status is 308.

    Raises:
        ConfigParseError: a dict rule is malformed.
        PatternError: a source cannot be compiled (``index`` is set).
    """
    routes = []
    for index, rule in enumerate(redirects):
        redirect = _as_rule(rule, Redirect, parse_redirect)
        compiled = _compile(redirect.source, index)
        location = rewrite_destination(redirect.destination, compiled.registry)
        status = redirect.status_code
        routes.append(
            RedirectRoute(
                src=compiled.regex_source,
                headers={"Location": location},
                status=DEFAULT_REDIRECT_STATUS if status is None else status,
            )
        )
    return routes


def convert_rewrites(rewrites: Iterable[Rewrite | dict[str, Any]]) -> list[RewriteRoute]:
    """Compile rewrite rules; every route asks for a filesystem check."""
    routes = []
    for index, rule in enumerate(rewrites):
        rewrite = _as_rule(rule, Rewrite, parse_rewrite)
        compiled = _compile(rewrite.source, index)
        dest = rewrite_destination(rewrite.destination, compiled.registry)
        routes.append(RewriteRoute(src=compiled.regex_source, dest=dest, check=True))
    return routes


def convert_headers(headers: Iterable[HeaderRule | dict[str, Any]]) -> list[HeaderRoute]:
    """Compile header rules. Keys and values may both reference parameters."""
    routes = []
    for index, rule in enumerate(headers):
        header_rule = _as_rule(rule, HeaderRule, parse_header_rule)
        compiled = _compile(header_rule.source, index)
        registry = compiled.registry
        rendered = {
            rewrite_template(entry.key, registry): rewrite_template(entry.value, registry)
            for entry in header_rule.headers
        }
        routes.append(HeaderRoute(src=compiled.regex_source, headers=rendered, continue_=True))
    return routes


def _as_rule[R](rule: R | dict[str, Any], kind: type[R], parse: Callable[[dict[str, Any]], R]) -> R:
    if isinstance(rule, kind):
        return rule
    return parse(rule)  # type: ignore[arg-type]


def _compile(source: str, index: int) -> CompiledPattern:
    try:
        return compile_pattern(source)
    except PatternError as e:
        raise PatternError(e.source, e.message, e.position, index) from e
