"""Test utilities for routec.

Helpers to evaluate compiled routes against sample paths in tests and
examples. routec itself never matches live traffic; this is the minimum a
test needs to check that a compiled ``src`` accepts and rejects the right
paths.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from routec._routes import RouteDescriptor


def route_regex(route: RouteDescriptor | Mapping[str, Any]) -> re.Pattern[str]:
    """Compile a route's ``src`` with the standard library engine.

    >>> from routec.superstatic import convert_trailing_slash
    >>> route_regex(convert_trailing_slash(True)[0]).pattern
    '^/(.*[^\\\\/])$'
    """
    src = route["src"] if isinstance(route, Mapping) else route.src  # type: ignore[union-attr]
    return re.compile(src)


def route_matches(route: RouteDescriptor | Mapping[str, Any], path: str) -> bool:
    """True if the route's ``src`` matches ``path`` (search semantics)."""
    return route_regex(route).search(path) is not None
