"""Whole-config transform — routing config → normalized route table.

Section order in the emitted table:
  clean URLs, trailing slash, redirects, headers,
  {handle: filesystem}, rewrites

Rewrites sit behind the filesystem phase so real files win over them.
Sections absent from the config emit nothing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from routec._config import ConfigParseError, RoutingConfig, parse_routing_config
from routec._normalize import NormalizedRoutes, normalize_routes
from routec._routes import HandleRoute
from routec._types import PatternError
from routec.superstatic._convert import (
    convert_clean_urls,
    convert_headers,
    convert_redirects,
    convert_rewrites,
    convert_trailing_slash,
)

if TYPE_CHECKING:
    from routec._normalize import RegexEngine
    from routec._routes import RouteDescriptor

logger = logging.getLogger(__name__)


def get_transformed_routes(
    config: RoutingConfig | dict[str, Any], *, engine: RegexEngine = "re"
) -> NormalizedRoutes:
    """Build and validate the route table for a routing config.

    Never raises for bad config: parse, pattern and validation errors come
    back as ``NormalizedRoutes.error`` with no routes.
    """
    try:
        routing = config if isinstance(config, RoutingConfig) else parse_routing_config(config)
        routes = _assemble(routing)
    except (ConfigParseError, PatternError) as e:
        logger.debug("routing config rejected: %s", e)
        return NormalizedRoutes(error=e)

    return normalize_routes(routes, engine=engine)


def _assemble(routing: RoutingConfig) -> list[RouteDescriptor]:
    routes: list[RouteDescriptor] = []
    if routing.clean_urls is not None:
        routes.extend(convert_clean_urls(routing.clean_urls, bool(routing.trailing_slash)))
    if routing.trailing_slash is not None:
        routes.extend(convert_trailing_slash(routing.trailing_slash))
    if routing.redirects is not None:
        routes.extend(convert_redirects(routing.redirects))
    if routing.headers is not None:
        routes.extend(convert_headers(routing.headers))
    if routing.rewrites is not None:
        routes.append(HandleRoute("filesystem"))
        routes.extend(convert_rewrites(routing.rewrites))
    logger.debug("assembled %d routes from routing config", len(routes))
    return routes
