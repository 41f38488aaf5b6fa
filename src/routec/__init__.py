"""routec — compile declarative route patterns into a low-level route table.

All public types are exported from this module for flat imports:

    from routec import compile_pattern, rewrite_destination, normalize_routes

The superstatic-style assemblers live in ``routec.superstatic``.
"""

__version__ = "0.1.0"

# Author-facing rule config — see routec._config for details
from routec._config import (
    ConfigParseError,
    HeaderEntry,
    HeaderRule,
    Redirect,
    Rewrite,
    RoutingConfig,
    Rule,
    parse_header_rule,
    parse_redirect,
    parse_rewrite,
    parse_routing_config,
)

# Normalizer
from routec._normalize import (
    NormalizedRoutes,
    RegexEngine,
    ValidationError,
    compile_routes,
    normalize_routes,
    route_from_dict,
)

# Compiler
from routec._pattern import RegistryBuilder, compile_pattern, escape_literal

# Rewriter
from routec._rewrite import rewrite_destination, rewrite_template

# Route descriptors
from routec._routes import (
    DEFAULT_REDIRECT_STATUS,
    HANDLE_PHASES,
    REDIRECT_STATUS_CODES,
    HandleRoute,
    HeaderRoute,
    RedirectRoute,
    RewriteRoute,
    RouteDescriptor,
    route_to_dict,
    routes_to_dicts,
)

# Tokenizer
from routec._tokenizer import MAX_PATTERN_LENGTH, scan_template, tokenize
from routec._types import (
    DEFAULT_PATTERN,
    CompiledPattern,
    Literal,
    LiteralGroup,
    Param,
    ParamCatchAll,
    ParamCatchAllRequired,
    ParamEntry,
    ParamRef,
    ParamRegistry,
    PatternError,
    RegexFragment,
    RouteError,
    Segment,
)

__all__ = [
    # Errors
    "RouteError",
    "PatternError",
    "ConfigParseError",
    "ValidationError",
    # Segments
    "Segment",
    "Literal",
    "LiteralGroup",
    "Param",
    "ParamCatchAll",
    "ParamCatchAllRequired",
    "RegexFragment",
    "ParamRef",
    "DEFAULT_PATTERN",
    "MAX_PATTERN_LENGTH",
    "tokenize",
    "scan_template",
    # Compiler
    "ParamEntry",
    "ParamRegistry",
    "RegistryBuilder",
    "CompiledPattern",
    "compile_pattern",
    "escape_literal",
    # Rewriter
    "rewrite_template",
    "rewrite_destination",
    # Route descriptors
    "RouteDescriptor",
    "RedirectRoute",
    "RewriteRoute",
    "HeaderRoute",
    "HandleRoute",
    "route_to_dict",
    "routes_to_dicts",
    "DEFAULT_REDIRECT_STATUS",
    "REDIRECT_STATUS_CODES",
    "HANDLE_PHASES",
    # Rule config
    "Rule",
    "Redirect",
    "Rewrite",
    "HeaderEntry",
    "HeaderRule",
    "RoutingConfig",
    "parse_redirect",
    "parse_rewrite",
    "parse_header_rule",
    "parse_routing_config",
    # Normalizer
    "RegexEngine",
    "NormalizedRoutes",
    "compile_routes",
    "normalize_routes",
    "route_from_dict",
]
