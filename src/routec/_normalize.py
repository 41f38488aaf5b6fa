"""Route normalizer — mixed entries → validated route table.

Entries may be route descriptors or plain dicts in the wire shape. Every
entry is parsed back into a descriptor and checked:

- only known fields, and ``src`` xor ``handle``
- ``src`` is anchored (``^``/``$`` added when missing) and compiles
- shape fields are not mixed (see routec._routes)
- ``status`` is a redirect code, ``headers`` maps str → str
- each ``handle`` phase appears once

Validation is total: the first invalid entry fails the whole batch and no
partial table is returned.

Regex engines:
- ``re``: backtracking, accepts lookaround (needed by sources such as
  ``/feedback/((?!general).*)``)
- ``re2``: ``google-re2``, linear time; rejects backreferences and
  lookaround. Use it when the serving layer evaluates routes with RE2.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

import re2

from routec._routes import (
    HANDLE_PHASES,
    REDIRECT_STATUS_CODES,
    HandleRoute,
    HeaderRoute,
    RedirectRoute,
    RewriteRoute,
    RouteDescriptor,
)
from routec._types import RouteError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)

type RegexEngine = Literal["re", "re2"]

ROUTE_FIELDS = frozenset({"src", "dest", "headers", "status", "check", "continue", "handle"})

_DESCRIPTOR_TYPES = (RedirectRoute, RewriteRoute, HeaderRoute, HandleRoute)


class ValidationError(RouteError):
    """A route table entry is invalid.

    ``index`` is the entry's position in the batch and ``field`` the
    offending field, when known.
    """

    def __init__(
        self, message: str, index: int | None = None, field: str | None = None
    ) -> None:
        self.message = message
        self.index = index
        self.field = field
        location = "" if index is None else f"routes[{index}]"
        if field is not None:
            location = f"{location}.{field}" if location else field
        super().__init__(f"{location}: {message}" if location else message)


@dataclass(frozen=True, slots=True)
class NormalizedRoutes:
    """Either a full route table or the error that rejected it."""

    routes: tuple[RouteDescriptor, ...] = ()
    error: RouteError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def compile_routes(
    entries: Iterable[RouteDescriptor | Mapping[str, Any]] | None,
    *,
    engine: RegexEngine = "re",
) -> tuple[RouteDescriptor, ...]:
    """Validate entries into a route table.

    Raises:
        ValidationError: on the first invalid entry.
        ValueError: unknown regex engine.
    """
    check = _regex_checker(engine)
    routes: list[RouteDescriptor] = []
    handles: set[str] = set()

    for index, entry in enumerate(entries or ()):
        route = _parse_route(entry, index, check)
        if isinstance(route, HandleRoute):
            if route.handle in handles:
                msg = f"handle {route.handle!r} appears more than once"
                raise ValidationError(msg, index, "handle")
            handles.add(route.handle)
        routes.append(route)

    logger.debug("compiled route table: %d routes (engine=%s)", len(routes), engine)
    return tuple(routes)


def normalize_routes(
    entries: Iterable[RouteDescriptor | Mapping[str, Any]] | None,
    *,
    engine: RegexEngine = "re",
) -> NormalizedRoutes:
    """Validate entries, returning the error instead of raising it."""
    try:
        routes = compile_routes(entries, engine=engine)
    except ValidationError as e:
        logger.debug("route table rejected: %s", e)
        return NormalizedRoutes(error=e)
    return NormalizedRoutes(routes=routes)


def route_from_dict(
    data: Mapping[str, Any], *, engine: RegexEngine = "re"
) -> RouteDescriptor:
    """Parse a single wire-shaped dict into a descriptor.

    Raises:
        ValidationError: If the dict is not a valid route.
    """
    return _parse_route(data, None, _regex_checker(engine))


# ═══════════════════════════════════════════════════════════════════════════════
# Entry parsing
# ═══════════════════════════════════════════════════════════════════════════════


def _regex_checker(engine: str) -> Callable[[str], None]:
    match engine:
        case "re":
            return _check_re
        case "re2":
            return _check_re2
        case _:
            msg = f"unknown regex engine: {engine!r}"
            raise ValueError(msg)


def _check_re(src: str) -> None:
    try:
        re.compile(src)
    except re.error as e:
        msg = f"invalid regular expression: {e}"
        raise ValidationError(msg) from e


def _check_re2(src: str) -> None:
    try:
        re2.compile(src)
    except re2.error as e:
        msg = f"invalid RE2 regular expression: {e}"
        raise ValidationError(msg) from e


def _parse_route(
    entry: RouteDescriptor | Mapping[str, Any],
    index: int | None,
    check: Callable[[str], None],
) -> RouteDescriptor:
    data = entry.to_dict() if isinstance(entry, _DESCRIPTOR_TYPES) else entry
    if not isinstance(data, Mapping):
        msg = f"route must be a mapping, got {type(data).__name__}"
        raise ValidationError(msg, index)

    for key in data:
        if not isinstance(key, str):
            msg = f"field names must be strings, got {key!r}"
            raise ValidationError(msg, index)

    unknown = sorted(set(data) - ROUTE_FIELDS)
    if unknown:
        msg = f"unknown field(s): {', '.join(map(repr, unknown))}"
        raise ValidationError(msg, index, unknown[0])

    if "handle" in data:
        return _parse_handle(data, index)
    if "src" not in data:
        msg = "a route must set either 'handle' or 'src'"
        raise ValidationError(msg, index)

    src = _parse_src(data["src"], index, check)

    if "continue" in data:
        _forbid(data, ("dest", "status", "check"), "continue", index)
        return HeaderRoute(
            src=src,
            headers=_parse_headers(data, index),
            continue_=_parse_bool(data, "continue", index),
        )

    if "dest" in data:
        _forbid(data, ("status", "headers"), "dest", index)
        dest = data["dest"]
        if not isinstance(dest, str):
            msg = f"must be a string, got {type(dest).__name__}"
            raise ValidationError(msg, index, "dest")
        check_fs = _parse_bool(data, "check", index) if "check" in data else False
        return RewriteRoute(src=src, dest=dest, check=check_fs)

    if "status" in data:
        _forbid(data, ("check",), "status", index)
        headers = _parse_headers(data, index)
        if not any(key.lower() == "location" for key in headers):
            msg = "redirect routes need a 'Location' header"
            raise ValidationError(msg, index, "headers")
        return RedirectRoute(src=src, headers=headers, status=_parse_status(data, index))

    msg = "a route must set one of 'dest', 'status' or 'continue'"
    raise ValidationError(msg, index)


def _parse_handle(data: Mapping[str, Any], index: int | None) -> HandleRoute:
    extra = sorted(set(data) - {"handle"})
    if extra:
        msg = f"handle routes cannot set {', '.join(map(repr, extra))}"
        raise ValidationError(msg, index, extra[0])
    handle = data["handle"]
    if handle not in HANDLE_PHASES:
        msg = f"unknown handle {handle!r} (expected one of {sorted(HANDLE_PHASES)})"
        raise ValidationError(msg, index, "handle")
    return HandleRoute(handle=handle)


def _parse_src(src: Any, index: int | None, check: Callable[[str], None]) -> str:
    if not isinstance(src, str) or not src:
        msg = "must be a non-empty string"
        raise ValidationError(msg, index, "src")
    if not src.startswith("^"):
        src = f"^{src}"
    if not src.endswith("$"):
        src = f"{src}$"
    try:
        check(src)
    except ValidationError as e:
        raise ValidationError(e.message, index, "src") from e
    return src


def _parse_headers(data: Mapping[str, Any], index: int | None) -> dict[str, str]:
    headers = data.get("headers")
    if not isinstance(headers, Mapping):
        msg = f"must be a mapping, got {type(headers).__name__}"
        raise ValidationError(msg, index, "headers")
    for key, value in headers.items():
        if not isinstance(key, str) or not isinstance(value, str):
            msg = f"header {key!r} must map a string to a string"
            raise ValidationError(msg, index, "headers")
    return dict(headers)


def _parse_status(data: Mapping[str, Any], index: int | None) -> int:
    status = data["status"]
    if isinstance(status, bool) or not isinstance(status, int):
        msg = f"must be an integer, got {type(status).__name__}"
        raise ValidationError(msg, index, "status")
    if status not in REDIRECT_STATUS_CODES:
        msg = f"{status} is not a redirect status (expected one of {sorted(REDIRECT_STATUS_CODES)})"
        raise ValidationError(msg, index, "status")
    return status


def _parse_bool(data: Mapping[str, Any], name: str, index: int | None) -> bool:
    value = data[name]
    if not isinstance(value, bool):
        msg = f"must be a boolean, got {type(value).__name__}"
        raise ValidationError(msg, index, name)
    return value


def _forbid(
    data: Mapping[str, Any], fields: tuple[str, ...], owner: str, index: int | None
) -> None:
    for name in fields:
        if name in data:
            msg = f"cannot be combined with {owner!r}"
            raise ValidationError(msg, index, name)
