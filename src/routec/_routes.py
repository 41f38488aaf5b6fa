"""Route descriptors — the emitted, low-level route table entries.

Each descriptor kind has a fixed wire shape:

| Descriptor   | Wire fields                |
|--------------|----------------------------|
| RedirectRoute| src, headers, status       |
| RewriteRoute | src, dest, check           |
| HeaderRoute  | src, headers, continue     |
| HandleRoute  | handle                     |

``src`` is an anchored regex; ``$n`` only ever appears in ``headers`` and
``dest``. Shapes are never mixed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DEFAULT_REDIRECT_STATUS = 308
REDIRECT_STATUS_CODES = frozenset({301, 302, 303, 307, 308})

# Route phases a HandleRoute may mark
HANDLE_PHASES = frozenset({"filesystem"})


@dataclass(frozen=True, slots=True)
class RedirectRoute:
    """Respond with ``status`` and the given headers (``Location`` included).

    ``headers`` is a plain dict, so descriptors compare by value but are not
    hashable. Each assembler builds a fresh dict that the caller owns.
    """

    src: str
    headers: dict[str, str]
    status: int = DEFAULT_REDIRECT_STATUS

    def to_dict(self) -> dict[str, Any]:
        return {"src": self.src, "headers": dict(self.headers), "status": self.status}


@dataclass(frozen=True, slots=True)
class RewriteRoute:
    """Serve ``dest`` instead of the requested path.

    ``check`` asks the serving layer to confirm something exists at the
    destination first. It is omitted from the wire shape when False.
    """

    src: str
    dest: str
    check: bool = True

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"src": self.src, "dest": self.dest}
        if self.check:
            data["check"] = True
        return data


@dataclass(frozen=True, slots=True)
class HeaderRoute:
    """Attach response headers; ``continue_`` keeps matching later routes.

    Like RedirectRoute, holds its own ``headers`` dict and is not hashable.
    """

    src: str
    headers: dict[str, str]
    continue_: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"src": self.src, "headers": dict(self.headers), "continue": self.continue_}


@dataclass(frozen=True, slots=True)
class HandleRoute:
    """Phase marker, e.g. check the filesystem before the routes that follow."""

    handle: str

    def to_dict(self) -> dict[str, Any]:
        return {"handle": self.handle}


type RouteDescriptor = RedirectRoute | RewriteRoute | HeaderRoute | HandleRoute


def route_to_dict(route: RouteDescriptor) -> dict[str, Any]:
    """Serialize a descriptor to its wire shape."""
    return route.to_dict()


def routes_to_dicts(
    routes: list[RouteDescriptor] | tuple[RouteDescriptor, ...],
) -> list[dict[str, Any]]:
    return [route.to_dict() for route in routes]
