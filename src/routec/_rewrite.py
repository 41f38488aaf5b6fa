"""Template rewriter — ``:name`` references → positional ``$n`` references.

Two entry points share one scanner (scan_template):
- rewrite_template: header keys and values, substitution only
- rewrite_destination: redirect/rewrite destinations, substitution plus
  query augmentation

Query augmentation: every registered parameter that is not already a query
key of the destination is appended as ``name=$n``, in registry order, after
the destination's own pairs. An explicit key of the same name wins even if
its value never references the parameter.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from urllib.parse import unquote_plus

from routec._tokenizer import scan_template

if TYPE_CHECKING:
    from routec._types import ParamRef, ParamRegistry

# scheme://authority or //authority. Left untouched: only the path, query
# values and hash are templates.
_ORIGIN_RE = re.compile(r"^(?:[A-Za-z][A-Za-z0-9+.\-]*:)?//[^/?#]*")


def rewrite_template(template: str, registry: ParamRegistry) -> str:
    """Replace registered ``:name`` references with ``$n``.

    A trailing modifier is consumed only when it matches the modifier the
    parameter was declared with. Unregistered names are left as-is.
    """
    if not registry:
        return template
    return "".join(
        part if isinstance(part, str) else _substitute(part, registry)
        for part in scan_template(template)
    )


def rewrite_destination(destination: str, registry: ParamRegistry) -> str:
    """Rewrite a destination URL or path and expose parameters as query keys.

    >>> from routec._pattern import compile_pattern
    >>> registry = compile_pattern("/users/:id").registry
    >>> rewrite_destination("/api/user?identifier=:id&version=v2", registry)
    '/api/user?identifier=$1&version=v2&id=$1'
    """
    if not registry:
        return destination

    origin_match = _ORIGIN_RE.match(destination)
    origin = origin_match.group(0) if origin_match else ""
    rest = destination[len(origin) :]

    rest, hash_sep, fragment = rest.partition("#")
    path, _, query = rest.partition("?")

    pairs: list[str] = []
    keys: set[str] = set()
    for pair in query.split("&"):
        if not pair:
            continue
        key, eq, value = pair.partition("=")
        keys.add(unquote_plus(key))
        pairs.append(f"{key}{eq}{rewrite_template(value, registry)}")

    for entry in registry:
        if entry.name not in keys:
            pairs.append(f"{entry.name}={entry.reference}")

    if origin and not path:
        # An absolute URL always carries at least the root path
        path = "/"
    result = origin + rewrite_template(path, registry)
    if pairs:
        result += "?" + "&".join(pairs)
    if hash_sep:
        result += "#" + rewrite_template(fragment, registry)
    return result


def _substitute(ref: ParamRef, registry: ParamRegistry) -> str:
    entry = registry.get(ref.name)
    if entry is None:
        return ref.raw
    if ref.modifier and ref.modifier != entry.modifier:
        return entry.reference + ref.modifier
    return entry.reference
