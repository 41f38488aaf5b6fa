"""Conformance fixture loader for routec.

Loads YAML fixtures from tests/fixtures/ and converts each case into a
rule, the route it must compile to, and sample paths the route's src must
accept or reject.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from routec.superstatic import (
    convert_clean_urls,
    convert_headers,
    convert_redirects,
    convert_rewrites,
    convert_trailing_slash,
)

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"


def _clean_urls(rules: list[dict[str, Any]]) -> list[Any]:
    (flags,) = rules
    return convert_clean_urls(flags["enabled"], flags.get("trailingSlash", False))


def _trailing_slash(rules: list[dict[str, Any]]) -> list[Any]:
    (flags,) = rules
    return convert_trailing_slash(flags["enabled"])


# Flag-driven kinds take a single {enabled, ...} rule
CONVERTERS = {
    "redirects": convert_redirects,
    "rewrites": convert_rewrites,
    "headers": convert_headers,
    "clean_urls": _clean_urls,
    "trailing_slash": _trailing_slash,
}


@dataclass
class FixtureCase:
    """A single test case from a conformance fixture."""

    fixture_name: str
    case_name: str
    kind: str
    rule: dict[str, Any]
    route: dict[str, Any]
    match: list[str] = field(default_factory=list)
    no_match: list[str] = field(default_factory=list)
    route_index: int | None = None

    @property
    def id(self) -> str:
        return f"{self.fixture_name}::{self.case_name}"

    def convert(self) -> list[Any]:
        """Run the rule through its converter.

        ``route_index`` picks one route when a converter emits several.
        """
        routes = CONVERTERS[self.kind]([self.rule])
        if self.route_index is None:
            return routes
        return [routes[self.route_index]]


# ─── Fixture loading ────────────────────────────────────────────────────────


def load_conversion_fixtures() -> list[FixtureCase]:
    """Load every rule-conversion fixture under fixtures/ (one YAML file per kind)."""
    cases: list[FixtureCase] = []
    for yaml_file in sorted(FIXTURE_DIR.glob("*.yaml")):
        cases.extend(_load_file(yaml_file))
    return cases


def load_config_fixtures() -> list[dict[str, Any]]:
    """Load whole-config fixtures from fixtures/config/."""
    fixtures: list[dict[str, Any]] = []
    config_dir = FIXTURE_DIR / "config"
    if not config_dir.exists():
        return fixtures
    for yaml_file in sorted(config_dir.glob("*.yaml")):
        with yaml_file.open() as f:
            for doc in yaml.safe_load_all(f):
                if doc is None:
                    continue
                doc["_source"] = yaml_file.name
                fixtures.append(doc)
    return fixtures


def _load_file(path: Path) -> list[FixtureCase]:
    """Load a single fixture YAML file (may contain multiple documents)."""
    cases: list[FixtureCase] = []
    with path.open() as f:
        for doc in yaml.safe_load_all(f):
            if doc is None:
                continue
            for case in doc["cases"]:
                cases.append(
                    FixtureCase(
                        fixture_name=doc["name"],
                        case_name=case["name"],
                        kind=doc["kind"],
                        rule=case["rule"],
                        route=case["route"],
                        match=[str(p) for p in case.get("match", [])],
                        no_match=[str(p) for p in case.get("no_match", [])],
                        route_index=case.get("route_index"),
                    )
                )
    return cases
