"""Tests for the rule types and their dict parsers."""

import pytest

from routec import (
    ConfigParseError,
    HeaderEntry,
    HeaderRule,
    Redirect,
    Rewrite,
    RouteError,
    RoutingConfig,
    parse_header_rule,
    parse_redirect,
    parse_rewrite,
    parse_routing_config,
)


class TestParseRedirect:
    def test_minimal(self) -> None:
        assert parse_redirect({"source": "/a", "destination": "/b"}) == Redirect("/a", "/b")

    def test_status_code(self) -> None:
        rule = parse_redirect({"source": "/a", "destination": "/b", "statusCode": 302})
        assert rule.status_code == 302

    def test_missing_source(self) -> None:
        with pytest.raises(ConfigParseError, match="missing required field 'source'"):
            parse_redirect({"destination": "/b"})

    def test_destination_must_be_string(self) -> None:
        with pytest.raises(ConfigParseError, match="'destination' must be a string"):
            parse_redirect({"source": "/a", "destination": 1})

    def test_status_code_must_be_int(self) -> None:
        with pytest.raises(ConfigParseError, match="statusCode"):
            parse_redirect({"source": "/a", "destination": "/b", "statusCode": "301"})

    def test_status_code_rejects_bool(self) -> None:
        with pytest.raises(ConfigParseError, match="statusCode"):
            parse_redirect({"source": "/a", "destination": "/b", "statusCode": True})

    def test_not_a_dict(self) -> None:
        with pytest.raises(ConfigParseError, match="must be a dict"):
            parse_redirect(["/a", "/b"])  # type: ignore[arg-type]


class TestParseRewrite:
    def test_minimal(self) -> None:
        assert parse_rewrite({"source": "/a", "destination": "/b"}) == Rewrite("/a", "/b")

    def test_extra_keys_ignored(self) -> None:
        assert parse_rewrite({"source": "/a", "destination": "/b", "x": 1}) == Rewrite("/a", "/b")


class TestParseHeaderRule:
    def test_entries(self) -> None:
        rule = parse_header_rule(
            {
                "source": "/:path*",
                "headers": [
                    {"key": "Cache-Control", "value": "no-cache"},
                    {"key": "X-Path", "value": ":path"},
                ],
            }
        )
        assert rule == HeaderRule(
            "/:path*",
            (HeaderEntry("Cache-Control", "no-cache"), HeaderEntry("X-Path", ":path")),
        )

    def test_missing_headers(self) -> None:
        with pytest.raises(ConfigParseError, match="missing required field 'headers'"):
            parse_header_rule({"source": "/a"})

    def test_headers_must_be_list(self) -> None:
        with pytest.raises(ConfigParseError, match="must be a list"):
            parse_header_rule({"source": "/a", "headers": {"key": "X", "value": "y"}})

    def test_entry_missing_value(self) -> None:
        with pytest.raises(ConfigParseError, match="header missing required field 'value'"):
            parse_header_rule({"source": "/a", "headers": [{"key": "X"}]})


class TestParseRoutingConfig:
    def test_empty(self) -> None:
        assert parse_routing_config({}) == RoutingConfig()

    def test_all_sections(self) -> None:
        config = parse_routing_config(
            {
                "cleanUrls": True,
                "trailingSlash": False,
                "redirects": [{"source": "/a", "destination": "/b"}],
                "rewrites": [],
                "headers": [{"source": "/h", "headers": []}],
            }
        )
        assert config.clean_urls is True
        assert config.trailing_slash is False
        assert config.redirects == (Redirect("/a", "/b"),)
        assert config.rewrites == ()
        assert config.headers == (HeaderRule("/h", ()),)

    def test_absent_differs_from_empty(self) -> None:
        assert parse_routing_config({}).rewrites is None
        assert parse_routing_config({"rewrites": []}).rewrites == ()

    def test_unrelated_keys_ignored(self) -> None:
        config = parse_routing_config({"public": "dist", "cleanUrls": False})
        assert config == RoutingConfig(clean_urls=False)

    def test_bool_flags(self) -> None:
        with pytest.raises(ConfigParseError, match="'cleanUrls' must be a boolean"):
            parse_routing_config({"cleanUrls": "yes"})

    def test_section_must_be_list(self) -> None:
        with pytest.raises(ConfigParseError, match="'redirects' must be a list"):
            parse_routing_config({"redirects": {"source": "/a"}})

    def test_not_a_dict(self) -> None:
        with pytest.raises(ConfigParseError, match="expected dict"):
            parse_routing_config("cleanUrls")  # type: ignore[arg-type]

    def test_errors_share_base(self) -> None:
        assert issubclass(ConfigParseError, RouteError)
