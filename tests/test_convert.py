"""Tests for the superstatic rule assemblers."""

import pytest

from routec import (
    ConfigParseError,
    HeaderEntry,
    HeaderRoute,
    HeaderRule,
    PatternError,
    Redirect,
    RedirectRoute,
    Rewrite,
    RewriteRoute,
)
from routec.superstatic import (
    CleanUrl,
    convert_clean_urls,
    convert_headers,
    convert_redirects,
    convert_rewrites,
    convert_trailing_slash,
    get_clean_urls,
)
from routec.testing import route_matches, route_regex

SEGMENT = r"[^\/#\?]+?"


class TestCleanUrls:
    def test_disabled(self) -> None:
        assert convert_clean_urls(False) == []

    def test_enabled(self) -> None:
        assert convert_clean_urls(True) == [
            RedirectRoute(r"^/(?:(.+)/)?index(?:\.html)?/?$", {"Location": "/$1"}, 308),
            RedirectRoute(r"^/(.*)\.html/?$", {"Location": "/$1"}, 308),
        ]

    def test_with_trailing_slash(self) -> None:
        routes = convert_clean_urls(True, trailing_slash=True)
        assert [r.headers["Location"] for r in routes] == ["/$1/", "/$1/"]

    def test_index_route_matches(self) -> None:
        (index_route, _) = convert_clean_urls(True)
        for path in ("/index", "/index.html", "/about/index.html", "/about/index/"):
            assert route_matches(index_route, path), path
        m = route_regex(index_route).match("/about/index.html")
        assert m is not None
        assert m.group(1) == "about"

    def test_html_route_matches(self) -> None:
        (_, html_route) = convert_clean_urls(True)
        m = route_regex(html_route).match("/blog/post.html")
        assert m is not None
        assert m.group(1) == "blog/post"
        assert not route_matches(html_route, "/blog/post")


class TestTrailingSlash:
    def test_enabled(self) -> None:
        (route,) = convert_trailing_slash(True)
        assert route == RedirectRoute(r"^/(.*[^\/])$", {"Location": "/$1/"}, 308)
        assert route_matches(route, "/about")
        assert not route_matches(route, "/about/")
        assert not route_matches(route, "/")

    def test_disabled(self) -> None:
        (route,) = convert_trailing_slash(False)
        assert route == RedirectRoute(r"^/(.*)\/$", {"Location": "/$1"}, 308)
        assert route_matches(route, "/about/")
        assert not route_matches(route, "/about")


class TestGetCleanUrls:
    def test_html_files_only(self) -> None:
        paths = ["index.html", "img/logo.png", "blog/post.html", "about.html"]
        assert get_clean_urls(paths) == [
            CleanUrl("/index.html", "/index"),
            CleanUrl("/blog/post.html", "/blog/post"),
            CleanUrl("/about.html", "/about"),
        ]

    def test_empty(self) -> None:
        assert get_clean_urls([]) == []


class TestConvertRedirects:
    def test_default_status(self) -> None:
        (route,) = convert_redirects([{"source": "/a", "destination": "/b"}])
        assert route == RedirectRoute(r"^\/a$", {"Location": "/b"}, 308)

    def test_explicit_status(self) -> None:
        (route,) = convert_redirects([{"source": "/a", "destination": "/b", "statusCode": 301}])
        assert route.status == 301

    def test_typed_rule(self) -> None:
        (route,) = convert_redirects([Redirect("/users/:id", "/u/:id", status_code=302)])
        assert route == RedirectRoute(
            rf"^\/users(?:\/({SEGMENT}))$", {"Location": "/u/$1?id=$1"}, 302
        )

    def test_typed_and_dict_rules_agree(self) -> None:
        typed = convert_redirects([Redirect("/a/:b", "/c")])
        raw = convert_redirects([{"source": "/a/:b", "destination": "/c"}])
        assert typed == raw

    def test_optional_unnamed_group(self) -> None:
        (route,) = convert_redirects(
            [{"source": "/next(\\.js)?", "destination": "https://nextjs.org"}]
        )
        assert route == RedirectRoute(r"^\/next(\.js)?$", {"Location": "https://nextjs.org"}, 308)
        assert route_matches(route, "/next")
        assert route_matches(route, "/next.js")
        assert not route_matches(route, "/nextjs")

    def test_empty(self) -> None:
        assert convert_redirects([]) == []

    def test_headers_dict_is_fresh_per_call(self) -> None:
        rules = [{"source": "/a", "destination": "/b"}]
        (first,) = convert_redirects(rules)
        first.headers["Location"] = "/changed"
        (second,) = convert_redirects(rules)
        assert second.headers == {"Location": "/b"}

    def test_malformed_rule(self) -> None:
        with pytest.raises(ConfigParseError, match="destination"):
            convert_redirects([{"source": "/a"}])

    def test_pattern_error_carries_index(self) -> None:
        rules = [{"source": "/ok", "destination": "/"}, {"source": "/:", "destination": "/"}]
        with pytest.raises(PatternError, match="rule 1") as exc_info:
            convert_redirects(rules)
        assert exc_info.value.index == 1
        assert exc_info.value.source == "/:"


class TestConvertRewrites:
    def test_rewrite(self) -> None:
        (route,) = convert_rewrites([Rewrite("/blog/:slug", "/posts/:slug")])
        assert route == RewriteRoute(
            rf"^\/blog(?:\/({SEGMENT}))$", "/posts/$1?slug=$1", check=True
        )

    def test_always_checks_filesystem(self) -> None:
        routes = convert_rewrites([{"source": "/a", "destination": "/b"}])
        assert all(r.check for r in routes)

    def test_pattern_error_carries_index(self) -> None:
        with pytest.raises(PatternError) as exc_info:
            convert_rewrites([{"source": "/((a))", "destination": "/"}])
        assert exc_info.value.index == 0


class TestConvertHeaders:
    def test_key_and_value_templates(self) -> None:
        rule = HeaderRule("/:lang/docs", (HeaderEntry("X-:lang", ":lang"),))
        (route,) = convert_headers([rule])
        assert route == HeaderRoute(
            rf"^(?:\/({SEGMENT}))\/docs$", {"X-$1": "$1"}, continue_=True
        )

    def test_no_query_augmentation(self) -> None:
        (route,) = convert_headers(
            [{"source": "/:id", "headers": [{"key": "Cache-Control", "value": "max-age=60"}]}]
        )
        assert route.headers == {"Cache-Control": "max-age=60"}

    def test_missing_headers(self) -> None:
        with pytest.raises(ConfigParseError, match="headers"):
            convert_headers([{"source": "/a"}])
