import base64

import pytest

from wp_sites import SiteConnection, SiteCredentials, build_api_url, build_auth_header
from wp_sites.urls import normalize_base_url, normalize_rest_base


def test_normalize_base_url_strips_one_trailing_slash():
    assert normalize_base_url("https://x.com/") == "https://x.com"
    assert normalize_base_url("https://x.com") == "https://x.com"
    assert normalize_base_url("https://x.com//") == "https://x.com/"


@pytest.mark.parametrize("value", [None, "", "   "])
def test_normalize_rest_base_defaults(value):
    assert normalize_rest_base(value) == "/wp-json/wp/v2/"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("wp-json/wp/v2", "/wp-json/wp/v2/"),
        ("///wp-json/wp/v2/", "/wp-json/wp/v2/"),
        ("/index.php?rest_route=/wp/v2", "/index.php?rest_route=/wp/v2/"),
        ("api", "/api/"),
        ("api//", "/api/"),
        ("/", "/"),
        ("///", "/"),
    ],
)
def test_normalize_rest_base(value, expected):
    result = normalize_rest_base(value)
    assert result == expected
    assert result.startswith("/") and not result.startswith("//")
    assert result.endswith("/")
    assert not result.endswith("//")


def test_build_api_url():
    connection = SiteConnection("https://x.com/", "/wp-json/wp/v2/")
    assert build_api_url(connection, "/posts") == "https://x.com/wp-json/wp/v2/posts"


def test_build_api_url_uses_default_rest_base():
    assert build_api_url(SiteConnection("https://x.com"), "users/me") == "https://x.com/wp-json/wp/v2/users/me"


def test_build_auth_header():
    header = build_auth_header(SiteCredentials("a", "b"))
    assert header.startswith("Basic ")
    assert base64.b64decode(header[len("Basic "):]).decode() == "a:b"


def test_build_auth_header_non_ascii():
    header = build_auth_header(SiteCredentials("zażółć", "hasło 123"))
    assert base64.b64decode(header[len("Basic "):]).decode("utf-8") == "zażółć:hasło 123"


def test_build_auth_header_unknown_strategy():
    credentials = SiteCredentials("a", "b")
    credentials.auth_strategy = "bearer-token"
    with pytest.raises(ValueError):
        build_auth_header(credentials)


def test_build_api_url_slash_only_rest_base():
    assert build_api_url(SiteConnection("https://x.com/", "//"), "users/me") == "https://x.com/users/me"
