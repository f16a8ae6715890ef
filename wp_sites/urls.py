"""URL and authentication helpers for the WordPress REST API."""
from __future__ import annotations

import base64
from typing import Callable, Dict, Optional

from .models import AuthStrategy, SiteConnection, SiteCredentials

DEFAULT_REST_BASE = "/wp-json/wp/v2/"


def normalize_base_url(base_url: str) -> str:
    """Strip a single trailing slash from ``base_url``."""
    return base_url[:-1] if base_url.endswith("/") else base_url


def normalize_rest_base(rest_base: Optional[str] = None) -> str:
    """Return ``rest_base`` with exactly one leading and one trailing slash.

    Empty or blank values fall back to :data:`DEFAULT_REST_BASE`.
    """
    if not rest_base or not rest_base.strip():
        return DEFAULT_REST_BASE
    trimmed = rest_base.strip("/")
    if not trimmed:
        return "/"
    return f"/{trimmed}/"


def build_api_url(connection: SiteConnection, route: str) -> str:
    """Join the site's API root and ``route``. No URL validation is done."""
    base_url = normalize_base_url(connection.base_url)
    rest_base = normalize_rest_base(connection.rest_base)
    return f"{base_url}{rest_base}{route.lstrip('/')}"


def _basic_auth_header(credentials: SiteCredentials) -> str:
    token = f"{credentials.username}:{credentials.application_password}"
    return "Basic " + base64.b64encode(token.encode("utf-8")).decode("ascii")


_AUTH_HEADER_BUILDERS: Dict[AuthStrategy, Callable[[SiteCredentials], str]] = {
    AuthStrategy.APPLICATION_PASSWORD: _basic_auth_header,
}


def build_auth_header(credentials: SiteCredentials) -> str:
    """Return the ``Authorization`` header value for ``credentials``."""
    try:
        builder = _AUTH_HEADER_BUILDERS[credentials.auth_strategy]
    except KeyError:
        raise ValueError(f"Unsupported auth strategy: {credentials.auth_strategy!r}") from None
    return builder(credentials)
