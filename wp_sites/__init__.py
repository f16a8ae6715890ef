"""WordPress site profiles.

Stores connection details and application-password credentials for many
WordPress sites and talks to them through the REST API. A site is only
saved after its credentials have been checked against the live site.
"""

__all__ = [
    "AuthStrategy",
    "SiteCapabilities",
    "SiteConnection",
    "SiteCredentials",
    "SiteInput",
    "SiteMetadata",
    "SiteProfile",
    "SiteNotFoundError",
    "SiteStore",
    "WordPressClient",
    "WordPressError",
    "build_api_url",
    "build_auth_header",
    "fetch_json",
    "normalize_base_url",
    "normalize_rest_base",
    "validate_site_connection",
]

from .models import (
    AuthStrategy,
    SiteCapabilities,
    SiteConnection,
    SiteCredentials,
    SiteInput,
    SiteMetadata,
    SiteProfile,
)
from .sites import SiteNotFoundError, SiteStore
from .urls import build_api_url, build_auth_header, normalize_base_url, normalize_rest_base
from .wordpress_client import WordPressClient, WordPressError, fetch_json, validate_site_connection
