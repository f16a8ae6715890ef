"""Authenticated client for the WordPress REST API.

Requests are sent with ``requests``; the transport can be swapped for any
object exposing ``get``/``post`` with the ``requests`` signature (usually a
:class:`requests.Session`), which is how the tests stub the network.
Nothing is retried: a failed call fails once and the error reaches the
caller.
"""
from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Dict, List, Optional

import requests

from .models import SiteCapabilities, SiteConnection, SiteCredentials, SiteProfile, ValidatedSite
from .urls import build_api_url, build_auth_header

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class WordPressError(RuntimeError):
    """Raised when the WordPress API returns an error response."""


def _headers(credentials: SiteCredentials) -> Dict[str, str]:
    return {
        "Authorization": build_auth_header(credentials),
        "Accept": "application/json",
    }


def _extract_error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        logger.warning("Failed to parse error response from %s", response.url, exc_info=True)
    else:
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
    return f"{response.status_code} {response.reason}"


def _handle_response(response: requests.Response) -> Any:
    if not 200 <= response.status_code < 300:
        raise WordPressError(_extract_error_message(response))
    return response.json()


def fetch_json(
    url: str,
    credentials: SiteCredentials,
    session: Any = None,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> Any:
    """GET ``url`` and return the decoded JSON body.

    A non-2xx status raises :class:`WordPressError` carrying the ``message``
    of the error body, or ``"<status> <reason>"`` when there is none.
    Transport errors and undecodable success bodies propagate unchanged.
    The body is not checked against any schema.
    """
    http = session if session is not None else requests
    response = http.get(url, headers=_headers(credentials), timeout=timeout)
    return _handle_response(response)


def post_json(
    url: str,
    credentials: SiteCredentials,
    payload: Dict[str, Any],
    session: Any = None,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> Any:
    """POST ``payload`` as JSON; errors are reported like :func:`fetch_json`."""
    http = session if session is not None else requests
    response = http.post(url, json=payload, headers=_headers(credentials), timeout=timeout)
    return _handle_response(response)


def validate_site_connection(
    connection: SiteConnection,
    credentials: SiteCredentials,
    session: Any = None,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> ValidatedSite:
    """Confirm the site is reachable and accepts ``credentials``.

    Fetches the current user. Capabilities are not probed per endpoint:
    a successful check reports categories, tags and media as available.
    """
    url = build_api_url(connection, "users/me")
    logger.info("Validating site credentials for %s", connection.base_url)
    try:
        user = fetch_json(url, credentials, session=session, timeout=timeout)
    except Exception as exc:
        logger.warning("Validation failed for %s: %s", connection.base_url, exc)
        raise

    capabilities = SiteCapabilities(categories=True, tags=True, media=True)
    name = user.get("name") if isinstance(user, dict) else None
    logger.info("Connection validated: authenticated as %s", name)
    return ValidatedSite(user=user, capabilities=capabilities)


class WordPressClient:
    """Client bound to one site, used for browsing taxonomies and publishing."""

    def __init__(
        self,
        connection: SiteConnection,
        credentials: SiteCredentials,
        session: Any = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ):
        self.connection = connection
        self.credentials = credentials
        self.session = session
        self.timeout = timeout

    @classmethod
    def for_profile(cls, profile: SiteProfile, **kwargs: Any) -> "WordPressClient":
        return cls(profile, profile.credentials, **kwargs)

    def url(self, route: str) -> str:
        return build_api_url(self.connection, route)

    def get(self, route: str, **params: Any) -> Any:
        url = self.url(route)
        if params:
            url = requests.Request("GET", url, params=params).prepare().url
        return fetch_json(url, self.credentials, session=self.session, timeout=self.timeout)

    def _post(self, route: str, payload: Dict[str, Any]) -> Any:
        return post_json(
            self.url(route), self.credentials, payload, session=self.session, timeout=self.timeout
        )

    # Public API -----------------------------------------------------------
    def validate(self) -> ValidatedSite:
        return validate_site_connection(
            self.connection, self.credentials, session=self.session, timeout=self.timeout
        )

    def list_categories(self) -> Dict[str, int]:
        """Return a mapping of category name to category ID."""
        data = self.get("categories", per_page=100)
        return {c["name"]: c["id"] for c in data}

    def list_tags(self) -> Dict[str, int]:
        """Return a mapping of tag name to tag ID."""
        data = self.get("tags", per_page=100)
        return {t["name"]: t["id"] for t in data}

    def create_post(
        self,
        title: str,
        content: str,
        status: str = "draft",
        categories: Optional[List[int]] = None,
        tags: Optional[List[int]] = None,
        publish_at: Optional[dt.datetime] = None,
    ) -> Dict[str, Any]:
        """Create a post and return the site's representation of it.

        Parameters
        ----------
        title: str
            Title of the post.
        content: str
            Body of the post as HTML.
        status: str
            ``draft``, ``publish``, ``future`` or any status the site accepts.
        categories, tags: list[int], optional
            Term IDs to assign.
        publish_at: datetime.datetime, optional
            Publication date, required by the site for ``future`` posts.
        """
        payload: Dict[str, Any] = {"title": title, "content": content, "status": status}
        if categories:
            payload["categories"] = categories
        if tags:
            payload["tags"] = tags
        if publish_at is not None:
            payload["date"] = publish_at.isoformat()
        logger.info("Creating %s post %r on %s", status, title, self.connection.base_url)
        return self._post("posts", payload)

    def schedule_post(
        self,
        title: str,
        content: str,
        publish_at: dt.datetime,
        categories: Optional[List[int]] = None,
        tags: Optional[List[int]] = None,
    ) -> Dict[str, Any]:
        """Schedule a post for future publication."""
        return self.create_post(
            title, content, status="future", categories=categories, tags=tags, publish_at=publish_at
        )
