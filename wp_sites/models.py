"""Records describing a WordPress site, its credentials and validation state.

Stored records are serialised with the camelCase keys used by the
persisted site index, e.g. ``baseUrl`` and ``applicationPassword``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class AuthStrategy(str, Enum):
    """How a request to the site is authenticated."""

    APPLICATION_PASSWORD = "application-password"


@dataclass
class SiteConnection:
    """Where the REST API of a site lives."""

    base_url: str
    rest_base: Optional[str] = None


@dataclass
class SiteCredentials:
    username: str
    application_password: str
    auth_strategy: AuthStrategy = AuthStrategy.APPLICATION_PASSWORD

    def to_dict(self) -> Dict[str, Any]:
        return {
            "username": self.username,
            "applicationPassword": self.application_password,
            "authStrategy": self.auth_strategy.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SiteCredentials":
        username = data["username"]
        password = data["applicationPassword"]
        if not isinstance(username, str) or not isinstance(password, str):
            raise TypeError("username and applicationPassword must be strings")
        return cls(username, password, AuthStrategy(data["authStrategy"]))

    def __repr__(self) -> str:
        return (
            f"SiteCredentials(username={self.username!r}, "
            f"auth_strategy={self.auth_strategy.value!r})"
        )


@dataclass
class SiteCapabilities:
    """REST collections confirmed reachable at the last validation."""

    categories: bool = False
    tags: bool = False
    media: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return {"categories": self.categories, "tags": self.tags, "media": self.media}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SiteCapabilities":
        return cls(
            categories=bool(data.get("categories")),
            tags=bool(data.get("tags")),
            media=bool(data.get("media")),
        )


@dataclass
class SiteMetadata(SiteConnection):
    """Non-secret half of a site profile."""

    id: str = ""
    name: str = ""
    capabilities: Optional[SiteCapabilities] = None
    validated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "baseUrl": self.base_url,
            "restBase": self.rest_base,
        }
        if self.capabilities is not None:
            data["capabilities"] = self.capabilities.to_dict()
        if self.validated_at is not None:
            data["validatedAt"] = self.validated_at
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SiteMetadata":
        site_id = data["id"]
        if not isinstance(site_id, str) or not site_id:
            raise ValueError("site id must be a non-empty string")
        if not isinstance(data["baseUrl"], str) or not isinstance(data["name"], str):
            raise TypeError("baseUrl and name must be strings")
        if not isinstance(data["restBase"], (str, type(None))):
            raise TypeError("restBase must be a string or null")
        if not isinstance(data.get("validatedAt"), (str, type(None))):
            raise TypeError("validatedAt must be a string or null")
        capabilities = data.get("capabilities")
        return cls(
            base_url=data["baseUrl"],
            rest_base=data["restBase"],
            id=site_id,
            name=data["name"],
            capabilities=SiteCapabilities.from_dict(capabilities) if capabilities else None,
            validated_at=data.get("validatedAt"),
        )


@dataclass
class SiteProfile(SiteMetadata):
    """Metadata and credentials of one site, always handed out together."""

    credentials: SiteCredentials = field(kw_only=True)

    @classmethod
    def combine(cls, metadata: SiteMetadata, credentials: SiteCredentials) -> "SiteProfile":
        return cls(
            base_url=metadata.base_url,
            rest_base=metadata.rest_base,
            id=metadata.id,
            name=metadata.name,
            capabilities=metadata.capabilities,
            validated_at=metadata.validated_at,
            credentials=credentials,
        )

    def metadata(self) -> SiteMetadata:
        return SiteMetadata(
            base_url=self.base_url,
            rest_base=self.rest_base,
            id=self.id,
            name=self.name,
            capabilities=self.capabilities,
            validated_at=self.validated_at,
        )


@dataclass
class SiteInput:
    """Values submitted to create (no ``id``) or update a site."""

    name: str
    base_url: str
    username: str
    application_password: str
    rest_base: Optional[str] = None
    id: Optional[str] = None


@dataclass
class ValidatedSite:
    """Result of a successful connection check.

    ``user`` is the ``users/me`` payload exactly as the site returned it.
    """

    user: Dict[str, Any]
    capabilities: SiteCapabilities
