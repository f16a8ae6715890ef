"""Persistent registry of WordPress site profiles.

Metadata for all sites is kept as one JSON array under a fixed index key;
each site's credentials are kept under their own key in a separate secret
store. Callers only ever see both halves together as a
:class:`~wp_sites.models.SiteProfile`.

The two writes of an upsert (and the two removals of a delete) are
independent: if the second one fails the first is not rolled back.
"""
from __future__ import annotations

import datetime as dt
import json
import logging
import uuid
from typing import Any, Callable, List, Optional

from .config import Settings
from .models import AuthStrategy, SiteCredentials, SiteInput, SiteMetadata, SiteProfile
from .storage import EncryptedFileStore, JsonFileStore, KeyValueStore, derive_fernet_key
from .urls import normalize_base_url, normalize_rest_base
from .wordpress_client import DEFAULT_TIMEOUT, validate_site_connection

logger = logging.getLogger(__name__)

SITE_INDEX_KEY = "site-index"
SITE_SECRET_PREFIX = "site-secret-"


class SiteNotFoundError(LookupError):
    """Raised when a site id has no complete stored profile."""

    def __init__(self, site_id: str):
        super().__init__(f"Site '{site_id}' is not configured.")
        self.site_id = site_id


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class SiteStore:
    """Create, read, update and delete site profiles."""

    def __init__(
        self,
        metadata_store: KeyValueStore,
        secret_store: KeyValueStore,
        session: Any = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        id_factory: Callable[[], str] = _new_id,
        clock: Callable[[], dt.datetime] = _utcnow,
    ) -> None:
        self.metadata_store = metadata_store
        self.secret_store = secret_store
        self.session = session
        self.timeout = timeout
        self._id_factory = id_factory
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "SiteStore":
        """Build a store backed by files in ``settings.storage_dir``."""
        return cls(
            JsonFileStore(settings.metadata_path),
            EncryptedFileStore(settings.secrets_path, derive_fernet_key(settings.encryption_key)),
            timeout=settings.request_timeout,
            **kwargs,
        )

    # Persistence ---------------------------------------------------------
    def _load_entries(self, for_write: bool = False) -> List[Any]:
        data = self.metadata_store.get_item(SITE_INDEX_KEY)
        if not data:
            return []
        try:
            entries = json.loads(data)
        except ValueError:
            entries = None
        if not isinstance(entries, list):
            if for_write:
                logger.error("Stored site metadata is unreadable and will be overwritten: %.200r", data)
            else:
                logger.warning("Failed to parse stored site metadata; treating it as empty")
            return []
        return entries

    def _load_metadata(self) -> List[SiteMetadata]:
        sites: List[SiteMetadata] = []
        for entry in self._load_entries():
            try:
                site = SiteMetadata.from_dict(entry)
            except (KeyError, TypeError, ValueError, AttributeError):
                logger.warning("Skipping malformed site metadata entry: %r", entry)
                continue
            site.rest_base = normalize_rest_base(site.rest_base)
            sites.append(site)
        return sites

    def _save_entries(self, entries: List[Any]) -> None:
        self.metadata_store.set_item(SITE_INDEX_KEY, json.dumps(entries))

    def _load_credentials(self, site_id: str) -> Optional[SiteCredentials]:
        data = self.secret_store.get_item(SITE_SECRET_PREFIX + site_id)
        if not data:
            return None
        try:
            return SiteCredentials.from_dict(json.loads(data))
        except (KeyError, TypeError, ValueError, AttributeError):
            logger.warning("Failed to parse stored credentials for site %s", site_id)
            return None

    def _save_credentials(self, site_id: str, credentials: SiteCredentials) -> None:
        self.secret_store.set_item(SITE_SECRET_PREFIX + site_id, json.dumps(credentials.to_dict()))

    def _upsert_metadata(self, site: SiteMetadata) -> None:
        # Entries that fail to parse are written back untouched.
        entries = self._load_entries(for_write=True)
        for index, entry in enumerate(entries):
            if isinstance(entry, dict) and entry.get("id") == site.id:
                entries[index] = site.to_dict()
                break
        else:
            entries.append(site.to_dict())
        self._save_entries(entries)

    # Queries -------------------------------------------------------------
    def list_sites(self) -> List[SiteProfile]:
        """Return every site whose metadata and credentials are both readable."""
        profiles: List[SiteProfile] = []
        for site in self._load_metadata():
            credentials = self._load_credentials(site.id)
            if credentials is None:
                logger.debug("Site %s has no usable credentials; skipping", site.id)
                continue
            profiles.append(SiteProfile.combine(site, credentials))
        return profiles

    def get_site(self, site_id: str) -> Optional[SiteProfile]:
        site = next((s for s in self._load_metadata() if s.id == site_id), None)
        if site is None:
            return None
        credentials = self._load_credentials(site_id)
        if credentials is None:
            return None
        return SiteProfile.combine(site, credentials)

    # Mutations -----------------------------------------------------------
    def upsert_site(self, site_input: SiteInput) -> SiteProfile:
        """Validate ``site_input`` against the live site, then store it.

        A missing ``id`` creates a new site. If validation fails the error
        propagates and nothing is written.
        """
        site_id = site_input.id or self._id_factory()
        base_url = normalize_base_url(site_input.base_url)
        rest_base = normalize_rest_base(site_input.rest_base)
        credentials = SiteCredentials(
            username=site_input.username,
            application_password=site_input.application_password,
            auth_strategy=AuthStrategy.APPLICATION_PASSWORD,
        )

        metadata = SiteMetadata(base_url=base_url, rest_base=rest_base, id=site_id, name=site_input.name)
        validation = validate_site_connection(
            metadata, credentials, session=self.session, timeout=self.timeout
        )
        metadata.capabilities = validation.capabilities
        metadata.validated_at = self._clock().isoformat()

        self._upsert_metadata(metadata)
        self._save_credentials(site_id, credentials)
        logger.info("Saved site %s (%s)", site_id, base_url)
        return SiteProfile.combine(metadata, credentials)

    def revalidate_site(self, site_id: str) -> SiteProfile:
        """Re-check a stored site and refresh its validation stamp."""
        profile = self.get_site(site_id)
        if profile is None:
            raise SiteNotFoundError(site_id)

        validation = validate_site_connection(
            profile, profile.credentials, session=self.session, timeout=self.timeout
        )
        metadata = profile.metadata()
        metadata.capabilities = validation.capabilities
        metadata.validated_at = self._clock().isoformat()
        self._upsert_metadata(metadata)
        return SiteProfile.combine(metadata, profile.credentials)

    def remove_site(self, site_id: str) -> None:
        """Remove both halves of a site. Unknown ids are ignored."""
        remaining = [
            entry for entry in self._load_entries(for_write=True)
            if not (isinstance(entry, dict) and entry.get("id") == site_id)
        ]
        self._save_entries(remaining)
        self.secret_store.remove_item(SITE_SECRET_PREFIX + site_id)
        logger.info("Removed site %s", site_id)
