"""Runtime settings read from ``WP_SITES_*`` environment variables."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

# Default passphrase for the secret store. Set WP_SITES_ENCRYPTION_KEY in production.
DEFAULT_ENCRYPTION_KEY = "wp-sites-default-encryption-key-change-me"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class Settings:
    storage_dir: Path = Path("~/.wp-sites").expanduser()
    encryption_key: str = DEFAULT_ENCRYPTION_KEY
    request_timeout: Optional[float] = 10.0
    log_level: str = "INFO"

    @property
    def metadata_path(self) -> Path:
        return self.storage_dir / "sites.json"

    @property
    def secrets_path(self) -> Path:
        return self.storage_dir / "secrets.json"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        settings = cls()
        if env.get("WP_SITES_DIR"):
            settings.storage_dir = Path(env["WP_SITES_DIR"]).expanduser()
        if env.get("WP_SITES_ENCRYPTION_KEY"):
            settings.encryption_key = env["WP_SITES_ENCRYPTION_KEY"]
        timeout = env.get("WP_SITES_TIMEOUT")
        if timeout:
            # 0 disables the transport timeout
            settings.request_timeout = float(timeout) or None
        if env.get("WP_SITES_LOG_LEVEL"):
            settings.log_level = env["WP_SITES_LOG_LEVEL"].upper()
        return settings


def configure_logging(level: str = "INFO") -> None:
    """Send ``wp_sites`` log records to stderr."""
    logger = logging.getLogger("wp_sites")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)
