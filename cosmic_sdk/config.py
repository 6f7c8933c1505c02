"""Client configuration.

Configuration is immutable once built. It can be given explicitly or read
from a ``KEY=VALUE`` credentials file with environment variable fallback.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from .exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://api.cosmicjs.com"
DEFAULT_WORKERS_URL = "https://workers.cosmicjs.com"
DEFAULT_TIMEOUT = 30.0

ENV_KEYS = (
    "COSMIC_BUCKET_SLUG",
    "COSMIC_READ_KEY",
    "COSMIC_WRITE_KEY",
    "COSMIC_BASE_URL",
    "COSMIC_WORKERS_URL",
    "COSMIC_TIMEOUT",
)


@dataclass(frozen=True)
class ClientConfig:
    bucket_slug: str
    read_key: str
    write_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    workers_url: str = DEFAULT_WORKERS_URL
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not self.bucket_slug or not self.bucket_slug.strip():
            raise ConfigurationError("bucket_slug is required")
        if not self.read_key or not self.read_key.strip():
            raise ConfigurationError("read_key is required")

    @classmethod
    def from_env(cls, path: Optional[Union[str, Path]] = None) -> "ClientConfig":
        """Build a config from a credentials file and/or the environment.

        Args:
            path: Optional KEY=VALUE file; values in the file win over the
                  environment. Empty values are ignored.

        Raises:
            ConfigurationError: If bucket slug or read key is missing
        """
        values = read_credentials(path)
        timeout = values.get("COSMIC_TIMEOUT")
        try:
            timeout_value = float(timeout) if timeout else DEFAULT_TIMEOUT
        except ValueError as e:
            raise ConfigurationError(f"Invalid COSMIC_TIMEOUT: {timeout!r}") from e
        return cls(
            bucket_slug=values.get("COSMIC_BUCKET_SLUG", ""),
            read_key=values.get("COSMIC_READ_KEY", ""),
            write_key=values.get("COSMIC_WRITE_KEY"),
            base_url=values.get("COSMIC_BASE_URL", DEFAULT_BASE_URL),
            workers_url=values.get("COSMIC_WORKERS_URL", DEFAULT_WORKERS_URL),
            timeout=timeout_value,
        )

    def __repr__(self) -> str:
        return (
            f"ClientConfig(bucket_slug={self.bucket_slug!r}, read_key='***', "
            f"write_key={'***' if self.write_key else None}, base_url={self.base_url!r}, "
            f"workers_url={self.workers_url!r}, timeout={self.timeout!r})"
        )


def read_credentials(path: Optional[Union[str, Path]] = None) -> Dict[str, str]:
    """Return dict of settings from the given file. Falls back to env vars if not present."""
    creds: Dict[str, str] = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            for ln in p.read_text().splitlines():
                ln = ln.strip()
                if not ln or ln.startswith("#"):
                    continue
                if "=" in ln:
                    k, v = ln.split("=", 1)
                    if v.strip():
                        creds[k.strip()] = v.strip()
    # Only accept non-empty values to avoid silently using empty strings.
    for k in ENV_KEYS:
        if k not in creds:
            val = os.getenv(k)
            if val:
                creds[k] = val
    return creds
