"""
Run configuration for the sitemap builder
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


@dataclass
class SitemapConfig:
    """
    Settings for one sitemap run.

    Attributes:
        root_id: Id of the page the sitemap starts from
        token: Notion integration token
        log_unsupported: Log pages containing unsupported blocks
        max_collection_members: Database members to recurse through
        suppress_over_limit: Skip every member of a database that has more
            than ``max_collection_members`` members
        max_depth: Deepest nest level to render, or None (or 0) for no maximum
        collection_filter: Optional Notion filter applied to database queries
        delay: Seconds to wait between expansion steps
        timeout: HTTP timeout in seconds
    """

    root_id: Optional[str] = None
    token: Optional[str] = None
    log_unsupported: bool = False
    max_collection_members: int = 5
    suppress_over_limit: bool = True
    max_depth: Optional[int] = None
    collection_filter: Optional[Dict[str, Any]] = None
    delay: float = 0.0
    timeout: float = 30.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SitemapConfig":
        """
        Build a configuration from environment variables.

        NOTION_KEY and SCRIPT_ID (or NOTION_ROOT_ID) supply the token and the
        root page; SITEMAP_* variables override the tunables.
        """
        env = os.environ if environ is None else environ
        config = cls(
            root_id=env.get("SCRIPT_ID") or env.get("NOTION_ROOT_ID") or None,
            token=env.get("NOTION_KEY") or None,
        )

        if "SITEMAP_LOG_UNSUPPORTED" in env:
            config.log_unsupported = _parse_bool(
                "SITEMAP_LOG_UNSUPPORTED", env["SITEMAP_LOG_UNSUPPORTED"]
            )
        if "SITEMAP_MAX_COLLECTION_MEMBERS" in env:
            config.max_collection_members = _parse_int(
                "SITEMAP_MAX_COLLECTION_MEMBERS", env["SITEMAP_MAX_COLLECTION_MEMBERS"]
            )
        if "SITEMAP_SUPPRESS_OVER_LIMIT" in env:
            config.suppress_over_limit = _parse_bool(
                "SITEMAP_SUPPRESS_OVER_LIMIT", env["SITEMAP_SUPPRESS_OVER_LIMIT"]
            )
        if env.get("SITEMAP_MAX_DEPTH"):
            config.max_depth = _parse_int("SITEMAP_MAX_DEPTH", env["SITEMAP_MAX_DEPTH"]) or None

        return config

    def validate(self) -> "SitemapConfig":
        """Raise ConfigurationError unless the configuration is usable."""
        if not self.root_id:
            raise ConfigurationError("Invalid root page id! Set SCRIPT_ID or pass ROOT_ID.")
        if not self.token:
            raise ConfigurationError("Missing Notion token! Set NOTION_KEY or pass --token.")
        if self.max_collection_members < 1:
            raise ConfigurationError("max_collection_members must be at least 1")
        if self.max_depth is not None and self.max_depth < 0:
            raise ConfigurationError("max_depth must not be negative (0 or unset for no maximum)")
        if self.delay < 0:
            raise ConfigurationError("delay must not be negative")
        return self
