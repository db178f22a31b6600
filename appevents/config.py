"""
Runtime configuration for the app events service.
Values come from the environment (optionally a local .env file).
"""

import os
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_STORE_PATH = Path.home() / ".appevents" / "app_event_preferences.db"


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, read once at startup"""
    app_id: Optional[str] = None
    package_name: Optional[str] = None
    package_version: Optional[str] = None
    package_path: Optional[str] = None
    cert_paths: List[str] = field(default_factory=list)
    store_path: str = str(DEFAULT_STORE_PATH)
    flush_behavior: str = "auto"
    log_level: str = "INFO"


def _split_paths(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [p.strip() for p in raw.split(os.pathsep) if p.strip()]


def load_settings() -> Settings:
    """
    Build Settings from APP_EVENTS_* environment variables.

    Raises:
        ValueError: If APP_EVENTS_FLUSH_BEHAVIOR is not a known mode
    """
    flush_behavior = (os.getenv("APP_EVENTS_FLUSH_BEHAVIOR") or "auto").strip().lower()
    if flush_behavior not in ("auto", "explicit_only"):
        raise ValueError(
            f"Unknown APP_EVENTS_FLUSH_BEHAVIOR '{flush_behavior}'. "
            "Expected 'auto' or 'explicit_only'."
        )

    settings = Settings(
        app_id=os.getenv("APP_EVENTS_APP_ID"),
        package_name=os.getenv("APP_EVENTS_PACKAGE_NAME"),
        package_version=os.getenv("APP_EVENTS_PACKAGE_VERSION"),
        package_path=os.getenv("APP_EVENTS_PACKAGE_PATH"),
        cert_paths=_split_paths(os.getenv("APP_EVENTS_CERT_PATHS")),
        store_path=os.getenv("APP_EVENTS_STORE_PATH") or str(DEFAULT_STORE_PATH),
        flush_behavior=flush_behavior,
        log_level=(os.getenv("APP_EVENTS_LOG_LEVEL") or "INFO").upper(),
    )

    logger.debug(f"Settings loaded for package {settings.package_name}")
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
