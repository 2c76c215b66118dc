"""
Settings for the wallpaper generator.
Values are read from the environment (and a local .env file) once per process.
"""

import os
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8000"
DEFAULT_ASPECT_RATIO = "16:9"


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration passed explicitly to the request layer."""
    api_url: str = DEFAULT_API_URL
    aspect_ratio: str = DEFAULT_ASPECT_RATIO
    request_timeout: Optional[float] = None
    log_level: str = "INFO"


def _get_timeout(key: str) -> Optional[float]:
    raw = os.getenv(key, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Invalid value for {key}: {raw!r}, requests will not time out")
        return None
    if value <= 0:
        logger.warning(f"{key} must be positive, got {value}; ignoring")
        return None
    return value


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    api_url = os.getenv("WALLPAPER_API_URL", "").strip() or DEFAULT_API_URL
    return Settings(
        api_url=api_url.rstrip("/"),
        aspect_ratio=os.getenv("WALLPAPER_ASPECT_RATIO", "").strip() or DEFAULT_ASPECT_RATIO,
        request_timeout=_get_timeout("WALLPAPER_REQUEST_TIMEOUT"),
        log_level=os.getenv("WALLPAPER_LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level, None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level)
