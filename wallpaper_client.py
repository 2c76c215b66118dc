"""
HTTP client for the wallpaper generation backend
Sends prompts to /api/generate-wallpaper and fetches generated images
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import requests

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate-wallpaper"


class WallpaperRequestError(Exception):
    """A generation or image download request did not succeed."""


class GenerationFailed(WallpaperRequestError):
    """The backend answered but reported that generation failed."""

    def __init__(self, error: Optional[str] = None):
        super().__init__(error or "Wallpaper generation failed")
        self.error = error


class GenerationStatus(Enum):
    IDLE = "idle"
    GENERATING = "generating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class GenerationResult:
    image_url: str
    prompt: str


def _is_image_url(value: Any) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    parsed = urlparse(value.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class WallpaperClient:
    """Talks to a single generation backend rooted at ``api_base``."""

    def __init__(
        self,
        api_base: str,
        aspect_ratio: str = "16:9",
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        self.api_base = api_base.rstrip("/")
        self.aspect_ratio = aspect_ratio
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def generate_url(self) -> str:
        return f"{self.api_base}{GENERATE_PATH}"

    def build_payload(self, prompt: str) -> Dict[str, str]:
        return {"prompt": prompt.strip(), "aspect_ratio": self.aspect_ratio}

    def generate(self, prompt: str) -> GenerationResult:
        """
        Request one wallpaper for ``prompt``.

        Returns the image URL together with the prompt the backend reports
        having used. Raises GenerationFailed when the backend reports failure
        and WallpaperRequestError for transport or HTTP errors.
        """
        payload = self.build_payload(prompt)
        logger.info(f"Requesting wallpaper from {self.generate_url}")
        logger.debug(f"Payload: {payload}")

        try:
            response = self.session.post(self.generate_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise WallpaperRequestError(str(e)) from e
        except ValueError as e:
            raise WallpaperRequestError("Invalid JSON in generation response") from e

        if not isinstance(data, dict):
            raise WallpaperRequestError("Unexpected generation response format")

        if not data.get("success"):
            error = data.get("error")
            if not isinstance(error, str) or not error.strip():
                error = None
            logger.warning(f"Generation backend reported failure: {error}")
            raise GenerationFailed(error)

        image_url = data.get("image_url")
        if not _is_image_url(image_url):
            logger.error(f"Generation backend returned an unusable image URL: {image_url!r}")
            raise GenerationFailed("The server returned an invalid image URL")

        echoed_prompt = data.get("prompt")
        if not isinstance(echoed_prompt, str):
            echoed_prompt = payload["prompt"]

        logger.info(f"Wallpaper ready: {image_url}")
        return GenerationResult(image_url=image_url.strip(), prompt=echoed_prompt)

    def fetch_image(self, image_url: str) -> bytes:
        """Download the bytes of an already generated image."""
        try:
            response = self.session.get(image_url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise WallpaperRequestError(str(e)) from e

        logger.debug(f"Downloaded {len(response.content)} bytes from {image_url}")
        return response.content
