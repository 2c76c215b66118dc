"""Share links, download names and the clipboard snippet for a generated wallpaper."""

import json
import logging
import time
from typing import Optional
from urllib.parse import quote

logger = logging.getLogger(__name__)

SHARE_PLATFORMS = ("twitter", "facebook", "pinterest")

# Characters JavaScript's encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def share_text(prompt: str) -> str:
    return f'Check out this amazing wallpaper I just generated: "{prompt}"'


def build_share_url(platform: str, image_url: str, prompt: str) -> Optional[str]:
    """
    Return a pre-filled share link for one of SHARE_PLATFORMS.

    Unknown platforms return None so callers can treat them as a no-op.
    """
    url = encode_uri_component(image_url)
    text = encode_uri_component(share_text(prompt))

    if platform == "twitter":
        return f"https://twitter.com/intent/tweet?text={text}&url={url}"
    if platform == "facebook":
        return f"https://www.facebook.com/sharer/sharer.php?u={url}&quote={text}"
    if platform == "pinterest":
        return f"https://pinterest.com/pin/create/button/?url={url}&description={text}"

    logger.warning(f"Ignoring unsupported share platform: {platform!r}")
    return None


def download_filename(now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"wallpaper-{now_ms}.jpg"


def clipboard_script(text: str) -> str:
    """HTML snippet that writes ``text`` to the browser clipboard when rendered."""
    # json.dumps gives a valid JS string literal; "</" is split so it can't close the tag
    literal = json.dumps(text).replace("</", "<\\/")
    return (
        "<script>\n"
        f"navigator.clipboard.writeText({literal});\n"
        "</script>"
    )
