import os
import sys
import logging
from typing import Any, Callable, MutableMapping, Optional

import streamlit as st
import streamlit.components.v1 as components

from wallpaper_actions import SHARE_PLATFORMS, build_share_url, clipboard_script, download_filename
from wallpaper_client import (
    GenerationFailed,
    GenerationResult,
    GenerationStatus,
    WallpaperClient,
    WallpaperRequestError
)
from wallpaper_config import Settings, configure_logging, get_settings

logger = logging.getLogger(__name__)

SAMPLE_PROMPTS = [
    "Serene mountain landscape at sunset with purple sky",
    "Modern minimalist geometric abstract art",
    "Peaceful forest path with morning sunlight filtering through trees",
    "Vibrant galaxy and stars in deep space",
    "Ocean waves crashing on a rocky shore at golden hour"
]

EMPTY_PROMPT_MESSAGE = "Please enter a description for your wallpaper"
GENERATED_MESSAGE = "Wallpaper generated successfully!"
GENERATION_FAILED_MESSAGE = "Failed to generate wallpaper"
REQUEST_FAILED_MESSAGE = "Failed to generate wallpaper. Please try again."
DOWNLOADED_MESSAGE = "Wallpaper downloaded!"
DOWNLOAD_FAILED_MESSAGE = "Failed to download wallpaper"
COPIED_MESSAGE = "Image URL copied to clipboard! If it does not paste, copy it from the Image URL box."


class WallpaperGeneratorApp:
    """Single-page wallpaper generator backed by a remote generation API"""

    def __init__(
        self,
        client: Optional[WallpaperClient] = None,
        state: Optional[MutableMapping[str, Any]] = None,
        notify: Optional[Callable[..., Any]] = None,
        settings: Optional[Settings] = None
    ):
        self.settings = settings or get_settings()
        self.state = state if state is not None else st.session_state
        self.client = client or self.session_client()
        self.notify = notify or st.toast
        self.defer_toasts = False
        self.initialize_session_state()

    def session_client(self) -> WallpaperClient:
        # one requests.Session per browser session, never shared between script threads
        if "client" not in self.state:
            self.state["client"] = WallpaperClient(
                self.settings.api_url,
                aspect_ratio=self.settings.aspect_ratio,
                timeout=self.settings.request_timeout
            )
        return self.state["client"]

    def initialize_session_state(self):
        """Initialize all session state variables"""
        defaults = {
            "prompt": "",
            "status": GenerationStatus.IDLE,
            "result": None,
            "download": None,
            "copy_requested": False,
            "pending_toasts": []
        }

        for key, default_value in defaults.items():
            if key not in self.state:
                self.state[key] = default_value

    def toast(self, message: str, message_type: str = "info"):
        icon = {
            "success": "✅",
            "error": "❌",
            "info": "ℹ️"
        }.get(message_type, "ℹ️")
        if self.defer_toasts:
            # shown after the next st.rerun(), which would otherwise drop them
            self.state["pending_toasts"].append((message, icon))
        else:
            self.notify(message, icon=icon)

    def flush_toasts(self):
        pending = self.state["pending_toasts"]
        self.state["pending_toasts"] = []
        for message, icon in pending:
            self.notify(message, icon=icon)

    @property
    def status(self) -> GenerationStatus:
        return self.state["status"]

    @property
    def result(self) -> Optional[GenerationResult]:
        return self.state["result"]

    @property
    def is_generating(self) -> bool:
        return self.status is GenerationStatus.GENERATING

    @property
    def can_generate(self) -> bool:
        return not self.is_generating and bool(self.state["prompt"].strip())

    def select_sample(self, sample: str):
        self.state["prompt"] = sample

    def request_generation(self) -> bool:
        """Validate the prompt and mark a generation as in flight."""
        if not self.state["prompt"].strip():
            self.toast(EMPTY_PROMPT_MESSAGE, "error")
            return False
        if self.is_generating:
            return False

        self.state["status"] = GenerationStatus.GENERATING
        self.state["download"] = None
        return True

    def run_generation(self) -> Optional[GenerationResult]:
        """Send the current prompt to the backend and store the outcome."""
        status = GenerationStatus.FAILED
        result = None
        try:
            result = self.client.generate(self.state["prompt"])
            self.state["result"] = result
            status = GenerationStatus.SUCCEEDED
            self.toast(GENERATED_MESSAGE, "success")
        except GenerationFailed as e:
            self.toast(e.error or GENERATION_FAILED_MESSAGE, "error")
        except WallpaperRequestError:
            logger.exception("Error generating wallpaper")
            self.toast(REQUEST_FAILED_MESSAGE, "error")
        finally:
            self.state["status"] = status
        return result

    def prepare_download(self):
        """Fetch the displayed image so it can be offered as a file."""
        if self.result is None:
            return
        try:
            data = self.client.fetch_image(self.result.image_url)
        except WallpaperRequestError:
            logger.exception("Error downloading image")
            self.toast(DOWNLOAD_FAILED_MESSAGE, "error")
            return
        self.state["download"] = {"data": data, "file_name": download_filename()}

    def finish_download(self):
        self.state["download"] = None
        self.toast(DOWNLOADED_MESSAGE, "success")

    def copy_image_url(self):
        if self.result is None:
            return
        self.state["copy_requested"] = True
        self.toast(COPIED_MESSAGE, "success")

    def share_url(self, platform: str) -> Optional[str]:
        if self.result is None:
            return None
        return build_share_url(platform, self.result.image_url, self.result.prompt)

    def render_input(self):
        st.subheader("🪄 Describe Your Wallpaper")
        st.caption("Enter a detailed description of the wallpaper you'd like to create")

        st.text_area(
            "Wallpaper description",
            key="prompt",
            height=120,
            placeholder="A breathtaking mountain landscape at sunrise with misty clouds...",
            disabled=self.is_generating,
            label_visibility="collapsed"
        )
        st.caption("Be specific about colors, mood, and style for best results")

        st.markdown("**Try these examples:**")
        for idx, sample in enumerate(SAMPLE_PROMPTS):
            st.button(
                sample,
                key=f"sample_{idx}",
                on_click=self.select_sample,
                args=(sample,),
                disabled=self.is_generating
            )

        st.button(
            "⏳ Generating..." if self.is_generating else "🪄 Generate Wallpaper",
            type="primary",
            width="stretch",
            key="generate",
            on_click=self.request_generation,
            disabled=not self.can_generate
        )

    def render_actions(self, result: GenerationResult):
        st.markdown(f"**Prompt:** {result.prompt}")

        col1, col2 = st.columns(2)
        with col1:
            st.button("📥 Download", width="stretch", on_click=self.prepare_download)
        with col2:
            st.button("🔗 Copy URL", width="stretch", on_click=self.copy_image_url)

        download = self.state["download"]
        if download:
            st.download_button(
                label="💾 Save wallpaper",
                data=download["data"],
                file_name=download["file_name"],
                mime="image/jpeg",
                width="stretch",
                on_click=self.finish_download
            )

        copy_requested = self.state["copy_requested"]
        if copy_requested:
            components.html(clipboard_script(result.image_url), height=0)
            self.state["copy_requested"] = False

        with st.expander("Image URL", expanded=copy_requested):
            st.code(result.image_url, language=None)

        share_cols = st.columns(len(SHARE_PLATFORMS))
        for col, platform in zip(share_cols, SHARE_PLATFORMS):
            with col:
                st.link_button(
                    platform.title(),
                    self.share_url(platform),
                    width="stretch"
                )

    def render_preview(self):
        st.subheader("Preview")
        st.caption("Your generated wallpaper will appear here")

        if self.is_generating:
            self.defer_toasts = True
            try:
                with st.spinner("Creating your wallpaper..."):
                    self.run_generation()
            finally:
                self.defer_toasts = False
            st.rerun()

        result = self.result
        if result is None:
            st.info("Your wallpaper will appear here")
            return

        st.image(result.image_url, caption="Generated wallpaper", width="stretch")
        self.render_actions(result)

    def render_ui(self):
        """Render the main UI"""
        self.flush_toasts()

        st.title("🖼️ Wallpaper Generator")
        st.markdown(
            "Create stunning laptop wallpapers from your imagination. "
            "Just describe what you want and watch it come to life."
        )

        input_col, preview_col = st.columns(2)
        with input_col:
            self.render_input()
        with preview_col:
            self.render_preview()

        st.divider()
        st.caption(
            "Generate high-quality wallpapers perfect for laptops and desktops • "
            "Share your creations with the world"
        )


def main():
    """Main application entry point"""
    settings = get_settings()
    configure_logging(settings)

    st.set_page_config(
        page_title="Wallpaper Generator",
        page_icon="🖼️",
        layout="wide"
    )
    st.markdown("""
<style>
.stImage img { border-radius: 8px; }
</style>
""", unsafe_allow_html=True)

    app = WallpaperGeneratorApp(settings=settings)
    app.render_ui()


def run():
    """Console entry point: launch the page with ``streamlit run``."""
    from streamlit.web import cli as stcli

    sys.argv = ["streamlit", "run", os.path.abspath(__file__)]
    sys.exit(stcli.main())


if __name__ == "__main__":
    main()
