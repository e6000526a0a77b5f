"""Main Streamlit UI for Reel Studio.

Each browser session gets its own ``ReelController``; this module only
renders the controller's state and forwards user actions to its commands.
"""

from __future__ import annotations

import html
import logging
import os
import sys
from pathlib import Path
from typing import Any

import streamlit as st
from dotenv import load_dotenv
from streamlit.errors import StreamlitAPIException

# Ensure backend package is importable when running `streamlit run streamlit_app.py`.
ROOT = Path(__file__).resolve().parent
BACKEND_ROOT = ROOT / "backend"
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))
load_dotenv(ROOT / ".env", override=False)

SECRET_ENV_KEYS = (
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "OPENAI_DEFAULT_CHAT_MODEL",
    "OPENAI_API_KEY_FALLBACK",
    "OPENAI_BASE_URL_FALLBACK",
    "OPENAI_MODEL_FALLBACK",
    "OPENAI_FALLBACK_OPENAI_MODEL",
    "GEMINI_API_KEY",
    "GEMINI_VIDEO_MODEL",
    "GEMINI_TTS_MODEL",
    "GEMINI_TTS_VOICE",
)


def _hydrate_env_from_streamlit_secrets() -> None:
    """Copy provider config from Streamlit Secrets into env when not already set."""
    try:
        secrets = st.secrets.to_dict()
    except (FileNotFoundError, AttributeError, StreamlitAPIException):
        return

    for key, value in secrets.items():
        if not isinstance(key, str) or not isinstance(value, str) or not value.strip():
            continue
        indexed = key.startswith(
            ("OPENAI_API_KEY_FALLBACK_", "OPENAI_BASE_URL_FALLBACK_", "OPENAI_MODEL_FALLBACK_")
        )
        if (key in SECRET_ENV_KEYS or indexed) and not os.getenv(key):
            os.environ[key] = value.strip()


_hydrate_env_from_streamlit_secrets()

from reel_studio.app import create_app  # noqa: E402
from reel_studio.controller import CUSTOM_TEXT_LIMIT, Phase, ReelController, Tab  # noqa: E402
from reel_studio.models import UploadedVideo  # noqa: E402
from reel_studio.translations import LANGUAGES, t  # noqa: E402

logger = logging.getLogger(__name__)


@st.cache_resource
def _get_app() -> dict[str, Any]:
    return create_app()


def _rerun() -> None:
    st.rerun()


def _provider_name(api_key: str | None, base_url: str | None) -> str:
    base = (base_url or "").lower()
    if "generativelanguage.googleapis.com" in base:
        return "Gemini"
    if "openai.com" in base or (api_key and api_key.startswith("sk-")):
        return "OpenAI"
    return "Custom"


def _provider_status_lines(ai_client: Any, media_client: Any, lang: str) -> list[str]:
    missing = t("notConfigured", lang)
    if ai_client.is_configured:
        providers = getattr(ai_client, "_providers", None) or []
        chain = " -> ".join(_provider_name(p.api_key, p.base_url) for p in providers)
        active = _provider_name(ai_client.api_key, ai_client.base_url)
        text_status = active if len(providers) < 2 else f"{active} ({chain})"
    else:
        text_status = missing
    media_status = f"Gemini · {media_client.tts_voice}" if media_client.is_configured else missing
    return [
        f"{t('textProvider', lang)}: {text_status}",
        f"{t('mediaProvider', lang)}: {media_status}",
    ]


def _handle_upload(
    controller: ReelController,
    uploaded: Any,
    nonce: int,
    marker: tuple[str, int] | None,
) -> tuple[int, tuple[str, int] | None]:
    """Pass a newly uploaded file to the controller; return the uploader's next (nonce, marker).

    A rejected file bumps the nonce, which gives the uploader a fresh key
    and so clears the file input.
    """
    if uploaded is None:
        return nonce, marker
    new_marker = (uploaded.name, uploaded.size)
    if new_marker == marker:
        return nonce, marker
    video = UploadedVideo(uploaded.name, uploaded.type or "", uploaded.getvalue())
    if controller.select_video(video):
        return nonce, new_marker
    return nonce + 1, None


def _go_back(controller: ReelController, nonce: int) -> tuple[int, None]:
    controller.back()
    # The stored video is gone, so the uploader must forget its file too.
    return nonce + 1, None


def _controller() -> ReelController:
    if "reel_controller" not in st.session_state:
        st.session_state["reel_controller"] = _get_app()["new_controller"]()
    return st.session_state["reel_controller"]


def _init_state() -> None:
    defaults = {
        "reel_video_nonce": 0,
        "reel_video_marker": None,
    }
    for key, value in defaults.items():
        st.session_state.setdefault(key, value)


def _inject_styles() -> None:
    st.markdown(
        """
        <style>
        .block-container { max-width: 900px; padding-top: 1.5rem; }
        .reel-subtitle { text-align: center; color: #6b7280; margin-bottom: 1.5rem; }
        .news-card {
            border: 1px solid #e5e7eb;
            border-radius: 12px;
            padding: 0.9rem 1rem;
            margin-bottom: 0.4rem;
        }
        .news-card h4 { margin: 0 0 0.2rem; }
        .news-meta { color: #6b7280; font-size: 0.85rem; }
        .hashtag {
            display: inline-block;
            background: rgba(37, 99, 235, 0.1);
            color: #1d4ed8;
            border-radius: 999px;
            padding: 0.1rem 0.6rem;
            margin: 0 0.3rem 0.3rem 0;
            font-size: 0.85rem;
        }
        .sidebar-note {
            color: #6b7280;
            font-size: 0.8rem;
            border-left: 3px solid #e5e7eb;
            padding-left: 0.6rem;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def _header(controller: ReelController) -> None:
    state = controller.state
    _, lang_col = st.columns([4, 1.2])
    with lang_col:
        cols = st.columns(len(LANGUAGES))
        for idx, lang in enumerate(LANGUAGES):
            if cols[idx].button(
                lang.upper(),
                key=f"lang_{lang}",
                type="primary" if state.language == lang else "secondary",
                use_container_width=True,
            ):
                controller.set_language(lang)
                _rerun()
    st.title("Reel Studio")
    st.markdown(f"<p class='reel-subtitle'>{html.escape(t('subtitle', state.language))}</p>", unsafe_allow_html=True)

    if state.error:
        st.error(f"**{t('errorTitle', state.language)}** {state.error}")


def _tab_buttons(controller: ReelController) -> None:
    state = controller.state
    labels = {Tab.NEWS: "tabNews", Tab.TEXT: "tabText", Tab.VIDEO: "tabVideo"}
    cols = st.columns(len(labels))
    for idx, (tab, key) in enumerate(labels.items()):
        if cols[idx].button(
            t(key, state.language),
            key=f"tab_{tab.value}",
            type="primary" if state.active_tab == tab else "secondary",
            use_container_width=True,
        ):
            controller.set_tab(tab)
            _rerun()


def _news_panel(controller: ReelController) -> None:
    state = controller.state
    lang = state.language
    st.caption(t("newsDescription", lang))
    busy = state.phase in (Phase.FETCHING_NEWS, Phase.GENERATING_SCRIPT)
    if st.button(t("newsButton", lang), type="primary", disabled=busy, use_container_width=True):
        with st.spinner(t("newsLoading", lang)):
            controller.fetch_news()
        _rerun()


def _text_panel(controller: ReelController) -> None:
    state = controller.state
    lang = state.language
    text = st.text_area(
        t("tabText", lang),
        value=state.custom_text,
        placeholder=t("customTextPlaceholder", lang),
        max_chars=CUSTOM_TEXT_LIMIT,
        height=140,
        label_visibility="collapsed",
    )
    controller.set_custom_text(text)
    disabled = state.phase == Phase.GENERATING_SCRIPT or not text.strip()
    if st.button(t("customTextButton", lang), type="primary", disabled=disabled, use_container_width=True):
        with st.spinner(f'{t("generatingScript", lang)} "{t("customTextButton", lang)}"...'):
            controller.submit_custom_text()
        _rerun()


def _video_panel(controller: ReelController) -> None:
    state = controller.state
    lang = state.language
    st.caption(t("videoDescription", lang))
    uploaded = st.file_uploader(
        t("videoSelect", lang),
        key=f"reel_video_{st.session_state['reel_video_nonce']}",
        help=t("videoDropzone", lang),
    )
    current = (st.session_state["reel_video_nonce"], st.session_state["reel_video_marker"])
    updated = _handle_upload(controller, uploaded, *current)
    if updated != current:
        st.session_state["reel_video_nonce"], st.session_state["reel_video_marker"] = updated
        _rerun()

    if state.video_file is not None:
        st.caption(f"{t('videoFileSelected', lang)} {state.video_file.name}")

    disabled = state.phase == Phase.GENERATING_SCRIPT or state.video_file is None
    if st.button(t("videoButton", lang), type="primary", disabled=disabled, use_container_width=True):
        with st.spinner(f'{t("transcribingScript", lang)} "{state.video_file.name}"...'):
            controller.submit_video()
        _rerun()


def _news_list(controller: ReelController) -> None:
    state = controller.state
    lang = state.language
    st.subheader(t("step2Title", lang))
    for index, item in enumerate(state.news_items):
        st.markdown(
            f"""
            <div class="news-card">
              <h4>{html.escape(item.headline)}</h4>
              <div class="news-meta">{html.escape(item.source)} - {html.escape(item.date)}</div>
              <p>{html.escape(item.summary)}</p>
            </div>
            """,
            unsafe_allow_html=True,
        )
        if st.button(t("selectNewsButton", lang), key=f"news_{index}"):
            with st.spinner(f'{t("generatingScript", lang)} "{item.headline}"...'):
                controller.select_news(item)
            _rerun()


def _audio_controls(controller: ReelController, container: Any) -> None:
    state = controller.state
    lang = state.language
    if state.is_generating_audio:
        label = t("generatingAudio", lang)
    elif controller.is_playing:
        label = t("stopAudio", lang)
    else:
        label = t("listenButton", lang)

    if container.button(label, disabled=state.is_generating_audio, use_container_width=True):
        if controller.has_audio:
            controller.toggle_playback()
        else:
            with st.spinner(t("generatingAudio", lang)):
                controller.generate_audio()
        _rerun()


def _script_view(controller: ReelController) -> None:
    state = controller.state
    lang = state.language
    script = state.script
    item = state.selected_news
    if script is None or item is None:
        return

    if st.button(f"← {t('backButton', lang)}"):
        st.session_state["reel_video_nonce"], st.session_state["reel_video_marker"] = _go_back(
            controller, st.session_state["reel_video_nonce"]
        )
        _rerun()

    st.header(script.suggestions.title)
    st.caption(f'{t("basedOn", lang)} "{item.headline}"')

    listen_col, edit_col, download_col = st.columns(3)
    _audio_controls(controller, listen_col)
    if edit_col.button(t("editButton", lang), use_container_width=True):
        controller.toggle_editing()
        _rerun()
    document = controller.download()
    if document is not None:
        download_col.download_button(
            t("downloadButton", lang),
            data=document.data,
            file_name=document.file_name,
            mime=document.mime_type,
            use_container_width=True,
        )

    if controller.has_audio:
        st.audio(controller.audio_bytes(), format="audio/wav", autoplay=controller.is_playing)

    if state.is_editing:
        with st.container(border=True):
            command = st.text_area(
                t("editPanelTitle", lang),
                value=state.edit_command,
                placeholder=t("editPanelPlaceholder", lang),
                height=100,
            )
            controller.set_edit_command(command)
            if st.button(t("regenerateButton", lang)):
                with st.spinner(f'{t("generatingScript", lang)} "{item.headline}"...'):
                    controller.edit_script()
                _rerun()

    main_col, side_col = st.columns([3, 2], gap="large")
    with main_col:
        st.markdown(f"#### 🎬 {t('detailedScriptTitle', lang)}")
        st.markdown(f"**{t('hookTitle', lang)}**")
        st.write(script.detailed_script.hook)
        st.markdown(f"**{t('developmentTitle', lang)}**")
        st.write(script.detailed_script.development)
        st.markdown(f"**{t('ctaTitle', lang)}**")
        st.write(script.detailed_script.cta)
        st.markdown(f"#### 🎙️ {t('audioTextTitle', lang)}")
        st.info(script.clean_audio_text)
    with side_col:
        st.markdown(f"#### 💡 {t('suggestionsTitle', lang)}")
        st.markdown(f"**{t('hashtagsTitle', lang)}**")
        tags = "".join(f"<span class='hashtag'>{html.escape(tag)}</span>" for tag in script.suggestions.hashtags)
        st.markdown(tags, unsafe_allow_html=True)
        st.markdown(f"**{t('thumbnailTitle', lang)}**")
        st.write(script.suggestions.thumbnail_idea)


def _sidebar_status(lang: str) -> None:
    app = _get_app()
    st.sidebar.markdown(f"## {t('providersTitle', lang)}")
    for line in _provider_status_lines(app["ai_client"], app["media_client"], lang):
        st.sidebar.caption(line)
    st.sidebar.markdown(
        f"<div class='sidebar-note'>{html.escape(t('providersNote', lang))}</div>",
        unsafe_allow_html=True,
    )


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    st.set_page_config(page_title="Reel Studio", page_icon="🎬", layout="centered")

    _init_state()
    _inject_styles()

    controller = _controller()
    controller.sync_playback()
    _header(controller)
    state = controller.state
    _sidebar_status(state.language)

    if state.phase != Phase.SCRIPT_READY:
        with st.container(border=True):
            st.subheader(t("step1Title", state.language))
            _tab_buttons(controller)
            if state.active_tab == Tab.NEWS:
                _news_panel(controller)
            elif state.active_tab == Tab.TEXT:
                _text_panel(controller)
            else:
                _video_panel(controller)

    if state.phase == Phase.NEWS_READY and state.news_items:
        _news_list(controller)
    elif state.phase == Phase.SCRIPT_READY:
        _script_view(controller)


if __name__ == "__main__":
    main()
