"""Backend application factory.

Returns a lightweight "service container" dictionary with the configured
provider clients, the reel service facade and a controller factory. The
Streamlit layer builds one controller per browser session from it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv

from reel_studio.ai.gemini_client import GeminiClient
from reel_studio.ai.openai_client import DEFAULT_CHAT_MODEL, OpenAIClient
from reel_studio.ai.reel_service import ReelService
from reel_studio.audio import AudioStore
from reel_studio.controller import ReelController

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"

# Ensure local `.env` values are available when running via Streamlit/CLI.
load_dotenv(Path(__file__).resolve().parents[2] / ".env", override=False)


def _read_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _is_openai(api_key: str | None, base_url: str | None) -> bool:
    if base_url:
        return "openai.com" in base_url.lower()
    return bool(api_key and api_key.startswith("sk-"))


def _ordered_provider_chain(default_chat_model: str) -> list[dict[str, str | None]]:
    """Primary slot, single fallback slot, indexed fallbacks, then Gemini's OpenAI endpoint."""
    default_openai_fallback_model = _read_env("OPENAI_FALLBACK_OPENAI_MODEL") or "gpt-4.1-mini"
    providers: list[dict[str, str | None]] = []
    seen: set[tuple[str, str | None, str | None]] = set()

    def _append_provider(
        api_key: str | None,
        base_url: str | None,
        chat_model_override: str | None = None,
    ) -> None:
        if not api_key:
            return
        resolved_model = chat_model_override
        # A Gemini model name means nothing to api.openai.com.
        if not resolved_model and _is_openai(api_key, base_url):
            if "gemini" in default_chat_model.lower():
                resolved_model = default_openai_fallback_model
        provider = {
            "api_key": api_key,
            "base_url": base_url,
            "chat_model_override": resolved_model,
        }
        marker = (api_key, base_url, resolved_model)
        if marker in seen:
            return
        providers.append(provider)
        seen.add(marker)

    _append_provider(_read_env("OPENAI_API_KEY"), _read_env("OPENAI_BASE_URL"))
    _append_provider(
        _read_env("OPENAI_API_KEY_FALLBACK"),
        _read_env("OPENAI_BASE_URL_FALLBACK"),
        _read_env("OPENAI_MODEL_FALLBACK"),
    )

    prefix = "OPENAI_API_KEY_FALLBACK_"
    indexed_names = sorted(
        (
            name
            for name in os.environ
            if name.startswith(prefix) and name[len(prefix) :].isdigit()
        ),
        key=lambda name: int(name[len(prefix) :]),
    )
    for name in indexed_names:
        idx = name[len(prefix) :]
        _append_provider(
            _read_env(name),
            _read_env(f"OPENAI_BASE_URL_FALLBACK_{idx}"),
            _read_env(f"OPENAI_MODEL_FALLBACK_{idx}"),
        )

    _append_provider(_read_env("GEMINI_API_KEY"), GEMINI_OPENAI_BASE_URL)
    return providers


def create_app() -> Dict[str, Any]:
    """Create the backend dependency container."""
    default_chat_model = _read_env("OPENAI_DEFAULT_CHAT_MODEL") or DEFAULT_CHAT_MODEL
    ai_client = OpenAIClient(
        provider_configs=_ordered_provider_chain(default_chat_model),
        default_chat_model=default_chat_model,
    )
    media_client = GeminiClient(
        api_key=_read_env("GEMINI_API_KEY"),
        video_model=_read_env("GEMINI_VIDEO_MODEL"),
        tts_model=_read_env("GEMINI_TTS_MODEL"),
        tts_voice=_read_env("GEMINI_TTS_VOICE"),
    )
    service = ReelService(ai_client, media_client)
    audio_store = AudioStore(_read_env("REEL_STUDIO_AUDIO_DIR"))
    audio_store.purge_stale()

    return {
        "ai_client": ai_client,
        "media_client": media_client,
        "service": service,
        "audio_store": audio_store,
        "new_controller": lambda: ReelController(service, audio_store=audio_store),
    }
