"""Gemini client for the media calls: video understanding and speech."""

from __future__ import annotations

import logging
from typing import Any

from google import genai
from google.genai import types

from reel_studio.ai.errors import ProviderConfigError

logger = logging.getLogger(__name__)

DEFAULT_VIDEO_MODEL = "gemini-2.5-flash"
DEFAULT_TTS_MODEL = "gemini-2.5-flash-preview-tts"
DEFAULT_TTS_VOICE = "Kore"


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


class GeminiClient:
    def __init__(
        self,
        api_key: str | None = None,
        video_model: str | None = None,
        tts_model: str | None = None,
        tts_voice: str | None = None,
    ):
        self.api_key = _clean(api_key)
        self.video_model = _clean(video_model) or DEFAULT_VIDEO_MODEL
        self.tts_model = _clean(tts_model) or DEFAULT_TTS_MODEL
        self.tts_voice = _clean(tts_voice) or DEFAULT_TTS_VOICE
        self._client: Any = None

    @property
    def is_configured(self) -> bool:
        return self.api_key is not None

    def _get_live_client(self) -> Any:
        if not self.api_key:
            raise ProviderConfigError("Missing Gemini API key. Set GEMINI_API_KEY.")
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def describe_video(self, data: bytes, mime_type: str, prompt: str, model: str | None = None) -> str:
        """Send inline video bytes plus an instruction; return the text answer."""
        client = self._get_live_client()
        chosen_model = model or self.video_model
        logger.info("Video request (model=%s, mime=%s, %d bytes)", chosen_model, mime_type, len(data))
        resp = client.models.generate_content(
            model=chosen_model,
            contents=types.Content(
                parts=[
                    types.Part.from_bytes(data=data, mime_type=mime_type),
                    types.Part(text=prompt),
                ]
            ),
            config=types.GenerateContentConfig(response_mime_type="application/json"),
        )
        return (resp.text or "").strip()

    def synthesize(
        self,
        text: str,
        language_code: str | None = None,
        voice: str | None = None,
        model: str | None = None,
    ) -> bytes:
        """Return raw 24 kHz mono PCM for ``text``; empty bytes when nothing came back."""
        client = self._get_live_client()
        chosen_model = model or self.tts_model
        logger.info("Speech request (model=%s, language=%s)", chosen_model, language_code)
        resp = client.models.generate_content(
            model=chosen_model,
            contents=text,
            config=types.GenerateContentConfig(
                response_modalities=["AUDIO"],
                speech_config=types.SpeechConfig(
                    language_code=language_code,
                    voice_config=types.VoiceConfig(
                        prebuilt_voice_config=types.PrebuiltVoiceConfig(
                            voice_name=voice or self.tts_voice
                        )
                    ),
                ),
            ),
        )
        candidates = resp.candidates or []
        if not candidates or candidates[0].content is None:
            return b""
        for part in candidates[0].content.parts or []:
            if part.inline_data is not None and part.inline_data.data:
                return part.inline_data.data
        return b""
