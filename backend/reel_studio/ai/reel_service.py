"""Facade over the AI providers: news, reel scripts, edits and narration.

Text requests go to the OpenAI-compatible chain; video and speech go to
Gemini. Every call returns domain objects or raises ``ReelServiceError``
with a message fit for the UI.
"""

from __future__ import annotations

import base64
import json
import logging
import re
import textwrap
from typing import Any, Callable, List, Tuple

from reel_studio.ai.errors import ReelServiceError
from reel_studio.models import GenerationResult, NewsItem, Script
from reel_studio.translations import LANGUAGE_NAMES, SPEECH_LANGUAGE_CODES, t

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)
_DECODER = json.JSONDecoder()

SCRIPT_SYSTEM_PROMPT = (
    "You are a social media strategist for real-estate agents. You write punchy "
    "short-form video scripts (Instagram Reels, TikTok) that hook viewers in the "
    "first seconds and end with a clear call to action. Answer with JSON only."
)

SCRIPT_JSON_SHAPE = textwrap.dedent(
    """
    {
      "detailedScript": {
        "hook": "opening line with on-screen/stage directions",
        "development": "body of the reel with stage directions",
        "cta": "closing call to action"
      },
      "cleanAudioText": "narration only, no stage directions, ready for text-to-speech",
      "suggestions": {
        "title": "reel title",
        "hashtags": ["#tag1", "#tag2"],
        "thumbnailIdea": "one sentence thumbnail concept"
      }
    }
    """
).strip()


def parse_json_payload(content: str, expect: Tuple[type, ...] = (dict, list)) -> Any:
    """Parse a JSON answer, tolerating markdown code fences and prose around it.

    Each ``{`` or ``[`` is tried as a start in turn; the first value that
    decodes to one of the ``expect`` types wins. Raises ``ValueError`` when
    nothing usable is found.
    """
    cleaned = _FENCE_RE.sub("", content.strip()).strip()
    if not cleaned:
        return None
    starts = [idx for idx, char in enumerate(cleaned) if char in "{["]
    if not starts:
        return json.loads(cleaned)
    last_error: ValueError | None = None
    for idx in starts:
        try:
            payload, _ = _DECODER.raw_decode(cleaned, idx)
        except ValueError as exc:
            last_error = exc
            continue
        if isinstance(payload, expect):
            return payload
    raise last_error or ValueError("No JSON value of the expected shape")


class ReelService:
    def __init__(
        self,
        text_client: Any,
        media_client: Any,
        model: str | None = None,
        temperature: float = 0.7,
    ):
        self._text = text_client
        self._media = media_client
        self._model = model
        self._temperature = temperature

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        return self._text.complete(
            system_prompt,
            user_prompt,
            model=self._model,
            temperature=self._temperature,
        )

    @staticmethod
    def _script_brief(language: str) -> str:
        return textwrap.dedent(
            f"""
            Write everything in {LANGUAGE_NAMES[language]}.
            Keep the narration under 60 seconds when read aloud.
            Return a single JSON object with exactly this shape:
            {SCRIPT_JSON_SHAPE}
            """
        ).strip()

    def _parse_script(self, content: str, language: str) -> GenerationResult[Script]:
        if not content or not content.strip():
            return GenerationResult.empty()
        try:
            payload = parse_json_payload(content, expect=(dict,))
            if not payload:
                return GenerationResult.empty()
            if not isinstance(payload, dict):
                raise ValueError("Expected a JSON object")
            return GenerationResult.generated(Script.from_dict(payload))
        except ValueError as exc:
            logger.warning("Malformed script payload: %s", exc)
            raise ReelServiceError(t("unknownError", language)) from exc

    def _request_script(self, language: str, call: Callable[[], str]) -> GenerationResult[Script]:
        try:
            content = call()
        except ReelServiceError:
            raise
        except Exception as exc:
            logger.warning("Script request failed: %s", exc)
            raise ReelServiceError(str(exc) or t("unknownError", language)) from exc
        return self._parse_script(content, language)

    def fetch_news(self, language: str) -> List[NewsItem]:
        user_prompt = textwrap.dedent(
            f"""
            List the 5 most relevant real-estate market news stories from the last days.
            Write headline and summary in {LANGUAGE_NAMES[language]}.
            Return a JSON array of objects with the keys
            "headline", "date", "source" and "summary" (2-3 sentences).
            """
        ).strip()
        try:
            content = self._complete(
                "You are a real-estate market news researcher. Answer with JSON only.",
                user_prompt,
            )
            payload = parse_json_payload(content)
            if isinstance(payload, dict):
                payload = payload.get("news")
            if not isinstance(payload, list):
                raise ValueError("Expected a JSON array of news items")
            items = [NewsItem.from_dict(entry) for entry in payload]
        except Exception as exc:
            logger.warning("News fetch failed: %s", exc)
            raise ReelServiceError(t("unknownError", language)) from exc
        logger.info("Fetched %d news item(s)", len(items))
        return items

    def generate_script(self, news_item: NewsItem, language: str) -> GenerationResult[Script]:
        story = json.dumps(news_item.to_dict(), ensure_ascii=False, indent=2)
        user_prompt = f"Create a Reel script based on this real-estate news story (JSON):\n\n{story}"
        return self._request_script(
            language,
            lambda: self._complete(SCRIPT_SYSTEM_PROMPT, f"{user_prompt}\n\n{self._script_brief(language)}"),
        )

    def generate_script_from_text(self, text: str, language: str) -> GenerationResult[Script]:
        user_prompt = f"Create a Reel script from the following content:\n\n{text.strip()}"
        return self._request_script(
            language,
            lambda: self._complete(SCRIPT_SYSTEM_PROMPT, f"{user_prompt}\n\n{self._script_brief(language)}"),
        )

    def generate_script_from_video(
        self, base64_payload: str, mime_type: str, language: str
    ) -> GenerationResult[Script]:
        prompt = (
            f"{SCRIPT_SYSTEM_PROMPT}\n\n"
            "Watch this video, transcribe what is said and shown, and turn it into a "
            f"Reel script for a real-estate audience.\n\n{self._script_brief(language)}"
        )

        def _call() -> str:
            data = base64.b64decode(base64_payload)
            return self._media.describe_video(data, mime_type, prompt)

        return self._request_script(language, _call)

    def edit_script(
        self, news_item: NewsItem, script: Script, command: str, language: str
    ) -> GenerationResult[Script]:
        user_prompt = textwrap.dedent(
            """
            Rewrite this Reel script following the instruction.

            Source headline: {headline}
            Source summary: {summary}

            Current script (JSON):
            {script}

            Instruction: {command}
            """
        ).strip().format(
            headline=news_item.headline,
            summary=news_item.summary,
            script=json.dumps(script.to_dict(), ensure_ascii=False, indent=2),
            command=command.strip(),
        )
        return self._request_script(
            language,
            lambda: self._complete(SCRIPT_SYSTEM_PROMPT, f"{user_prompt}\n\n{self._script_brief(language)}"),
        )

    def synthesize_speech(self, text: str, language: str) -> GenerationResult[str]:
        """Return base64 PCM narration, or an empty result when no audio came back."""
        try:
            pcm = self._media.synthesize(text, language_code=SPEECH_LANGUAGE_CODES[language])
        except Exception as exc:
            logger.warning("Speech synthesis failed: %s", exc)
            raise ReelServiceError(str(exc) or t("unknownError", language)) from exc
        if not pcm:
            logger.info("Speech synthesis returned no audio")
            return GenerationResult.empty()
        return GenerationResult.generated(base64.b64encode(pcm).decode("ascii"))
