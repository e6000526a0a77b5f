"""Value objects shared by the service facade, controller and exporters."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Dict, Generic, Mapping, Optional, Tuple, TypeVar

T = TypeVar("T")


def _require_text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"Missing or invalid field '{key}'")
    return value.strip()


def _require_mapping(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    if not isinstance(value, Mapping):
        raise ValueError(f"Missing or invalid section '{key}'")
    return value


@dataclass(frozen=True)
class NewsItem:
    headline: str
    date: str
    source: str
    summary: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NewsItem":
        return cls(
            headline=_require_text(data, "headline"),
            date=_require_text(data, "date"),
            source=_require_text(data, "source"),
            summary=_require_text(data, "summary"),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "headline": self.headline,
            "date": self.date,
            "source": self.source,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class DetailedScript:
    hook: str
    development: str
    cta: str


@dataclass(frozen=True)
class Suggestions:
    title: str
    hashtags: Tuple[str, ...]
    thumbnail_idea: str


@dataclass(frozen=True)
class Script:
    """A reel script: hook/development/CTA plus publishing suggestions."""

    detailed_script: DetailedScript
    clean_audio_text: str
    suggestions: Suggestions

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Script":
        """Build a script from the provider's camelCase JSON payload.

        Raises ``ValueError`` when a required field is missing so a
        half-filled response is never shown as a finished script.
        """
        detailed = _require_mapping(data, "detailedScript")
        suggestions = _require_mapping(data, "suggestions")
        hashtags = suggestions.get("hashtags")
        if isinstance(hashtags, str):
            hashtags = hashtags.split()
        if not isinstance(hashtags, (list, tuple)):
            raise ValueError("Missing or invalid field 'hashtags'")
        return cls(
            detailed_script=DetailedScript(
                hook=_require_text(detailed, "hook"),
                development=_require_text(detailed, "development"),
                cta=_require_text(detailed, "cta"),
            ),
            clean_audio_text=_require_text(data, "cleanAudioText"),
            suggestions=Suggestions(
                title=_require_text(suggestions, "title"),
                hashtags=tuple(str(tag).strip() for tag in hashtags if str(tag).strip()),
                thumbnail_idea=_require_text(suggestions, "thumbnailIdea"),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detailedScript": {
                "hook": self.detailed_script.hook,
                "development": self.detailed_script.development,
                "cta": self.detailed_script.cta,
            },
            "cleanAudioText": self.clean_audio_text,
            "suggestions": {
                "title": self.suggestions.title,
                "hashtags": list(self.suggestions.hashtags),
                "thumbnailIdea": self.suggestions.thumbnail_idea,
            },
        }


@dataclass(frozen=True)
class GenerationResult(Generic[T]):
    """Outcome of a generation call: a payload, or explicitly nothing.

    Script generation treats an empty result as an error while speech
    synthesis treats it as a silent no-op, so callers must check
    ``is_empty`` instead of relying on truthiness.
    """

    payload: Optional[T] = None

    @classmethod
    def generated(cls, payload: T) -> "GenerationResult[T]":
        return cls(payload=payload)

    @classmethod
    def empty(cls) -> "GenerationResult[T]":
        return cls(payload=None)

    @property
    def is_empty(self) -> bool:
        return self.payload is None

    def unwrap(self) -> T:
        if self.payload is None:
            raise ValueError("Generation result is empty")
        return self.payload


@dataclass(frozen=True)
class UploadedVideo:
    name: str
    mime_type: str
    data: bytes

    @property
    def is_video(self) -> bool:
        return (self.mime_type or "").startswith("video/")

    def to_base64(self) -> Tuple[str, str]:
        """Return ``(base64_payload, mime_type)`` ready for the facade."""
        return base64.b64encode(self.data).decode("ascii"), self.mime_type
