"""Shared fixtures: sample domain objects and a scriptable fake service."""

import base64

import pytest

from reel_studio.audio import AudioStore, samples_to_pcm
from reel_studio.models import GenerationResult, NewsItem, Script

SCRIPT_PAYLOAD = {
    "detailedScript": {
        "hook": "[Close-up] Rates just dropped. Here's what it means for you.",
        "development": "Mortgage rates fell for the third week in a row...",
        "cta": "Follow for more market updates!",
    },
    "cleanAudioText": "Rates just dropped. Mortgage rates fell for the third week in a row.",
    "suggestions": {
        "title": "Rates Are Falling",
        "hashtags": ["#realestate", "#mortgage", "#homebuying"],
        "thumbnailIdea": "Agent pointing at a falling arrow chart",
    },
}


def make_news(count=3):
    return [
        NewsItem(
            headline=f"Headline {idx}",
            date="10/18/2026",
            source=f"Source {idx}",
            summary=f"Summary {idx}",
        )
        for idx in range(1, count + 1)
    ]


def make_script(title="Rates Are Falling"):
    payload = dict(SCRIPT_PAYLOAD)
    payload["suggestions"] = dict(SCRIPT_PAYLOAD["suggestions"], title=title)
    return Script.from_dict(payload)


class FakeService:
    """Records every call; results and failures are set per test."""

    def __init__(self):
        self.calls = []
        self.news = make_news()
        self.script_result = GenerationResult.generated(make_script())
        self.edit_result = GenerationResult.generated(make_script("Edited Title"))
        self.speech_result = GenerationResult.generated(
            base64.b64encode(samples_to_pcm([0, 1000, -1000, 32767, -32768])).decode("ascii")
        )
        self.error = None
        self.before_return = None

    def _finish(self, name, value):
        if self.before_return is not None:
            self.before_return(name)
        if self.error is not None:
            raise self.error
        return value

    def fetch_news(self, language):
        self.calls.append(("fetch_news", language))
        return self._finish("fetch_news", list(self.news))

    def generate_script(self, news_item, language):
        self.calls.append(("generate_script", news_item, language))
        return self._finish("generate_script", self.script_result)

    def generate_script_from_text(self, text, language):
        self.calls.append(("generate_script_from_text", text, language))
        return self._finish("generate_script_from_text", self.script_result)

    def generate_script_from_video(self, base64_payload, mime_type, language):
        self.calls.append(("generate_script_from_video", base64_payload, mime_type, language))
        return self._finish("generate_script_from_video", self.script_result)

    def edit_script(self, news_item, script, command, language):
        self.calls.append(("edit_script", news_item, script, command, language))
        return self._finish("edit_script", self.edit_result)

    def synthesize_speech(self, text, language):
        self.calls.append(("synthesize_speech", text, language))
        return self._finish("synthesize_speech", self.speech_result)

    def call_names(self):
        return [call[0] for call in self.calls]


@pytest.fixture()
def fake_service():
    return FakeService()


@pytest.fixture()
def audio_store(tmp_path):
    return AudioStore(tmp_path / "audio")
