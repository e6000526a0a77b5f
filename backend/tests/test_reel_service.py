"""Facade tests: response shaping and the empty-result contract."""

import base64
import json

import pytest

from conftest import SCRIPT_PAYLOAD, make_news, make_script
from reel_studio.ai.errors import ReelServiceError
from reel_studio.ai.reel_service import ReelService, parse_json_payload
from reel_studio.translations import t


class _FakeTextClient:
    def __init__(self, content="", error=None):
        self.content = content
        self.error = error
        self.prompts = []

    def complete(self, system_prompt, user_prompt, model=None, **kwargs):
        self.prompts.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return self.content


class _FakeMediaClient:
    def __init__(self, text="", audio=b"", error=None):
        self.text = text
        self.audio = audio
        self.error = error
        self.videos = []
        self.speech = []

    def describe_video(self, data, mime_type, prompt, model=None):
        self.videos.append((data, mime_type))
        if self.error is not None:
            raise self.error
        return self.text

    def synthesize(self, text, language_code=None, voice=None, model=None):
        self.speech.append((text, language_code))
        if self.error is not None:
            raise self.error
        return self.audio


def _service(text_client=None, media_client=None):
    return ReelService(text_client or _FakeTextClient(), media_client or _FakeMediaClient())


def test_parse_json_payload_strips_code_fences():
    assert parse_json_payload('```json\n{"a": 1}\n```') == {"a": 1}
    assert parse_json_payload("Here you go: [1, 2]") == [1, 2]
    assert parse_json_payload("   ") is None


def test_fetch_news_parses_items():
    news = [item.to_dict() for item in make_news(3)]
    service = _service(_FakeTextClient(json.dumps(news)))
    items = service.fetch_news("en")
    assert [item.headline for item in items] == ["Headline 1", "Headline 2", "Headline 3"]


def test_fetch_news_accepts_wrapped_list():
    news = {"news": [make_news(1)[0].to_dict()]}
    items = _service(_FakeTextClient(json.dumps(news))).fetch_news("pt")
    assert len(items) == 1


@pytest.mark.parametrize("content", ["not json", '{"other": []}', '[{"headline": "x"}]'])
def test_fetch_news_failures_use_unknown_error(content):
    with pytest.raises(ReelServiceError) as excinfo:
        _service(_FakeTextClient(content)).fetch_news("es")
    assert str(excinfo.value) == t("unknownError", "es")


def test_fetch_news_transport_error_uses_unknown_error():
    client = _FakeTextClient(error=ConnectionError("timeout"))
    with pytest.raises(ReelServiceError) as excinfo:
        _service(client).fetch_news("en")
    assert str(excinfo.value) == t("unknownError", "en")
    assert isinstance(excinfo.value.__cause__, ConnectionError)


def test_generate_script_returns_script():
    client = _FakeTextClient(json.dumps(SCRIPT_PAYLOAD))
    result = _service(client).generate_script(make_news(1)[0], "en")
    assert not result.is_empty
    assert result.unwrap() == make_script()
    assert "Headline 1" in client.prompts[0][1]
    assert "English" in client.prompts[0][1]


@pytest.mark.parametrize("content", ["", "   ", "{}", "null"])
def test_blank_script_response_is_empty(content):
    result = _service(_FakeTextClient(content)).generate_script_from_text("idea", "es")
    assert result.is_empty


def test_malformed_script_raises():
    payload = dict(SCRIPT_PAYLOAD)
    del payload["cleanAudioText"]
    with pytest.raises(ReelServiceError):
        _service(_FakeTextClient(json.dumps(payload))).generate_script_from_text("idea", "en")


def test_provider_error_message_is_kept():
    client = _FakeTextClient(error=RuntimeError("quota exceeded"))
    with pytest.raises(ReelServiceError, match="quota exceeded"):
        _service(client).generate_script_from_text("idea", "en")


def test_video_payload_is_decoded_before_upload():
    media = _FakeMediaClient(text=json.dumps(SCRIPT_PAYLOAD))
    payload = base64.b64encode(b"video-bytes").decode("ascii")
    result = _service(media_client=media).generate_script_from_video(payload, "video/mp4", "es")
    assert result.unwrap().suggestions.title == "Rates Are Falling"
    assert media.videos == [(b"video-bytes", "video/mp4")]


def test_empty_video_answer_is_empty():
    media = _FakeMediaClient(text="")
    result = _service(media_client=media).generate_script_from_video("AAAA", "video/mp4", "es")
    assert result.is_empty


def test_edit_script_sends_current_script_and_command():
    client = _FakeTextClient(json.dumps(SCRIPT_PAYLOAD))
    result = _service(client).edit_script(make_news(1)[0], make_script(), "  make it funnier ", "en")
    assert not result.is_empty
    prompt = client.prompts[0][1]
    assert "Instruction: make it funnier" in prompt
    assert '"cleanAudioText"' in prompt


def test_synthesize_speech_returns_base64_pcm():
    media = _FakeMediaClient(audio=b"\x01\x02\x03\x04")
    result = _service(media_client=media).synthesize_speech("Hola", "es")
    assert base64.b64decode(result.unwrap()) == b"\x01\x02\x03\x04"
    assert media.speech == [("Hola", "es-US")]


def test_synthesize_speech_empty_is_not_an_error():
    result = _service(media_client=_FakeMediaClient(audio=b"")).synthesize_speech("Hi", "en")
    assert result.is_empty


def test_synthesize_speech_failure_raises():
    media = _FakeMediaClient(error=RuntimeError("tts offline"))
    with pytest.raises(ReelServiceError, match="tts offline"):
        _service(media_client=media).synthesize_speech("Hi", "en")


def test_parse_json_payload_skips_brackets_in_prose():
    content = 'Sure [json]: {"a": [1, 2]} hope it helps'
    assert parse_json_payload(content) == {"a": [1, 2]}
    assert parse_json_payload("Note [1]: {\"b\": 2}", expect=(dict,)) == {"b": 2}


def test_parse_json_payload_without_match_raises():
    with pytest.raises(ValueError):
        parse_json_payload("only [a list] here", expect=(dict,))


def test_script_after_bracketed_preamble_is_parsed():
    content = f"Here is your script [v2]:\n{json.dumps(SCRIPT_PAYLOAD)}"
    result = _service(_FakeTextClient(content)).generate_script_from_text("idea", "en")
    assert result.unwrap() == make_script()


def test_news_prompt_carries_the_story_as_json():
    client = _FakeTextClient(json.dumps(SCRIPT_PAYLOAD))
    item = make_news(1)[0]
    _service(client).generate_script(item, "es")
    assert json.dumps(item.to_dict(), ensure_ascii=False, indent=2) in client.prompts[0][1]
