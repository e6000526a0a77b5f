"""Provider-order tests for the primary -> fallback -> Gemini chain."""

import pytest

from reel_studio.app import GEMINI_OPENAI_BASE_URL, create_app

TRACKED = [
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "OPENAI_API_KEY_FALLBACK",
    "OPENAI_BASE_URL_FALLBACK",
    "OPENAI_MODEL_FALLBACK",
    "OPENAI_API_KEY_FALLBACK_1",
    "OPENAI_BASE_URL_FALLBACK_1",
    "OPENAI_MODEL_FALLBACK_1",
    "OPENAI_API_KEY_FALLBACK_2",
    "OPENAI_BASE_URL_FALLBACK_2",
    "OPENAI_MODEL_FALLBACK_2",
    "OPENAI_API_KEY_FALLBACK_10",
    "OPENAI_DEFAULT_CHAT_MODEL",
    "OPENAI_FALLBACK_OPENAI_MODEL",
    "GEMINI_API_KEY",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in TRACKED:
        monkeypatch.delenv(name, raising=False)


def _providers():
    return getattr(create_app()["ai_client"], "_providers")


def test_indexed_fallbacks_follow_numeric_order(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "primary")
    monkeypatch.setenv("OPENAI_BASE_URL", "https://proxy.example.com/v1")
    monkeypatch.setenv("OPENAI_API_KEY_FALLBACK_10", "tenth")
    monkeypatch.setenv("OPENAI_API_KEY_FALLBACK_2", "second")
    monkeypatch.setenv("OPENAI_MODEL_FALLBACK_2", "custom-model")

    providers = _providers()

    assert [p.api_key for p in providers] == ["primary", "second", "tenth"]
    assert providers[1].chat_model_override == "custom-model"


def test_gemini_endpoint_is_tried_last(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")
    monkeypatch.setenv("OPENAI_API_KEY_FALLBACK", "fallback")
    monkeypatch.setenv("OPENAI_BASE_URL_FALLBACK", "https://proxy.example.com/v1")

    providers = _providers()

    assert [p.api_key for p in providers] == ["fallback", "gemini-key"]
    assert providers[-1].base_url == GEMINI_OPENAI_BASE_URL
    assert providers[-1].chat_model_override is None


def test_openai_provider_gets_openai_model_for_gemini_default(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-openai-primary")
    monkeypatch.setenv("OPENAI_BASE_URL", "https://api.openai.com/v1")

    providers = _providers()

    assert providers[0].chat_model_override == "gpt-4.1-mini"


def test_openai_provider_keeps_default_for_non_gemini_model(monkeypatch):
    monkeypatch.setenv("OPENAI_DEFAULT_CHAT_MODEL", "gpt-4o")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-openai-primary")

    providers = _providers()

    assert providers[0].chat_model_override is None


def test_duplicate_slots_collapse(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "same")
    monkeypatch.setenv("OPENAI_API_KEY_FALLBACK_1", "same")

    assert [p.api_key for p in _providers()] == ["same"]
