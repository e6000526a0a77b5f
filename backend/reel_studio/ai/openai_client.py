"""OpenAI-compatible chat client with an ordered provider fallback chain."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Sequence

from openai import OpenAI

from reel_studio.ai.errors import ProviderConfigError

logger = logging.getLogger(__name__)

DEFAULT_CHAT_MODEL = "gemini-2.5-flash"


@dataclass(frozen=True)
class _Provider:
    """Provider configuration for a single OpenAI-compatible endpoint."""

    api_key: str
    base_url: str | None = None
    chat_model_override: str | None = None


def extract_content(resp: Any) -> str:
    """Handle both dict responses and SDK objects."""

    def _normalize(content: Any) -> str:
        if content is None:
            return ""
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            parts: list[str] = []
            for item in content:
                if isinstance(item, dict):
                    text_value = item.get("text") or item.get("content")
                else:
                    text_value = getattr(item, "text", None) or getattr(item, "content", None)
                if isinstance(text_value, str):
                    parts.append(text_value)
            return "\n".join(parts).strip()
        return str(content)

    if isinstance(resp, dict):
        choices = resp.get("choices") or []
        if not choices:
            return ""
        return _normalize((choices[0].get("message") or {}).get("content"))

    choices = getattr(resp, "choices", None) or []
    if not choices:
        return ""
    return _normalize(getattr(choices[0].message, "content", None))


class OpenAIClient:
    """Thin wrapper around OpenAI-compatible providers.

    Providers are tried in order; the first one that answers is promoted to
    the front so later calls go there directly.
    """

    def __init__(
        self,
        provider_configs: Sequence[Dict[str, str | None]] | None = None,
        default_chat_model: str | None = None,
    ):
        self._providers = self._build_providers(provider_configs)
        self.api_key = self._providers[0].api_key if self._providers else None
        self.base_url = self._providers[0].base_url if self._providers else None
        self.default_chat_model = self._clean(default_chat_model) or DEFAULT_CHAT_MODEL
        self._clients: Dict[tuple[str, str | None], OpenAI] = {}

    @staticmethod
    def _clean(value: str | None) -> str | None:
        if value is None:
            return None
        stripped = value.strip()
        return stripped or None

    @property
    def is_configured(self) -> bool:
        return bool(self._providers)

    def _build_providers(
        self,
        provider_configs: Sequence[Dict[str, str | None]] | None,
    ) -> List[_Provider]:
        providers: list[_Provider] = []
        seen: set[tuple[str, str | None, str | None]] = set()

        for cfg in provider_configs or []:
            api_key = self._clean(cfg.get("api_key"))
            if not api_key:
                continue
            provider = _Provider(
                api_key=api_key,
                base_url=self._clean(cfg.get("base_url")),
                chat_model_override=self._clean(cfg.get("chat_model_override")),
            )
            marker = (provider.api_key, provider.base_url, provider.chat_model_override)
            if marker in seen:
                continue
            providers.append(provider)
            seen.add(marker)

        return providers

    def _get_live_client(self, provider: _Provider) -> OpenAI:
        client_key = (provider.api_key, provider.base_url)
        client = self._clients.get(client_key)
        if not client:
            client = OpenAI(api_key=provider.api_key, base_url=provider.base_url)
            self._clients[client_key] = client
        return client

    def _promote_provider(self, idx: int) -> None:
        if idx <= 0:
            return
        provider = self._providers.pop(idx)
        self._providers.insert(0, provider)
        self.api_key = self._providers[0].api_key
        self.base_url = self._providers[0].base_url

    def _call_with_fallback(self, call: Callable[[Any, _Provider], Any]) -> Any:
        if not self._providers:
            raise ProviderConfigError(
                "No text provider configured. Set OPENAI_API_KEY or GEMINI_API_KEY."
            )

        last_error: Exception | None = None
        for idx, provider in enumerate(list(self._providers)):
            try:
                client = self._get_live_client(provider)
                response = call(client, provider)
                self._promote_provider(idx)
                return response
            except Exception as exc:
                logger.warning("Provider %s failed: %s", provider.base_url or "default", exc)
                last_error = exc
                continue

        raise last_error  # type: ignore[misc]

    def chat(self, messages: List[Dict[str, str]], model: str | None = None, **kwargs) -> Any:
        """Call provider chat endpoint with ordered API-key fallback."""

        def _chat_call(client: Any, provider: _Provider) -> Any:
            chosen_model = provider.chat_model_override or model or self.default_chat_model
            logger.info("Chat completion via %s (model=%s)", provider.base_url or "default", chosen_model)
            return client.chat.completions.create(messages=messages, model=chosen_model, **kwargs)

        return self._call_with_fallback(_chat_call)

    def complete(self, system_prompt: str, user_prompt: str, model: str | None = None, **kwargs) -> str:
        resp = self.chat(
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            model=model,
            **kwargs,
        )
        return extract_content(resp).strip()
