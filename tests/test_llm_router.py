"""LLM 제공자 라우터 테스트."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from place_resolver.core import llm_router
from place_resolver.core.llm_router import OpenRouterProvider, Stage, clear_llm_client_cache, invoke


@pytest.fixture()
def fake_chat_openai(monkeypatch) -> MagicMock:
    chat_class = MagicMock()
    monkeypatch.setattr(llm_router, "ChatOpenAI", chat_class)
    clear_llm_client_cache()
    yield chat_class
    clear_llm_client_cache()


def test_invoke_builds_client_without_retries(fake_chat_openai) -> None:
    provider = OpenRouterProvider(api_key="or-key", model="x-ai/grok-4-fast", referer="https://github.com/o/r")
    fake_chat_openai.return_value.invoke.return_value = "ok"

    result = invoke(Stage.PLACE_EXTRACTION, ["message"], provider=provider, timeout_seconds=120)

    assert result == "ok"
    kwargs = fake_chat_openai.call_args.kwargs
    assert kwargs["base_url"] == "https://openrouter.ai/api/v1"
    assert kwargs["max_retries"] == 0
    assert kwargs["request_timeout"] == 120
    assert kwargs["default_headers"]["HTTP-Referer"] == "https://github.com/o/r"
    fake_chat_openai.return_value.invoke.assert_called_once_with(
        ["message"],
        response_format={"type": "json_object"},
    )


def test_invoke_reuses_cached_client(fake_chat_openai) -> None:
    provider = OpenRouterProvider(api_key="or-key", model="m")

    invoke(Stage.PLACE_EXTRACTION, [], provider=provider, timeout_seconds=30)
    invoke(Stage.PLACE_UPDATE_EXTRACTION, [], provider=provider, timeout_seconds=30)

    assert fake_chat_openai.call_count == 1


def test_invoke_propagates_provider_errors(fake_chat_openai) -> None:
    provider = OpenRouterProvider(api_key="or-key", model="m")
    fake_chat_openai.return_value.invoke.side_effect = RuntimeError("rate limited")

    with pytest.raises(RuntimeError, match="rate limited"):
        invoke(Stage.PLACE_EXTRACTION, [], provider=provider, timeout_seconds=30, json_mode=False)
