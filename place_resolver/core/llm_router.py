"""LLM 제공자 선택 및 호출 유틸."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from functools import lru_cache
from time import perf_counter
from typing import Any

from langchain_openai import ChatOpenAI

from place_resolver.core.config import Settings
from place_resolver.core.exceptions import ConfigError
from place_resolver.core.logger import get_logger

logger = get_logger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
OPENAI_BASE_URL = "https://api.openai.com/v1"
APP_TITLE = "Vibe Places Data Auto Resolver"


class Stage(StrEnum):
    """LLM 호출 stage."""

    PLACE_EXTRACTION = "PLACE_EXTRACTION"
    PLACE_UPDATE_EXTRACTION = "PLACE_UPDATE_EXTRACTION"
    SCREENSHOT_EXTRACTION = "SCREENSHOT_EXTRACTION"


@dataclass(frozen=True, slots=True)
class LLMProvider(ABC):
    """OpenAI 호환 chat completions 제공자.

    요청/응답 계약은 동일하고 엔드포인트, 모델, 헤더 구성만 다릅니다.
    """

    api_key: str
    model: str

    @property
    @abstractmethod
    def display_name(self) -> str:
        raise NotImplementedError

    @property
    @abstractmethod
    def base_url(self) -> str:
        raise NotImplementedError

    def default_headers(self) -> dict[str, str]:
        return {}

    def build_client(self, *, temperature: float, timeout_seconds: int) -> ChatOpenAI:
        """제공자 설정으로 ChatOpenAI 클라이언트를 생성합니다. 재시도는 하지 않습니다."""
        return ChatOpenAI(
            model=self.model,
            temperature=temperature,
            api_key=self.api_key,
            base_url=self.base_url,
            default_headers=self.default_headers() or None,
            request_timeout=timeout_seconds,
            max_retries=0,
        )


@dataclass(frozen=True, slots=True)
class OpenRouterProvider(LLMProvider):
    """OpenRouter 제공자. 권장 HTTP-Referer/X-Title 헤더를 붙입니다."""

    referer: str = ""

    @property
    def display_name(self) -> str:
        return "OpenRouter"

    @property
    def base_url(self) -> str:
        return OPENROUTER_BASE_URL

    def default_headers(self) -> dict[str, str]:
        headers = {"X-Title": APP_TITLE}
        if self.referer:
            headers["HTTP-Referer"] = self.referer
        return headers


@dataclass(frozen=True, slots=True)
class OpenAIProvider(LLMProvider):
    """OpenAI 제공자."""

    @property
    def display_name(self) -> str:
        return "OpenAI"

    @property
    def base_url(self) -> str:
        return OPENAI_BASE_URL


def select_provider(settings: Settings) -> LLMProvider:
    """키 존재 여부로 제공자를 한 번 선택합니다.

    Raises:
        ConfigError: OpenRouter/OpenAI 키가 모두 없는 경우.
    """
    if settings.OPENROUTER_API_KEY:
        referer = ""
        if settings.REPO_OWNER and settings.REPO_NAME:
            referer = f"https://github.com/{settings.REPO_OWNER}/{settings.REPO_NAME}"
        provider: LLMProvider = OpenRouterProvider(
            api_key=settings.OPENROUTER_API_KEY,
            model=settings.OPENROUTER_MODEL,
            referer=referer,
        )
    elif settings.OPENAI_API_KEY:
        provider = OpenAIProvider(api_key=settings.OPENAI_API_KEY, model=settings.OPENAI_MODEL)
    else:
        raise ConfigError("Neither OPENROUTER_API_KEY nor OPENAI_API_KEY is set")

    logger.info("Using %s API with model: %s", provider.display_name, provider.model)
    return provider


@lru_cache(maxsize=16)
def _get_chat_client(provider: LLMProvider, temperature: float, timeout_seconds: int) -> ChatOpenAI:
    return provider.build_client(temperature=temperature, timeout_seconds=timeout_seconds)


def clear_llm_client_cache() -> None:
    """테스트/운영 시 클라이언트 캐시를 비웁니다."""
    _get_chat_client.cache_clear()


def _log_success(*, stage: Stage, provider: LLMProvider, latency_ms: float) -> None:
    logger.info(
        "LLM call succeeded",
        extra={
            "stage": stage.value,
            "provider": provider.display_name,
            "selected_model": provider.model,
            "latency_ms": latency_ms,
        },
    )


def _log_failure(*, stage: Stage, provider: LLMProvider, latency_ms: float, exc: Exception) -> None:
    logger.warning(
        "LLM call failed",
        extra={
            "stage": stage.value,
            "provider": provider.display_name,
            "selected_model": provider.model,
            "latency_ms": latency_ms,
        },
        exc_info=exc,
    )


def invoke(
    stage: Stage,
    payload: Any,
    *,
    provider: LLMProvider,
    timeout_seconds: int,
    temperature: float = 0.3,
    json_mode: bool = True,
) -> Any:
    """선택된 제공자로 동기 LLM 호출을 수행합니다. 실패 시 예외를 그대로 전파합니다."""
    client = _get_chat_client(provider, float(temperature), max(1, int(timeout_seconds)))
    invoke_kwargs: dict[str, Any] = {}
    if json_mode:
        invoke_kwargs["response_format"] = {"type": "json_object"}

    started = perf_counter()
    try:
        response = client.invoke(payload, **invoke_kwargs)
    except Exception as exc:
        _log_failure(stage=stage, provider=provider, latency_ms=(perf_counter() - started) * 1000, exc=exc)
        raise

    _log_success(stage=stage, provider=provider, latency_ms=(perf_counter() - started) * 1000)
    return response
