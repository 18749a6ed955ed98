"""CLI 실행용 로깅 설정."""

from __future__ import annotations

import logging.config
from typing import Any

from place_resolver.core.logger import LOG_DATE_FORMAT, LOG_FORMAT, PACKAGE_LOGGER_NAME


def _resolve_log_level(level: str | None = None) -> str:
    """인자로 받은 로그 레벨을 정규화합니다."""
    if level and level.strip():
        return level.strip().upper()
    return "INFO"


def build_logging_config(level: str | None = None) -> dict[str, Any]:
    """패키지 로거와 외부 라이브러리 로거 설정을 생성합니다."""
    log_level = _resolve_log_level(level)
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT, "datefmt": LOG_DATE_FORMAT},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            PACKAGE_LOGGER_NAME: {"handlers": ["default"], "level": log_level, "propagate": True},
            "httpx": {"level": "WARNING"},
            "openai": {"level": "WARNING"},
            "urllib3": {"level": "WARNING"},
        },
        "root": {"level": "WARNING"},
    }


def configure_logging(level: str | None = None) -> None:
    """dictConfig로 로깅을 구성합니다."""
    logging.config.dictConfig(build_logging_config(level))
