"""텍스트 정규화 공통 유틸리티."""

from __future__ import annotations

import re

_LEADING_WRAPPERS = re.compile(r"^[<\"'`]+")
_TRAILING_WRAPPERS = re.compile(r"[>\"'`]+$")
_NUMBER_PATTERN = re.compile(r"-?\d+(?:\.\d+)?")


def sanitize_url(url: str | None) -> str | None:
    """마크다운에서 섞여 들어온 앞뒤 꺾쇠/따옴표 문자를 제거합니다.

    Examples:
        >>> sanitize_url("<https://x/y.png>")
        'https://x/y.png'
    """
    if not url:
        return url
    cleaned = url.strip()
    cleaned = _LEADING_WRAPPERS.sub("", cleaned)
    return _TRAILING_WRAPPERS.sub("", cleaned)


def strip_code_fence(text: str) -> str:
    """코드 펜스를 제거합니다."""
    content = (text or "").strip()
    if content.startswith("```"):
        parts = content.split("```")
        if len(parts) > 1:
            content = parts[1].strip()
            if content.startswith("json"):
                content = content[4:].strip()
    return content.strip()


def coerce_float(value: object) -> float | None:
    """숫자처럼 보이는 입력을 float로 변환합니다. 변환할 수 없으면 None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = _NUMBER_PATTERN.search(str(value))
    if not match:
        return None
    return float(match.group(0))


def coerce_int(value: object) -> int | None:
    """숫자처럼 보이는 입력을 int로 변환합니다. 소수부는 버립니다."""
    number = coerce_float(value)
    if number is None:
        return None
    return int(number)
