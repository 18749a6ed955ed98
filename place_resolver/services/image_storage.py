"""이슈 첨부 이미지 다운로드 및 저장."""

from __future__ import annotations

import re
from pathlib import Path

import requests

from place_resolver.core.exceptions import DownloadError
from place_resolver.core.logger import get_logger
from place_resolver.core.timeout_policy import to_requests_timeout
from place_resolver.core.utils import sanitize_url

logger = get_logger(__name__)

DEFAULT_EXTENSION = "jpg"
_URL_EXTENSION_PATTERN = re.compile(r"\.(jpg|jpeg|png)(?:\?|$)", re.I)
_CHUNK_SIZE = 64 * 1024


def detect_extension(content_type: str | None, url: str) -> str:
    """content-type 헤더 → URL 확장자 → jpg 순서로 파일 확장자를 결정합니다."""
    normalized = (content_type or "").lower()
    if "png" in normalized:
        return "png"
    if "jpeg" in normalized or "jpg" in normalized:
        return "jpg"

    match = _URL_EXTENSION_PATTERN.search(url or "")
    if match:
        extension = match.group(1).lower()
        return "jpg" if extension == "jpeg" else extension
    return DEFAULT_EXTENSION


def download_image(
    url: str,
    target_dir: str | Path,
    *,
    basename: str = "main",
    timeout_seconds: int = 30,
) -> Path:
    """이미지를 내려받아 `<target_dir>/<basename>.<ext>`로 저장하고 경로를 반환합니다.

    Raises:
        DownloadError: 요청 실패, HTTP 오류, 파일 쓰기 실패.
    """
    sanitized_url = sanitize_url(url) or ""
    directory = Path(target_dir)

    try:
        with requests.get(
            sanitized_url,
            headers={"User-Agent": "GitHub-Actions"},
            stream=True,
            timeout=to_requests_timeout(timeout_seconds),
        ) as response:
            response.raise_for_status()
            extension = detect_extension(response.headers.get("content-type"), sanitized_url)
            directory.mkdir(parents=True, exist_ok=True)
            target = directory / f"{basename}.{extension}"
            with target.open("wb") as file:
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    if chunk:
                        file.write(chunk)
    except requests.RequestException as exc:
        raise DownloadError(f"Failed to download image: {exc}") from exc
    except OSError as exc:
        raise DownloadError(f"Failed to save image: {exc}") from exc

    logger.info("Image downloaded: %s -> %s", sanitized_url, target)
    return target


def store_place_image(
    url: str,
    images_dir: str | Path,
    place_id: str,
    *,
    timeout_seconds: int = 30,
) -> str:
    """장소 대표 이미지를 `images/<id>/main.<ext>`로 저장하고 레코드용 상대 경로를 반환합니다."""
    saved = download_image(url, Path(images_dir) / place_id, timeout_seconds=timeout_seconds)
    return f"{place_id}/{saved.name}"


def remove_temp_files(paths: list[Path], temp_dir: Path | None) -> None:
    """스크린샷 임시 파일을 정리합니다. 실패해도 예외를 던지지 않습니다."""
    for path in paths:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Failed to delete temp file %s: %s", path, exc)

    if temp_dir is None:
        return
    try:
        temp_dir.rmdir()
    except OSError:
        # 비어 있지 않으면 그대로 둡니다.
        logger.debug("Temp directory not removed: %s", temp_dir)
