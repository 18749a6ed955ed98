"""신규 장소 대표 이미지를 내려받는 노드."""

from __future__ import annotations

from pathlib import Path

from langchain_core.runnables import RunnableConfig

from place_resolver.core.exceptions import ResolverError
from place_resolver.core.logger import get_logger
from place_resolver.graph.context import ResolverServices, get_services
from place_resolver.graph.state import ResolverState
from place_resolver.graph.utils import fail_state
from place_resolver.services.attachment_resolver import ScanMode, resolve_issue_images
from place_resolver.services.image_storage import remove_temp_files, store_place_image

logger = get_logger(__name__)


def _pick_photo_url(state: ResolverState, services: ResolverServices) -> str | None:
    if state.get("screenshot_mode"):
        return state.get("photo_url")

    issue = state["issue"]
    urls = resolve_issue_images(services.github, issue.number, issue.body, ScanMode.FIRST_MATCH)
    return urls[0] if urls else None


def resolve_place_image(state: ResolverState, config: RunnableConfig) -> ResolverState:
    """첨부 이미지를 `images/<id>/main.<ext>`로 저장하고 레코드에 경로를 기록합니다."""
    if state.get("error"):
        return state

    place = state.get("place")
    if place is None:
        return {**state, "error": "이미지를 연결할 장소가 없습니다.", "error_type": "ExtractionError"}

    try:
        services = get_services(config)
        logger.info("Attempting to download image from issue...")
        url = _pick_photo_url(state, services)
        if not url:
            logger.warning("No image found in issue. Place will be added without image.")
            return {**state, "image_added": False}

        place.image = store_place_image(
            url,
            services.images_dir,
            place.id,
            timeout_seconds=services.timeouts.download_timeout_seconds,
        )
    except ResolverError as exc:
        return fail_state(state, exc, "resolve_image")

    logger.info("Image downloaded successfully: %s", place.image)

    temp_dir = state.get("temp_dir")
    if state.get("temp_files") or temp_dir:
        remove_temp_files(
            [Path(path) for path in state.get("temp_files") or []],
            Path(temp_dir) if temp_dir else None,
        )

    return {**state, "place": place, "image_added": True}
