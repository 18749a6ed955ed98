"""이슈에서 장소 정보를 추출하는 노드."""

from __future__ import annotations

from langchain_core.runnables import RunnableConfig

from place_resolver.core.exceptions import MissingAttachmentError, ResolverError, UnsupportedModeError
from place_resolver.core.logger import get_logger
from place_resolver.graph.context import ResolverServices, get_services
from place_resolver.graph.state import ResolverState
from place_resolver.graph.utils import fail_state
from place_resolver.schemas.issue import IssueContext
from place_resolver.schemas.place import PlaceUpdateRequest
from place_resolver.services.attachment_resolver import ScanMode, resolve_issue_images
from place_resolver.services.extraction_service import extract_place_from_screenshot, extract_place_from_text
from place_resolver.services.image_storage import download_image

logger = get_logger(__name__)

REQUIRED_SCREENSHOT_ATTACHMENTS = 2


def _extract_from_screenshot(issue: IssueContext, is_update: bool, services: ResolverServices) -> dict:
    """첫 번째 첨부는 스크린샷, 두 번째 첨부는 대표 사진으로 사용합니다."""
    if is_update:
        raise UnsupportedModeError("Screenshot mode does not support place updates")

    urls = resolve_issue_images(services.github, issue.number, issue.body, ScanMode.COLLECT_ALL)
    if len(urls) < REQUIRED_SCREENSHOT_ATTACHMENTS:
        raise MissingAttachmentError(
            "Screenshot mode needs both a screenshot and a place photo attached to the issue "
            f"(found {len(urls)} image(s))"
        )
    if len(urls) > REQUIRED_SCREENSHOT_ATTACHMENTS:
        logger.warning("Found %d images; using the first two as screenshot and photo", len(urls))

    temp_dir = services.temp_dir_for(issue.number)
    screenshot_path = download_image(
        urls[0],
        temp_dir,
        basename="screenshot",
        timeout_seconds=services.timeouts.download_timeout_seconds,
    )
    candidate = extract_place_from_screenshot(
        screenshot_path,
        issue.body,
        provider=services.provider,
        timeout_seconds=services.timeouts.llm_timeout_seconds,
    )
    return {
        "candidate": candidate,
        "photo_url": urls[1],
        "temp_files": [str(screenshot_path)],
        "temp_dir": str(temp_dir),
    }


def extract_place(state: ResolverState, config: RunnableConfig) -> ResolverState:
    """텍스트 또는 스크린샷 모드로 장소 후보/업데이트 요청을 추출합니다."""
    if state.get("error"):
        return state

    issue = state.get("issue")
    if issue is None:
        return {**state, "error": "extract_place에는 issue가 필요합니다.", "error_type": "ConfigError"}

    is_update = bool(state.get("is_update"))
    try:
        services = get_services(config)
        if state.get("screenshot_mode"):
            return {**state, **_extract_from_screenshot(issue, is_update, services)}

        result = extract_place_from_text(
            issue.title,
            issue.body,
            is_update,
            provider=services.provider,
            timeout_seconds=services.timeouts.llm_timeout_seconds,
        )
    except ResolverError as exc:
        return fail_state(state, exc, "extract")

    if isinstance(result, PlaceUpdateRequest):
        return {**state, "update_request": result}
    return {**state, "candidate": result}
