"""AI 기반 장소 필드 추출 서비스.

텍스트 모드는 이슈 제목/본문에서, 스크린샷 모드는 업로드된 지도/리뷰 앱
캡처 이미지에서 장소 정보를 추출합니다.
"""

from __future__ import annotations

import base64
import json
from pathlib import Path
from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage

from place_resolver.core.exceptions import ExtractionError, UnsupportedModeError
from place_resolver.core.llm_router import LLMProvider, Stage, invoke
from place_resolver.core.logger import get_logger
from place_resolver.core.utils import strip_code_fence
from place_resolver.schemas.place import NewPlaceCandidate, PlaceUpdateRequest
from place_resolver.services.issue_form_parser import KNOWN_AMENITIES, manual_amenities

logger = get_logger(__name__)

EXTRACTION_TEMPERATURE = 0.3

NEW_PLACE_PROMPT = """\
You are a data extraction assistant. Extract place information from a GitHub issue form.
Return a JSON object with the following structure:
{
  "title": "place name (required)",
  "description": "description or empty string",
  "address_text": "full address (required)",
  "latitude": number or null,
  "longitude": number or null,
  "cost_per_person": number or null,
  "opening_hours": "HH:MM-HH:MM format or null",
  "link": "url or empty string",
  "amenities": ["array of selected amenities"]
}
IMPORTANT: Do NOT extract image data - images are handled separately by downloading from issue attachments.
Validate that required fields are present. Validate coordinates are numbers. Return only valid JSON."""

UPDATE_PLACE_PROMPT = """\
You are a data extraction assistant. Extract place update information from a GitHub issue form.
Return a JSON object with the following structure:
{
  "place_name": "name of the place to update",
  "updates": {
    "description": "updated description if provided",
    "address_text": "updated address if provided",
    "latitude": number or null,
    "longitude": number or null,
    "cost_per_person": number or null,
    "opening_hours": "HH:MM-HH:MM format or null",
    "link": "url or empty string",
    "amenities": ["array of amenities if provided"]
  }
}
Only include fields that are being updated. Validate coordinates are numbers. Return only valid JSON."""

SCREENSHOT_PROMPT = """\
You are a data extraction assistant. The image is a screenshot from a Chinese map or review app
(such as 大众点评, 高德地图, 美团 or 小红书) showing a single place.
Return a JSON object with the following structure:
{{
  "title": "place name exactly as shown (required)",
  "description": "short description in Chinese based on visible tags, category or reviews, or empty string",
  "address_text": "full address as shown (required)",
  "latitude": number or null,
  "longitude": number or null,
  "cost_per_person": integer or null,
  "opening_hours": "HH:MM-HH:MM format or null",
  "link": "empty string",
  "amenities": ["subset of: {amenities}"]
}}
Guidance:
- cost_per_person: read values like "人均 ¥45" or "¥45/人" and return the plain integer 45.
- opening_hours: convert values like "营业中 09:00-22:00" or "10:00至次日02:00" to HH:MM-HH:MM.
  If several ranges are shown, use the range for today or the first one.
- Only fill latitude/longitude when coordinates are visibly printed in the screenshot.
- Return only valid JSON."""


def _user_prompt(issue_title: str, issue_body: str) -> str:
    return f"Extract place data from this GitHub issue:\n\nTitle: {issue_title}\n\nBody:\n{issue_body}"


def _parse_json_content(content: Any) -> Any:
    text = content if isinstance(content, str) else str(content or "")
    try:
        return json.loads(strip_code_fence(text))
    except json.JSONDecodeError as exc:
        raise ExtractionError(f"AI response is not valid JSON: {exc}") from exc


def _call_model(stage: Stage, messages: list, provider: LLMProvider, timeout_seconds: int) -> Any:
    """모델을 호출하고 응답 JSON을 반환합니다. 모든 실패는 ExtractionError로 바꿉니다."""
    try:
        response = invoke(
            stage,
            messages,
            provider=provider,
            timeout_seconds=timeout_seconds,
            temperature=EXTRACTION_TEMPERATURE,
        )
    except Exception as exc:
        raise ExtractionError(f"{provider.display_name} API error: {exc}") from exc

    return _parse_json_content(getattr(response, "content", response))


def extract_place_from_text(
    issue_title: str,
    issue_body: str,
    is_update: bool,
    *,
    provider: LLMProvider,
    timeout_seconds: int,
) -> NewPlaceCandidate | PlaceUpdateRequest:
    """이슈 제목/본문에서 신규 장소 후보 또는 업데이트 요청을 추출합니다.

    Raises:
        ExtractionError: 모델 호출 실패, 제공자 오류 응답, JSON 파싱 실패, 필수 필드 누락.
    """
    stage = Stage.PLACE_UPDATE_EXTRACTION if is_update else Stage.PLACE_EXTRACTION
    system_prompt = UPDATE_PLACE_PROMPT if is_update else NEW_PLACE_PROMPT
    messages = [
        SystemMessage(content=system_prompt),
        HumanMessage(content=_user_prompt(issue_title, issue_body)),
    ]

    logger.info("Extracting place data with AI (update=%s)", is_update)
    payload = _call_model(stage, messages, provider, timeout_seconds)

    if is_update:
        request = PlaceUpdateRequest.from_llm_payload(payload)
        logger.info(
            "Extracted update for '%s': fields=%s",
            request.place_name,
            request.updates.provided_fields(),
        )
        return request

    candidate = NewPlaceCandidate.from_llm_payload(payload)
    logger.info("Extracted new place candidate: %s", candidate.title)
    return candidate


def guess_image_mime_type(image_path: str | Path) -> str:
    """확장자로 MIME 타입을 추정합니다. png 외에는 jpeg로 취급합니다."""
    return "image/png" if Path(image_path).suffix.lower() == ".png" else "image/jpeg"


def merge_manual_amenities(candidate: NewPlaceCandidate, issue_body: str | None) -> NewPlaceCandidate:
    """이슈 본문에서 수동 체크한 편의시설이 있으면 AI 결과를 대체합니다."""
    manual = manual_amenities(issue_body)
    if not manual:
        return candidate
    logger.info("Using manually checked amenities over AI result: %s", manual)
    return candidate.model_copy(update={"amenities": manual})


def extract_place_from_screenshot(
    image_path: str | Path,
    issue_body: str | None,
    *,
    provider: LLMProvider,
    timeout_seconds: int,
    is_update: bool = False,
) -> NewPlaceCandidate:
    """스크린샷 이미지에서 신규 장소 후보를 추출합니다.

    Raises:
        UnsupportedModeError: 업데이트 요청인 경우 (네트워크 호출 전에 실패).
        ExtractionError: 이미지 읽기 실패, 모델 호출/파싱 실패.
    """
    if is_update:
        raise UnsupportedModeError("Screenshot mode does not support place updates")

    path = Path(image_path)
    try:
        encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    except OSError as exc:
        raise ExtractionError(f"Failed to read screenshot {path}: {exc}") from exc

    data_url = f"data:{guess_image_mime_type(path)};base64,{encoded}"
    messages = [
        SystemMessage(content=SCREENSHOT_PROMPT.format(amenities=", ".join(KNOWN_AMENITIES))),
        HumanMessage(
            content=[
                {"type": "text", "text": "Extract the place information from this screenshot."},
                {"type": "image_url", "image_url": {"url": data_url}},
            ]
        ),
    ]

    logger.info("Extracting place data from screenshot: %s", path.name)
    payload = _call_model(Stage.SCREENSHOT_EXTRACTION, messages, provider, timeout_seconds)
    candidate = NewPlaceCandidate.from_llm_payload(payload)
    return merge_manual_amenities(candidate, issue_body)
