"""GitHub 이슈 폼 본문 파서.

이슈 템플릿이 고정되어 있으므로 문법 없이 줄 단위로 섹션 헤더를 찾고,
헤더 아래 줄을 해당 필드 값으로 모읍니다.
"""

from __future__ import annotations

import re

KNOWN_AMENITIES: tuple[str, ...] = ("WiFi", "插座", "安静", "空调", "洗手间", "可久坐")

# (헤더에 포함될 키워드, 필드명). 위에서부터 먼저 일치하는 항목이 사용됩니다.
FIELD_LABELS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("地点名称", "名称"), "title"),
    (("描述",), "description"),
    (("地址",), "address_text"),
    (("纬度",), "latitude"),
    (("经度",), "longitude"),
    (("人均消费", "消费"), "cost_per_person"),
    (("营业时间", "时间"), "opening_hours"),
    (("链接", "link"), "link"),
    (("照片", "图片", "image"), "image"),
    (("设施", "amenities"), "amenities"),
)

_HEADER_PATTERN = re.compile(r"^(?:###|\*\*)\s*(.+?)(?:\*\*)?$")
_CHECKED_PATTERN = re.compile(r"^[-*]\s*\[[xX]\]\s*(.+?)\s*$")
_EMPTY_PLACEHOLDERS = {"_No response_", "None"}


def match_field(header: str) -> str | None:
    """헤더 텍스트를 필드명으로 매핑합니다. 알 수 없는 헤더는 None."""
    for keywords, field in FIELD_LABELS:
        if any(keyword in header for keyword in keywords):
            return field
    return None


def parse_checked_amenity(line: str) -> str | None:
    """체크된 체크박스 줄에서 알려진 편의시설 라벨을 반환합니다."""
    match = _CHECKED_PATTERN.match(line)
    if not match:
        return None
    label = match.group(1).strip()
    return label if label in KNOWN_AMENITIES else None


def parse_issue_body(body: str | None) -> dict[str, str | list[str]]:
    """이슈 폼 본문에서 필드 값을 희소 dict로 추출합니다.

    Args:
        body: 이슈 본문 원문

    Returns:
        인식된 필드만 담은 dict. amenities는 체크된 라벨 목록, 나머지는 문자열.
    """
    data: dict[str, str | list[str]] = {}
    current_field: str | None = None

    for raw_line in (body or "").splitlines():
        line = raw_line.strip()

        header = _HEADER_PATTERN.match(line)
        if header:
            current_field = match_field(header.group(1).strip())
            continue

        if current_field is None or not line:
            continue

        if current_field == "amenities":
            amenity = parse_checked_amenity(line)
            if amenity is None:
                continue
            amenities = data.setdefault("amenities", [])
            if isinstance(amenities, list) and amenity not in amenities:
                amenities.append(amenity)
            continue

        if line in _EMPTY_PLACEHOLDERS:
            continue

        existing = data.get(current_field)
        data[current_field] = f"{existing}\n{line}" if isinstance(existing, str) else line

    return data


def manual_amenities(body: str | None) -> list[str]:
    """이슈 본문에서 수동으로 체크한 편의시설 목록을 반환합니다."""
    amenities = parse_issue_body(body).get("amenities")
    return list(amenities) if isinstance(amenities, list) else []
