"""장소 레코드와 추출 결과 스키마."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Generic, Iterator, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, field_validator

from place_resolver.core.exceptions import ExtractionError
from place_resolver.core.utils import coerce_float, coerce_int, sanitize_url

T = TypeVar("T")

UPDATABLE_FIELDS: tuple[str, ...] = (
    "description",
    "address_text",
    "latitude",
    "longitude",
    "cost_per_person",
    "opening_hours",
    "link",
    "amenities",
)


def _normalize_amenities(value: object) -> list[str]:
    """편의시설 목록을 순서를 유지한 채 중복 없이 정리합니다."""
    if not isinstance(value, (list, tuple)):
        return []
    amenities: list[str] = []
    for item in value:
        if item is None:
            continue
        label = str(item).strip()
        if label and label not in amenities:
            amenities.append(label)
    return amenities


def _normalize_link(value: object) -> str:
    if value is None:
        return ""
    return sanitize_url(str(value)) or ""


class Place(BaseModel):
    """데이터 파일에 저장되는 장소 레코드.

    Fields:
        id: UUID v4 형태의 고유 ID
        title: 장소명 (대소문자/공백 무시 비교의 기준)
        image: `<id>/main.<ext>` 상대 경로, 빈 문자열은 이미지 없음
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="장소 고유 ID")
    title: str = Field(..., description="장소명")
    description: str = Field(default="", description="장소 설명")
    address_text: str = Field(default="", description="주소")
    latitude: float | None = Field(default=None, description="위도")
    longitude: float | None = Field(default=None, description="경도")
    cost_per_person: int | None = Field(default=None, description="1인당 비용")
    opening_hours: str | None = Field(default=None, description="영업시간 (HH:MM-HH:MM)")
    link: str = Field(default="", description="관련 링크")
    image: str = Field(default="", description="이미지 상대 경로")
    amenities: list[str] = Field(default_factory=list, description="편의시설 태그")

    # 데이터 파일에서 읽은 원본 레코드. 새로 만든 장소는 None.
    _source: dict[str, Any] | None = PrivateAttr(default=None)

    @field_validator("description", "address_text", "image", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("link", mode="before")
    @classmethod
    def _sanitize_link(cls, value: object) -> str:
        return _normalize_link(value)

    @field_validator("amenities", mode="before")
    @classmethod
    def _dedupe_amenities(cls, value: object) -> list[str]:
        return _normalize_amenities(value)

    def matches_name(self, name: str) -> bool:
        """대소문자와 앞뒤 공백을 무시하고 장소명을 비교합니다."""
        return self.title.strip().lower() == (name or "").strip().lower()

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Place:
        """저장된 레코드를 검증하고 원본 dict를 함께 보관합니다."""
        place = cls.model_validate(record)
        place._source = copy.deepcopy(dict(record))
        return place

    def with_changes(self, changes: Mapping[str, Any]) -> Place:
        """변경 필드만 덮어쓴 사본을 반환합니다.

        저장된 레코드였다면 원본 dict 위에 변경 키만 얹으므로, 나머지 키는
        null 값과 중복 편의시설까지 그대로 유지됩니다.
        """
        updated = type(self).model_validate({**self.model_dump(), **changes})
        if self._source is not None:
            updated._source = {**copy.deepcopy(self._source), **copy.deepcopy(dict(changes))}
        return updated

    def to_record(self) -> dict[str, Any]:
        """저장용 dict로 변환합니다.

        저장된 레코드는 읽은 원본(및 with_changes로 얹은 변경)을 그대로 반환하고,
        새 장소만 기본값을 채운 뒤 값이 없는 선택 필드를 생략합니다.
        """
        if self._source is not None:
            return copy.deepcopy(self._source)
        return self.model_dump(exclude_none=True)


class NewPlaceCandidate(BaseModel):
    """AI가 추출한 신규 장소 후보."""

    model_config = ConfigDict(extra="ignore")

    title: str = Field(..., description="장소명 (필수)")
    address_text: str = Field(..., description="주소 (필수)")
    description: str = Field(default="", description="설명")
    latitude: float | None = Field(default=None, description="위도")
    longitude: float | None = Field(default=None, description="경도")
    cost_per_person: int | None = Field(default=None, description="1인당 비용")
    opening_hours: str | None = Field(default=None, description="영업시간")
    link: str = Field(default="", description="링크")
    amenities: list[str] = Field(default_factory=list, description="편의시설")

    @field_validator("title", "address_text", mode="before")
    @classmethod
    def _require_text(cls, value: object) -> str:
        text = str(value).strip() if value is not None else ""
        if not text:
            raise ValueError("must not be empty")
        return text

    @field_validator("description", mode="before")
    @classmethod
    def _description_default(cls, value: object) -> str:
        return "" if value is None else str(value)

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _parse_coordinate(cls, value: object) -> float | None:
        return coerce_float(value)

    @field_validator("cost_per_person", mode="before")
    @classmethod
    def _parse_cost(cls, value: object) -> int | None:
        return coerce_int(value)

    @field_validator("opening_hours", mode="before")
    @classmethod
    def _blank_hours(cls, value: object) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("link", mode="before")
    @classmethod
    def _sanitize_link(cls, value: object) -> str:
        return _normalize_link(value)

    @field_validator("amenities", mode="before")
    @classmethod
    def _amenities_default(cls, value: object) -> list[str]:
        return _normalize_amenities(value)

    @classmethod
    def from_llm_payload(cls, payload: object) -> NewPlaceCandidate:
        """AI 응답 JSON을 후보로 변환합니다.

        Raises:
            ExtractionError: JSON 객체가 아니거나 필수 필드가 없는 경우.
        """
        if not isinstance(payload, dict):
            raise ExtractionError("AI response is not a JSON object")
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            fields = ", ".join(str(error["loc"][0]) for error in exc.errors() if error.get("loc"))
            raise ExtractionError(f"AI response is missing required fields: {fields}") from exc


@dataclass(frozen=True, slots=True)
class Provided(Generic[T]):
    """명시적으로 제공된 업데이트 값."""

    value: T


class PlaceUpdate:
    """부분 업데이트 페이로드.

    필드마다 Provided 값이 있거나 아예 없습니다. null은 "제공되지 않음"으로 취급해
    기존 값을 지우지 않습니다.
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, Provided[Any]] | None = None) -> None:
        unknown = set(fields or {}) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unsupported update fields: {sorted(unknown)}")
        self._fields: dict[str, Provided[Any]] = dict(fields or {})

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> PlaceUpdate:
        """AI 응답의 updates 객체에서 값이 있는 필드만 골라냅니다."""
        fields: dict[str, Provided[Any]] = {}
        for name in UPDATABLE_FIELDS:
            if not payload or name not in payload:
                continue
            value = payload[name]
            if value is None:
                continue
            if name == "amenities" and not isinstance(value, (list, tuple)):
                continue
            fields[name] = Provided(value)
        return cls(fields)

    def get(self, name: str) -> Provided[Any] | None:
        return self._fields.get(name)

    def provided_fields(self) -> list[str]:
        """제공된 필드명을 정의 순서대로 반환합니다."""
        return [name for name in UPDATABLE_FIELDS if name in self._fields]

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[tuple[str, Provided[Any]]]:
        for name in self.provided_fields():
            yield name, self._fields[name]

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlaceUpdate):
            return NotImplemented
        return self._fields == other._fields

    def __repr__(self) -> str:
        inner = ", ".join(f"{name}={provided.value!r}" for name, provided in self)
        return f"PlaceUpdate({inner})"


@dataclass(frozen=True, slots=True)
class PlaceUpdateRequest:
    """기존 장소 업데이트 요청."""

    place_name: str
    updates: PlaceUpdate

    @classmethod
    def from_llm_payload(cls, payload: object) -> PlaceUpdateRequest:
        """AI 응답 JSON을 업데이트 요청으로 변환합니다.

        Raises:
            ExtractionError: JSON 객체가 아니거나 place_name이 없는 경우.
        """
        if not isinstance(payload, dict):
            raise ExtractionError("AI response is not a JSON object")
        place_name = str(payload.get("place_name") or "").strip()
        if not place_name:
            raise ExtractionError("AI response is missing required field: place_name")
        updates = payload.get("updates")
        if updates is not None and not isinstance(updates, dict):
            raise ExtractionError("AI response field 'updates' is not an object")
        return cls(place_name=place_name, updates=PlaceUpdate.from_payload(updates))
