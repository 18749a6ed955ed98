"""장소 목록에 신규 장소를 추가하거나 기존 장소를 부분 업데이트합니다."""

from __future__ import annotations

import uuid
from typing import Any, Callable

from place_resolver.core.exceptions import AmbiguousMatchError, NotFoundError
from place_resolver.core.logger import get_logger
from place_resolver.core.utils import coerce_float, coerce_int, sanitize_url
from place_resolver.schemas.place import NewPlaceCandidate, Place, PlaceUpdateRequest

logger = get_logger(__name__)

# 필드별 값 변환기. 변환 결과가 None이면 해당 필드는 건너뜁니다.
_FIELD_COERCERS: dict[str, Callable[[Any], Any]] = {
    "description": str,
    "address_text": str,
    "latitude": coerce_float,
    "longitude": coerce_float,
    "cost_per_person": coerce_int,
    "opening_hours": str,
    "link": lambda value: sanitize_url(str(value)) or "",
    "amenities": list,
}


def generate_unique_id(places: list[Place], id_factory: Callable[[], str] | None = None) -> str:
    """기존 ID와 겹치지 않는 UUID v4를 생성합니다."""
    factory = id_factory or (lambda: str(uuid.uuid4()))
    existing_ids = {place.id for place in places}
    new_id = factory()
    while new_id in existing_ids:
        logger.warning("Generated id collided with an existing place, regenerating: %s", new_id)
        new_id = factory()
    return new_id


def find_places_by_name(name: str, places: list[Place]) -> list[Place]:
    """대소문자와 앞뒤 공백을 무시하고 이름이 같은 장소를 찾습니다."""
    return [place for place in places if place.matches_name(name)]


def add_place(
    places: list[Place],
    candidate: NewPlaceCandidate,
    id_factory: Callable[[], str] | None = None,
) -> Place:
    """신규 장소를 목록 끝에 추가하고 반환합니다."""
    place = Place(
        id=generate_unique_id(places, id_factory),
        title=candidate.title,
        description=candidate.description or "",
        address_text=candidate.address_text,
        latitude=candidate.latitude,
        longitude=candidate.longitude,
        cost_per_person=candidate.cost_per_person,
        opening_hours=candidate.opening_hours,
        link=candidate.link or "",
        image="",
        amenities=list(candidate.amenities),
    )
    places.append(place)
    logger.info("Added new place '%s' (id=%s)", place.title, place.id)
    return place


def apply_update(place: Place, request: PlaceUpdateRequest) -> Place:
    """제공된 필드만 덮어쓴 사본을 반환합니다. 원본 레코드의 나머지 키는 건드리지 않습니다."""
    changes: dict[str, Any] = {}
    for field, provided in request.updates:
        coerced = _FIELD_COERCERS[field](provided.value)
        if coerced is None:
            logger.warning("Skipping unparsable update value for %s: %r", field, provided.value)
            continue
        changes[field] = coerced

    return place.with_changes(changes)


def update_place(places: list[Place], request: PlaceUpdateRequest) -> Place:
    """이름이 정확히 하나의 장소와 일치할 때 부분 업데이트를 제자리에 반영합니다.

    Raises:
        NotFoundError: 일치하는 장소가 없는 경우.
        AmbiguousMatchError: 일치하는 장소가 두 개 이상인 경우.
    """
    matches = find_places_by_name(request.place_name, places)
    if not matches:
        raise NotFoundError(f'Place "{request.place_name}" not found')
    if len(matches) > 1:
        raise AmbiguousMatchError(
            f'Multiple places found with name "{request.place_name}". Please be more specific.'
        )

    existing = matches[0]
    index = next(position for position, place in enumerate(places) if place is existing)
    updated = apply_update(existing, request)
    places[index] = updated
    logger.info(
        "Updated place '%s' (id=%s): fields=%s",
        updated.title,
        updated.id,
        request.updates.provided_fields(),
    )
    return updated
