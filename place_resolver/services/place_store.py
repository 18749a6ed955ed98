"""장소 데이터 파일 저장소.

데이터 파일은 TOON(Token-Oriented Object Notation) 형식의 장소 배열입니다.
코덱 내부 문법은 toon_format 라이브러리에 맡기고, 여기서는 읽기/쓰기와
레코드 검증만 담당합니다.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

import toon_format
from pydantic import ValidationError

from place_resolver.core.exceptions import StorageFormatError, StorageNotFoundError
from place_resolver.core.logger import get_logger
from place_resolver.schemas.place import Place

logger = get_logger(__name__)


class PlaceCodec(Protocol):
    """레코드 목록 <-> 텍스트 코덱."""

    def decode(self, text: str) -> Any: ...

    def encode(self, records: list[dict[str, Any]]) -> str: ...


class ToonCodec:
    """toon_format 기반 코덱."""

    def decode(self, text: str) -> Any:
        return toon_format.decode(text)

    def encode(self, records: list[dict[str, Any]]) -> str:
        return toon_format.encode(records)


def records_to_places(records: Any) -> list[Place]:
    """디코딩된 레코드 목록을 Place 목록으로 검증합니다."""
    if not isinstance(records, list):
        raise StorageFormatError("Place data file must contain a list of places")
    try:
        return [Place.from_record(record) for record in records]
    except ValidationError as exc:
        raise StorageFormatError(f"Invalid place record in data file: {exc}") from exc


def places_to_records(places: list[Place]) -> list[dict[str, Any]]:
    return [place.to_record() for place in places]


class PlaceStore:
    """장소 데이터 파일을 한 번 읽고 한 번 쓰는 저장소."""

    def __init__(self, path: str | Path, codec: PlaceCodec | None = None) -> None:
        self.path = Path(path)
        self._codec = codec or ToonCodec()

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> list[Place]:
        """데이터 파일을 디코딩합니다.

        Raises:
            StorageNotFoundError: 파일이 없는 경우.
            StorageFormatError: 장소 목록으로 디코딩되지 않는 경우.
        """
        if not self.exists():
            raise StorageNotFoundError(f"{self.path.name} not found")

        text = self.path.read_text(encoding="utf-8")
        try:
            records = self._codec.decode(text)
        except StorageFormatError:
            raise
        except Exception as exc:
            raise StorageFormatError(f"Failed to decode {self.path.name}: {exc}") from exc

        places = records_to_places(records)
        logger.info("Loaded %d places from %s", len(places), self.path)
        return places

    def save(self, places: list[Place]) -> None:
        """전체 장소 목록을 인코딩해 파일을 덮어씁니다."""
        text = self._codec.encode(places_to_records(places))
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(text, encoding="utf-8")
        logger.info("Saved %d places to %s", len(places), self.path)


def convert_json_to_store(source: str | Path, store: PlaceStore) -> int:
    """JSON 장소 배열 파일을 저장소 형식으로 변환합니다. 변환한 장소 수를 반환합니다."""
    source_path = Path(source)
    if not source_path.is_file():
        raise StorageNotFoundError(f"{source_path.name} not found")
    try:
        records = json.loads(source_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise StorageFormatError(f"Failed to parse {source_path.name}: {exc}") from exc

    places = records_to_places(records)
    store.save(places)
    logger.info("Converted %d places from %s to %s", len(places), source_path, store.path)
    return len(places)
