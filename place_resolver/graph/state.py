"""이슈 처리 그래프 상태 정의."""

from typing import TypedDict

from place_resolver.schemas.issue import IssueContext
from place_resolver.schemas.place import NewPlaceCandidate, Place, PlaceUpdateRequest


class ResolverState(TypedDict, total=False):
    """이슈 처리 그래프 상태.

    Keys:
        issue: 처리 대상 이슈
        is_update: 기존 장소 업데이트 요청 여부
        screenshot_mode: 스크린샷 추출 모드 여부
        candidate: 추출된 신규 장소 후보
        update_request: 추출된 업데이트 요청
        photo_url: 스크린샷 모드에서 대표 사진으로 쓸 URL
        temp_files: 스크린샷 모드 임시 파일 경로
        temp_dir: 스크린샷 모드 임시 디렉터리
        places: 데이터 파일에서 읽은 전체 장소 목록
        place: 추가/수정된 장소
        image_added: 새 이미지를 저장했는지 여부
        branch_name: 푸시한 브랜치 이름
        error: 오류 메시지
        error_type: 오류 분류 (예외 클래스명)
    """

    # Input
    issue: IssueContext
    is_update: bool
    screenshot_mode: bool

    # Processing
    candidate: NewPlaceCandidate | None
    update_request: PlaceUpdateRequest | None
    photo_url: str | None
    temp_files: list[str]
    temp_dir: str | None
    places: list[Place]
    place: Place | None
    image_added: bool

    # Output
    branch_name: str | None
    error: str | None
    error_type: str | None
