"""파이프라인 예외 계층."""


class ResolverError(RuntimeError):
    """이슈 처리 파이프라인의 기본 예외."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigError(ResolverError):
    """필수 설정(자격 증명 등)이 누락된 경우."""


class ExtractionError(ResolverError):
    """AI 호출 실패 또는 응답 파싱 실패."""


class UnsupportedModeError(ResolverError):
    """스크린샷 모드에서 업데이트를 시도한 경우."""


class MissingAttachmentError(ResolverError):
    """스크린샷 모드에 필요한 첨부 이미지가 부족한 경우."""


class StorageNotFoundError(ResolverError):
    """데이터 파일이 존재하지 않는 경우."""


class StorageFormatError(ResolverError):
    """데이터 파일이 장소 목록으로 디코딩되지 않는 경우."""


class NotFoundError(ResolverError):
    """업데이트 대상 장소를 찾지 못한 경우."""


class AmbiguousMatchError(ResolverError):
    """업데이트 대상 이름이 여러 장소와 일치하는 경우."""


class DownloadError(ResolverError):
    """이미지 다운로드 실패."""


class PublicationError(ResolverError):
    """git 커밋/브랜치/푸시 단계 실패."""
