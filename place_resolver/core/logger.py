"""표준화된 로거 모듈.

프로젝트 전체에서 일관된 로깅 형식을 제공합니다.
"""

import logging
import sys

LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PACKAGE_LOGGER_NAME = "place_resolver"


def get_logger(name: str) -> logging.Logger:
    """표준화된 로거를 반환합니다.

    핸들러는 패키지 로거에 한 번만 붙이고, 모듈 로거는 전파로 출력합니다.

    Args:
        name: 로거 이름 (일반적으로 __name__ 사용).

    Returns:
        설정된 로거 인스턴스.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)

    if not package_logger.handlers:
        package_logger.setLevel(logging.INFO)

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        package_logger.addHandler(handler)

    return logging.getLogger(name)


def mask_secret(value: str | None, show_chars: int = 4) -> str:
    """로그 출력용으로 비밀 값을 마스킹합니다."""
    if not value or len(value) <= show_chars * 2:
        return "****"
    return f"{value[:show_chars]}{'*' * 8}{value[-show_chars:]}"
