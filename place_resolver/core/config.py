"""애플리케이션 전역 설정을 관리하는 모듈."""

from functools import lru_cache

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from place_resolver.core.exceptions import ConfigError
from place_resolver.schemas.issue import IssueContext

LOG_LEVELS: tuple[str, ...] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """환경 변수 기반 설정 모델.

    프로세스 시작 시 한 번 생성되어 각 컴포넌트에 명시적으로 전달됩니다.
    """

    OPENROUTER_API_KEY: str = ""
    OPENROUTER_MODEL: str = "x-ai/grok-4-fast"
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    LLM_TEMPERATURE: float = 0.3
    LLM_TIMEOUT_SECONDS: int = 120
    GITHUB_API_TIMEOUT_SECONDS: int = 15
    DOWNLOAD_TIMEOUT_SECONDS: int = 30

    GITHUB_TOKEN: str = ""
    REPO_OWNER: str = ""
    REPO_NAME: str = ""
    ISSUE_NUMBER: int | None = None
    ISSUE_TITLE: str = ""
    ISSUE_BODY: str = ""
    ISSUE_AUTHOR_LOGIN: str = ""
    ISSUE_AUTHOR_NAME: str = ""
    ISSUE_AUTHOR_EMAIL: str = ""
    SCREENSHOT_MODE: bool = False
    GITHUB_OUTPUT: str | None = None

    WORKSPACE_DIR: str = "."
    DATA_FILE: str = "data/places.toon"
    IMAGES_DIR: str = "images"
    TEMP_DIR: str = ".tmp"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("ISSUE_NUMBER", "GITHUB_OUTPUT", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> str:
        level = str(value or "").strip().upper() or "INFO"
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("SCREENSHOT_MODE", mode="before")
    @classmethod
    def _parse_flag(cls, value: object) -> bool:
        if isinstance(value, bool):
            return value
        if value is None:
            return False
        return str(value).strip().lower() in {"1", "true", "yes", "on"}

    @field_validator(
        "OPENROUTER_API_KEY",
        "OPENAI_API_KEY",
        "GITHUB_TOKEN",
        "OPENROUTER_MODEL",
        "OPENAI_MODEL",
        mode="before",
    )
    @classmethod
    def _strip(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @property
    def use_openrouter(self) -> bool:
        """OpenRouter 키가 있으면 OpenRouter를 우선 사용합니다."""
        return bool(self.OPENROUTER_API_KEY)

    def validate_credentials(self) -> None:
        """파이프라인 실행에 필요한 자격 증명을 검증합니다.

        Raises:
            ConfigError: AI 키가 모두 없거나 GitHub 토큰이 없는 경우.
        """
        if not (self.OPENROUTER_API_KEY or self.OPENAI_API_KEY):
            raise ConfigError(
                "Neither OPENROUTER_API_KEY nor OPENAI_API_KEY is set. "
                "Please set one of them in repository secrets."
            )
        if not self.GITHUB_TOKEN:
            raise ConfigError("GITHUB_TOKEN is not set.")
        if self.ISSUE_NUMBER is None:
            raise ConfigError("ISSUE_NUMBER is not set.")
        if not (self.REPO_OWNER and self.REPO_NAME):
            raise ConfigError("REPO_OWNER and REPO_NAME must be set.")

    def issue(self) -> IssueContext:
        """환경에서 읽은 이슈 정보를 IssueContext로 반환합니다."""
        return IssueContext(
            number=self.ISSUE_NUMBER or 0,
            title=self.ISSUE_TITLE,
            body=self.ISSUE_BODY,
            author_login=self.ISSUE_AUTHOR_LOGIN,
            author_name=self.ISSUE_AUTHOR_NAME,
            author_email=self.ISSUE_AUTHOR_EMAIL,
        )


@lru_cache
def get_settings() -> Settings:
    """Settings 인스턴스를 반환한다. 최초 호출 시에만 생성되고 이후 캐싱된다."""
    return Settings()


def load_settings() -> Settings:
    """설정을 읽습니다. 환경 변수 형식 오류는 ConfigError로 바꿉니다.

    Raises:
        ConfigError: 환경 변수 값이 설정 스키마에 맞지 않는 경우.
    """
    try:
        return get_settings()
    except ValidationError as exc:
        fields = ", ".join(str(error["loc"][0]) for error in exc.errors() if error.get("loc"))
        raise ConfigError(f"Invalid environment configuration: {fields}") from exc
