"""그래프 노드에 주입되는 실행 컨텍스트."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from langchain_core.runnables import RunnableConfig

from place_resolver.core.config import Settings
from place_resolver.core.exceptions import ConfigError
from place_resolver.core.llm_router import LLMProvider, select_provider
from place_resolver.core.timeout_policy import TimeoutPolicy, build_timeout_policy
from place_resolver.services.attachment_resolver import CommentSource
from place_resolver.services.github_client import GitHubClient
from place_resolver.services.place_store import PlaceStore
from place_resolver.services.publisher import GitPublisher


@dataclass(slots=True)
class ResolverServices:
    """한 번의 실행 동안 공유되는 설정과 외부 협력자 묶음."""

    settings: Settings
    provider: LLMProvider
    github: CommentSource
    store: PlaceStore
    publisher: GitPublisher
    timeouts: TimeoutPolicy

    @classmethod
    def from_settings(cls, settings: Settings) -> ResolverServices:
        """설정으로 실제 협력자를 구성합니다."""
        workspace = Path(settings.WORKSPACE_DIR)
        return cls(
            settings=settings,
            provider=select_provider(settings),
            github=GitHubClient.from_settings(settings),
            store=PlaceStore(workspace / settings.DATA_FILE),
            publisher=GitPublisher(
                workspace,
                data_file=settings.DATA_FILE,
                images_dir=settings.IMAGES_DIR,
            ),
            timeouts=build_timeout_policy(settings),
        )

    @property
    def workspace(self) -> Path:
        return Path(self.settings.WORKSPACE_DIR)

    @property
    def images_dir(self) -> Path:
        return self.workspace / self.settings.IMAGES_DIR

    def temp_dir_for(self, issue_number: int) -> Path:
        """스크린샷 모드 임시 디렉터리 경로를 반환합니다."""
        return self.workspace / self.settings.TEMP_DIR / f"issue-{issue_number}"


def get_services(config: RunnableConfig | None) -> ResolverServices:
    """RunnableConfig에서 주입된 ResolverServices를 꺼냅니다."""
    services = ((config or {}).get("configurable") or {}).get("services")
    if services is None:
        raise ConfigError("ResolverServices가 그래프 config에 주입되지 않았습니다.")
    return services
