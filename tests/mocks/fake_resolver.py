"""이슈 처리 파이프라인 테스트용 가짜 협력자.

네트워크, git, TOON 코덱 없이 그래프 전체를 실행할 수 있도록 최소 동작만 제공합니다.
"""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

from place_resolver.core.config import Settings
from place_resolver.core.llm_router import OpenAIProvider
from place_resolver.core.timeout_policy import build_timeout_policy
from place_resolver.graph.context import ResolverServices
from place_resolver.services.place_store import PlaceStore
from place_resolver.services.publisher import GitPublisher


class JsonCodec:
    """테스트에서 데이터 파일을 JSON으로 다루는 코덱."""

    def decode(self, text: str) -> Any:
        return json.loads(text)

    def encode(self, records: list[dict[str, Any]]) -> str:
        return json.dumps(records, ensure_ascii=False, indent=2)


class FakeCommentSource:
    """고정된 댓글 목록을 돌려주는 GitHub 클라이언트."""

    def __init__(self, comments: list[str] | None = None, error: Exception | None = None) -> None:
        self._comments = comments or []
        self._error = error
        self.calls: list[int] = []

    def list_issue_comments(self, issue_number: int) -> list[dict[str, Any]]:
        self.calls.append(issue_number)
        if self._error is not None:
            raise self._error
        return [{"body": body} for body in self._comments]


class RecordingRunner:
    """git 명령을 실행하지 않고 기록만 하는 runner."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.commands: list[list[str]] = []
        self._fail_on = fail_on

    def __call__(self, command: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
        self.commands.append(command)
        if self._fail_on and command[1] == self._fail_on:
            raise subprocess.CalledProcessError(128, command)
        return subprocess.CompletedProcess(command, 0)


def llm_response(payload: Any) -> MagicMock:
    """LLM 응답 객체를 흉내냅니다. dict는 JSON 문자열로 직렬화합니다."""
    response = MagicMock()
    response.content = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
    return response


def make_settings(workspace: Path, **overrides: Any) -> Settings:
    """환경 변수와 .env 파일에 영향받지 않는 테스트용 설정."""
    values: dict[str, Any] = {
        "OPENROUTER_API_KEY": "",
        "OPENAI_API_KEY": "test-key",
        "GITHUB_TOKEN": "test-token",
        "REPO_OWNER": "owner",
        "REPO_NAME": "places",
        "ISSUE_NUMBER": 42,
        "ISSUE_TITLE": "",
        "ISSUE_BODY": "",
        "ISSUE_AUTHOR_LOGIN": "alice",
        "ISSUE_AUTHOR_NAME": "",
        "ISSUE_AUTHOR_EMAIL": "",
        "SCREENSHOT_MODE": False,
        "GITHUB_OUTPUT": None,
        "WORKSPACE_DIR": str(workspace),
        "DATA_FILE": "data/places.toon",
        "IMAGES_DIR": "images",
        "TEMP_DIR": ".tmp",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_services(
    settings: Settings,
    *,
    comments: list[str] | None = None,
    runner: RecordingRunner | None = None,
) -> ResolverServices:
    workspace = Path(settings.WORKSPACE_DIR)
    return ResolverServices(
        settings=settings,
        provider=OpenAIProvider(api_key=settings.OPENAI_API_KEY, model=settings.OPENAI_MODEL),
        github=FakeCommentSource(comments),
        store=PlaceStore(workspace / settings.DATA_FILE, codec=JsonCodec()),
        publisher=GitPublisher(
            workspace,
            data_file=settings.DATA_FILE,
            images_dir=settings.IMAGES_DIR,
            runner=runner or RecordingRunner(),
        ),
        timeouts=build_timeout_policy(settings),
    )


def write_places(settings: Settings, records: list[dict[str, Any]]) -> Path:
    """JSON 코덱 형식으로 데이터 파일을 준비합니다."""
    path = Path(settings.WORKSPACE_DIR) / settings.DATA_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(JsonCodec().encode(records), encoding="utf-8")
    return path
