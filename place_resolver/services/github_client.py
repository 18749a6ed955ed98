"""GitHub REST API 클라이언트."""

from __future__ import annotations

from typing import Any

import requests

from place_resolver.core.config import Settings
from place_resolver.core.logger import get_logger
from place_resolver.core.timeout_policy import build_timeout_policy, to_requests_timeout

logger = get_logger(__name__)


class GitHubClient:
    """저장소 단위 GitHub REST API 클라이언트."""

    _BASE_URL = "https://api.github.com"
    _PER_PAGE = 100

    def __init__(self, token: str, owner: str, repo: str, timeout_seconds: int = 15) -> None:
        self._token = token
        self._owner = owner
        self._repo = repo
        self._timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> GitHubClient:
        """애플리케이션 설정으로 클라이언트를 생성합니다."""
        policy = build_timeout_policy(settings)
        return cls(
            token=settings.GITHUB_TOKEN,
            owner=settings.REPO_OWNER,
            repo=settings.REPO_NAME,
            timeout_seconds=policy.github_api_timeout_seconds,
        )

    @property
    def repo_url(self) -> str:
        return f"{self._BASE_URL}/repos/{self._owner}/{self._repo}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"token {self._token}",
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "GitHub-Actions",
        }

    def _request(self, method: str, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """API 요청을 보내고 JSON 응답을 반환합니다. 실패 시 requests 예외를 전파합니다."""
        with requests.Session() as session:
            response = session.request(
                method=method,
                url=f"{self.repo_url}{endpoint}",
                params=params,
                headers=self._headers(),
                timeout=to_requests_timeout(self._timeout_seconds),
            )
        response.raise_for_status()
        return response.json()

    def list_issue_comments(self, issue_number: int) -> list[dict[str, Any]]:
        """이슈 댓글 목록을 작성 순서대로 반환합니다."""
        comments: list[dict[str, Any]] = []
        page = 1
        while True:
            batch = self._request(
                "GET",
                f"/issues/{issue_number}/comments",
                params={"per_page": self._PER_PAGE, "page": page},
            )
            if not isinstance(batch, list):
                raise ValueError("Unexpected comments payload from GitHub API")
            comments.extend(batch)
            if len(batch) < self._PER_PAGE:
                break
            page += 1

        logger.info("Fetched %d comments for issue #%s", len(comments), issue_number)
        return comments
