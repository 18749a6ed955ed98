"""이슈 본문/댓글에서 첨부 이미지 URL을 찾는 리졸버.

URL 패턴은 우선순위가 고정된 목록으로 정의합니다. 찾기 실패는 예외가 아니라
빈 결과로 처리합니다(이미지는 선택 항목).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Iterable, Protocol

import requests

from place_resolver.core.logger import get_logger
from place_resolver.core.utils import sanitize_url

logger = get_logger(__name__)


class ScanMode(StrEnum):
    """첨부 이미지 탐색 방식."""

    # 댓글 → 본문 순서로 보고 처음 일치한 URL 하나만 사용 (텍스트 모드)
    FIRST_MATCH = "FIRST_MATCH"
    # 댓글 → 본문의 모든 패턴 일치를 중복 없이 수집 (스크린샷 모드)
    COLLECT_ALL = "COLLECT_ALL"


@dataclass(frozen=True, slots=True)
class UrlMatcher:
    """이미지 URL 패턴과 URL을 담은 그룹 번호."""

    name: str
    pattern: re.Pattern[str]
    group: int = 0

    def find_all(self, text: str) -> list[str]:
        return [url for _, _, url in self.find_spans(text)]

    def find_spans(self, text: str) -> list[tuple[int, int, str]]:
        """(시작 위치, 끝 위치, URL) 목록을 반환합니다."""
        return [
            (match.start(self.group), match.end(self.group), match.group(self.group))
            for match in self.pattern.finditer(text or "")
        ]


URL_MATCHERS: tuple[UrlMatcher, ...] = (
    UrlMatcher("user-attachment", re.compile(r"https://github\.com/user-attachments/assets/[^\s)\]]+")),
    UrlMatcher("user-images", re.compile(r"https://user-images\.githubusercontent\.com/[^\s)\]]+")),
    UrlMatcher("markdown", re.compile(r"!\[.*?\]\((https?://[^\s)]+)\)"), group=1),
    UrlMatcher(
        "raw",
        re.compile(r"https://[^\s)]*?github\.com/[^\s)]*?/raw/[^\s)]*?/[^\s)]+?\.(?:jpg|jpeg|png)(?=\?|\s|\)|$)", re.I),
    ),
    UrlMatcher(
        "any-image",
        re.compile(r"https?://[^\s)]+\.(?:jpg|jpeg|png|gif|webp)(?:\?[^\s)]*)?", re.I),
    ),
)

# 댓글에서는 GitHub 업로드 URL만 인정합니다.
COMMENT_MATCHERS: tuple[UrlMatcher, ...] = URL_MATCHERS[:2]


class CommentSource(Protocol):
    def list_issue_comments(self, issue_number: int) -> list[dict[str, Any]]: ...


def _first_match(text: str, matchers: Iterable[UrlMatcher], source: str) -> str | None:
    for matcher in matchers:
        found = matcher.find_all(text)
        if found:
            url = sanitize_url(found[0])
            logger.info("Found image URL (%s) in %s: %s", matcher.name, source, url)
            return url
    return None


def find_image_urls(
    body: str | None,
    comment_bodies: Iterable[str],
    mode: ScanMode = ScanMode.FIRST_MATCH,
) -> list[str]:
    """댓글과 본문에서 이미지 URL 후보를 찾습니다.

    Args:
        body: 이슈 본문
        comment_bodies: 댓글 본문 목록 (작성 순서)
        mode: FIRST_MATCH는 최대 1개, COLLECT_ALL은 전부 반환

    Returns:
        정제(sanitize)된 URL 목록. 순서는 처음 등장한 순서이며 중복은 제거됩니다.
    """
    comments = [text for text in comment_bodies if text]

    if mode == ScanMode.FIRST_MATCH:
        for comment in comments:
            url = _first_match(comment, COMMENT_MATCHERS, "comment")
            if url:
                return [url]
        url = _first_match(body or "", URL_MATCHERS, "issue body")
        return [url] if url else []

    urls: list[str] = []
    for text in [*comments, body or ""]:
        found = sorted(
            (start, priority, end, raw_url)
            for priority, matcher in enumerate(URL_MATCHERS)
            for start, end, raw_url in matcher.find_spans(text)
        )
        covered_until = -1
        for start, _, end, raw_url in found:
            # 같은 위치를 여러 패턴이 잡으면 우선순위가 높은 쪽만 사용합니다.
            if start < covered_until:
                continue
            covered_until = end
            url = sanitize_url(raw_url)
            if url and url not in urls:
                urls.append(url)
    logger.info("Collected %d image URL(s) from issue", len(urls))
    return urls


def resolve_issue_images(
    github: CommentSource,
    issue_number: int,
    body: str | None,
    mode: ScanMode = ScanMode.FIRST_MATCH,
) -> list[str]:
    """댓글을 조회한 뒤 이미지 URL을 찾습니다. 댓글 조회 실패는 경고만 남깁니다."""
    comment_bodies: list[str] = []
    try:
        comments = github.list_issue_comments(issue_number)
        comment_bodies = [str(comment.get("body") or "") for comment in comments]
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Error fetching issue comments: %s", exc)

    urls = find_image_urls(body, comment_bodies, mode)
    if not urls:
        logger.warning("No image URL found in issue body or comments")
    return urls
