"""첨부 이미지 URL 리졸버 테스트."""

from __future__ import annotations

import pytest
import requests

from place_resolver.core.utils import sanitize_url
from place_resolver.services.attachment_resolver import ScanMode, find_image_urls, resolve_issue_images
from tests.mocks.fake_resolver import FakeCommentSource

ASSET_A = "https://github.com/user-attachments/assets/aaaa-1111"
ASSET_B = "https://github.com/user-attachments/assets/bbbb-2222"
LEGACY = "https://user-images.githubusercontent.com/1/legacy.png"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("<https://x/y.png>", "https://x/y.png"),
        ("\"https://x/y.png'", "https://x/y.png"),
        ("``https://x/y.png``", "https://x/y.png"),
        ("  https://x/y.png  ", "https://x/y.png"),
        ("https://x/y.png", "https://x/y.png"),
    ],
)
def test_sanitize_url_strips_wrappers(raw: str, expected: str) -> None:
    assert sanitize_url(raw) == expected


def test_sanitize_url_is_idempotent() -> None:
    once = sanitize_url("<'https://x/y.png'>")

    assert sanitize_url(once) == once


def test_first_match_prefers_comment_upload() -> None:
    body = f"![photo]({ASSET_B})"
    urls = find_image_urls(body, ["no image here", f"see {ASSET_A}"], ScanMode.FIRST_MATCH)

    assert urls == [ASSET_A]


def test_first_match_ignores_generic_images_in_comments() -> None:
    body = "![photo](https://cdn.example.com/a.png)"
    urls = find_image_urls(body, ["https://cdn.example.com/comment.jpg"], ScanMode.FIRST_MATCH)

    assert urls == ["https://cdn.example.com/a.png"]


def test_first_match_uses_matcher_priority_in_body() -> None:
    body = f"![x](https://cdn.example.com/a.png)\n{LEGACY}"

    assert find_image_urls(body, [], ScanMode.FIRST_MATCH) == [LEGACY]


def test_first_match_sanitizes_wrapped_url() -> None:
    body = f"<{ASSET_A}>"

    assert find_image_urls(body, [], ScanMode.FIRST_MATCH) == [ASSET_A]


def test_raw_github_url_accepts_query_string() -> None:
    url = "https://github.com/owner/repo/raw/main/photos/shop.JPG?raw=true"

    assert find_image_urls(f"photo: {url}", [], ScanMode.FIRST_MATCH) == [
        "https://github.com/owner/repo/raw/main/photos/shop.JPG"
    ]


def test_collect_all_keeps_order_and_dedupes() -> None:
    body = f"### 截图\n\n![screenshot]({ASSET_A})\n\n### 照片\n\n![photo]({ASSET_B})\n\n{ASSET_A}"

    urls = find_image_urls(body, [], ScanMode.COLLECT_ALL)

    assert urls == [ASSET_A, ASSET_B]


def test_collect_all_reads_comments_before_body() -> None:
    urls = find_image_urls(f"![a]({ASSET_A})", [f"![b]({ASSET_B})"], ScanMode.COLLECT_ALL)

    assert urls == [ASSET_B, ASSET_A]


def test_collect_all_reports_generic_image_once() -> None:
    urls = find_image_urls("![x](https://cdn.example.com/a.png?w=200)", [], ScanMode.COLLECT_ALL)

    assert urls == ["https://cdn.example.com/a.png?w=200"]


def test_resolution_is_stable_across_calls() -> None:
    body = f"![a]({ASSET_A}) and ![b]({ASSET_B})"
    comments = [LEGACY]

    first = find_image_urls(body, comments, ScanMode.COLLECT_ALL)
    second = find_image_urls(body, comments, ScanMode.COLLECT_ALL)

    assert first == second == [LEGACY, ASSET_A, ASSET_B]


def test_resolve_issue_images_tolerates_comment_failure(caplog) -> None:
    github = FakeCommentSource(error=requests.ConnectionError("offline"))

    urls = resolve_issue_images(github, 3, f"![a]({ASSET_A})", ScanMode.FIRST_MATCH)

    assert urls == [ASSET_A]
    assert github.calls == [3]
    assert "Error fetching issue comments" in caplog.text


def test_resolve_issue_images_returns_empty_without_images() -> None:
    github = FakeCommentSource(["thanks!"])

    assert resolve_issue_images(github, 3, "no attachments", ScanMode.COLLECT_ALL) == []
