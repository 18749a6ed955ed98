"""이미지 다운로드/저장 테스트."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from place_resolver.core.exceptions import DownloadError
from place_resolver.services import image_storage
from place_resolver.services.image_storage import detect_extension, remove_temp_files, store_place_image


@pytest.mark.parametrize(
    ("content_type", "url", "expected"),
    [
        ("image/png", "https://x/a", "png"),
        ("image/jpeg", "https://x/a.png", "jpg"),
        ("application/octet-stream", "https://x/a.JPEG?size=1", "jpg"),
        (None, "https://x/a.png", "png"),
        ("", "https://github.com/user-attachments/assets/abc", "jpg"),
    ],
)
def test_detect_extension(content_type, url, expected) -> None:
    assert detect_extension(content_type, url) == expected


def _fake_response(content: bytes, content_type: str) -> MagicMock:
    response = MagicMock()
    response.__enter__.return_value = response
    response.headers = {"content-type": content_type}
    response.iter_content.return_value = [content]
    response.raise_for_status.return_value = None
    return response


def test_store_place_image_writes_main_file(monkeypatch, tmp_path) -> None:
    fake_get = MagicMock(return_value=_fake_response(b"png-bytes", "image/png"))
    monkeypatch.setattr(image_storage.requests, "get", fake_get)

    relative = store_place_image("<https://x/photo>", tmp_path / "images", "place-1", timeout_seconds=10)

    assert relative == "place-1/main.png"
    assert (tmp_path / "images" / "place-1" / "main.png").read_bytes() == b"png-bytes"
    assert fake_get.call_args.args[0] == "https://x/photo"
    assert fake_get.call_args.kwargs["timeout"] == (3.0, 7.0)


def test_download_http_error_raises_download_error(monkeypatch, tmp_path) -> None:
    response = _fake_response(b"", "text/html")
    response.raise_for_status.side_effect = requests.HTTPError("404 Not Found")
    monkeypatch.setattr(image_storage.requests, "get", MagicMock(return_value=response))

    with pytest.raises(DownloadError, match="404"):
        store_place_image("https://x/photo.jpg", tmp_path / "images", "place-1")

    assert not (tmp_path / "images" / "place-1").exists()


def test_remove_temp_files_cleans_up(tmp_path) -> None:
    temp_dir = tmp_path / ".tmp" / "issue-1"
    temp_dir.mkdir(parents=True)
    screenshot = temp_dir / "screenshot.png"
    screenshot.write_bytes(b"x")

    remove_temp_files([screenshot, temp_dir / "already-gone.jpg"], temp_dir)

    assert not temp_dir.exists()
