"""이슈 처리 그래프 통합 테스트.

LLM, GitHub API, 이미지 다운로드, git은 모두 가짜 객체로 대체합니다.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from place_resolver.services import extraction_service, image_storage
from place_resolver.services.issue_processor import run_resolver_pipeline
from tests.mocks.fake_resolver import RecordingRunner, llm_response, make_services, make_settings, write_places

ASSET_SCREENSHOT = "https://github.com/user-attachments/assets/screenshot-1"
ASSET_PHOTO = "https://github.com/user-attachments/assets/photo-2"

NEW_PLACE_BODY = """### 地点名称

西湖边咖啡

### 地址

杭州市西湖区北山街 1 号

### 纬度

30.2590

### 经度

120.1480
"""

EXISTING_PLACES = [
    {"id": "id-1", "title": "Tea House", "address_text": "成都", "latitude": None, "amenities": ["WiFi", "WiFi"]},
    {"id": "id-2", "title": "tea house", "address_text": "重庆", "amenities": []},
    {"id": "id-3", "title": "西湖边咖啡", "address_text": "杭州", "latitude": 30.1, "amenities": ["WiFi"]},
]


def _fake_image_response(content_type: str) -> MagicMock:
    response = MagicMock()
    response.__enter__.return_value = response
    response.headers = {"content-type": content_type}
    response.iter_content.return_value = [b"image-bytes"]
    return response


@pytest.fixture()
def fake_invoke(monkeypatch) -> MagicMock:
    invoke = MagicMock()
    monkeypatch.setattr(extraction_service, "invoke", invoke)
    return invoke


@pytest.fixture()
def fake_get(monkeypatch) -> MagicMock:
    get = MagicMock()
    monkeypatch.setattr(image_storage.requests, "get", get)
    return get


def _load_records(data_file) -> list[dict]:
    return json.loads(data_file.read_text(encoding="utf-8"))


def test_new_place_from_text_without_image(tmp_path, fake_invoke, fake_get) -> None:
    settings = make_settings(tmp_path, ISSUE_TITLE="新地点: 西湖边咖啡", ISSUE_BODY=NEW_PLACE_BODY)
    data_file = write_places(settings, [])
    runner = RecordingRunner()
    fake_invoke.return_value = llm_response(
        {
            "title": "西湖边咖啡",
            "description": "",
            "address_text": "杭州市西湖区北山街 1 号",
            "latitude": 30.259,
            "longitude": 120.148,
            "cost_per_person": None,
            "opening_hours": None,
            "link": "",
            "amenities": [],
        }
    )

    outputs = run_resolver_pipeline(settings, make_services(settings, runner=runner))

    assert outputs.error is False
    assert outputs.place_title == "西湖边咖啡"
    assert outputs.is_update is False
    assert outputs.branch_name.startswith("auto-add-")

    records = _load_records(data_file)
    assert len(records) == 1
    assert records[0]["latitude"] == pytest.approx(30.259)
    assert records[0]["longitude"] == pytest.approx(120.148)
    assert records[0]["image"] == ""
    assert outputs.branch_name.startswith(f"auto-add-{records[0]['id']}-")
    fake_get.assert_not_called()
    assert ["git", "add", f"images/{records[0]['id']}/"] not in runner.commands


def test_new_place_from_text_downloads_first_image(tmp_path, fake_invoke, fake_get) -> None:
    body = f"{NEW_PLACE_BODY}\n### 照片\n\n![photo]({ASSET_PHOTO})\n"
    settings = make_settings(tmp_path, ISSUE_BODY=body)
    data_file = write_places(settings, EXISTING_PLACES)
    runner = RecordingRunner()
    fake_invoke.return_value = llm_response({"title": "湖滨书店", "address_text": "杭州市湖滨路 2 号"})
    fake_get.return_value = _fake_image_response("image/png")

    outputs = run_resolver_pipeline(settings, make_services(settings, runner=runner))

    assert outputs.error is False
    records = _load_records(data_file)
    new_record = records[-1]
    assert len(records) == len(EXISTING_PLACES) + 1
    assert records[:-1] == EXISTING_PLACES
    assert new_record["image"] == f"{new_record['id']}/main.png"
    assert (tmp_path / "images" / new_record["id"] / "main.png").read_bytes() == b"image-bytes"
    assert fake_get.call_args.args[0] == ASSET_PHOTO
    assert ["git", "add", f"images/{new_record['id']}/"] in runner.commands


def test_update_changes_only_provided_fields(tmp_path, fake_invoke, fake_get) -> None:
    settings = make_settings(tmp_path, ISSUE_TITLE="[更新] 西湖边咖啡", ISSUE_BODY="更新地点\n人均 60")
    data_file = write_places(settings, EXISTING_PLACES)
    fake_invoke.return_value = llm_response(
        {"place_name": "西湖边咖啡", "updates": {"cost_per_person": 60, "latitude": None}}
    )

    outputs = run_resolver_pipeline(settings, make_services(settings))

    assert outputs.error is False
    assert outputs.is_update is True
    assert outputs.branch_name.startswith("auto-update-id-3-")
    records = _load_records(data_file)
    assert records[2] == {**EXISTING_PLACES[2], "cost_per_person": 60}
    assert records[:2] == EXISTING_PLACES[:2]
    fake_get.assert_not_called()


def test_ambiguous_update_fails_without_touching_data(tmp_path, fake_invoke, fake_get) -> None:
    settings = make_settings(tmp_path, ISSUE_TITLE="[更新] Tea House", ISSUE_BODY="更新地点")
    data_file = write_places(settings, EXISTING_PLACES)
    original = data_file.read_bytes()
    runner = RecordingRunner()
    fake_invoke.return_value = llm_response({"place_name": "TEA HOUSE", "updates": {"description": "new"}})

    outputs = run_resolver_pipeline(settings, make_services(settings, runner=runner))

    assert outputs.error is True
    assert outputs.error_message == 'Multiple places found with name "TEA HOUSE". Please be more specific.'
    assert data_file.read_bytes() == original
    assert runner.commands == []


def test_missing_data_file_fails(tmp_path, fake_invoke, fake_get) -> None:
    settings = make_settings(tmp_path, ISSUE_BODY=NEW_PLACE_BODY)
    fake_invoke.return_value = llm_response({"title": "店", "address_text": "某路"})

    outputs = run_resolver_pipeline(settings, make_services(settings))

    assert outputs.error is True
    assert outputs.error_message == "places.toon not found"
    assert outputs.as_pairs()[0] == ("error", "true")


def test_screenshot_with_one_image_fails_before_ai_call(tmp_path, fake_invoke, fake_get) -> None:
    settings = make_settings(tmp_path, SCREENSHOT_MODE=True, ISSUE_BODY=f"![screenshot]({ASSET_SCREENSHOT})")
    data_file = write_places(settings, EXISTING_PLACES)
    original = data_file.read_bytes()

    outputs = run_resolver_pipeline(settings, make_services(settings))

    assert outputs.error is True
    assert "found 1 image(s)" in outputs.error_message
    fake_invoke.assert_not_called()
    fake_get.assert_not_called()
    assert data_file.read_bytes() == original


def test_screenshot_update_is_rejected(tmp_path, fake_invoke, fake_get) -> None:
    settings = make_settings(tmp_path, SCREENSHOT_MODE=True, ISSUE_TITLE="[更新] 西湖边咖啡")
    write_places(settings, EXISTING_PLACES)

    outputs = run_resolver_pipeline(settings, make_services(settings))

    assert outputs.error is True
    assert outputs.error_message == "Screenshot mode does not support place updates"
    fake_invoke.assert_not_called()


def test_screenshot_mode_uses_second_image_as_photo(tmp_path, fake_invoke, fake_get) -> None:
    body = f"![screenshot]({ASSET_SCREENSHOT})\n\n![photo]({ASSET_PHOTO})\n\n### 设施\n\n- [x] 插座\n"
    settings = make_settings(tmp_path, SCREENSHOT_MODE=True, ISSUE_BODY=body)
    data_file = write_places(settings, [])
    services = make_services(settings, comments=["looks good"])
    fake_get.side_effect = [_fake_image_response("image/png"), _fake_image_response("image/jpeg")]
    fake_invoke.return_value = llm_response(
        {"title": "茶馆", "address_text": "成都市人民公园", "cost_per_person": "¥30", "amenities": ["WiFi"]}
    )

    outputs = run_resolver_pipeline(settings, services)

    assert outputs.error is False
    record = _load_records(data_file)[0]
    assert record["cost_per_person"] == 30
    assert record["amenities"] == ["插座"]
    assert record["image"] == f"{record['id']}/main.jpg"
    assert [call.args[0] for call in fake_get.call_args_list] == [ASSET_SCREENSHOT, ASSET_PHOTO]
    assert not (tmp_path / ".tmp" / "issue-42").exists()
