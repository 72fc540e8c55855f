"""Tests for photo staging."""

import asyncio

from volunteer_board.services.photos import (
    remove_photo,
    stage_photos,
    to_data_url,
)

PNG = b"\x89PNG\r\n\x1a\n" + b"rest"
JPEG = b"\xff\xd8\xff" + b"rest"


def test_stage_photos_accepts_only_remaining_capacity() -> None:
    staged = [f"data:image/jpeg;base64,{i}" for i in range(1)]
    files = [PNG + bytes([i]) for i in range(12)]

    result = asyncio.run(stage_photos(staged, files))

    assert result.accepted == 9
    assert result.dropped == 3
    assert len(staged) == 10
    assert "9 photo(s) were added" in (result.message or "")


def test_stage_photos_accepts_converted_set_regardless_of_order() -> None:
    staged: list[str] = []
    files = [PNG + bytes([i]) for i in range(3)]

    result = asyncio.run(stage_photos(staged, files))

    assert result.accepted == 3
    assert result.message is None
    assert sorted(staged) == sorted(to_data_url(data) for data in files)


def test_stage_photos_when_full_drops_everything() -> None:
    staged = ["x"] * 10

    result = asyncio.run(stage_photos(staged, [JPEG]))

    assert result.accepted == 0
    assert result.dropped == 1
    assert staged == ["x"] * 10


def test_remove_photo_by_position() -> None:
    staged = ["a", "b", "a"]

    assert remove_photo(staged, 2) is True
    assert remove_photo(staged, 5) is False

    assert staged == ["a", "b"]


def test_to_data_url_detects_mime_types() -> None:
    assert to_data_url(PNG).startswith("data:image/png;base64,")
    assert to_data_url(JPEG).startswith("data:image/jpeg;base64,")
    assert to_data_url(b"GIF89a....").startswith("data:image/gif;base64,")
    assert to_data_url(b"unknown").startswith("data:image/jpeg;base64,")
