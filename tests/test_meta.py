"""Tests for thememgr.core.meta."""

import pytest

from thememgr.core.meta import parse_dimensions


def _write_meta(tmp_path, text: str):
    path = tmp_path / "meta.txt"
    path.write_text(text, encoding="utf-8")
    return path


def test_parses_width_and_height(tmp_path):
    path = _write_meta(
        tmp_path,
        "Filetype: Flipper Animation\nVersion: 1\n\nWidth: 128\nHeight: 64\nPassive frames: 6\n",
    )
    assert parse_dimensions(path) == (128, 64)


def test_small_dimensions(tmp_path):
    path = _write_meta(tmp_path, "Width: 1\nHeight: 1\n")
    assert parse_dimensions(path) == (1, 1)


def test_rejects_wide_frame_even_with_valid_height(tmp_path):
    path = _write_meta(tmp_path, "Width: 200\nHeight: 32\n")
    assert parse_dimensions(path) is None


@pytest.mark.parametrize(
    "text",
    [
        "Width: 0\nHeight: 10\n",
        "Width: 10\nHeight: 65\n",
        "Width: -5\nHeight: 10\n",
        "Width: abc\nHeight: 10\n",
        "Height: 10\n",
        "Width: 10\n",
        "",
    ],
)
def test_rejects_invalid_or_missing_fields(tmp_path, text):
    assert parse_dimensions(_write_meta(tmp_path, text)) is None


def test_uses_first_occurrence(tmp_path):
    path = _write_meta(tmp_path, "Width: 64\nHeight: 32\nWidth: 500\n")
    assert parse_dimensions(path) == (64, 32)


def test_missing_file(tmp_path):
    assert parse_dimensions(tmp_path / "meta.txt") is None


@pytest.mark.parametrize(
    "text",
    [
        "Width: ١٢٨\nHeight: 10\n",
        "Width: 64\nHeight: ３２\n",
    ],
)
def test_rejects_non_ascii_digits(tmp_path, text):
    assert parse_dimensions(_write_meta(tmp_path, text)) is None
