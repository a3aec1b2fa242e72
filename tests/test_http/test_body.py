"""Tests for request body framing."""

from __future__ import annotations

import io
import re
from pathlib import Path

import pytest

from wildfyre.http.body import (
    MULTIPART_FILE_FIELD,
    MULTIPART_JSON_FIELD,
    FileBody,
    body_kind,
    build_body,
    new_boundary,
)
from wildfyre.models import BodyKind

PNG_BYTES = b"\x89PNG\x00\x01fake-image"


def _split_parts(content: bytes, boundary: str) -> list[tuple[bytes, bytes]]:
    """Split a multipart body into (headers, data) pairs, checking the framing."""
    delimiter = b"--" + boundary.encode()
    chunks = content.split(delimiter)
    assert chunks[0] == b""
    assert chunks[-1] == b"--\r\n"

    parts = []
    for chunk in chunks[1:-1]:
        assert chunk.startswith(b"\r\n")
        assert chunk.endswith(b"\r\n")
        headers, blank, data = chunk[2:-2].partition(b"\r\n\r\n")
        assert blank == b"\r\n\r\n"
        parts.append((headers, data))
    return parts


@pytest.fixture
def png_file(tmp_path: Path) -> Path:
    path = tmp_path / "cat.png"
    path.write_bytes(PNG_BYTES)
    return path


class TestBodyKind:
    @pytest.mark.parametrize(
        ("has_json", "has_file", "expected"),
        [
            (False, False, BodyKind.EMPTY),
            (True, False, BodyKind.JSON),
            (False, True, BodyKind.FILE),
            (True, True, BodyKind.JSON_AND_FILE),
        ],
    )
    def test_selection(self, has_json: bool, has_file: bool, expected: BodyKind) -> None:
        assert body_kind(has_json, has_file) is expected

    def test_multipart_kinds(self) -> None:
        assert BodyKind.FILE.is_multipart
        assert BodyKind.JSON_AND_FILE.is_multipart
        assert not BodyKind.JSON.is_multipart
        assert not BodyKind.EMPTY.is_multipart


class TestFileBody:
    def test_path(self, png_file: Path) -> None:
        body = FileBody(png_file)
        assert body.name == "cat.png"
        assert body.content_type == "image/png"
        assert body.read() == PNG_BYTES

    def test_string_path(self, png_file: Path) -> None:
        assert FileBody(str(png_file)).read() == PNG_BYTES

    def test_file_object(self, png_file: Path) -> None:
        with open(png_file, "rb") as f:
            body = FileBody(f)
            assert body.name == "cat.png"
            assert body.read() == PNG_BYTES

    def test_unknown_extension(self) -> None:
        body = FileBody(io.BytesIO(b"data"))
        assert body.name == "file"
        assert body.content_type == "application/octet-stream"


class TestBuildBody:
    def test_empty(self) -> None:
        body = build_body(BodyKind.EMPTY)
        assert body.content == b""
        assert body.content_type is None

    def test_json_only(self) -> None:
        body = build_body(BodyKind.JSON, {"text": "hi", "n": 1})
        assert body.content == b'{"text":"hi","n":1}'
        assert body.content_type == "application/json"
        assert b"--" not in body.content

    def test_file_only(self, png_file: Path) -> None:
        body = build_body(BodyKind.FILE, file=FileBody(png_file), boundary="===1===")

        assert body.content_type == "multipart/form-data; boundary====1==="
        parts = _split_parts(body.content, "===1===")
        assert len(parts) == 1
        headers, data = parts[0]
        assert headers == (
            b'Content-Disposition: form-data; name="file"; filename="cat.png"\r\n'
            b"Content-Type: image/png"
        )
        assert data == PNG_BYTES

    def test_json_and_file(self, png_file: Path) -> None:
        body = build_body(
            BodyKind.JSON_AND_FILE, {"text": "hi"}, FileBody(png_file), boundary="===42==="
        )

        assert body.content.startswith(b"--===42===\r\n")
        assert body.content.endswith(b"--===42===--\r\n")
        (json_headers, json_data), (file_headers, file_data) = _split_parts(body.content, "===42===")
        assert json_headers == (
            f'Content-Disposition: form-data; name="{MULTIPART_JSON_FIELD}"\r\n'.encode()
            + b"Content-Type: application/json; charset=UTF-8"
        )
        assert json_data == b'{"text":"hi"}'
        assert f'name="{MULTIPART_FILE_FIELD}"'.encode() in file_headers
        assert file_data == PNG_BYTES

    def test_custom_field_names(self, png_file: Path) -> None:
        body = build_body(
            BodyKind.JSON_AND_FILE,
            {},
            FileBody(png_file),
            boundary="b",
            json_field="data",
            file_field="image",
        )
        assert b'name="data"' in body.content
        assert b'name="image"; filename="cat.png"' in body.content

    def test_generated_boundary(self, png_file: Path) -> None:
        body = build_body(BodyKind.FILE, file=FileBody(png_file))
        match = re.fullmatch(r"multipart/form-data; boundary=(===\d+===)", body.content_type or "")
        assert match is not None
        assert len(_split_parts(body.content, match.group(1))) == 1

    def test_multipart_without_file(self) -> None:
        with pytest.raises(ValueError, match="needs a file"):
            build_body(BodyKind.JSON_AND_FILE, {"a": 1})

    def test_quotes_in_filename(self) -> None:
        stream = io.BytesIO(b"x")
        stream.name = 'we"ird.txt'
        body = build_body(BodyKind.FILE, file=FileBody(stream), boundary="b")
        assert b'filename="we%22ird.txt"' in body.content


def test_new_boundary_format() -> None:
    assert re.fullmatch(r"===\d+===", new_boundary())
