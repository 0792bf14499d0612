"""Tests for image upload ingestion."""

import asyncio
import io
import re

import pytest
from fastapi import UploadFile
from fastapi.testclient import TestClient
from starlette.datastructures import Headers

from platify.services.image_ingestor import ImageIngestor, detect_content_type
from platify.utils.exceptions import (
    ImageValidationError,
    StorageError,
    UnsupportedImageError,
    UploadTooLargeError,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 64
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 64
GIF_BYTES = b"GIF89a" + b"\x01\x00\x01\x00" + b"\x00" * 32
WEBP_BYTES = b"RIFF\x24\x00\x00\x00WEBPVP8 " + b"\x00" * 32

FILENAME_RE = re.compile(r"^\d+_[0-9a-f]{8}\.png$")


def make_upload(content: bytes, filename: str = "photo.png", content_type: str = "image/png") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.mark.parametrize(
    "content, expected",
    [
        (PNG_BYTES, "image/png"),
        (JPEG_BYTES, "image/jpeg"),
        (GIF_BYTES, "image/gif"),
        (WEBP_BYTES, "image/webp"),
        (b"BM" + b"\x00" * 32, "image/bmp"),
        (b"%PDF-1.7 hello", "application/octet-stream"),
        (b"", "application/octet-stream"),
    ],
)
def test_detect_content_type(content, expected):
    assert detect_content_type(content) == expected


def test_upload_png_with_misleading_metadata(client: TestClient, settings):
    response = client.post(
        "/api/images/upload",
        files={"image": ("holiday.gif", PNG_BYTES, "image/jpeg")},
    )

    assert response.status_code == 200
    url = response.json()["url"]
    assert url.startswith("/static/uploads/")
    filename = url.rsplit("/", 1)[1]
    assert FILENAME_RE.match(filename)
    assert (settings.upload_dir / filename).read_bytes() == PNG_BYTES


def test_uploaded_image_is_served(client: TestClient):
    url = client.post("/api/images/upload", files={"image": ("a.jpg", JPEG_BYTES, "image/jpeg")}).json()["url"]

    response = client.get(url)

    assert response.status_code == 200
    assert response.content == JPEG_BYTES


def test_upload_unrecognised_content_is_rejected(client: TestClient, settings):
    response = client.post(
        "/api/images/upload",
        files={"image": ("cat.png", b"just some text pretending to be a png", "image/png")},
    )

    assert response.status_code == 400
    assert "unsupported image type" in response.json()["error"]
    assert list(settings.upload_dir.iterdir()) == []


def test_upload_without_image_field(client: TestClient):
    response = client.post("/api/images/upload", files={"file": ("a.png", PNG_BYTES, "image/png")})

    assert response.status_code == 400
    assert response.json()["error"] == "no image provided"


def test_upload_over_size_limit(client: TestClient, settings):
    big = PNG_BYTES + b"\x00" * (settings.max_upload_bytes + 1)

    response = client.post("/api/images/upload", files={"image": ("big.png", big, "image/png")})

    assert response.status_code == 413
    assert list(settings.upload_dir.iterdir()) == []


def test_ingest_enforces_size_while_streaming(tmp_path):
    ingestor = ImageIngestor(tmp_path, "/static/uploads", max_bytes=len(PNG_BYTES) - 1)

    with pytest.raises(UploadTooLargeError):
        asyncio.run(ingestor.ingest(make_upload(PNG_BYTES)))

    assert list(tmp_path.iterdir()) == []


def test_ingest_missing_upload(tmp_path):
    ingestor = ImageIngestor(tmp_path, "/static/uploads", max_bytes=1024)

    with pytest.raises(ImageValidationError):
        asyncio.run(ingestor.ingest(None))


def test_ingest_rejects_before_touching_storage(tmp_path):
    upload_dir = tmp_path / "uploads"
    ingestor = ImageIngestor(upload_dir, "/static/uploads", max_bytes=1024)

    with pytest.raises(UnsupportedImageError):
        asyncio.run(ingestor.ingest(make_upload(b"<html></html>", "x.png")))

    assert not upload_dir.exists()


def test_ingest_storage_error_when_directory_unusable(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("occupied")
    ingestor = ImageIngestor(blocker / "uploads", "/static/uploads", max_bytes=1024)

    with pytest.raises(StorageError):
        asyncio.run(ingestor.ingest(make_upload(PNG_BYTES)))


def test_storage_error_response(client: TestClient, settings, tmp_path):
    blocker = tmp_path / "blocked"
    blocker.write_text("occupied")
    client.app.state.image_ingestor = ImageIngestor(blocker / "uploads", "/static/uploads", max_bytes=1024)

    response = client.post("/api/images/upload", files={"image": ("a.png", PNG_BYTES, "image/png")})

    assert response.status_code == 500
    assert response.json()["error"] == "storage error"


def test_filename_format(tmp_path):
    ingestor = ImageIngestor(
        tmp_path, "/static/uploads/", max_bytes=1024, clock=lambda: 1700000000123456789, rand32=lambda: 0xAB
    )

    url = asyncio.run(ingestor.ingest(make_upload(GIF_BYTES, "x.png", "image/png")))

    assert url == "/static/uploads/1700000000123456789_000000ab.gif"
    assert (tmp_path / "1700000000123456789_000000ab.gif").read_bytes() == GIF_BYTES


def test_concurrent_uploads_in_same_nanosecond_get_distinct_names(tmp_path):
    ingestor = ImageIngestor(tmp_path, "/static/uploads", max_bytes=1024, clock=lambda: 42)

    async def upload_both():
        return await asyncio.gather(
            ingestor.ingest(make_upload(PNG_BYTES)),
            ingestor.ingest(make_upload(PNG_BYTES)),
        )

    first, second = asyncio.run(upload_both())

    assert first != second
    assert first.startswith("/static/uploads/42_")
    assert second.startswith("/static/uploads/42_")
    assert len(list(tmp_path.iterdir())) == 2
