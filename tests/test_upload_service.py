"""Tests for MIME and size validation of incoming uploads."""

import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from app.core.exceptions import InvalidTypeError, TooLargeError
from app.services.upload_service import UploadAdapter

ALLOWED = ["text/plain", "application/pdf"]


def make_upload(data: bytes, filename: str, content_type: str, size=None) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        size=size,
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def adapter(storage):
    return UploadAdapter(storage, allowed_mime_types=ALLOWED, max_bytes=1024)


@pytest.mark.asyncio
async def test_accepts_allowed_file(adapter, storage):
    stored = await adapter.accept(make_upload(b"plain text", "notes.txt", "text/plain"))

    assert stored.original_name == "notes.txt"
    assert stored.mime_type == "text/plain"
    assert stored.size == 10
    assert await storage.read(stored.stored_path) == b"plain text"


@pytest.mark.asyncio
async def test_declared_name_overrides_filename(adapter):
    stored = await adapter.accept(
        make_upload(b"%PDF-1.4", "blob", "application/pdf"), original_name="Quarterly.pdf"
    )

    assert stored.original_name == "Quarterly.pdf"
    assert stored.stored_name.startswith("Quarterly-")


@pytest.mark.asyncio
async def test_rejects_type_before_writing(adapter, storage):
    with pytest.raises(InvalidTypeError):
        await adapter.accept(make_upload(b"PK\x03\x04", "archive.zip", "application/zip"))

    assert not storage.upload_dir.exists() or list(storage.upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_rejects_known_size_over_limit(adapter, storage):
    with pytest.raises(TooLargeError):
        await adapter.accept(make_upload(b"x" * 2048, "big.txt", "text/plain", size=2048))

    assert not storage.upload_dir.exists() or list(storage.upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_streaming_overflow_removes_partial_file(adapter, storage):
    # no declared size, so the limit trips part-way through the copy
    with pytest.raises(TooLargeError):
        await adapter.accept(make_upload(b"x" * 200_000, "big.txt", "text/plain"))

    assert list(storage.upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_file_exactly_at_limit_is_accepted(adapter):
    stored = await adapter.accept(make_upload(b"x" * 1024, "edge.txt", "text/plain"))
    assert stored.size == 1024
