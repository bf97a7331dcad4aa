from dataclasses import dataclass
from typing import AsyncIterator, Iterable, Optional

from fastapi import UploadFile

from app.core.exceptions import InvalidTypeError, TooLargeError
from app.services.storage_service import CHUNK_SIZE, StorageService
from app.utils.logger import get_logger
from app.utils.metrics import upload_rejections

logger = get_logger(__name__)


@dataclass(frozen=True)
class StoredUpload:
    original_name: str
    stored_name: str
    stored_path: str
    mime_type: str
    size: int


class UploadAdapter:
    """Validates an incoming multipart file and hands its bytes to the store.

    The MIME type is checked before anything is written; the size ceiling is
    enforced while streaming, and a file that crosses it is removed again by
    the store.
    """

    def __init__(self, storage: StorageService, allowed_mime_types: Iterable[str], max_bytes: int):
        self.storage = storage
        self.allowed_mime_types = frozenset(allowed_mime_types)
        self.max_bytes = max_bytes

    def check_type(self, mime_type: Optional[str]) -> None:
        if mime_type not in self.allowed_mime_types:
            upload_rejections.labels(reason="invalid_type").inc()
            logger.info(f"Rejected upload with MIME type {mime_type!r}")
            raise InvalidTypeError()

    def check_size(self, size: Optional[int]) -> None:
        if size is not None and size > self.max_bytes:
            upload_rejections.labels(reason="too_large").inc()
            logger.info(f"Rejected upload of {size} bytes (limit {self.max_bytes})")
            raise TooLargeError()

    async def _limited_chunks(self, file: UploadFile) -> AsyncIterator[bytes]:
        received = 0
        while True:
            chunk = await file.read(CHUNK_SIZE)
            if not chunk:
                break
            received += len(chunk)
            self.check_size(received)
            yield chunk

    async def accept(self, file: UploadFile, original_name: Optional[str] = None) -> StoredUpload:
        name = original_name or file.filename or "upload"
        self.check_type(file.content_type)
        self.check_size(file.size)

        stored = await self.storage.save(self._limited_chunks(file), name)
        logger.info(f"Stored upload '{name}' as {stored.name} ({stored.size} bytes)")
        return StoredUpload(
            original_name=name,
            stored_name=stored.name,
            stored_path=stored.path,
            mime_type=file.content_type,
            size=stored.size,
        )
