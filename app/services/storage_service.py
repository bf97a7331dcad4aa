import os
import random
import time
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterable, AsyncIterator

import aiofiles
import aiofiles.os

from app.core.exceptions import NotFoundError
from app.utils.logger import get_logger, log_file_operation

logger = get_logger(__name__)

UPLOAD_DIR = Path("uploads")
CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class StoredFile:
    name: str
    path: str
    size: int


class StorageService:
    """Flat directory of uploaded file bytes."""

    def __init__(self, upload_dir: Path = UPLOAD_DIR):
        self.upload_dir = Path(upload_dir)

    def ensure_directory(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def generate_name(original_name: str) -> str:
        """``<base>-<millis>-<random><ext>``, extension of the original preserved."""
        base_name = Path(original_name or "").name
        stem, extension = os.path.splitext(base_name)
        unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
        return f"{stem or 'file'}-{unique_suffix}{extension}"

    async def save(self, chunks: AsyncIterable[bytes], original_name: str) -> StoredFile:
        """Write ``chunks`` under a fresh name and return where they landed.

        If the source raises part-way through, the partial file is removed
        before the error propagates.
        """
        self.ensure_directory()
        file_name = self.generate_name(original_name)
        file_path = self.upload_dir / file_name

        size = 0
        try:
            async with aiofiles.open(file_path, "xb") as buffer:
                async for chunk in chunks:
                    await buffer.write(chunk)
                    size += len(chunk)
        except Exception:
            await self.delete(str(file_path))
            raise

        log_file_operation(logger, "WRITE", str(file_path), size)
        return StoredFile(name=file_name, path=str(file_path), size=size)

    async def exists(self, file_path: str) -> bool:
        return await aiofiles.os.path.isfile(file_path)

    async def read(self, file_path: str) -> bytes:
        try:
            async with aiofiles.open(file_path, "rb") as f:
                return await f.read()
        except FileNotFoundError:
            raise NotFoundError("File not found on server")

    async def stream(self, file_path: str, chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
        """Open the file now and return an iterator over its chunks.

        A missing file raises ``NotFoundError`` here, before any response
        has started.
        """
        try:
            f = await aiofiles.open(file_path, "rb")
        except FileNotFoundError:
            raise NotFoundError("File not found on server")
        return self._chunks(f, chunk_size)

    @staticmethod
    async def _chunks(f, chunk_size: int) -> AsyncIterator[bytes]:
        try:
            while True:
                chunk = await f.read(chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            await f.close()

    async def delete(self, file_path: str) -> bool:
        """Remove a stored file. A file that is already gone is not an error."""
        try:
            await aiofiles.os.remove(file_path)
        except FileNotFoundError:
            logger.debug(f"File already absent: {file_path}")
            return False
        log_file_operation(logger, "DELETE", file_path)
        return True
