"""Service container and FastAPI dependencies."""

from typing import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.db.repositories.document_repository import DocumentRepository
from app.db.sessions import Database
from app.services.document_service import DocumentService
from app.services.storage_service import StorageService
from app.services.upload_service import UploadAdapter


class ServiceContainer:
    """Connections shared by every request, opened at startup and closed at shutdown."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.database = Database(settings)
        self.storage = StorageService(settings.UPLOAD_DIR)
        self.uploads = UploadAdapter(
            self.storage,
            allowed_mime_types=settings.ALLOWED_MIME_TYPES,
            max_bytes=settings.MAX_UPLOAD_SIZE,
        )

    async def initialize(self) -> None:
        self.storage.ensure_directory()
        await self.database.connect()

    async def shutdown(self) -> None:
        await self.database.disconnect()


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


async def get_db(services: ServiceContainer = Depends(get_services)) -> AsyncIterator[AsyncSession]:
    async with services.database.new_session() as session:
        yield session


def get_storage(services: ServiceContainer = Depends(get_services)) -> StorageService:
    return services.storage


def get_document_service(
    services: ServiceContainer = Depends(get_services),
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage),
) -> DocumentService:
    return DocumentService(DocumentRepository(db), storage, services.uploads)
