from typing import AsyncIterator, List, Optional, Tuple

from fastapi import UploadFile

from app.core.exceptions import InternalError, NotFoundError, ValidationError
from app.db.models.document import Document, DocumentType
from app.db.repositories.document_repository import DocumentRepository
from app.services.storage_service import StorageService
from app.services.upload_service import StoredUpload, UploadAdapter
from app.utils.dto.document import DocumentUpdate, NewFileDocument, NewTextDocument
from app.utils.logger import get_logger
from app.utils.metrics import documents_created, documents_deleted

logger = get_logger(__name__)


class DocumentService:
    """Composes the repository, the upload adapter and the file store."""

    def __init__(self, repository: DocumentRepository, storage: StorageService, uploads: UploadAdapter):
        self.repository = repository
        self.storage = storage
        self.uploads = uploads

    async def create_text(self, title: Optional[str], content: Optional[str],
                          description: Optional[str] = None) -> Document:
        if not title or not content:
            raise ValidationError("Title and content are required")

        document = await self.repository.create(
            NewTextDocument(title=title, content=content, description=description)
        )
        documents_created.labels(type=DocumentType.TEXT.value).inc()
        logger.info(f"Saved text document {document.id}")
        return document

    async def upload_file(self, file: Optional[UploadFile], original_name: Optional[str] = None,
                          description: Optional[str] = None) -> Document:
        if file is None or not file.filename:
            raise ValidationError("No file uploaded")

        # phase one: bytes on disk
        stored = await self.uploads.accept(file, original_name)

        # phase two: metadata row, undoing phase one if it fails
        try:
            document = await self.repository.create(
                NewFileDocument(
                    original_name=stored.original_name,
                    file_name=stored.stored_name,
                    file_path=stored.stored_path,
                    mime_type=stored.mime_type,
                    file_size=stored.size,
                    description=description,
                )
            )
        except Exception as e:
            logger.error(f"Error saving metadata for upload '{stored.original_name}': {e}")
            await self._rollback_upload(stored)
            raise InternalError("Failed to upload file") from e

        documents_created.labels(type=DocumentType.FILE.value).inc()
        logger.info(f"Uploaded file document {document.id} ({stored.size} bytes)")
        return document

    async def _rollback_upload(self, stored: StoredUpload) -> None:
        try:
            await self.storage.delete(stored.stored_path)
            logger.info(f"Removed orphaned upload {stored.stored_path}")
        except OSError as e:
            logger.error(f"Failed to remove orphaned upload {stored.stored_path}: {e}")

    async def list_documents(self) -> List[Document]:
        return await self.repository.find_all()

    async def get_document(self, document_id: str) -> Document:
        return await self.repository.get(document_id)

    async def update_document(self, document_id: str, patch: DocumentUpdate) -> Document:
        document = await self.repository.update(document_id, patch)
        logger.info(f"Updated document {document_id}")
        return document

    async def open_download(self, document_id: str) -> Tuple[Document, AsyncIterator[bytes]]:
        document = await self.repository.get(document_id)
        if document.type != DocumentType.FILE:
            raise ValidationError("Document is not a file")
        try:
            chunks = await self.storage.stream(document.file_path)
        except NotFoundError:
            logger.error(f"Backing file missing for document {document_id}: {document.file_path}")
            raise
        return document, chunks

    async def delete_document(self, document_id: str) -> None:
        document = await self.repository.get(document_id)
        document_type = document.type

        # file first, a missing one counts as already deleted
        if document_type == DocumentType.FILE and document.file_path:
            try:
                await self.storage.delete(document.file_path)
            except OSError as e:
                logger.error(f"Error deleting file for document {document_id}: {e}")
                raise InternalError("Failed to delete document") from e

        await self.repository.delete(document_id)
        documents_deleted.labels(type=document_type.value).inc()
        logger.info(f"Deleted document {document_id}")

    async def search(self, query: Optional[str], document_type: Optional[DocumentType] = None) -> List[Document]:
        if not query:
            raise ValidationError("Search query is required")
        return await self.repository.search(query, document_type)
