from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InternalError, NotFoundError
from app.db.models.document import Document, DocumentType
from app.utils.dto.document import DocumentUpdate, NewDocument, NewFileDocument, NewTextDocument
from app.utils.logger import get_logger, log_database_operation

logger = get_logger(__name__)

SEARCHABLE_FIELDS = (Document.title, Document.content, Document.original_name, Document.description)


class DocumentRepository:
    """Typed access to the ``documents`` table.

    Every method returns ORM rows with all columns loaded, ``file_path``
    included; stripping server-internal fields is the job of the response
    schemas.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, payload: NewDocument) -> Document:
        now = datetime.now(timezone.utc)
        if isinstance(payload, NewTextDocument):
            document = Document(
                type=DocumentType.TEXT,
                title=payload.title,
                content=payload.content,
                description=payload.description,
            )
        elif isinstance(payload, NewFileDocument):
            document = Document(
                type=DocumentType.FILE,
                original_name=payload.original_name,
                file_name=payload.file_name,
                file_path=payload.file_path,
                mime_type=payload.mime_type,
                file_size=payload.file_size,
                description=payload.description,
            )
        else:
            raise TypeError(f"Unsupported document payload: {type(payload).__name__}")
        document.created_at = now
        document.updated_at = now

        try:
            self.db.add(document)
            await self.db.commit()
            await self.db.refresh(document)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to insert document: {e}")
            raise InternalError("Failed to save document") from e

        log_database_operation(logger, "INSERT", "documents", document.id)
        return document

    async def find_all(self) -> List[Document]:
        try:
            result = await self.db.execute(
                select(Document).order_by(Document.created_at.desc())
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to list documents: {e}")
            raise InternalError("Failed to fetch documents") from e
        return list(result.scalars().all())

    async def find_by_id(self, document_id: str) -> Optional[Document]:
        try:
            return await self.db.get(Document, document_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load document {document_id}: {e}")
            raise InternalError("Failed to fetch document") from e

    async def get(self, document_id: str) -> Document:
        """Like ``find_by_id`` but raises ``NotFoundError`` for unknown ids."""
        document = await self.find_by_id(document_id)
        if document is None:
            raise NotFoundError("Document not found")
        return document

    async def update(self, document_id: str, patch: DocumentUpdate) -> Document:
        document = await self.get(document_id)

        # type and file fields are never patched
        if document.type == DocumentType.TEXT:
            if patch.title:
                document.title = patch.title
            if patch.content:
                document.content = patch.content
        if "description" in patch.model_fields_set:
            document.description = patch.description
        document.updated_at = datetime.now(timezone.utc)

        try:
            await self.db.commit()
            await self.db.refresh(document)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to update document {document_id}: {e}")
            raise InternalError("Failed to update document") from e

        log_database_operation(logger, "UPDATE", "documents", document_id)
        return document

    async def delete(self, document_id: str) -> None:
        try:
            result = await self.db.execute(delete(Document).where(Document.id == document_id))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to delete document {document_id}: {e}")
            raise InternalError("Failed to delete document") from e

        if not result.rowcount:
            raise NotFoundError("Document not found")
        log_database_operation(logger, "DELETE", "documents", document_id)

    async def search(self, query: str, document_type: Optional[DocumentType] = None) -> List[Document]:
        """Case-insensitive substring match over title, content, originalName and description."""
        if not query:
            raise ValueError("query must be a non-empty string")

        stmt = select(Document).where(
            or_(*(field.icontains(query, autoescape=True) for field in SEARCHABLE_FIELDS))
        )
        if document_type is not None:
            stmt = stmt.where(Document.type == document_type)
        stmt = stmt.order_by(Document.created_at.desc())

        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Failed to search documents for '{query}': {e}")
            raise InternalError("Failed to search documents") from e
        return list(result.scalars().all())
