import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, Integer, String, Text
from app.db.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentType(str, enum.Enum):
    TEXT = "text"
    FILE = "file"


class Document(Base):
    __tablename__ = "documents"
    __table_args__ = (
        # exactly one attribute group is populated, picked by type
        CheckConstraint(
            "(type = 'text' AND title IS NOT NULL AND content IS NOT NULL"
            " AND original_name IS NULL AND file_name IS NULL AND file_path IS NULL)"
            " OR "
            "(type = 'file' AND original_name IS NOT NULL AND file_name IS NOT NULL"
            " AND file_path IS NOT NULL AND mime_type IS NOT NULL AND file_size IS NOT NULL"
            " AND title IS NULL AND content IS NULL)",
            name="ck_documents_type_fields",
        ),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    type = Column(
        Enum(DocumentType, name="document_type", native_enum=False,
             values_callable=lambda members: [m.value for m in members]),
        nullable=False,
        index=True,
    )

    # text documents
    title = Column(String, nullable=True)
    content = Column(Text, nullable=True)

    # file documents
    original_name = Column(String, nullable=True)
    file_name = Column(String, nullable=True)
    file_path = Column(String, nullable=True)
    mime_type = Column(String, nullable=True)
    file_size = Column(Integer, nullable=True)

    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Document id={self.id} type={self.type.value if self.type else None}>"
