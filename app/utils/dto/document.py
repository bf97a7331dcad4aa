from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.db.models.document import Document, DocumentType


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Requests

class TextDocumentRequest(CamelModel):
    """Body of ``POST /text``; presence of title and content is checked by the handler."""
    title: Optional[str] = None
    content: Optional[str] = None
    description: Optional[str] = None


class DocumentUpdate(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    description: Optional[str] = None


# Validated payloads handed to the repository

class NewTextDocument(CamelModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    description: Optional[str] = None


class NewFileDocument(CamelModel):
    original_name: str = Field(..., min_length=1)
    file_name: str = Field(..., min_length=1)
    file_path: str = Field(..., min_length=1)
    mime_type: str = Field(..., min_length=1)
    file_size: int = Field(..., ge=0)
    description: Optional[str] = None


NewDocument = Union[NewTextDocument, NewFileDocument]


# Responses; file_path and file_name never leave the server

class DocumentBase(CamelModel):
    id: str
    type: DocumentType
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TextDocumentResponse(DocumentBase):
    title: str
    content: str


class FileDocumentResponse(DocumentBase):
    original_name: str
    mime_type: str
    file_size: int


DocumentResponse = Union[TextDocumentResponse, FileDocumentResponse]


class DocumentEnvelope(CamelModel):
    message: str
    document: DocumentResponse


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    message: str
    mongodb: str
    database: str


def to_response(document: Document) -> DocumentResponse:
    if document.type == DocumentType.TEXT:
        return TextDocumentResponse.model_validate(document)
    return FileDocumentResponse.model_validate(document)


def to_response_list(documents: List[Document]) -> List[DocumentResponse]:
    return [to_response(document) for document in documents]
