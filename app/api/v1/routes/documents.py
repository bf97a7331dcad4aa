import unicodedata
from typing import List
from urllib.parse import quote

from fastapi import APIRouter, Depends, status
from fastapi.responses import StreamingResponse

from app.core.dependencies import get_document_service
from app.services.document_service import DocumentService
from app.utils.dto.document import (
    DocumentEnvelope,
    DocumentResponse,
    DocumentUpdate,
    MessageResponse,
    TextDocumentRequest,
    to_response,
    to_response_list,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


def content_disposition(filename: str) -> str:
    """``attachment; filename="..."``, plus ``filename*`` when the name is not ASCII."""
    fallback = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    fallback = "".join(c for c in fallback if c.isprintable()) or "download"
    escaped = fallback.replace("\\", "\\\\").replace('"', '\\"')

    header = f'attachment; filename="{escaped}"'
    if not filename.isascii() or fallback != filename:
        header += f"; filename*=utf-8''{quote(filename, safe='')}"
    return header


@router.post("/text", response_model=DocumentEnvelope, status_code=status.HTTP_201_CREATED)
async def save_text(payload: TextDocumentRequest, service: DocumentService = Depends(get_document_service)):
    document = await service.create_text(payload.title, payload.content, payload.description)
    return DocumentEnvelope(message="Text saved successfully", document=to_response(document))


@router.get("/documents", response_model=List[DocumentResponse])
async def list_documents(service: DocumentService = Depends(get_document_service)):
    """List all documents, newest first."""
    return to_response_list(await service.list_documents())


@router.get("/document/{document_id}", response_model=DocumentResponse)
async def get_document(document_id: str, service: DocumentService = Depends(get_document_service)):
    return to_response(await service.get_document(document_id))


@router.put("/document/{document_id}", response_model=DocumentEnvelope)
async def update_document(
    document_id: str,
    patch: DocumentUpdate,
    service: DocumentService = Depends(get_document_service),
):
    document = await service.update_document(document_id, patch)
    return DocumentEnvelope(message="Document updated successfully", document=to_response(document))


@router.delete("/document/{document_id}", response_model=MessageResponse)
async def delete_document(document_id: str, service: DocumentService = Depends(get_document_service)):
    await service.delete_document(document_id)
    return MessageResponse(message="Document deleted successfully")


@router.get("/download/{document_id}")
async def download_document(document_id: str, service: DocumentService = Depends(get_document_service)):
    document, chunks = await service.open_download(document_id)
    logger.info(f"Streaming {document.original_name} for document {document_id}")
    return StreamingResponse(
        chunks,
        media_type=document.mime_type,
        headers={"Content-Disposition": content_disposition(document.original_name)},
    )
