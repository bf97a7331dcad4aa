from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from app.core.dependencies import get_document_service
from app.services.document_service import DocumentService
from app.utils.dto.document import DocumentEnvelope, to_response
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/upload", response_model=DocumentEnvelope, status_code=status.HTTP_201_CREATED)
async def upload_file(
    document: Optional[UploadFile] = File(None),
    description: Optional[str] = Form(None),
    original_name: Optional[str] = Form(None, alias="originalName"),
    service: DocumentService = Depends(get_document_service),
):
    logger.info(f"Uploading file '{document.filename if document else None}'")
    saved = await service.upload_file(document, original_name=original_name, description=description)
    return DocumentEnvelope(message="File uploaded successfully", document=to_response(saved))
