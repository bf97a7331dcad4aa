from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.core.dependencies import get_document_service
from app.db.models.document import DocumentType
from app.services.document_service import DocumentService
from app.utils.dto.document import DocumentResponse, to_response_list
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/search", response_model=List[DocumentResponse])
async def search_documents(
    q: Optional[str] = Query(None, description="Case-insensitive text to look for"),
    type: Optional[DocumentType] = Query(None, description="Restrict results to one document type"),
    service: DocumentService = Depends(get_document_service),
):
    """
    Match ``q`` against title, content, original file name and description.
    Newest documents first.
    """
    documents = await service.search(q, type)
    logger.info(f"Search for '{q}' returned {len(documents)} documents")
    return to_response_list(documents)
