from fastapi import APIRouter
from app.api.v1.routes import health, documents, uploads, search

api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(documents.router, tags=["Documents"])
api_router.include_router(uploads.router, tags=["Uploads"])
api_router.include_router(search.router, tags=["Search"])
