from fastapi import APIRouter, Depends

from app.core.dependencies import ServiceContainer, get_services
from app.utils.dto.document import HealthResponse

router = APIRouter()

@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health(services: ServiceContainer = Depends(get_services)):
    connection = "Connected" if await services.database.ping() else "Disconnected"
    # ``mongodb`` is the key existing clients read
    return HealthResponse(status="OK", message="Server is running", mongodb=connection, database=connection)
