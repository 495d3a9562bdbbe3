from datetime import datetime, timezone

from fastapi import APIRouter

from app.core.config import settings
from app.schemas.auth import HealthResponse


router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness check. Does not touch the database."""
    return HealthResponse(
        success=True,
        message=f"{settings.APP_NAME} is running",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
