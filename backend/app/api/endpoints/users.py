from typing import Optional

from fastapi import APIRouter, Depends

from app.schemas.auth import ProfileResponse
from app.services.auth_service import AuthService
from app.modules.auth.dependencies import get_auth_service, get_bearer_token


router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    token: Optional[str] = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Profile of the user the bearer token belongs to"""
    user = await auth_service.get_profile(token)

    return ProfileResponse(
        success=True,
        message="Profile retrieved successfully",
        data={"user": user},
    )
