from fastapi import APIRouter, Depends, Request, status

from app.schemas.auth import UserRegister, UserLogin, AuthResponse
from app.services.auth_service import AuthService
from app.modules.auth.dependencies import get_auth_service
from app.core.rate_limiter import register_rate_limit, login_rate_limit


router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@register_rate_limit()
async def register(
    request: Request,
    user_data: UserRegister,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Create an account and return a session token. `request` is read by the rate limiter."""
    token, user = await auth_service.register(user_data)

    return AuthResponse(
        success=True,
        message="Account created successfully",
        data={"token": token, "user": user},
    )


@router.post("/login", response_model=AuthResponse)
@login_rate_limit()
async def login(
    request: Request,
    credentials: UserLogin,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Exchange email and password for a session token (rate limited)"""
    token, user = await auth_service.login(credentials)

    return AuthResponse(
        success=True,
        message="Login successful",
        data={"token": token, "user": user},
    )
