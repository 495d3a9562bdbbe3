# Pydantic schemas
from app.schemas.auth import (
    UserRegister,
    UserLogin,
    UserResponse,
    UserProfile,
    ApiResponse,
    AuthResponse,
    ProfileResponse,
    HealthResponse,
)
