from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime


class CamelModel(BaseModel):
    """JSON uses camelCase keys, Python code uses snake_case attributes"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================
# Requests
# ============================================

class UserRegister(CamelModel):
    # Presence and format are checked by AuthService so the first failing
    # rule produces the client message, not a schema error
    email: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    user_type: Optional[str] = None


class UserLogin(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


# ============================================
# User representations
# ============================================

class UserResponse(CamelModel):
    id: int
    email: str
    first_name: str
    last_name: str
    user_type: str


class UserProfile(UserResponse):
    created_at: datetime

    @field_serializer('created_at')
    def serialize_created_at(self, value: datetime) -> str:
        return value.isoformat()


# ============================================
# Envelopes
# ============================================

class ApiResponse(BaseModel):
    success: bool
    message: str


class AuthData(BaseModel):
    token: str
    user: UserResponse


class AuthResponse(ApiResponse):
    data: AuthData


class ProfileData(BaseModel):
    user: UserProfile


class ProfileResponse(ApiResponse):
    data: ProfileData


class HealthResponse(ApiResponse):
    timestamp: str
