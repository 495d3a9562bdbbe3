from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.services.user_store import UserStore
from app.services.auth_service import AuthService

# auto_error=False: a missing header is reported by AuthService as
# "No token provided" inside the normal envelope instead of FastAPI's 403
security = HTTPBearer(auto_error=False)


def get_user_store(db: AsyncSession = Depends(get_db)) -> UserStore:
    """Credential store bound to the request's session"""
    return UserStore(db)


def get_auth_service(store: UserStore = Depends(get_user_store)) -> AuthService:
    return AuthService(store)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[str]:
    """Token from `Authorization: Bearer <token>`, or None"""
    if not credentials:
        return None
    return credentials.credentials

