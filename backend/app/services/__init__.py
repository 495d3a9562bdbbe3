from app.services.user_store import UserStore
from app.services.auth_service import AuthService

__all__ = [
    "UserStore",
    "AuthService",
]
