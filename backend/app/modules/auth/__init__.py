# Authentication module

from app.modules.auth.dependencies import (
    get_user_store,
    get_auth_service,
    get_bearer_token,
)

__all__ = [
    "get_user_store",
    "get_auth_service",
    "get_bearer_token",
]
