# Re-export all models for convenient imports
from app.models.user import User, UserType

__all__ = [
    "User",
    "UserType",
]
