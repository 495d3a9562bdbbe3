# API endpoints
from . import auth, users, health

__all__ = ["auth", "users", "health"]
