from sqlalchemy import Column, String, DateTime, Integer, CheckConstraint
from datetime import datetime, timezone
import enum

from app.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserType(str, enum.Enum):
    """Account types"""
    STUDENT = "student"
    RECRUITER = "recruiter"
    ADMIN = "admin"


# Types a visitor may pick when signing up
SELF_REGISTER_TYPES = (UserType.STUDENT, UserType.RECRUITER)


class User(Base):
    """User model - the only table owned by the auth core"""
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "user_type IN ('student', 'recruiter', 'admin')",
            name="ck_users_user_type",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Stored exactly as submitted; lookups are case-sensitive
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    user_type = Column(String(20), default=UserType.STUDENT.value, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<User {self.id}>"
