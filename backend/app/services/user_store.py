"""
User Store - the credential store behind registration, login and profile reads.

Wraps the single `users` table. The store is handed its AsyncSession by the
caller (one per request) rather than reaching for a global connection.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import select

from app.models.user import User, UserType
from app.schemas.auth import UserProfile
from app.core.exceptions import ConflictError, StoreError
from app.core.logging_config import logger


def describe_db_error(e: SQLAlchemyError) -> str:
    """Driver-level reason only: str(e) would include the bound parameters"""
    orig = getattr(e, "orig", None)
    return f"{type(e).__name__}: {orig}" if orig is not None else type(e).__name__


def to_profile(user: User) -> UserProfile:
    """Public view of a user record (never includes the password hash)"""
    return UserProfile(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        user_type=user.user_type,
        created_at=user.created_at,
    )


class UserStore:
    """
    Credential store over the users table.

    - find_by_email: exact, case-sensitive match; returns the full record
      (hash included) for password verification
    - find_by_id: public profile only
    - insert: existence check first, unique index as the backstop for the
      race between two concurrent registrations of the same email
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_email(self, email: str) -> Optional[User]:
        try:
            result = await self.db.execute(
                select(User).where(User.email == email)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreError(f"Lookup by email failed: {describe_db_error(e)}") from e

    async def find_by_id(self, user_id: int) -> Optional[UserProfile]:
        try:
            result = await self.db.execute(
                select(User).where(User.id == user_id)
            )
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreError(f"Lookup by id failed: {describe_db_error(e)}") from e

        return to_profile(user) if user else None

    async def insert(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        user_type: str = UserType.STUDENT.value,
    ) -> User:
        """Create a user. Raises ConflictError if the email is taken."""
        if await self.find_by_email(email) is not None:
            raise ConflictError()

        user = User(
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            user_type=user_type,
        )

        try:
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
        except IntegrityError as e:
            await self.db.rollback()
            # Lost the race to a concurrent registration
            if await self.find_by_email(email) is not None:
                logger.warning("[UserStore] Duplicate email rejected by unique constraint")
                raise ConflictError() from e
            raise StoreError(f"Insert violated a constraint: {describe_db_error(e)}") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError(f"Insert failed: {describe_db_error(e)}") from e

        return user
