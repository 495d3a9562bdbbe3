"""
Auth Service - registration, login and profile lookup.

Registration: Validate -> CheckUniqueness -> Hash -> Insert -> IssueToken
Login:        Validate -> Lookup -> VerifyPassword -> IssueToken
Profile:      Verify token -> LookupById

Each step raises one of the app.core.exceptions error kinds and nothing after
the failing step runs, so a failed hash never reaches the store and a failed
insert never yields a token. The service holds no state between calls.
"""

import re
from typing import Any, Dict, Optional, Tuple

from starlette.concurrency import run_in_threadpool

from app.core.exceptions import (
    AuthenticationError,
    NotFoundError,
    ValidationError,
    ConflictError,
)
from app.core.logging_config import logger, set_user_id
from app.core.security import (
    get_password_hash,
    verify_password,
    burn_password_check,
    create_access_token,
    decode_token,
)
from app.models.user import User, UserType, SELF_REGISTER_TYPES
from app.schemas.auth import UserRegister, UserLogin, UserResponse, UserProfile


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8
MIN_NAME_LENGTH = 2

INVALID_CREDENTIALS = "Invalid email or password"


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def validate_registration(data: UserRegister) -> str:
    """Check the registration rules in order; returns the resolved user type"""
    required = (data.email, data.password, data.confirm_password, data.first_name, data.last_name)
    if not all(required):
        raise ValidationError("All fields are required")

    if not is_valid_email(data.email):
        raise ValidationError("Please enter a valid email address", field="email")

    if len(data.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
            field="password",
        )

    if data.password != data.confirm_password:
        raise ValidationError("Passwords do not match", field="confirmPassword")

    if len(data.first_name) < MIN_NAME_LENGTH or len(data.last_name) < MIN_NAME_LENGTH:
        raise ValidationError(
            f"First name and last name must be at least {MIN_NAME_LENGTH} characters long"
        )

    user_type = data.user_type or UserType.STUDENT.value
    if user_type not in {t.value for t in SELF_REGISTER_TYPES}:
        raise ValidationError("Invalid user type", field="userType")

    return user_type


def build_claims(user: User) -> Dict[str, Any]:
    return {
        "userId": user.id,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "userType": user.user_type,
    }


def to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        user_type=user.user_type,
    )


class AuthService:
    """Orchestrates the credential store, password hasher and token issuer"""

    def __init__(self, store):
        self.store = store

    async def register(self, data: UserRegister) -> Tuple[str, UserResponse]:
        try:
            user_type = validate_registration(data)
        except ValidationError as e:
            logger.log_auth_event(
                event="register",
                success=False,
                user_email=data.email or None,
                reason=e.message
            )
            raise

        if await self.store.find_by_email(data.email) is not None:
            logger.log_auth_event(
                event="register",
                success=False,
                user_email=data.email,
                reason="Email already registered"
            )
            raise ConflictError()

        # bcrypt is CPU bound, keep it off the event loop
        password_hash = await run_in_threadpool(get_password_hash, data.password)

        user = await self.store.insert(
            email=data.email,
            password_hash=password_hash,
            first_name=data.first_name,
            last_name=data.last_name,
            user_type=user_type,
        )

        set_user_id(str(user.id))
        token = create_access_token(build_claims(user))

        logger.log_auth_event(
            event="register",
            success=True,
            user_email=user.email,
            user_type=user.user_type
        )
        return token, to_response(user)

    async def login(self, credentials: UserLogin) -> Tuple[str, UserResponse]:
        if not credentials.email or not credentials.password:
            raise ValidationError("Email and password are required")

        user = await self.store.find_by_email(credentials.email)

        if user is None:
            await run_in_threadpool(burn_password_check, credentials.password)
            password_ok = False
        else:
            password_ok = await run_in_threadpool(
                verify_password, credentials.password, user.password_hash
            )

        if not password_ok:
            logger.log_auth_event(
                event="login",
                success=False,
                user_email=credentials.email,
                reason="Unknown email" if user is None else "Wrong password"
            )
            raise AuthenticationError(INVALID_CREDENTIALS)

        set_user_id(str(user.id))
        token = create_access_token(build_claims(user))

        logger.log_auth_event(
            event="login",
            success=True,
            user_email=user.email,
            user_type=user.user_type
        )
        return token, to_response(user)

    def verify_token(self, token: Optional[str]) -> Dict[str, Any]:
        """Decode a bearer token; raises AuthenticationError subclasses"""
        if not token:
            raise AuthenticationError("No token provided")

        try:
            return decode_token(token)
        except AuthenticationError as e:
            logger.log_auth_event(event="token", success=False, reason=e.code)
            raise

    async def get_profile(self, token: Optional[str]) -> UserProfile:
        claims = self.verify_token(token)

        user_id = claims.get("userId")
        set_user_id(str(user_id))

        profile = await self.store.find_by_id(user_id)
        if profile is None:
            raise NotFoundError("User not found", resource_id=user_id)

        return profile
