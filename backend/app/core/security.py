from datetime import datetime, timezone
from typing import Optional, Dict, Any
import json

from jose import jwt, JWTError, ExpiredSignatureError
from jose.exceptions import JWTClaimsError
from jose.utils import base64url_decode
import bcrypt

from app.core.config import settings
from app.core.exceptions import (
    HashError,
    MalformedTokenError,
    TokenExpiredError,
    TokenSignatureError,
)

# Bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72

# Claims every session token must carry
IDENTITY_CLAIMS = ("userId", "email", "firstName", "lastName")
REQUIRED_CLAIMS = IDENTITY_CLAIMS + ("iat", "exp")


def _password_bytes(password: str) -> bytes:
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


def get_password_hash(password: str) -> str:
    """Hash password with a fresh salt (BCRYPT_ROUNDS work factor)"""
    try:
        hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    except (ValueError, TypeError) as e:
        raise HashError(f"Could not hash password: {e}") from e
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify password against a stored bcrypt hash.

    A mismatch is a normal False. Only a stored hash bcrypt cannot parse
    raises HashError. bcrypt.checkpw compares in constant time.
    """
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode('utf-8'))
    except (ValueError, TypeError) as e:
        raise HashError(f"Stored password hash is unusable: {e}") from e


# Computed once so a lookup miss costs the same bcrypt work as a mismatch
_DUMMY_HASH: Optional[str] = None


def burn_password_check(plain_password: str) -> None:
    """Run one bcrypt verification whose result is discarded"""
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = get_password_hash("x-recruit-timing-equalizer")
    verify_password(plain_password, _DUMMY_HASH)


def create_access_token(claims: Dict[str, Any], issued_at: Optional[datetime] = None) -> str:
    """
    Create a signed session token.

    `claims` carries userId, email, firstName, lastName (plus optional
    extras such as userType). iat is the issue time and exp = iat + 24h.
    """
    missing = [name for name in IDENTITY_CLAIMS if claims.get(name) is None]
    if missing:
        raise ValueError(f"Missing token claims: {', '.join(missing)}")

    now = issued_at or datetime.now(timezone.utc)
    iat = int(now.timestamp())

    to_encode = dict(claims)
    to_encode.update({
        "iat": iat,
        "exp": iat + settings.ACCESS_TOKEN_EXPIRE_SECONDS,
    })
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def _decode_json_segment(segment: str) -> Any:
    try:
        return json.loads(base64url_decode(segment.encode('ascii')))
    except (ValueError, UnicodeError) as e:
        raise MalformedTokenError(f"Token segment is not base64url JSON: {e}") from e


def check_token_structure(token: str) -> Dict[str, Any]:
    """
    Ensure the token is three dot-separated base64url segments whose first
    two decode to JSON objects. Returns the unverified claims.
    """
    if not isinstance(token, str) or not token:
        raise MalformedTokenError("Token is empty")

    parts = token.split('.')
    if len(parts) != 3 or not all(parts):
        raise MalformedTokenError("Token must have three segments")

    header = _decode_json_segment(parts[0])
    claims = _decode_json_segment(parts[1])
    if not isinstance(header, dict) or not isinstance(claims, dict):
        raise MalformedTokenError("Token header and claims must be JSON objects")

    try:
        base64url_decode(parts[2].encode('ascii'))
    except (ValueError, UnicodeError) as e:
        raise MalformedTokenError(f"Token signature is not base64url: {e}") from e

    return claims


def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises MalformedTokenError, TokenSignatureError or TokenExpiredError.
    The API layer reports all three as the same generic 401.
    """
    check_token_structure(token)

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"leeway": 0},
        )
    except ExpiredSignatureError as e:
        raise TokenExpiredError() from e
    except JWTClaimsError as e:
        raise MalformedTokenError(f"Invalid token claims: {e}") from e
    except JWTError as e:
        raise TokenSignatureError() from e

    missing = [name for name in REQUIRED_CLAIMS if name not in payload]
    if missing:
        raise MalformedTokenError(f"Token is missing claims: {', '.join(missing)}")

    return payload

