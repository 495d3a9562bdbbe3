"""
Unit Tests for Security Module
Tests for: password hashing, session token issue/verify
"""
import base64
import json
import pytest
from datetime import datetime, timedelta, timezone
from jose import jwt

from app.core.security import (
    verify_password,
    get_password_hash,
    burn_password_check,
    create_access_token,
    decode_token,
    check_token_structure,
)
from app.core.config import settings, Settings
from app.core.exceptions import (
    AuthenticationError,
    HashError,
    MalformedTokenError,
    TokenExpiredError,
    TokenSignatureError,
    TokenVerificationError,
)


CLAIMS = {
    "userId": 7,
    "email": "a@b.com",
    "firstName": "Jo",
    "lastName": "Li",
}


def _b64(data: dict) -> str:
    return base64.urlsafe_b64encode(json.dumps(data).encode()).rstrip(b"=").decode()


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_password_returns_different_value(self):
        password = "testpassword123"
        hashed = get_password_hash(password)

        assert hashed != password
        assert hashed.startswith("$2")

    def test_hash_password_different_each_time(self):
        """Same password, fresh salt, different hash - both verify"""
        password = "testpassword123"
        hash1 = get_password_hash(password)
        hash2 = get_password_hash(password)

        assert hash1 != hash2
        assert verify_password(password, hash1) is True
        assert verify_password(password, hash2) is True

    def test_verify_password_incorrect(self):
        hashed = get_password_hash("testpassword123")

        assert verify_password("wrongpassword", hashed) is False

    def test_hash_long_password_truncated(self):
        """Bcrypt has a 72 byte limit"""
        long_password = "a" * 100
        hashed = get_password_hash(long_password)

        assert verify_password(long_password, hashed) is True

    def test_hash_unicode_password(self):
        password = "tëst🔐pässwörd"
        hashed = get_password_hash(password)

        assert verify_password(password, hashed) is True

    def test_malformed_stored_hash_raises_hash_error(self):
        with pytest.raises(HashError):
            verify_password("testpassword123", "not-a-bcrypt-hash")

    def test_burn_password_check_never_raises(self):
        burn_password_check("anything12")
        burn_password_check("")

    def test_default_work_factor_is_12(self):
        assert Settings.model_fields["BCRYPT_ROUNDS"].default == 12


class TestAccessToken:
    """Test token issuing"""

    def test_token_has_three_segments(self):
        token = create_access_token(CLAIMS)

        assert isinstance(token, str)
        assert len(token.split(".")) == 3

    def test_expiry_is_24_hours_after_issue(self):
        token = create_access_token(CLAIMS)

        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert payload["exp"] - payload["iat"] == 86400

    def test_issued_at_is_now(self):
        before = int(datetime.now(timezone.utc).timestamp())
        payload = decode_token(create_access_token(CLAIMS))
        after = int(datetime.now(timezone.utc).timestamp())

        assert before <= payload["iat"] <= after

    def test_extra_claims_are_kept(self):
        payload = decode_token(create_access_token({**CLAIMS, "userType": "recruiter"}))

        assert payload["userType"] == "recruiter"

    def test_missing_identity_claim_rejected(self):
        with pytest.raises(ValueError):
            create_access_token({"userId": 1, "email": "a@b.com"})


class TestDecodeToken:
    """Test token verification"""

    def test_round_trip_returns_claims(self):
        payload = decode_token(create_access_token(CLAIMS))

        assert {k: payload[k] for k in CLAIMS} == CLAIMS
        assert set(payload) == set(CLAIMS) | {"iat", "exp"}

    def test_expired_token(self):
        issued = datetime.now(timezone.utc) - timedelta(hours=25)
        token = create_access_token(CLAIMS, issued_at=issued)

        with pytest.raises(TokenExpiredError):
            decode_token(token)

    def test_token_just_before_expiry_is_valid(self):
        issued = datetime.now(timezone.utc) - timedelta(hours=23, minutes=59)
        token = create_access_token(CLAIMS, issued_at=issued)

        assert decode_token(token)["userId"] == 7

    def test_wrong_secret(self):
        now = int(datetime.now(timezone.utc).timestamp())
        token = jwt.encode(
            {**CLAIMS, "iat": now, "exp": now + 3600},
            "wrong_secret_key",
            algorithm=settings.JWT_ALGORITHM
        )

        with pytest.raises(TokenSignatureError):
            decode_token(token)

    def test_tampered_claims(self):
        header, _, signature = create_access_token(CLAIMS).split(".")
        now = int(datetime.now(timezone.utc).timestamp())
        forged = _b64({**CLAIMS, "userId": 1, "iat": now, "exp": now + 3600})

        with pytest.raises(TokenSignatureError):
            decode_token(f"{header}.{forged}.{signature}")

    def test_expired_with_wrong_secret_is_still_rejected(self):
        past = int((datetime.now(timezone.utc) - timedelta(days=2)).timestamp())
        token = jwt.encode(
            {**CLAIMS, "iat": past, "exp": past + 86400},
            "wrong_secret_key",
            algorithm=settings.JWT_ALGORITHM
        )

        with pytest.raises(TokenVerificationError):
            decode_token(token)

    @pytest.mark.parametrize("token", [
        "",
        "invalid_token_string",
        "a.b",
        "a.b.c.d",
        "..",
        "!!!.???.***",
    ])
    def test_malformed_tokens(self, token):
        with pytest.raises(MalformedTokenError):
            decode_token(token)

    def test_non_json_claims_segment(self):
        header = _b64({"alg": "HS256", "typ": "JWT"})
        claims = base64.urlsafe_b64encode(b"not json").rstrip(b"=").decode()

        with pytest.raises(MalformedTokenError):
            check_token_structure(f"{header}.{claims}.c2ln")

    def test_missing_required_claims(self):
        now = int(datetime.now(timezone.utc).timestamp())
        token = jwt.encode(
            {"email": "a@b.com", "iat": now, "exp": now + 3600},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM
        )

        with pytest.raises(MalformedTokenError):
            decode_token(token)

    def test_alg_none_rejected(self):
        now = int(datetime.now(timezone.utc).timestamp())
        header = _b64({"alg": "none", "typ": "JWT"})
        claims = _b64({**CLAIMS, "iat": now, "exp": now + 3600})

        with pytest.raises(TokenVerificationError):
            decode_token(f"{header}.{claims}.c2ln")

    def test_all_failures_share_the_public_message(self):
        failures = [TokenExpiredError(), MalformedTokenError(), TokenSignatureError()]

        assert all(isinstance(e, AuthenticationError) for e in failures)
        assert {e.client_message for e in failures} == {"Invalid token"}
        assert len({e.code for e in failures}) == 3
