"""
Session Client - keeps the issued token and user record between commands.

The token is stored under `xrecruit_token` and the user record (as a JSON
string) under `xrecruit_user`. Storage is pluggable: FileSessionStorage keeps
them in ~/.xrecruit/session.json, MemorySessionStorage is used in tests.

is_valid() only looks at the token's claims locally. It cannot check the
signature (the client has no secret); the server verifies every request.
"""

import json
import logging
import math
import os
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from jose import jwt, JWTError

from cli.config import CLIConfig

logger = logging.getLogger(__name__)

TOKEN_KEY = "xrecruit_token"
USER_KEY = "xrecruit_user"


class SessionStorage:
    """Key/value storage for the two session entries"""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_many(self, values: Dict[str, str]) -> None:
        raise NotImplementedError

    def remove_many(self, *keys: str) -> None:
        raise NotImplementedError


class MemorySessionStorage(SessionStorage):

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_many(self, values: Dict[str, str]) -> None:
        self.data.update(values)

    def remove_many(self, *keys: str) -> None:
        for key in keys:
            self.data.pop(key, None)


class FileSessionStorage(SessionStorage):
    """
    JSON file storage.

    Writes go to a temporary file that replaces the session file, so a reader
    never sees half of a session. The file is readable by the owner only.
    """

    def __init__(self, path: str):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with open(tmp_path, 'w') as f:
            json.dump(data, f, indent=2)
        if os.name == "posix":
            os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, self.path)

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_many(self, values: Dict[str, str]) -> None:
        data = self._read()
        data.update(values)
        self._write(data)

    def remove_many(self, *keys: str) -> None:
        data = self._read()
        if not any(key in data for key in keys):
            return
        for key in keys:
            data.pop(key, None)
        if data:
            self._write(data)
        else:
            self.path.unlink(missing_ok=True)


class SessionClient:
    """Persists, reads, checks and clears the local session"""

    def __init__(self, storage: SessionStorage, clock: Callable[[], float] = time.time):
        self.storage = storage
        self.clock = clock

    @classmethod
    def from_config(cls, config: CLIConfig) -> "SessionClient":
        return cls(FileSessionStorage(config.session_file))

    def persist(self, token: str, user: Dict[str, Any]) -> None:
        """Replace any previous session with this token and user record"""
        self.storage.set_many({
            TOKEN_KEY: token,
            USER_KEY: json.dumps(user),
        })

    def current_token(self) -> Optional[str]:
        return self.storage.get(TOKEN_KEY) or None

    def current_user(self) -> Optional[Dict[str, Any]]:
        """Stored user record, or None if absent or not parseable"""
        raw = self.storage.get(USER_KEY)
        if not raw:
            return None
        try:
            user = json.loads(raw)
        except ValueError:
            logger.debug("Stored user record is not valid JSON")
            return None
        return user if isinstance(user, dict) else None

    def claims(self) -> Optional[Dict[str, Any]]:
        """Unverified claims of the stored token"""
        token = self.current_token()
        if not token or len(token.split(".")) != 3:
            return None
        try:
            return jwt.get_unverified_claims(token)
        except JWTError:
            return None

    def expires_at(self) -> Optional[float]:
        claims = self.claims()
        exp = claims.get("exp") if claims else None
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            return None
        # json accepts Infinity and NaN
        if not math.isfinite(exp):
            return None
        return exp

    def is_valid(self) -> bool:
        """True if a well-formed token is stored and its expiry is in the future"""
        exp = self.expires_at()
        if exp is None:
            return False
        return self.clock() < exp

    def clear(self) -> None:
        """Remove both session entries. Safe to call when already logged out."""
        self.storage.remove_many(TOKEN_KEY, USER_KEY)

    def auth_headers(self) -> Dict[str, str]:
        token = self.current_token()
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}
