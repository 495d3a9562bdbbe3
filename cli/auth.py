"""
X-Recruit CLI Authentication Module
===================================

  register    Create an account
  login       Login with email and password
  logout      Forget the local session
  whoami      Show current user (from the server)

Flow:
1. User registers or logs in
2. Server returns {success, message, data: {token, user}}
3. CLI stores token and user via SessionClient
4. Protected requests carry `Authorization: Bearer <token>`
"""

import logging
from typing import Optional, Dict, Any

import httpx

from cli.config import CLIConfig
from cli.session import SessionClient

logger = logging.getLogger(__name__)

NETWORK_ERROR = "Network error. Please check your connection and try again."
SERVER_DOWN = "Backend server is not responding. Please make sure the server is running."


def failure(message: str) -> Dict[str, Any]:
    return {"success": False, "message": message}


def is_envelope(body: Any) -> bool:
    return isinstance(body, dict) and isinstance(body.get("success"), bool) and "message" in body


class AuthClient:
    """
    Talks to the auth API and keeps the session up to date.

    Every method returns the server's envelope when the server answered with
    one (including 4xx/5xx replies), and a generic failure envelope when the
    request did not get through. Nothing is retried.
    """

    def __init__(
        self,
        session: SessionClient,
        api_base_url: str = "http://localhost:3001/api",
        timeout: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.session = session
        self.api_base_url = api_base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_config(cls, config: CLIConfig) -> "AuthClient":
        return cls(
            SessionClient.from_config(config),
            api_base_url=config.api_base_url,
            timeout=config.timeout,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.api_base_url,
            timeout=self.timeout,
            transport=self.transport,
        )

    async def _send(self, method: str, path: str, **kwargs) -> Optional[Dict[str, Any]]:
        """Server envelope, or None if no usable reply came back"""
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.debug(f"{method} {path} failed: {e!r}")
            return None

        try:
            body = response.json()
        except ValueError:
            body = None

        if not is_envelope(body):
            logger.debug(f"{method} {path} returned an unexpected body ({response.status_code})")
            return None
        return body

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        result = await self._send(method, path, **kwargs)
        return result if result is not None else failure(NETWORK_ERROR)

    def _persist_from(self, result: Dict[str, Any]) -> None:
        data = result.get("data") or {}
        token = data.get("token")
        user = data.get("user")
        if result.get("success") and token and isinstance(user, dict):
            self.session.persist(token, user)

    async def register(
        self,
        email: str,
        password: str,
        confirm_password: str,
        first_name: str,
        last_name: str,
        user_type: Optional[str] = None
    ) -> Dict[str, Any]:
        payload = {
            "email": email,
            "password": password,
            "confirmPassword": confirm_password,
            "firstName": first_name,
            "lastName": last_name,
        }
        if user_type:
            payload["userType"] = user_type

        result = await self._request("POST", "/auth/register", json=payload)
        self._persist_from(result)
        return result

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        result = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        self._persist_from(result)
        return result

    async def get_profile(self) -> Dict[str, Any]:
        """Fetch the profile; with no stored token the request goes out unauthenticated"""
        return await self._request("GET", "/user/profile", headers=self.session.auth_headers())

    async def check_health(self) -> Dict[str, Any]:
        result = await self._send("GET", "/health")
        return result if result is not None else failure(SERVER_DOWN)

    def logout(self) -> None:
        self.session.clear()
