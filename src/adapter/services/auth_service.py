"""Authentication Service Implementations

The hosted provider exposes a GoTrue-style REST API:
- GET  {AUTH_URL}/auth/v1/user    resolves a bearer token to its user
- POST {AUTH_URL}/auth/v1/logout  revokes the token
Both calls carry the project's public API key in the ``apikey`` header.
"""

import logging
from typing import Optional
import httpx
from src.app.services.auth_service import AuthService, AuthSession

logger = logging.getLogger(__name__)


class HostedAuthClient:
    """
    HTTP client for the hosted auth provider

    Args:
        base_url: Provider URL (AUTH_URL)
        api_key: Public API key (AUTH_API_KEY)
        timeout: Request timeout in seconds
        transport: Optional httpx transport, used by tests
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    def _headers(self, access_token: str) -> dict:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {access_token}",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        )

    async def fetch_session(self, access_token: str) -> Optional[AuthSession]:
        """
        Resolve an access token to a session

        Args:
            access_token: Bearer token sent by the browser

        Returns:
            AuthSession if the provider accepts the token, None otherwise
        """
        try:
            async with self._client() as client:
                response = await client.get("/auth/v1/user", headers=self._headers(access_token))
        except httpx.HTTPError as e:
            logger.error(f"Auth provider unreachable: {e}")
            return None

        if response.status_code in (401, 403):
            logger.info("Auth provider rejected access token")
            return None
        if response.status_code != 200:
            logger.error(f"Auth provider returned {response.status_code} for session lookup")
            return None

        user = response.json()
        if not user.get("id"):
            logger.error("Auth provider returned a user without an ID")
            return None

        return AuthSession(user_id=user["id"], access_token=access_token, email=user.get("email"))

    async def logout(self, access_token: str) -> None:
        async with self._client() as client:
            response = await client.post("/auth/v1/logout", headers=self._headers(access_token))
            response.raise_for_status()


class SessionAuthService(AuthService):
    """
    AuthService over a session already resolved for the current request

    Args:
        session: Resolved session, or None when the request is anonymous
        client: Provider client used to sign out
    """

    def __init__(self, session: Optional[AuthSession], client: HostedAuthClient):
        self.session = session
        self.client = client

    def get_session(self) -> Optional[AuthSession]:
        return self.session

    async def sign_out(self) -> None:
        if self.session is None or not self.session.access_token:
            return
        await self.client.logout(self.session.access_token)
        logger.info(f"User {self.session.user_id} signed out")
        self.session = None


class StaticAuthService(AuthService):
    """
    AuthService that always reports the same signed-in user

    Used when AUTH_DISABLED is set, e.g. for local development.
    """

    def __init__(self, user_id: str):
        self.session = AuthSession(user_id=user_id)

    def get_session(self) -> Optional[AuthSession]:
        return self.session

    async def sign_out(self) -> None:
        logger.info("Authentication disabled, sign out ignored")
