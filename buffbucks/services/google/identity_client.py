"""
Google identity client.
Resolves the email address of the account that owns an OAuth access token.
"""

import httpx

from buffbucks.config import Settings, settings
from buffbucks.infrastructure.observability.logging import get_logger
from buffbucks.services.errors import IdentityFetchError

logger = get_logger(__name__)


class GoogleIdentityService:
    """Reads the caller's profile from the Google userinfo endpoint."""

    def __init__(self, client: httpx.AsyncClient, config: Settings = settings):
        self._client = client
        self._url = config.GOOGLE_USERINFO_URL

    def _get_auth_headers(self, access_token: str) -> dict:
        return {"Authorization": f"Bearer {access_token}"}

    async def fetch_email(self, access_token: str) -> str | None:
        """
        Fetch the account email for an access token.

        Args:
            access_token: Valid OAuth access token

        Returns:
            str | None: Email from the profile payload, None if the field is absent

        Raises:
            IdentityFetchError: If the request fails or the payload is unreadable
        """
        try:
            response = await self._client.get(
                self._url, headers=self._get_auth_headers(access_token)
            )
        except httpx.RequestError as e:
            logger.error("Identity request failed", error=str(e))
            raise IdentityFetchError(f"Error getting email: {e}") from e

        if not response.is_success:
            logger.error("Identity endpoint returned an error", status_code=response.status_code)
            raise IdentityFetchError(
                f"Error getting email (HTTP {response.status_code})",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Failed to parse identity response", error=str(e))
            raise IdentityFetchError(f"Invalid identity response format: {e}") from e

        if not isinstance(data, dict):
            raise IdentityFetchError("Invalid identity response format: expected an object")
        if data.get("error"):
            raise IdentityFetchError("Error getting email", response_data=data)

        logger.info("Identity fetched", has_email=bool(data.get("email")))
        return data.get("email")
