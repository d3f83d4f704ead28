"""
Time-utility client.
Fetches the canonical boundary of "today" used for the once-per-day mint rule.
"""

import httpx

from buffbucks.config import Settings, settings
from buffbucks.infrastructure.observability.logging import get_logger
from buffbucks.models.domain.fitness_domain import DayWindow
from buffbucks.services.errors import DayWindowFetchError

logger = get_logger(__name__)


class DayWindowService:
    """Resolves the current day window from an unauthenticated endpoint."""

    def __init__(self, client: httpx.AsyncClient, config: Settings = settings):
        self._client = client
        self._url = config.DAY_WINDOW_URL

    async def fetch_day_window(self) -> DayWindow:
        """
        Fetch the current day window.

        Raises:
            DayWindowFetchError: On transport failure, error status, or malformed payload
        """
        try:
            response = await self._client.get(self._url)
        except httpx.RequestError as e:
            logger.error("Day window request failed", error=str(e))
            raise DayWindowFetchError(f"Error getting day window: {e}") from e

        if not response.is_success:
            logger.error("Day window endpoint returned an error", status_code=response.status_code)
            raise DayWindowFetchError(
                f"Error getting day window (HTTP {response.status_code})",
                status_code=response.status_code,
            )

        try:
            data = response.json()
            window = DayWindow.from_payload(data)
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Malformed day window payload", error=str(e))
            raise DayWindowFetchError(f"Malformed day window payload: {e}") from e

        logger.info(
            "Day window resolved",
            start_time_millis=window.start_time_millis,
            end_time_millis=window.end_time_millis,
        )
        return window
