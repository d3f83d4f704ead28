"""
Mint request evaluation pipeline.

Stages run left to right: credential check, identity and day window (fetched
together), identity match, day gate, metric aggregation (fetched together),
scoring and token mapping. Any MintRequestError ends the invocation with no
partial result.
"""

import asyncio
from collections.abc import Sequence

import httpx

from buffbucks.config import Settings, settings
from buffbucks.infrastructure.observability.logging import get_logger
from buffbucks.models.domain.fitness_domain import DayWindow, InvocationArgs
from buffbucks.services.day_window_client import DayWindowService
from buffbucks.services.errors import (
    IdentityFetchError,
    IdentityMismatchError,
    MissingCredentialError,
    SameDayMintError,
)
from buffbucks.services.google.fitness_client import GoogleFitnessService
from buffbucks.services.google.identity_client import GoogleIdentityService
from buffbucks.services.scoring_service import tokens_for_activity

logger = get_logger(__name__)


def require_credential(credential: str | None) -> str:
    if not credential:
        raise MissingCredentialError("Need to set ACCESS_TOKEN for the request")
    return credential


def validate_request(args: Sequence, credential: str | None) -> tuple[InvocationArgs, str]:
    """
    Check the credential and pull the positional arguments.

    Argument shape is not validated here; a malformed list fails in the stage
    that consumes it.
    """
    credential = require_credential(credential)
    return InvocationArgs.from_args(list(args)), credential


def check_identity(fetched_email: str | None, claimed_email) -> None:
    if fetched_email != claimed_email:
        raise IdentityMismatchError("Email does not match")


def check_day_gate(last_mint_time_millis: int, window: DayWindow) -> None:
    """A last mint exactly on the day boundary still counts as a previous day."""
    if last_mint_time_millis > window.start_time_millis:
        raise SameDayMintError("Cannot mint on the same day")


class MintService:
    """Evaluates mint requests against the identity, time and fitness upstreams."""

    def __init__(self, client: httpx.AsyncClient, config: Settings = settings):
        self.identity = GoogleIdentityService(client, config)
        self.day_windows = DayWindowService(client, config)
        self.fitness = GoogleFitnessService(client, config)

    async def _resolve_identity_and_window(self, access_token: str) -> tuple[str | None, DayWindow]:
        # Both requests run to completion before either outcome is inspected.
        email_result, window_result = await asyncio.gather(
            self.identity.fetch_email(access_token),
            self.day_windows.fetch_day_window(),
            return_exceptions=True,
        )
        for result in (email_result, window_result):
            if isinstance(result, BaseException):
                raise result
        return email_result, window_result

    async def compute_mint_amount(self, args: Sequence, credential: str | None) -> int:
        """
        Compute the token amount for one mint request.

        Args:
            args: Positional arguments ``[claimed_email, last_mint_time_millis]``
            credential: OAuth bearer token for the caller's Google account

        Returns:
            int: Token amount, not clamped to the nominal range

        Raises:
            MissingCredentialError: Before any network call when credential is empty
            IdentityFetchError: If the identity endpoint fails
            DayWindowFetchError: If the day window cannot be resolved
            IdentityMismatchError: If the account email differs from the claimed one
            SameDayMintError: If the last mint falls after the day boundary
        """
        invocation, access_token = validate_request(args, credential)

        fetched_email, window = await self._resolve_identity_and_window(access_token)
        check_identity(fetched_email, invocation.claimed_email)
        check_day_gate(invocation.last_mint_time_millis, window)

        totals = await self.fitness.fetch_activity_totals(access_token, window)
        logger.info("Activity totals fetched", **totals.to_dict())

        return tokens_for_activity(totals)

    async def lookup_verified_email(self, credential: str | None) -> str:
        """Return the email of the account that owns the credential."""
        access_token = require_credential(credential)
        email = await self.identity.fetch_email(access_token)
        if not email:
            raise IdentityFetchError("Identity response did not include an email")
        return email


# Convenience functions for one-off invocations
async def compute_mint_amount(
    args: Sequence,
    credential: str | None,
    config: Settings = settings,
    client: httpx.AsyncClient | None = None,
) -> int:
    """Run one mint evaluation, opening an HTTP client when none is supplied."""
    if client is not None:
        return await MintService(client, config).compute_mint_amount(args, credential)

    async with httpx.AsyncClient(**config.get_http_client_config()) as owned_client:
        return await MintService(owned_client, config).compute_mint_amount(args, credential)


async def lookup_verified_email(
    credential: str | None,
    config: Settings = settings,
    client: httpx.AsyncClient | None = None,
) -> str:
    """Run one email lookup, opening an HTTP client when none is supplied."""
    if client is not None:
        return await MintService(client, config).lookup_verified_email(credential)

    async with httpx.AsyncClient(**config.get_http_client_config()) as owned_client:
        return await MintService(owned_client, config).lookup_verified_email(credential)
