"""
Local request runner.

Runs a single mint or email request outside the web server. The request name
comes from CLI args or the SIMULATE_REQUEST environment variable; remaining CLI
args are passed through as the request's positional arguments.
"""

import asyncio
import os
import sys
from collections.abc import Awaitable, Callable

from buffbucks.config import settings
from buffbucks.infrastructure.observability.logging import get_logger, setup_logging
from buffbucks.services.encoding import encode_string, encode_uint256, to_hex
from buffbucks.services.mint_service import compute_mint_amount, lookup_verified_email

logger = get_logger(__name__)

RequestRunner = Callable[[list[str], str | None], Awaitable[tuple[object, bytes]]]


async def run_mint_request(args: list[str], credential: str | None) -> tuple[int, bytes]:
    token_amount = await compute_mint_amount(args, credential)
    return token_amount, encode_uint256(token_amount)


async def run_email_request(args: list[str], credential: str | None) -> tuple[str, bytes]:
    email = await lookup_verified_email(credential)
    return email, encode_string(email)


REQUEST_REGISTRY: dict[str, RequestRunner] = {
    "mint": run_mint_request,
    "email": run_email_request,
}


def _resolve_request_name() -> str:
    """Pick the target request from CLI args or SIMULATE_REQUEST env variable."""
    if len(sys.argv) > 1:
        return sys.argv[1].strip().lower()
    return os.getenv("SIMULATE_REQUEST", "mint").strip().lower()


async def run_request(
    request_name: str | None = None,
    args: list[str] | None = None,
    credential: str | None = None,
) -> tuple[object, bytes]:
    """Run the requested simulation and return the value with its encoding."""
    name = (request_name or _resolve_request_name()).strip().lower()
    if name not in REQUEST_REGISTRY:
        raise ValueError(
            f"Unknown request '{name}'. "
            f"Available requests: {', '.join(sorted(REQUEST_REGISTRY.keys()))}"
        )

    logger.info("Simulating request", request=name, has_credential=bool(credential))
    return await REQUEST_REGISTRY[name](args or [], credential)


def main() -> None:
    """CLI entrypoint."""
    setup_logging(log_level=settings.LOG_LEVEL)
    request_name = _resolve_request_name()
    value, encoded = asyncio.run(
        run_request(request_name, sys.argv[2:], credential=settings.ACCESS_TOKEN)
    )
    print(f"Result: {value}")
    print(f"Encoded: {to_hex(encoded)}")


if __name__ == "__main__":
    main()
