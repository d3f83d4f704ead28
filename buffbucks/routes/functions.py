"""
Functions API Routes
HTTP endpoints invoked on behalf of on-chain requests.
The caller's OAuth access token arrives out-of-band as a bearer header.
"""

from fastapi import APIRouter, Header, HTTPException, status

from buffbucks.infrastructure.observability.logging import get_logger
from buffbucks.models.api.functions_request import MintRequest
from buffbucks.models.api.functions_response import EmailLookupResponse, MintResponse
from buffbucks.services.encoding import encode_string, encode_uint256, to_hex
from buffbucks.services.errors import (
    DayWindowFetchError,
    EncodingError,
    IdentityFetchError,
    IdentityMismatchError,
    MintRequestError,
    MissingCredentialError,
    SameDayMintError,
)
from buffbucks.services.mint_service import compute_mint_amount, lookup_verified_email

logger = get_logger(__name__)

router = APIRouter(prefix="/functions", tags=["functions"])

ERROR_STATUS_CODES = {
    MissingCredentialError: status.HTTP_401_UNAUTHORIZED,
    IdentityMismatchError: status.HTTP_403_FORBIDDEN,
    SameDayMintError: status.HTTP_409_CONFLICT,
    IdentityFetchError: status.HTTP_502_BAD_GATEWAY,
    DayWindowFetchError: status.HTTP_502_BAD_GATEWAY,
}


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def _to_http_error(error: MintRequestError) -> HTTPException:
    status_code = ERROR_STATUS_CODES.get(type(error), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTTPException(status_code=status_code, detail=error.message)


@router.post("/mint", response_model=MintResponse)
async def mint(request: MintRequest, authorization: str | None = Header(default=None)):
    """Compute today's token amount for the credential owner."""
    try:
        token_amount = await compute_mint_amount(request.args, _bearer_token(authorization))
        encoded = encode_uint256(token_amount)
    except MintRequestError as e:
        logger.warning("Mint request rejected", reason=type(e).__name__, error=e.message)
        raise _to_http_error(e)
    except (EncodingError, OverflowError) as e:
        logger.error("Mint result cannot be encoded", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Token amount cannot be encoded",
        )
    except (IndexError, ValueError) as e:
        logger.warning("Malformed mint arguments", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Expected arguments [email, last_mint_time_millis]",
        )

    return MintResponse(token_amount=token_amount, encoded_result=to_hex(encoded))


@router.post("/email", response_model=EmailLookupResponse)
async def email(authorization: str | None = Header(default=None)):
    """Return the verified email of the credential owner."""
    try:
        verified_email = await lookup_verified_email(_bearer_token(authorization))
    except MintRequestError as e:
        logger.warning("Email lookup rejected", reason=type(e).__name__, error=e.message)
        raise _to_http_error(e)

    return EmailLookupResponse(
        email=verified_email, encoded_result=to_hex(encode_string(verified_email))
    )
