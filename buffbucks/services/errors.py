"""
Error taxonomy for mint request evaluation.

Every MintRequestError subclass is fatal: it terminates the invocation and no
partial result is returned. Per-metric upstream failures never raise; the
fitness client absorbs them into a zero total.
"""


class MintRequestError(Exception):
    """Base exception for a failed mint request."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}


class MissingCredentialError(MintRequestError):
    """No bearer credential was supplied with the request."""


class IdentityFetchError(MintRequestError):
    """The identity endpoint failed or returned an unreadable payload."""


class IdentityMismatchError(MintRequestError):
    """The account email does not match the email claimed in the request."""


class DayWindowFetchError(MintRequestError):
    """The time-utility endpoint failed or returned a malformed day window."""


class SameDayMintError(MintRequestError):
    """The caller already minted within the current day window."""


class EncodingError(ValueError):
    """A result value cannot be represented in the on-chain encoding."""
