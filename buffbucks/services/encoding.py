"""
On-chain result encoding.
Fixed-width helpers for the values returned to the requesting contract.
"""

from buffbucks.services.errors import EncodingError

UINT256_BYTES = 32
UINT256_MAX = 2**256 - 1


def encode_uint256(value: int) -> bytes:
    """Encode a non-negative integer as a 32-byte big-endian word."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"uint256 value must be an integer, got {type(value).__name__}")
    if value < 0 or value > UINT256_MAX:
        raise EncodingError(f"Value {value} is out of range for uint256")
    return value.to_bytes(UINT256_BYTES, "big")


def encode_string(value: str) -> bytes:
    """Encode a string as UTF-8 bytes."""
    if not isinstance(value, str):
        raise EncodingError(f"String value expected, got {type(value).__name__}")
    return value.encode("utf-8")


def to_hex(data: bytes) -> str:
    return "0x" + data.hex()
