# buffbucks/models/api/functions_response.py
"""
Functions API response models.
Each response carries the decoded value and its on-chain encoding.
"""

from pydantic import BaseModel, Field


class MintResponse(BaseModel):
    """Response for a mint evaluation."""

    token_amount: int = Field(..., description="Tokens to mint for today's activity")
    encoded_result: str = Field(..., description="Hex-encoded uint256 of token_amount")


class EmailLookupResponse(BaseModel):
    """Response for a verified email lookup."""

    email: str = Field(..., description="Email of the credential owner")
    encoded_result: str = Field(..., description="Hex-encoded UTF-8 bytes of email")
