# buffbucks/models/api/functions_request.py
from pydantic import BaseModel, Field


class MintRequest(BaseModel):
    """Request to evaluate a mint for the credential owner."""

    args: list[str] = Field(
        ...,
        description="Positional arguments: [claimed_email, last_mint_time_millis]",
    )
