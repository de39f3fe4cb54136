"""Verified bearer token claims."""

from typing import Any

from pydantic import BaseModel, Field


class TokenClaims(BaseModel):
    """Structured representation of JWT token claims."""

    raw_token: str = Field(default="", description="Original JWT token")

    # Registered claims
    issuer: str = Field(description="Issuer")
    subject: str = Field(description="Subject (caller ID)")
    audience: str | list[str] = Field(description="Audience")
    expires_at: int = Field(description="Expiration time")
    issued_at: int = Field(description="Issued at")
    not_before: int | None = Field(default=None, description="Not before")
    jti: str | None = Field(default=None, description="JWT ID (unique token identifier)")

    # Authorization claims
    scopes: list[str] = Field(default_factory=list, description="Parsed OAuth scopes")

    custom_claims: dict[str, Any] = Field(
        default_factory=dict, description="Claims not mapped to a field"
    )

