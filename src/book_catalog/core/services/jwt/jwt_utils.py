"""Unverified inspection of bearer tokens and mapping of verified claims."""

import binascii
import time
from dataclasses import dataclass
from typing import Any, Final

from authlib.common.encoding import json_loads, to_bytes, urlsafe_b64decode
from fastapi import HTTPException

from src.book_catalog.core.models.claims import TokenClaims

MAX_TOKEN_CHARS: Final = 4096
REGISTERED_CLAIMS: Final = frozenset({"iss", "sub", "aud", "exp", "iat", "nbf", "jti"})
_SCOPE_CLAIMS: Final = frozenset({"scope", "scopes"})


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail)


@dataclass(frozen=True)
class TokenPreview:
    """Header algorithm and issuer, read before the signature is checked."""

    alg: str | None
    iss: str | None


def _decode_segment(segment: str, what: str) -> dict[str, Any]:
    try:
        value = json_loads(urlsafe_b64decode(to_bytes(segment)))
    except (binascii.Error, ValueError) as e:
        raise _unauthorized(f"Malformed JWT {what}") from e
    if not isinstance(value, dict):
        raise _unauthorized(f"JWT {what} must be a JSON object")
    return value


def preview_token(token: str) -> TokenPreview:
    """Read ``alg`` and ``iss`` so a token can be rejected before decoding it."""
    if not token or len(token) > MAX_TOKEN_CHARS:
        raise _unauthorized("Invalid JWT size")
    segments = token.split(".")
    if len(segments) != 3 or not all(segments):
        raise _unauthorized("Invalid JWT format")

    header = _decode_segment(segments[0], "header")
    payload = _decode_segment(segments[1], "payload")
    iss = payload.get("iss")
    return TokenPreview(
        alg=header.get("alg"),
        iss=iss.rstrip("/") if isinstance(iss, str) and iss else None,
    )


def token_scopes(claims: dict[str, Any]) -> list[str]:
    """Scopes from ``scope`` (space separated) then ``scopes`` (list), deduplicated."""
    scopes = str(claims.get("scope", "")).split()
    listed = claims.get("scopes")
    if isinstance(listed, list | tuple):
        scopes.extend(str(s) for s in listed)
    return list(dict.fromkeys(scopes))


def to_token_claims(token: str, claims: dict[str, Any]) -> TokenClaims:
    """Build TokenClaims from claims that have already been verified."""
    return TokenClaims(
        raw_token=token,
        issuer=claims.get("iss") or "",
        subject=claims["sub"],
        audience=claims.get("aud", []),
        expires_at=claims["exp"],
        issued_at=claims.get("iat", int(time.time())),
        not_before=claims.get("nbf"),
        jti=claims.get("jti"),
        scopes=token_scopes(claims),
        custom_claims={
            k: v
            for k, v in claims.items()
            if k not in REGISTERED_CLAIMS and k not in _SCOPE_CLAIMS
        },
    )
