"""Minting of HMAC-signed bearer tokens for the books API."""

import time
from typing import Any

from authlib.common.security import generate_token
from authlib.jose import JoseError, jwt
from loguru import logger

from src.book_catalog.runtime.config.config_data import AuthConfig


class JwtGenerationError(RuntimeError):
    """Raised when a token cannot be minted with the current configuration."""


class JwtGeneratorService:
    """Service for generating bearer tokens accepted by the books API."""

    def __init__(self, auth_config: AuthConfig):
        self._config = auth_config

    def generate_jwt(
        self,
        subject: str,
        claims: dict[str, Any] | None = None,
        expires_in_seconds: int | None = None,
        valid_after_seconds: int = 0,
        audience: str | list[str] | None = None,
        algorithm: str = "HS256",
        include_jti: bool = True,
    ) -> str:
        """Generate a signed JWT using authlib.

        Args:
            subject: Subject (sub) claim identifying the caller
            claims: Additional claims to include in the token
            expires_in_seconds: Token lifetime (defaults to ``auth.token_ttl_seconds``)
            valid_after_seconds: Time in seconds before the token is valid
            audience: Audience (aud) claim (defaults to the configured audiences)
            algorithm: Signing algorithm (default: HS256)
            include_jti: Whether to include a unique JWT ID claim

        Returns:
            Signed JWT token string

        Raises:
            JwtGenerationError: If the secret is missing or the algorithm is not allowed
        """
        cfg = self._config

        if not cfg.signing_secret:
            raise JwtGenerationError("JWT signing secret not configured")

        if algorithm not in cfg.allowed_algorithms:
            logger.debug(
                "Attempted to use disallowed algorithm: {}, only {} are allowed",
                algorithm,
                cfg.allowed_algorithms,
            )
            raise JwtGenerationError(f"Algorithm {algorithm} not allowed")

        now = int(time.time())
        lifetime = expires_in_seconds or cfg.token_ttl_seconds

        payload: dict[str, Any] = {
            "iss": cfg.issuer,
            "sub": subject,
            "aud": audience or cfg.audiences,
            "exp": now + lifetime,
            "iat": now,
            "nbf": now + valid_after_seconds,
        }

        if include_jti:
            payload["jti"] = generate_token(16)

        # Registered claims cannot be overridden through extra claims
        if claims:
            payload.update(
                {
                    k: v
                    for k, v in claims.items()
                    if k not in {"iss", "sub", "aud", "exp", "iat", "nbf", "jti"}
                }
            )

        try:
            header = {"alg": algorithm, "typ": "JWT"}
            token = jwt.encode(header, payload, cfg.signing_secret)
        except JoseError as e:
            raise JwtGenerationError(f"JWT encoding failed: {e}") from e

        return token.decode() if isinstance(token, bytes) else token

    def generate_access_token(
        self,
        subject: str,
        scopes: list[str] | None = None,
        expires_in_seconds: int | None = None,
        **extra_claims,
    ) -> str:
        """Generate an access token for API clients."""
        claims: dict[str, Any] = {}
        if scopes:
            claims["scope"] = " ".join(scopes)
        claims.update(extra_claims)

        return self.generate_jwt(
            subject=subject,
            claims=claims,
            expires_in_seconds=expires_in_seconds,
        )
