"""JWT verification service."""

import time

from authlib.jose import JoseError, jwt
from fastapi import HTTPException
from loguru import logger

from src.book_catalog.core.models.claims import TokenClaims
from src.book_catalog.core.services.jwt.jwt_utils import preview_token, to_token_claims
from src.book_catalog.runtime.config.config_data import AuthConfig


class JwtVerificationService:
    """Verify bearer tokens signed with the API's shared secret."""

    def __init__(self, auth_config: AuthConfig):
        self._config = auth_config

    @property
    def required(self) -> bool:
        return self._config.required

    async def verify_jwt(self, token: str) -> TokenClaims:
        cfg = self._config
        pv = preview_token(token)

        # alg allowlist
        if pv.alg not in cfg.allowed_algorithms:
            raise HTTPException(status_code=401, detail="Disallowed JWT algorithm")

        if not pv.iss:
            raise HTTPException(status_code=401, detail="Missing iss claim")
        if pv.iss != cfg.issuer.rstrip("/"):
            raise HTTPException(status_code=401, detail="Invalid issuer")

        if not cfg.signing_secret:
            raise HTTPException(status_code=500, detail="JWT signing secret not configured")

        claims_options = {
            "iss": {"essential": True, "values": [cfg.issuer.rstrip("/")]},
            "aud": {"essential": True, "values": list(cfg.audiences)},
            "sub": {"essential": True},
            "exp": {"essential": True},
        }

        # verify signature + registered claims
        try:
            logger.debug("Verifying JWT from issuer {}", pv.iss)
            claims = jwt.decode(token, cfg.signing_secret, claims_options=claims_options)
            claims.validate(leeway=cfg.clock_skew)
        except (JoseError, ValueError) as exc:
            raise HTTPException(status_code=401, detail=f"JWT error: {exc}") from exc

        # extra temporal sanity
        now = int(time.time())
        for k, check in (
            ("exp", lambda v: now > int(v) + cfg.clock_skew),
            ("nbf", lambda v: now < int(v) - cfg.clock_skew),
            ("iat", lambda v: int(v) > now + cfg.clock_skew),
        ):
            v = claims.get(k)
            if v is not None and check(v):
                raise HTTPException(status_code=401, detail=f"Invalid {k} with skew")

        if not claims.get("sub"):
            raise HTTPException(status_code=401, detail="Missing sub claim")

        return to_token_claims(token, dict(claims))
