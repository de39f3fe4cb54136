"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, HTTPException, Request
from sqlmodel import Session

from src.book_catalog.api.http.app_data import ApplicationDependencies
from src.book_catalog.core.models.claims import TokenClaims
from src.book_catalog.core.services import JwtVerificationService


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    """Get the application-wide service container."""
    return request.app.state.app_dependencies


def get_db_session(request: Request) -> Iterator[Session]:
    """Open a database session for the duration of one request."""
    app_deps = get_app_dependencies(request)
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_jwt_verify_service(request: Request) -> JwtVerificationService:
    """Get the JWT verification service instance."""
    return get_app_dependencies(request).jwt_verify_service


async def get_request_claims(
    request: Request,
    jwt_verify: JwtVerificationService = Depends(get_jwt_verify_service),
) -> TokenClaims | None:
    """Authenticate the request from its Bearer token.

    A presented token is always verified. Requests without one are let through
    as anonymous unless ``auth.required`` is set.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        if jwt_verify.required:
            raise HTTPException(status_code=401, detail="Missing Bearer token")
        return None

    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Malformed Authorization header")

    return await jwt_verify.verify_jwt(token.strip())
