"""Fixtures wiring the FastAPI app to in-memory services."""

from __future__ import annotations

from collections.abc import Callable, Generator

import pytest
from fastapi.testclient import TestClient

from src.book_catalog.api.http.app import app
from src.book_catalog.api.http.app_data import ApplicationDependencies
from src.book_catalog.core.services import (
    DbSessionService,
    JwtGeneratorService,
    JwtVerificationService,
)
from src.book_catalog.runtime.config.config_data import AuthConfig

__all__ = ["api_client", "api_client_factory", "bearer_headers"]


@pytest.fixture
def api_client_factory(
    db_service: DbSessionService, auth_config: AuthConfig
) -> Generator[Callable[..., TestClient]]:
    """Build a TestClient whose app uses the in-memory database.

    Pass ``required=True`` to make bearer tokens mandatory.
    """

    def _make(required: bool = False) -> TestClient:
        config = auth_config.model_copy(update={"required": required})
        app.state.app_dependencies = ApplicationDependencies(
            database_service=db_service,
            jwt_verify_service=JwtVerificationService(config),
            jwt_generation_service=JwtGeneratorService(config),
        )
        return TestClient(app, raise_server_exceptions=False)

    yield _make
    app.state.app_dependencies = None


@pytest.fixture
def api_client(api_client_factory: Callable[..., TestClient]) -> TestClient:
    return api_client_factory()


@pytest.fixture
def bearer_headers(jwt_generate_service: JwtGeneratorService) -> dict[str, str]:
    token = jwt_generate_service.generate_access_token("reader@example.com")
    return {"Authorization": f"Bearer {token}"}
