"""Services shared by request handlers through ``app.state``."""

from dataclasses import dataclass

from src.book_catalog.core.services import (
    DbSessionService,
    JwtGeneratorService,
    JwtVerificationService,
)


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    jwt_verify_service: JwtVerificationService
    jwt_generation_service: JwtGeneratorService
