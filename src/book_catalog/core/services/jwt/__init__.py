"""JWT service package."""

from .jwt_gen import JwtGenerationError, JwtGeneratorService
from .jwt_utils import preview_token
from .jwt_verify import JwtVerificationService

__all__ = [
    "JwtGenerationError",
    "JwtGeneratorService",
    "JwtVerificationService",
    "preview_token",
]
