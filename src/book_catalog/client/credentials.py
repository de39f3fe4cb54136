"""Persistent client-side storage for the bearer token."""

from collections.abc import Callable
from pathlib import Path

from loguru import logger

CredentialAccessor = Callable[[], str | None]


class TokenStore:
    """Keep the bearer token in a file so it survives between runs.

    ``get_token`` reads the file on every call, so a token saved by another
    process is picked up by the next request. A file that cannot be read is
    treated as no token.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def get_token(self) -> str | None:
        try:
            token = self._path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Ignoring unreadable token file {}: {}", self._path, e)
            return None
        return token or None

    def save(self, token: str) -> None:
        token = token.strip()
        if not token:
            raise ValueError("Token must not be empty")
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(token, encoding="utf-8")
        self._path.chmod(0o600)
        logger.debug("Saved bearer token to {}", self._path)

    def clear(self) -> bool:
        """Remove the stored token. Returns False if there was none."""
        try:
            self._path.unlink()
        except FileNotFoundError:
            return False
        return True


def no_credentials() -> str | None:
    return None
