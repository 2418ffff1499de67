"""Durable credential store for rotated access-control tokens."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from dotenv import set_key


class CredentialStoreError(Exception):
    """Failure to persist a rotated credential."""


class CredentialStore(Protocol):
    """Protocol for persisting the current bearer token."""

    def persist_token(self, token: str) -> None:
        """Durably record the current bearer token."""


class DotenvCredentialStore(CredentialStore):
    """Keep the bearer token in a ``.env`` file read back by settings loading."""

    def __init__(self, *, env_file: str | Path, key: str) -> None:
        self._env_file = Path(env_file)
        self._key = key

    def persist_token(self, token: str) -> None:
        """Update the token line in place, appending it when absent."""
        try:
            self._env_file.parent.mkdir(parents=True, exist_ok=True)
            self._env_file.touch(exist_ok=True)
            success, _, _ = set_key(
                self._env_file,
                self._key,
                token,
                quote_mode="never",
            )
        except OSError as exc:
            raise CredentialStoreError(
                f"token persistence failed for {self._env_file}: {exc}"
            ) from exc
        if not success:
            raise CredentialStoreError(
                f"token persistence failed for {self._env_file}"
            )
