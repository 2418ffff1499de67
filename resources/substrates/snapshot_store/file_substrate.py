"""JSON-file snapshot store with atomic replace-on-write semantics."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from resources.substrates.snapshot_store.config import SnapshotStoreSettings
from resources.substrates.snapshot_store.substrate import (
    SnapshotStore,
    SnapshotStoreError,
    SnapshotStoreHealthStatus,
)


class JsonFileSnapshotStore(SnapshotStore):
    """Persist the whole snapshot document as one JSON file on local disk."""

    def __init__(self, *, settings: SnapshotStoreSettings) -> None:
        self._settings = settings
        self._path = settings.snapshot_path()

    @property
    def path(self) -> Path:
        """Return the resolved snapshot file path."""
        return self._path

    def health(self) -> SnapshotStoreHealthStatus:
        """Return readiness for the snapshot parent directory."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            if not self._path.parent.is_dir():
                return SnapshotStoreHealthStatus(
                    ready=False,
                    detail=f"parent path is not a directory: {self._path.parent}",
                )
        except Exception as exc:  # noqa: BLE001
            return SnapshotStoreHealthStatus(
                ready=False,
                detail=f"snapshot store probe failed: {type(exc).__name__}",
            )
        return SnapshotStoreHealthStatus(ready=True, detail="ok")

    def read_snapshot(self) -> dict[str, Any]:
        """Read and decode the stored document."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise SnapshotStoreError(
                f"snapshot read failed for {self._path}: {exc}"
            ) from exc

        if raw.strip() == "":
            return {}
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise SnapshotStoreError(
                f"snapshot file is not valid JSON: {self._path}"
            ) from exc
        if not isinstance(document, dict):
            raise SnapshotStoreError(
                f"snapshot file must contain a top-level object: {self._path}"
            )
        return document

    def write_snapshot(self, document: Mapping[str, Any]) -> datetime:
        """Write the document to a temp file, then rename it over the target."""
        try:
            payload = json.dumps(
                dict(document),
                ensure_ascii=False,
                indent=self._settings.indent,
            )
        except (TypeError, ValueError) as exc:
            raise SnapshotStoreError(f"snapshot is not JSON serializable: {exc}") from exc

        tmp_path: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                prefix=f".{self._settings.temp_prefix}-",
                suffix=".tmp",
                dir=self._path.parent,
                delete=False,
            ) as handle:
                tmp_path = Path(handle.name)
                handle.write(payload)
                handle.flush()
                if self._settings.fsync_writes:
                    os.fsync(handle.fileno())

            os.replace(tmp_path, self._path)
            tmp_path = None
            return _mtime(self._path.stat())
        except OSError as exc:
            raise SnapshotStoreError(
                f"snapshot write failed for {self._path}: {exc}"
            ) from exc
        finally:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink(missing_ok=True)

    def modified_at(self) -> datetime | None:
        """Return the snapshot file mtime, or ``None`` when it does not exist."""
        try:
            return _mtime(self._path.stat())
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise SnapshotStoreError(
                f"snapshot stat failed for {self._path}: {exc}"
            ) from exc


def _mtime(stat: os.stat_result) -> datetime:
    """Convert one stat result into an aware UTC modification time."""
    return datetime.fromtimestamp(stat.st_mtime, tz=UTC)
