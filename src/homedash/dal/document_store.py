# src/homedash/dal/document_store.py
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, Tuple

import orjson
from pydantic import ValidationError

from homedash.errors import (
    DocumentCorrupt,
    ReferenceIntegrityError,
    StorageFailure,
    ValidationFailed,
    field_errors_from_pydantic,
)
from homedash.models import DashboardConfig, integrity_errors
from homedash.util.fs import atomic_write_bytes

logger = logging.getLogger("homedash.dal.document")

# One lock per document path, shared by every DocumentStore in the process
_locks: Dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = path.resolve()
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.RLock()
        return lock


def serialize(doc: DashboardConfig) -> bytes:
    """Pretty-printed (2-space) UTF-8 JSON with a trailing newline."""
    return orjson.dumps(doc.to_document(), option=orjson.OPT_INDENT_2) + b"\n"


class DocumentStore:
    """
    Single source of truth for the dashboard document on disk.

    `load()` and `commit()` are each atomic at the file level. `transaction()`
    additionally holds the per-path lock across load → mutate → commit so
    concurrent mutations in this process cannot overwrite each other.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = _lock_for(self.path)

    # ─────────────────────────────────────────────────────────────
    # Read
    # ─────────────────────────────────────────────────────────────
    def load(self) -> DashboardConfig:
        with self._lock:
            try:
                raw = self.path.read_bytes()
            except FileNotFoundError:
                logger.info("No document at %s; initializing an empty one", self.path)
                doc = DashboardConfig()
                self.commit(doc)
                return doc
            except OSError as e:
                logger.error("Failed to read %s: %s", self.path, e)
                raise StorageFailure("Failed to read configuration") from e

        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            logger.error("Document %s is not valid JSON: %s", self.path, e)
            raise DocumentCorrupt(f"Configuration file is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise DocumentCorrupt("Configuration file must contain a JSON object")

        try:
            return DashboardConfig.model_validate(data)
        except ValidationError as e:
            logger.error("Document %s failed schema validation: %s", self.path, e)
            raise DocumentCorrupt(field_errors_from_pydantic(e)) from e

    def read_bytes(self) -> bytes:
        """Raw document as stored (bootstrapping it first if absent)."""
        with self._lock:
            if not self.path.exists():
                self.load()
            try:
                return self.path.read_bytes()
            except OSError as e:
                raise StorageFailure("Failed to read configuration") from e

    def export(self) -> Tuple[str, bytes]:
        """Download name + verbatim document for the export boundary."""
        today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        return f"config-{today}.json", self.read_bytes()

    # ─────────────────────────────────────────────────────────────
    # Write
    # ─────────────────────────────────────────────────────────────
    def commit(self, doc: DashboardConfig) -> None:
        """
        Persist the full document. Refuses documents that break id uniqueness
        or reference a missing category; nothing is written in that case.
        """
        unique, refs = integrity_errors(doc)
        if unique:
            raise ValidationFailed(unique)
        if refs:
            raise ReferenceIntegrityError(refs)

        payload = serialize(doc)
        with self._lock:
            try:
                atomic_write_bytes(self.path, payload)
            except OSError as e:
                logger.error("Failed to write %s: %s", self.path, e)
                raise StorageFailure("Failed to write configuration") from e
        logger.debug(
            "Committed %s (%d categories, %d services)",
            self.path, len(doc.categories), len(doc.services),
        )

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the document lock without loading or committing."""
        with self._lock:
            yield

    @contextmanager
    def transaction(self) -> Iterator[DashboardConfig]:
        """
        Load the document, hand it to the caller for mutation, and commit it
        when the block exits cleanly. An exception inside the block discards
        the changes. The lock is held for the whole block.
        """
        with self._lock:
            doc = self.load()
            yield doc
            self.commit(doc)
