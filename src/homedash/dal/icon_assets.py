# src/homedash/dal/icon_assets.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from homedash.errors import FieldError, NotFoundError, StorageFailure, ValidationFailed
from homedash.models import ICONS_PREFIX, IMAGE_EXTENSIONS
from homedash.models.category import ENTITY_ID_MAX
from homedash.util.fs import atomic_write_bytes, ensure_under_root

logger = logging.getLogger("homedash.dal.icons")

MAX_ICON_BYTES = 2 * 1024 * 1024

ALLOWED_MIME_TYPES = (
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/svg+xml",
    "image/webp",
    "image/gif",
)

CONTENT_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
    ".gif": "image/gif",
}

_ENTITY_ID = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


def extension_of(filename: Optional[str]) -> str:
    return Path(filename or "").suffix.lower()


def content_type_for(filename: str) -> Optional[str]:
    return CONTENT_TYPES.get(extension_of(filename))


def _is_plain_name(filename: Optional[str]) -> bool:
    return bool(filename) and "/" not in filename and "\\" not in filename and filename not in (".", "..")


def _human_size(n: int) -> str:
    if n % (1024 * 1024) == 0:
        return f"{n // (1024 * 1024)}MB"
    return f"{n} bytes"


@dataclass(frozen=True)
class IconFile:
    path: Path
    content: bytes
    content_type: str
    etag: str


class IconAssetManager:
    """
    Owns the flat icons directory. Files are named `<entity id><ext>`; the
    document only ever stores `icons/<entity id><ext>` references into it.
    """

    def __init__(self, icons_dir: str | Path, *, max_bytes: int = MAX_ICON_BYTES) -> None:
        self.icons_dir = Path(icons_dir)
        self.max_bytes = max_bytes

    # ─────────────────────────────────────────────────────────────
    # Upload
    # ─────────────────────────────────────────────────────────────
    def validate_upload(
        self,
        entity_id: str,
        data: bytes,
        mime_type: Optional[str],
        filename: Optional[str],
    ) -> List[FieldError]:
        errors: List[FieldError] = []
        if not entity_id or len(entity_id) > ENTITY_ID_MAX or not _ENTITY_ID.match(entity_id):
            errors.append(FieldError(field="entityId", message="Invalid owner id for icon"))
        if len(data) > self.max_bytes:
            errors.append(FieldError(
                field="file",
                message=f"File too large. Maximum size is {_human_size(self.max_bytes)}.",
            ))
        if (mime_type or "").lower() not in ALLOWED_MIME_TYPES:
            errors.append(FieldError(
                field="mimeType",
                message="Invalid file type. Only PNG, JPG, SVG, WebP, and GIF are allowed.",
            ))
        if extension_of(filename) not in IMAGE_EXTENSIONS:
            errors.append(FieldError(
                field="filename",
                message=f"Invalid file extension '{extension_of(filename) or '(none)'}'.",
            ))
        return errors

    def write(self, entity_id: str, data: bytes, mime_type: Optional[str], filename: Optional[str]) -> str:
        """
        Persist `data` as `<entity_id><ext>` and return `icons/<entity_id><ext>`.

        Rejections happen before anything touches the disk. Files of the same
        entity in other formats are left in place; see `remove_stale`.
        """
        errors = self.validate_upload(entity_id, data, mime_type, filename)
        if errors:
            raise ValidationFailed(errors)

        final_name = f"{entity_id}{extension_of(filename)}"
        target = self.icons_dir / final_name
        try:
            atomic_write_bytes(target, data)
        except OSError as e:
            logger.error("Failed to store icon %s: %s", target, e)
            raise StorageFailure("Failed to upload file", field="file") from e

        logger.info("Stored icon %s (%d bytes)", final_name, len(data))
        return f"{ICONS_PREFIX}{final_name}"

    def store(self, entity_id: str, data: bytes, mime_type: Optional[str], filename: Optional[str]) -> str:
        """`write` followed by `remove_stale`, for callers with no document to commit."""
        path = self.write(entity_id, data, mime_type, filename)
        self.remove_stale(entity_id, keep=path[len(ICONS_PREFIX):])
        return path

    # ─────────────────────────────────────────────────────────────
    # Cleanup
    # ─────────────────────────────────────────────────────────────
    def delete(self, entity_id: str) -> None:
        """Remove every file whose basename is `entity_id`. Never raises."""
        self._remove_matching(entity_id)

    def remove_stale(self, entity_id: str, keep: str) -> None:
        """Remove files of `entity_id` other than `keep` (e.g. a previous upload in another format)."""
        self._remove_matching(entity_id, keep=keep)

    def remove_file(self, filename: str) -> None:
        """Best-effort removal of a single file in the icons directory."""
        if not _is_plain_name(filename):
            return
        path = self.icons_dir / filename
        try:
            path.unlink()
            logger.info("Removed icon %s", filename)
        except FileNotFoundError:
            pass
        except OSError:
            logger.warning("Could not remove icon %s", path, exc_info=True)

    def _remove_matching(self, entity_id: str, keep: Optional[str] = None) -> None:
        for p in self._files_for(entity_id):
            if p.name == keep:
                continue
            try:
                p.unlink()
                logger.info("Removed icon %s", p.name)
            except FileNotFoundError:
                pass
            except OSError:
                logger.warning("Could not remove stale icon %s", p, exc_info=True)

    def _files_for(self, entity_id: str) -> List[Path]:
        try:
            return [p for p in self.icons_dir.iterdir() if p.is_file() and p.stem == entity_id]
        except FileNotFoundError:
            return []
        except OSError:
            logger.warning("Could not scan icons directory %s", self.icons_dir, exc_info=True)
            return []

    # ─────────────────────────────────────────────────────────────
    # Read side
    # ─────────────────────────────────────────────────────────────
    def exists(self, filename: str) -> bool:
        return _is_plain_name(filename) and (self.icons_dir / filename).is_file()

    def list_files(self) -> List[str]:
        if not self.icons_dir.is_dir():
            return []
        return sorted(p.name for p in self.icons_dir.iterdir() if p.is_file() and not p.name.startswith("."))

    def read(self, filename: str) -> IconFile:
        """Load an icon by its file name, as the icon-serving route needs it."""
        if not filename or ".." in filename or "/" in filename or "\\" in filename:
            raise ValidationFailed("Invalid filename", field="filename")
        ctype = content_type_for(filename)
        if ctype is None:
            raise ValidationFailed("Invalid file type", field="filename")

        try:
            path = ensure_under_root(self.icons_dir, filename)
        except ValueError:
            raise ValidationFailed("Invalid filename", field="filename")
        try:
            st = path.stat()
            content = path.read_bytes()
        except FileNotFoundError:
            raise NotFoundError("Icon not found", field="filename")
        except OSError as e:
            raise StorageFailure("Failed to serve icon", field="filename") from e

        etag = f'"{st.st_mtime_ns:x}-{st.st_size:x}"'
        return IconFile(path=path, content=content, content_type=ctype, etag=etag)

