# src/homedash/models/icon.py
from __future__ import annotations

import re
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from homedash.icon_names import is_valid_icon_name, resolve_icon_name

ICONS_PREFIX = "icons/"
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".svg", ".webp", ".gif")

# icons/<entity id>.<ext>; entity ids are restricted to the same alphabet
_IMAGE_PATH_PATTERN = re.compile(
    r"^icons/[A-Za-z0-9][A-Za-z0-9_-]*\.(png|jpg|jpeg|svg|webp|gif)$"
)


class _IconBase(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="forbid")


# ─────────────────────────────────────────────────────────────
# Variants
# ─────────────────────────────────────────────────────────────
class ImageIcon(_IconBase):
    """Uploaded image living in the icons directory."""
    type: Literal["image"] = "image"
    value: str = Field(..., description="Relative path, e.g. icons/plex.png")

    @field_validator("value")
    @classmethod
    def _check_path(cls, v: str) -> str:
        # older documents stored the served URL form (/icons/x.png)
        v = v.lstrip("/")
        if not _IMAGE_PATH_PATTERN.match(v):
            raise ValueError("Image icon must be a path of the form icons/<name>.<png|jpg|jpeg|svg|webp|gif>")
        return v

    @property
    def filename(self) -> str:
        return self.value[len(ICONS_PREFIX):]

    @property
    def basename(self) -> str:
        return self.filename.rsplit(".", 1)[0]


class LucideIcon(_IconBase):
    """
    Named Lucide icon. Catalog names are stored in canonical form; names the
    catalog does not know are kept as written (see `require_catalog_icon`).
    """
    type: Literal["icon"] = "icon"
    value: str = Field(..., min_length=1)

    @field_validator("value")
    @classmethod
    def _canonical_name(cls, v: str) -> str:
        return resolve_icon_name(v) or v


class EmojiIcon(_IconBase):
    # rendered verbatim
    model_config = ConfigDict(str_strip_whitespace=False)

    type: Literal["emoji"] = "emoji"
    value: str = Field(..., min_length=1, max_length=32)


IconConfig = Annotated[Union[ImageIcon, LucideIcon, EmojiIcon], Field(discriminator="type")]


def require_catalog_icon(icon):
    """Field-validator helper for input models: named icons must be in the catalog."""
    if isinstance(icon, LucideIcon) and not is_valid_icon_name(icon.value):
        raise ValueError(f"Unknown icon name '{icon.value}'")
    return icon


def reject_image_icon(icon, *, owner: str):
    """Field-validator helper for entities that may not carry uploaded images."""
    if isinstance(icon, ImageIcon):
        raise ValueError(f"Image icons are not allowed for {owner}")
    return icon
