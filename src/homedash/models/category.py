# src/homedash/models/category.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .icon import IconConfig, reject_image_icon, require_catalog_icon

# Ids double as file basenames for uploaded icons, so keep them filesystem-safe
ENTITY_ID_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9_-]*$"
ENTITY_ID_MAX = 64
NAME_MAX = 100


class Category(BaseModel):
    """Stored Category (element of DashboardConfig.categories)."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="allow")

    id: str = Field(..., min_length=1, max_length=ENTITY_ID_MAX, pattern=ENTITY_ID_PATTERN)
    name: str = Field(..., min_length=1, max_length=NAME_MAX)
    icon: Optional[IconConfig] = None
    # ISO-8601 UTC, kept exactly as written
    created_at: Optional[str] = Field(default=None, alias="createdAt")

    @field_validator("icon")
    @classmethod
    def _no_image(cls, v):
        return reject_image_icon(v, owner="categories")


class CategoryCreate(BaseModel):
    """Payload for create-category. `id` is generated when omitted."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="forbid")

    id: Optional[str] = Field(default=None, min_length=1, max_length=ENTITY_ID_MAX, pattern=ENTITY_ID_PATTERN)
    name: str = Field(..., min_length=1, max_length=NAME_MAX)
    icon: Optional[IconConfig] = None

    @field_validator("icon")
    @classmethod
    def _no_image(cls, v):
        return require_catalog_icon(reject_image_icon(v, owner="categories"))


class CategoryUpdate(BaseModel):
    """Partial update payload; only fields present in the payload are applied."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1, max_length=NAME_MAX)
    icon: Optional[IconConfig] = None

    @field_validator("name")
    @classmethod
    def _name_not_null(cls, v):
        if v is None:
            raise ValueError("name cannot be cleared")
        return v

    @field_validator("icon")
    @classmethod
    def _no_image(cls, v):
        return require_catalog_icon(reject_image_icon(v, owner="categories"))
