# src/homedash/models/service.py
from __future__ import annotations

from typing import Annotated, Optional

from pydantic import AfterValidator, AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .category import ENTITY_ID_MAX, ENTITY_ID_PATTERN, NAME_MAX
from .icon import IconConfig, require_catalog_icon

DESCRIPTION_MAX = 500

# Basename reserved for the dashboard logo in the icons directory
APP_LOGO_ID = "app-logo"

_url_adapter = TypeAdapter(AnyUrl)


def _check_url(v: str) -> str:
    """Require an absolute URL; the value is stored exactly as entered."""
    try:
        _url_adapter.validate_python(v)
    except ValidationError:
        raise ValueError("Must be a valid absolute URL (e.g. https://plex.local)")
    return v


AbsoluteUrl = Annotated[str, AfterValidator(_check_url)]


class Service(BaseModel):
    """Stored Service (element of DashboardConfig.services)."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="allow")

    id: str = Field(..., min_length=1, max_length=ENTITY_ID_MAX, pattern=ENTITY_ID_PATTERN)
    name: str = Field(..., min_length=1, max_length=NAME_MAX)
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX)
    url: AbsoluteUrl
    category_id: str = Field(..., alias="categoryId", min_length=1)
    icon: Optional[IconConfig] = None
    active: bool = True
    # ISO-8601 UTC, kept exactly as written
    created_at: Optional[str] = Field(default=None, alias="createdAt")


class ServiceCreate(BaseModel):
    """Payload for create-service. `id` is generated when omitted."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="forbid")

    id: Optional[str] = Field(default=None, min_length=1, max_length=ENTITY_ID_MAX, pattern=ENTITY_ID_PATTERN)
    name: str = Field(..., min_length=1, max_length=NAME_MAX)
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX)
    url: AbsoluteUrl
    category_id: str = Field(..., alias="categoryId", min_length=1)
    icon: Optional[IconConfig] = None
    active: bool = True

    @field_validator("id")
    @classmethod
    def _not_reserved(cls, v):
        if v == APP_LOGO_ID:
            raise ValueError(f"'{APP_LOGO_ID}' is reserved")
        return v

    @field_validator("icon")
    @classmethod
    def _catalog_icon(cls, v):
        return require_catalog_icon(v)


class ServiceUpdate(BaseModel):
    """Partial update payload; only fields present in the payload are applied."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1, max_length=NAME_MAX)
    description: Optional[str] = Field(default=None, min_length=1, max_length=DESCRIPTION_MAX)
    url: Optional[AbsoluteUrl] = None
    category_id: Optional[str] = Field(default=None, alias="categoryId", min_length=1)
    icon: Optional[IconConfig] = None
    active: Optional[bool] = None

    @field_validator("name", "description", "url", "category_id", "active")
    @classmethod
    def _not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be cleared")
        return v

    @field_validator("icon")
    @classmethod
    def _catalog_icon(cls, v):
        return require_catalog_icon(v)
