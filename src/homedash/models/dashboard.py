# src/homedash/models/dashboard.py
from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from homedash.errors import FieldError

from .category import Category
from .icon import ImageIcon
from .service import Service

APP_TITLE_MAX = 100


def _normalize_title(v: Optional[str]) -> Optional[str]:
    # blank titles mean "use the default title"
    if not isinstance(v, str):
        return v
    v = v.strip()
    return v or None


class DashboardConfig(BaseModel):
    """The whole persisted document. Array order is display order."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    app_title: Optional[str] = Field(default=None, alias="appTitle", max_length=APP_TITLE_MAX)
    app_logo: Optional[ImageIcon] = Field(default=None, alias="appLogo")
    categories: List[Category] = Field(default_factory=list)
    services: List[Service] = Field(default_factory=list)

    @field_validator("app_title", mode="before")
    @classmethod
    def _blank_title(cls, v):
        return _normalize_title(v)

    # ── lookups ──────────────────────────────────────────────
    def category_index(self, category_id: str) -> int:
        for i, c in enumerate(self.categories):
            if c.id == category_id:
                return i
        return -1

    def service_index(self, service_id: str) -> int:
        for i, s in enumerate(self.services):
            if s.id == service_id:
                return i
        return -1

    def has_category(self, category_id: str) -> bool:
        return self.category_index(category_id) != -1

    def services_in(self, category_id: str) -> List[Service]:
        return [s for s in self.services if s.category_id == category_id]

    def to_document(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys; unset optionals are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AppSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    app_title: Optional[str] = Field(default=None, alias="appTitle")
    app_logo: Optional[ImageIcon] = Field(default=None, alias="appLogo")
    display_title: str = Field(..., alias="displayTitle")


class AppSettingsUpdate(BaseModel):
    """
    Partial update. Omitted fields are left alone; an explicit null clears
    the stored value (and, for appLogo, its file).
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    app_title: Optional[str] = Field(default=None, alias="appTitle", max_length=APP_TITLE_MAX)
    app_logo: Optional[ImageIcon] = Field(default=None, alias="appLogo")

    @field_validator("app_title", mode="before")
    @classmethod
    def _blank_title(cls, v):
        return _normalize_title(v)


def integrity_errors(doc: DashboardConfig) -> Tuple[List[FieldError], List[FieldError]]:
    """
    Check the document-level invariants: unique category ids, unique service
    ids, and no dangling Service.categoryId. Returns (uniqueness, reference)
    error lists.
    """
    unique: List[FieldError] = []
    refs: List[FieldError] = []

    for cid, n in Counter(c.id for c in doc.categories).items():
        if n > 1:
            unique.append(FieldError(field="categories", message=f"Duplicate category id '{cid}'"))
    for sid, n in Counter(s.id for s in doc.services).items():
        if n > 1:
            unique.append(FieldError(field="services", message=f"Duplicate service id '{sid}'"))

    known = {c.id for c in doc.categories}
    for s in doc.services:
        if s.category_id not in known:
            refs.append(FieldError(
                field="services",
                message=f"Service '{s.id}' references unknown category '{s.category_id}'",
            ))
    return unique, refs
