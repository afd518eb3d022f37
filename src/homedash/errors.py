# src/homedash/errors.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError


class FieldError(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    message: str


class DashboardError(Exception):
    """
    Base class for every error a store operation reports to its caller.
    Carries one or more {field, message} pairs so an HTTP layer can render
    them without knowing the concrete subclass.
    """
    kind = "error"

    def __init__(self, errors: Iterable[FieldError] | str, *, field: str = "general") -> None:
        if isinstance(errors, str):
            errors = [FieldError(field=field, message=errors)]
        self.errors: List[FieldError] = list(errors)
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in self.errors))

    @property
    def message(self) -> str:
        return self.errors[0].message if self.errors else ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "kind": self.kind,
            "errors": [e.model_dump() for e in self.errors],
        }


class ValidationFailed(DashboardError):
    kind = "validation"

    @classmethod
    def from_pydantic(cls, exc: ValidationError, *, prefix: Optional[str] = None) -> "ValidationFailed":
        return cls(field_errors_from_pydantic(exc, prefix=prefix))


class ReferenceIntegrityError(DashboardError):
    kind = "reference"


class NotFoundError(DashboardError):
    kind = "not_found"


class StorageFailure(DashboardError):
    kind = "storage"


class DocumentCorrupt(StorageFailure):
    pass


def field_errors_from_pydantic(exc: ValidationError, *, prefix: Optional[str] = None) -> List[FieldError]:
    """
    Flatten a pydantic ValidationError into FieldErrors, preserving pydantic's
    ordering so the same input always yields the same list.
    """
    out: List[FieldError] = []
    for err in exc.errors(include_url=False):
        loc = [str(p) for p in err.get("loc", ())]
        if prefix:
            loc.insert(0, prefix)
        msg = err.get("msg", "Invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        out.append(FieldError(field=".".join(loc) or "general", message=msg))
    return out
