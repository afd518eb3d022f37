# src/homedash/services/validation.py
from __future__ import annotations

from collections import Counter
from typing import Any, List, Mapping, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from homedash.errors import FieldError, ValidationFailed, field_errors_from_pydantic

M = TypeVar("M", bound=BaseModel)


def parse_payload(model: Type[M], data: Any, *, entity_id: Optional[str] = None) -> M:
    """
    Validate raw input into `model`, reporting every problem at once.

    For updates pass `entity_id`: an `id` key equal to it is ignored (forms
    tend to echo the whole entity back), any other `id` is rejected.
    """
    if isinstance(data, model):
        return data

    extra: List[FieldError] = []
    if entity_id is not None and isinstance(data, Mapping) and "id" in data:
        data = dict(data)
        sent = data.pop("id")
        if sent != entity_id:
            extra.append(FieldError(field="id", message="id cannot be changed"))

    try:
        parsed = model.model_validate(data if data is not None else {})
    except ValidationError as e:
        raise ValidationFailed(field_errors_from_pydantic(e) + extra) from e
    if extra:
        raise ValidationFailed(extra)
    return parsed


def permutation_errors(existing: Sequence[str], ordered: Sequence[str], *, field: str = "orderedIds",
                       scope: str = "") -> List[FieldError]:
    """
    `ordered` must contain every id of `existing` exactly once and nothing
    else. Returns the problems found, in a stable order.
    """
    errors: List[FieldError] = []
    known = set(existing)
    where = f" in {scope}" if scope else ""

    dupes = [i for i, n in Counter(ordered).items() if n > 1]
    for i in dupes:
        errors.append(FieldError(field=field, message=f"Duplicate id '{i}'"))
    for i in ordered:
        if i not in known:
            errors.append(FieldError(field=field, message=f"Id '{i}' not found{where}"))
    given = set(ordered)
    for i in existing:
        if i not in given:
            errors.append(FieldError(field=field, message=f"Id '{i}' is missing from the new order"))
    return errors
