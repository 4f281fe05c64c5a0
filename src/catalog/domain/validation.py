"""Field-level validation for product input.

Raw values arrive as strings (CLI, JSON files) or as already-typed
Python values. ``parse_product_fields`` coerces every field to its
domain type and collects *all* problems before raising, so a write is
either fully valid or rejected before touching the store.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from pydantic import EmailStr, HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from catalog.domain.exceptions import ValidationError
from catalog.domain.model.product import Grade, ProductStatus, StrainType
from catalog.domain.model.value_objects import Money

MAX_STRAIN_LENGTH = 255
MAX_CATEGORY_LENGTH = 100
REQUIRED_FIELDS = ("grade", "strain", "price")
READ_ONLY_FIELDS = frozenset(
    {"id", "price_history", "last_modified", "created_at", "updated_at", "deleted_at"}
)

_EMAIL = TypeAdapter(EmailStr)
_URL = TypeAdapter(HttpUrl)

_TRUE = {"true", "1", "yes", "y", "on"}
_FALSE = {"false", "0", "no", "n", "off"}


# --- Single-field parsers -----------------------------------------------------
# Each raises ValueError with a short message on bad input.


def _enum(enum_cls: type[Enum]) -> Callable[[Any], Enum]:
    def parse(value: Any) -> Enum:
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(value)
        except ValueError:
            allowed = ", ".join(member.value for member in enum_cls)
            raise ValueError(f"must be one of: {allowed}") from None

    return parse


def _text(max_length: int | None = None, required: bool = False) -> Callable[[Any], str | None]:
    def parse(value: Any) -> str | None:
        if value is None:
            if required:
                raise ValueError("is required")
            return None
        if not isinstance(value, str):
            raise ValueError("must be a string")
        value = value.strip()
        if required and not value:
            raise ValueError("must not be empty")
        if max_length is not None and len(value) > max_length:
            raise ValueError(f"must be at most {max_length} characters")
        return value or None

    return parse


def _money(required: bool) -> Callable[[Any], Money | None]:
    def parse(value: Any) -> Money | None:
        if value is None or value == "":
            if required:
                raise ValueError("is required")
            return None
        if isinstance(value, Money):
            return value
        try:
            return Money.of(value)
        except ValidationError:
            raise ValueError("must be a non-negative decimal") from None

    return parse


def _integer(minimum: int | None = None) -> Callable[[Any], int]:
    def parse(value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError("must be an integer")
        if isinstance(value, str):
            try:
                value = int(value.strip())
            except ValueError:
                raise ValueError("must be an integer") from None
        if not isinstance(value, int):
            raise ValueError("must be an integer")
        if minimum is not None and value < minimum:
            raise ValueError(f"must be >= {minimum}")
        return value

    return parse


def _potency(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError("must be a number between 0 and 100")
    try:
        potency = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError("must be a number between 0 and 100") from None
    if not potency.is_finite() or not Decimal("0") <= potency <= Decimal("100"):
        raise ValueError("must be a number between 0 and 100")
    return potency


def _url(value: Any) -> str | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if not isinstance(value, str):
        raise ValueError("must be a valid URL")
    try:
        _URL.validate_python(value.strip())
    except PydanticValidationError:
        raise ValueError("must be a valid URL") from None
    return value.strip()


def _email(value: Any) -> str | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if not isinstance(value, str):
        raise ValueError("must be a valid email address")
    try:
        return str(_EMAIL.validate_python(value.strip()))
    except PydanticValidationError:
        raise ValueError("must be a valid email address") from None


def _boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    raise ValueError("must be a boolean")


def _tags(value: Any) -> set[str]:
    if value is None:
        return set()
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, Iterable) or isinstance(value, Mapping):
        raise ValueError("must be a list of strings")
    tags: set[str] = set()
    for tag in value:
        if not isinstance(tag, str):
            raise ValueError("must be a list of strings")
        if tag.strip():
            tags.add(tag.strip())
    return tags


def _lab_results(value: Any) -> dict[str, Any] | None:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ValueError("must be a mapping of analyte to value")
    results: dict[str, Any] = {}
    for analyte, reading in value.items():
        if not isinstance(analyte, str):
            raise ValueError("must be a mapping of analyte to value")
        if isinstance(reading, Decimal):
            if not reading.is_finite():
                raise ValueError("must be a mapping of analyte to value")
            reading = str(reading)
        elif isinstance(reading, float) and not math.isfinite(reading):
            raise ValueError("must be a mapping of analyte to value")
        elif reading is not None and not isinstance(reading, (str, int, float)):
            raise ValueError("must be a mapping of analyte to value")
        results[analyte] = reading
    return results


def _slug(value: Any) -> str | None:
    slug = _text(MAX_STRAIN_LENGTH)(value)
    if slug is not None and any(ch.isspace() for ch in slug):
        raise ValueError("must not contain whitespace")
    return slug


_PARSERS: dict[str, Callable[[Any], Any]] = {
    "grade": _enum(Grade),
    "strain": _text(MAX_STRAIN_LENGTH, required=True),
    "thca": _potency,
    "price": _money(required=True),
    "cost_basis": _money(required=False),
    "status": _enum(ProductStatus),
    "stock": _integer(minimum=0),
    "type": _enum(StrainType),
    "photo": _url,
    "slug": _slug,
    "minimum_stock": _integer(minimum=0),
    "tags": _tags,
    "featured": _boolean,
    "sort_order": _integer(),
    "modified_by": _email,
    "description": _text(),
    "meta_title": _text(MAX_STRAIN_LENGTH),
    "meta_description": _text(),
    "category": _text(MAX_CATEGORY_LENGTH),
    "lab_results": _lab_results,
    "coa": _url,
}


def parse_product_fields(raw: Mapping[str, Any], partial: bool = False) -> dict[str, Any]:
    """Validate and coerce a mapping of product fields.

    With ``partial=False`` (creation) the required fields must be present.
    With ``partial=True`` (update) an existing slug cannot be blanked.
    Raises ValidationError naming every offending field.
    """
    errors: dict[str, str] = {}
    parsed: dict[str, Any] = {}

    for name, value in raw.items():
        if name in READ_ONLY_FIELDS:
            errors[name] = "is read-only"
            continue
        parser = _PARSERS.get(name)
        if parser is None:
            errors[name] = "is not a product field"
            continue
        try:
            parsed[name] = parser(value)
        except ValueError as exc:
            errors[name] = str(exc)

    if partial and "slug" in parsed and parsed["slug"] is None:
        errors["slug"] = "must not be empty"

    if not partial:
        for name in REQUIRED_FIELDS:
            if name not in raw:
                errors[name] = "is required"

    if errors:
        raise ValidationError(format_field_errors(errors), fields=errors)
    return parsed


def format_field_errors(errors: Mapping[str, str]) -> str:
    details = "; ".join(f"{name} {message}" for name, message in sorted(errors.items()))
    return f"Invalid product fields: {details}"
