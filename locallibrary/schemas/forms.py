"""
Local Library: Form Validation Schemas
=======================================

What:  Pydantic models describing the create/update form payloads.
Why:   Field rules are declared next to the fields they guard, and pydantic
       collects every failing rule in one pass so the form can show them all.
How:   Each POST handler runs the same three steps through `validate_form`:

           raw form ──► normalize ──► sanitize ──► validate
                        (multi-value)  (trim+escape) (pydantic rules)

       The sanitized values are returned even when validation fails; the
       handler builds its candidate record from them to re-render the form
       with the user's prior input.

Validation failures are never raised past the handler: a FormSubmission with
errors is an ordinary return value.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Any, ClassVar, Dict, Generic, List, Mapping, Optional, Tuple, Type, TypeVar

from dateutil.parser import isoparse
from markupsafe import escape
from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from locallibrary.models.book_instance import CopyStatus

NAME_MAX_LENGTH = 100


class FieldError(BaseModel):
    """One rejected rule: the form field and the message shown beside the form."""
    field: str
    message: str


# ══════════════════════════════════════════════════════════════════════════
# Normalization & Sanitizing
# ══════════════════════════════════════════════════════════════════════════

def normalize_multi_value(value: Any) -> List[Any]:
    """
    Coerce a possibly-absent or scalar field into a list.

        None         → []
        "x"          → ["x"]
        ["x", "y"]   → ["x", "y"]
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def form_to_dict(form: Any) -> Dict[str, Any]:
    """
    Flatten Starlette FormData into a plain dict.

    A key submitted once maps to its value, a repeated key maps to a list of
    values. Multi-value fields are then normalized by the form schema, so a
    single checked checkbox and several checked checkboxes end up the same.
    """
    data: Dict[str, Any] = {}
    for key, value in form.multi_items():
        if key not in data:
            data[key] = value
        elif isinstance(data[key], list):
            data[key].append(value)
        else:
            data[key] = [data[key], value]
    return data


def clean_text(value: Any) -> str:
    """Trim surrounding whitespace and HTML-escape unsafe characters."""
    if value is None:
        return ""
    return str(escape(str(value).strip()))


def _required(value: str, message: str) -> str:
    if not value:
        raise PydanticCustomError("required", message)
    return value


def coerce_date(value: Any) -> Optional[date]:
    """Lenient ISO-8601 parse used for candidate records: None when empty or invalid."""
    if value is None or isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return isoparse(value).date()
    except (ValueError, OverflowError):
        return None


def coerce_uuid(value: Any) -> Optional[uuid.UUID]:
    """Lenient identifier parse: None when empty or not a UUID."""
    if value is None or isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def _parse_optional_date(value: Any, message: str) -> Optional[date]:
    if not value:
        return None
    parsed = coerce_date(value)
    if parsed is None:
        raise PydanticCustomError("invalid_date", message)
    return parsed


def _parse_reference(value: Any, message: str) -> uuid.UUID:
    parsed = coerce_uuid(value)
    if parsed is None:
        raise PydanticCustomError("invalid_reference", message)
    return parsed


# ══════════════════════════════════════════════════════════════════════════
# Form Schemas
# ══════════════════════════════════════════════════════════════════════════

class CatalogForm(BaseModel):
    """
    Base for every form schema.

    Class attributes drive sanitizing:
        multi_value_fields: normalized to lists, each entry trimmed and escaped
        escaped_fields:     trimmed and HTML-escaped
        everything else:    trimmed only
    """

    multi_value_fields: ClassVar[Tuple[str, ...]] = ()
    escaped_fields: ClassVar[Tuple[str, ...]] = ()

    @classmethod
    def sanitize(cls, raw: Mapping[str, Any]) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for name in cls.model_fields:
            value = raw.get(name)
            if name in cls.multi_value_fields:
                values[name] = [clean_text(item) for item in normalize_multi_value(value)]
            elif name in cls.escaped_fields:
                values[name] = clean_text(value)
            else:
                values[name] = "" if value is None else str(value).strip()
        return values


class AuthorForm(CatalogForm):
    escaped_fields: ClassVar[Tuple[str, ...]] = ("first_name", "family_name")

    first_name: str
    family_name: str
    date_of_birth: Optional[date] = None
    date_of_death: Optional[date] = None

    @field_validator("first_name", "family_name")
    @classmethod
    def validate_name(cls, value: str, info: ValidationInfo) -> str:
        label = "First name" if info.field_name == "first_name" else "Family name"
        _required(value, f"{label} is required.")
        if len(value) > NAME_MAX_LENGTH:
            raise PydanticCustomError(
                "too_long", f"{label} must be at most {NAME_MAX_LENGTH} characters."
            )
        if not value.isalnum():
            raise PydanticCustomError(
                "not_alphanumeric", f"{label} has non-alphanumeric characters."
            )
        return value

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def parse_date_of_birth(cls, value: Any) -> Optional[date]:
        return _parse_optional_date(value, "Invalid date of birth")

    @field_validator("date_of_death", mode="before")
    @classmethod
    def parse_date_of_death(cls, value: Any) -> Optional[date]:
        return _parse_optional_date(value, "Invalid date of death")

    @field_validator("date_of_death")
    @classmethod
    def death_after_birth(cls, value: Optional[date], info: ValidationInfo) -> Optional[date]:
        # date_of_birth is missing from info.data when it failed its own rule
        born = info.data.get("date_of_birth")
        if value is not None and born is not None and value <= born:
            raise PydanticCustomError(
                "date_order", "Date of death must be after date of birth."
            )
        return value


class BookForm(CatalogForm):
    multi_value_fields: ClassVar[Tuple[str, ...]] = ("genre",)
    escaped_fields: ClassVar[Tuple[str, ...]] = ("title", "author", "summary", "isbn")

    title: str
    author: uuid.UUID
    summary: str
    isbn: str
    genre: List[uuid.UUID] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def title_required(cls, value: str) -> str:
        return _required(value, "Title must not be empty.")

    @field_validator("author", mode="before")
    @classmethod
    def author_reference(cls, value: Any) -> uuid.UUID:
        _required(value, "Author must not be empty.")
        return _parse_reference(value, "Author must be chosen from the list.")

    @field_validator("summary")
    @classmethod
    def summary_required(cls, value: str) -> str:
        return _required(value, "Summary must not be empty.")

    @field_validator("isbn")
    @classmethod
    def isbn_required(cls, value: str) -> str:
        return _required(value, "ISBN must not be empty")

    @field_validator("genre", mode="before")
    @classmethod
    def genre_references(cls, value: Any) -> List[uuid.UUID]:
        return [_parse_reference(item, "Genre must be chosen from the list.") for item in value]


class BookInstanceForm(CatalogForm):
    escaped_fields: ClassVar[Tuple[str, ...]] = ("book", "imprint", "status")

    book: uuid.UUID
    imprint: str
    status: CopyStatus = CopyStatus.MAINTENANCE
    due_back: Optional[date] = None

    @field_validator("book", mode="before")
    @classmethod
    def book_reference(cls, value: Any) -> uuid.UUID:
        _required(value, "Book must be specified")
        return _parse_reference(value, "Book must be chosen from the list.")

    @field_validator("imprint")
    @classmethod
    def imprint_required(cls, value: str) -> str:
        return _required(value, "Imprint must be specified")

    @field_validator("status", mode="before")
    @classmethod
    def status_member(cls, value: Any) -> CopyStatus:
        if not value:
            return CopyStatus.MAINTENANCE
        try:
            return CopyStatus(value)
        except ValueError:
            raise PydanticCustomError("invalid_status", "Invalid status")

    @field_validator("due_back", mode="before")
    @classmethod
    def parse_due_back(cls, value: Any) -> Optional[date]:
        return _parse_optional_date(value, "Invalid date")


# ══════════════════════════════════════════════════════════════════════════
# Pipeline
# ══════════════════════════════════════════════════════════════════════════

FormT = TypeVar("FormT", bound=CatalogForm)


@dataclass
class FormSubmission(Generic[FormT]):
    """
    Outcome of validating one form post.

    values: sanitized payload, always present (feeds the candidate record)
    data:   the validated form, None when any rule failed
    errors: rejected rules in field declaration order
    """
    values: Dict[str, Any]
    data: Optional[FormT] = None
    errors: List[FieldError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def errors_from(exc: ValidationError) -> List[FieldError]:
    errors = []
    for error in exc.errors():
        loc = error.get("loc") or ("form",)
        errors.append(FieldError(field=str(loc[0]), message=error["msg"]))
    return errors


def validate_form(form_cls: Type[FormT], raw: Mapping[str, Any]) -> FormSubmission[FormT]:
    """Normalize, sanitize and validate a raw form payload."""
    values = form_cls.sanitize(raw)
    try:
        data = form_cls.model_validate(values)
    except ValidationError as exc:
        return FormSubmission(values=values, errors=errors_from(exc))
    return FormSubmission(values=values, data=data)
