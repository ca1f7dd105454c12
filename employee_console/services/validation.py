"""Client-side checks run on the employee form before anything is sent."""

from __future__ import annotations

import re

from pydantic import BaseModel

from employee_console.models.employee import EmployeeFormData, ImageFile

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
MOBILE_RE = re.compile(r"[0-9]{10}")

REQUIRED_FIELDS: tuple[str, ...] = ("name", "email", "mobile", "gender")


class FieldError(BaseModel):
    field: str
    message: str


def is_valid_email(email: str) -> bool:
    return EMAIL_RE.fullmatch(email) is not None


def is_valid_mobile(mobile: str) -> bool:
    return MOBILE_RE.fullmatch(mobile) is not None


def validate_employee_form(
    fields: EmployeeFormData,
    require_image: bool,
    image: ImageFile | None = None,
) -> FieldError | None:
    """Return the first failed rule, or None when the form may be submitted."""
    for name in REQUIRED_FIELDS:
        if not getattr(fields, name).strip():
            return FieldError(field=name, message="All fields are required")
    if require_image and image is None:
        return FieldError(field="image", message="All fields are required")

    if not is_valid_email(fields.email):
        return FieldError(field="email", message="Invalid email format")

    if not is_valid_mobile(fields.mobile):
        return FieldError(field="mobile", message="Mobile number must be 10 digits")

    return None
