"""Employee records as served by the admin API, and the form data used to edit them."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

DESIGNATIONS: tuple[str, ...] = ("HR", "Manager", "Sales")
GENDERS: tuple[str, ...] = ("M", "F")
COURSES: tuple[str, ...] = ("MCA", "BCA", "BSC")

ALLOWED_IMAGE_TYPES: tuple[str, ...] = ("image/jpeg", "image/png")


def _unique(values: list[str]) -> list[str]:
    seen: list[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


class Employee(BaseModel):
    """One employee row.

    ``key`` is the server's record key (``_id``) and addresses the record in
    edit and delete calls. ``id`` is the number shown in the ID column and used
    for sorting; records without one fall back to the key.
    """

    model_config = {"populate_by_name": True, "frozen": True}

    key: str = Field(alias="_id")
    id: str | None = None
    name: str = ""
    email: str = ""
    mobile: str = ""
    designation: str = ""
    gender: str = ""
    course: list[str] = []
    image: str | None = None
    create_date: datetime | None = Field(default=None, alias="createDate")

    @property
    def display_id(self) -> str:
        return self.id or self.key

    @model_validator(mode="before")
    @classmethod
    def _key_from_plain_id(cls, data: object) -> object:
        if isinstance(data, dict) and "_id" not in data and "key" not in data and "id" in data:
            return {**data, "_id": data["id"]}
        return data

    @field_validator("key", "id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value

    @field_validator("mobile", mode="before")
    @classmethod
    def _coerce_mobile(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value

    @field_validator("course", mode="before")
    @classmethod
    def _dedupe_course(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        return _unique(list(value))


class EmployeePage(BaseModel):
    """Body of ``GET /employees``."""

    employees: list[Employee] = []
    total: int = 0
    pages: int = 0

    @field_validator("employees", mode="before")
    @classmethod
    def _none_is_empty(cls, value: object) -> object:
        return value or []

    @field_validator("total", "pages", mode="before")
    @classmethod
    def _none_is_zero(cls, value: object) -> object:
        return value or 0


class ImageFile(BaseModel):
    """A picked image file: its name, declared type and bytes."""

    filename: str
    content_type: str
    content: bytes = b""

    @property
    def is_supported(self) -> bool:
        return self.content_type in ALLOWED_IMAGE_TYPES


class EmployeeFormData(BaseModel):
    """Editable fields of the create/edit form."""

    name: str = ""
    email: str = ""
    mobile: str = ""
    designation: str = DESIGNATIONS[0]
    gender: str = ""
    course: list[str] = []

    @classmethod
    def from_employee(cls, employee: Employee) -> EmployeeFormData:
        return cls(
            name=employee.name,
            email=employee.email,
            mobile=employee.mobile,
            designation=employee.designation,
            gender=employee.gender,
            course=_unique(employee.course),
        )


class MultipartBody(BaseModel):
    """Ordered form parts; a name may repeat (``course[]``)."""

    parts: list[tuple[str, str | ImageFile]] = []

    def add(self, name: str, value: str | ImageFile) -> None:
        self.parts.append((name, value))

    def values(self, name: str) -> list[str | ImageFile]:
        return [value for part_name, value in self.parts if part_name == name]

    def names(self) -> list[str]:
        return [name for name, _ in self.parts]
