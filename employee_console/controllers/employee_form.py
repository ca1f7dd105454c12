from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from pydantic import ValidationError

from employee_console.core import navigation
from employee_console.core.navigation import Navigator
from employee_console.core.session import SessionStore
from employee_console.models.employee import (
    COURSES,
    DESIGNATIONS,
    GENDERS,
    Employee,
    EmployeeFormData,
    ImageFile,
    MultipartBody,
)
from employee_console.models.result import ApiError, ApiResult, ErrorKind
from employee_console.services.api_client import ApiClient
from employee_console.services.validation import validate_employee_form

logger = logging.getLogger(__name__)

SCALAR_FIELDS: tuple[str, ...] = ("name", "email", "mobile", "designation", "gender")
UNSUPPORTED_IMAGE_MESSAGE = "Only JPG/PNG files are allowed"
OPTION_FIELDS: dict[str, tuple[str, ...]] = {"designation": DESIGNATIONS, "gender": GENDERS}


class FormMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


class FormState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FETCH_FAILED = "fetch_failed"
    EDITING = "editing"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


class EmployeeFormController:
    """Create or edit one employee.

    Without ``employee_id`` the form creates a record and an image is
    mandatory. With it, ``load()`` fills the form from the server and the
    image may be left alone, in which case the update carries no image part
    and the server keeps the stored one.
    """

    def __init__(
        self,
        api: ApiClient,
        session_store: SessionStore,
        navigator: Navigator,
        employee_id: str | None = None,
    ) -> None:
        self.api = api
        self.session_store = session_store
        self.navigator = navigator
        self.employee_id = employee_id

        self.fields = EmployeeFormData()
        self.image: ImageFile | None = None
        self.current_image: str | None = None
        self.error = ""
        self.state = FormState.IDLE
        self._closed = False

    @property
    def mode(self) -> FormMode:
        return FormMode.CREATE if self.employee_id is None else FormMode.EDIT

    def close(self) -> None:
        self._closed = True

    async def load(self) -> ApiResult:
        if self.mode is FormMode.CREATE:
            return ApiResult.success(self.fields)

        if self.session_store.get_session() is None:
            self.navigator.go(navigation.LOGIN)
            return ApiResult.fail(ErrorKind.AUTH, "Not logged in")

        self.state = FormState.LOADING
        result = await self.api.get(f"/employees/{self.employee_id}")
        if self._closed:
            return result

        if result.ok and not result.data:
            result = ApiResult.failure(ApiError(kind=ErrorKind.NOT_FOUND, message="Employee not found"))
        if result.ok:
            try:
                employee = Employee.model_validate(result.data)
            except ValidationError:
                logger.exception("Malformed employee %s", self.employee_id)
                result = ApiResult.fail(ErrorKind.TRANSPORT, "Error fetching employee")
            else:
                self.fields = EmployeeFormData.from_employee(employee)
                self.current_image = employee.image
                self.error = ""
                self.state = FormState.LOADED
                return result

        result = result.with_fallback("Error fetching employee")
        self.error = result.error.message
        self.state = FormState.FETCH_FAILED
        if result.is_not_found:
            self.navigator.go(navigation.EMPLOYEES)
        return result

    def set_field(self, name: str, value: Any) -> None:
        if name not in SCALAR_FIELDS:
            raise ValueError(f"Unknown form field {name!r}")
        value = "" if value is None else str(value)
        choices = OPTION_FIELDS.get(name)
        if choices and value and value not in choices:
            raise ValueError(f"Unknown {name} {value!r}; expected one of {', '.join(choices)}")
        self.fields = self.fields.model_copy(update={name: value})
        self.state = FormState.EDITING

    def set_course_membership(self, course: str, included: bool) -> None:
        if course not in COURSES:
            raise ValueError(f"Unknown course {course!r}; expected one of {', '.join(COURSES)}")
        courses = [c for c in self.fields.course if c != course]
        if included:
            courses.append(course)
        self.fields = self.fields.model_copy(update={"course": courses})
        self.state = FormState.EDITING

    def set_image(self, file: ImageFile | None) -> ApiResult:
        if file is None:
            return ApiResult.success(self.image)
        if not file.is_supported:
            self.error = UNSUPPORTED_IMAGE_MESSAGE
            return ApiResult.fail(ErrorKind.UNSUPPORTED_FILE, UNSUPPORTED_IMAGE_MESSAGE, field="image")
        self.image = file
        self.error = ""
        self.state = FormState.EDITING
        return ApiResult.success(file)

    def build_payload(self) -> MultipartBody:
        body = MultipartBody()
        for name in SCALAR_FIELDS:
            body.add(name, getattr(self.fields, name))
        for course in self.fields.course:
            body.add("course[]", course)
        if self.image is not None:
            body.add("image", self.image)
        return body

    async def submit(self) -> ApiResult:
        self.error = ""
        problem = validate_employee_form(
            self.fields,
            require_image=self.mode is FormMode.CREATE,
            image=self.image,
        )
        if problem is not None:
            self.error = problem.message
            self.state = FormState.EDITING
            return ApiResult.fail(ErrorKind.VALIDATION, problem.message, field=problem.field)

        if self.session_store.get_session() is None:
            self.navigator.go(navigation.LOGIN)
            return ApiResult.fail(ErrorKind.AUTH, "Not logged in")

        self.state = FormState.SUBMITTING
        payload = self.build_payload()
        if self.mode is FormMode.CREATE:
            result = await self.api.post("/employees", body=payload)
            fallback = "Error creating employee"
        else:
            result = await self.api.put(f"/employees/{self.employee_id}", body=payload)
            fallback = "Error updating employee"

        if self._closed:
            return result

        if not result.ok:
            result = result.with_fallback(fallback)
            self.error = result.error.message
            self.state = FormState.FAILED
            return result

        logger.info("Employee %s saved", self.employee_id or self.fields.email)
        self.state = FormState.SUCCESS
        self.navigator.go(navigation.EMPLOYEES)
        return result
