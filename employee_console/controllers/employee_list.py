"""Paginated, sorted and searchable employee list.

Each change to the query produces a new ``QueryState`` and a refresh. Every
refresh is tagged with a generation number and only the newest one is
allowed to commit, so a slow response to an old query never overwrites the
rows of a newer one.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from pydantic import BaseModel, ValidationError

from employee_console.core import navigation
from employee_console.core.config import Settings
from employee_console.core.navigation import Navigator
from employee_console.core.session import SessionStore
from employee_console.models.employee import Employee, EmployeePage
from employee_console.models.result import ApiError, ApiResult, ErrorKind
from employee_console.services.api_client import ApiClient

logger = logging.getLogger(__name__)

SORTABLE_FIELDS: tuple[str, ...] = ("id", "name", "email", "createDate")
DELETE_PROMPT = "Are you sure you want to delete this employee?"

ConfirmCallback = Callable[[str], bool | Awaitable[bool]]


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class QueryState(BaseModel):
    model_config = {"frozen": True}

    page: int = 1
    page_size: int = 10
    search: str = ""
    sort_field: str = "name"
    sort_order: SortOrder = SortOrder.ASC

    def sorted_by(self, field: str) -> QueryState:
        if field not in SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort by {field!r}; expected one of {', '.join(SORTABLE_FIELDS)}")
        if field == self.sort_field:
            order = SortOrder.DESC if self.sort_order is SortOrder.ASC else SortOrder.ASC
        else:
            order = SortOrder.ASC
        return self.model_copy(update={"sort_field": field, "sort_order": order})

    def to_params(self) -> dict[str, str | int]:
        return {
            "page": self.page,
            "limit": self.page_size,
            "search": self.search,
            "sort": self.sort_field,
            "order": self.sort_order.value,
        }


class EmployeeListController:
    def __init__(
        self,
        api: ApiClient,
        session_store: SessionStore,
        navigator: Navigator,
        settings: Settings,
        *,
        confirm: ConfirmCallback | None = None,
        query: QueryState | None = None,
    ) -> None:
        self.api = api
        self.session_store = session_store
        self.navigator = navigator
        self.confirm = confirm
        self.reset_page_on_query_change = settings.RESET_PAGE_ON_QUERY_CHANGE
        self.query = query or QueryState(page_size=settings.PAGE_SIZE)

        self.employees: list[Employee] = []
        self.total = 0
        self.pages = 0
        self.error = ""
        self.loading = False

        self._generation = 0
        self._closed = False

    @property
    def page_label(self) -> str:
        return f"Page {self.query.page} of {self.pages}"

    @property
    def count_label(self) -> str:
        return f"Employees List (Count: {self.total})"

    @property
    def can_go_previous(self) -> bool:
        return self.query.page > 1

    @property
    def can_go_next(self) -> bool:
        return self.query.page < self.pages

    def close(self) -> None:
        """Detach the controller; responses still in flight are dropped."""
        self._closed = True

    def dismiss_error(self) -> None:
        self.error = ""

    async def refresh(self) -> ApiResult:
        if self.session_store.get_session() is None:
            self.navigator.go(navigation.LOGIN)
            return ApiResult.fail(ErrorKind.AUTH, "Not logged in")

        self._generation += 1
        generation = self._generation
        query = self.query
        self.loading = True

        result = await self.api.get("/employees", params=query.to_params())

        if self._closed or generation != self._generation:
            logger.debug("Discarding stale employee list response for %s", query)
            return result

        self.loading = False
        if not result.ok:
            result = result.with_fallback("Error fetching employees")
            self.error = result.error.message
            return result

        try:
            page = EmployeePage.model_validate(result.data or {})
        except ValidationError:
            logger.exception("Malformed employee list response")
            self.error = "Error fetching employees"
            return ApiResult.failure(
                ApiError(kind=ErrorKind.TRANSPORT, status=result.status, message=self.error)
            )

        self.employees = page.employees
        self.total = page.total
        self.pages = page.pages
        self.error = ""
        return result

    async def set_query(self, query: QueryState) -> ApiResult:
        self.query = query
        return await self.refresh()

    async def set_search(self, text: str) -> ApiResult:
        return await self.set_query(self._filtered(self.query.model_copy(update={"search": text})))

    async def sort_by(self, field: str) -> ApiResult:
        return await self.set_query(self._filtered(self.query.sorted_by(field)))

    async def go_to_page(self, page: int) -> ApiResult | None:
        target = max(1, min(page, self.pages)) if self.pages else 1
        if target == self.query.page:
            return None
        return await self.set_query(self.query.model_copy(update={"page": target}))

    async def next_page(self) -> ApiResult | None:
        if not self.can_go_next:
            return None
        return await self.go_to_page(self.query.page + 1)

    async def previous_page(self) -> ApiResult | None:
        if not self.can_go_previous:
            return None
        return await self.go_to_page(self.query.page - 1)

    async def delete(self, employee_id: str) -> ApiResult | None:
        """Delete after confirmation. Returns None when the user declines."""
        if not await self._confirmed(DELETE_PROMPT):
            return None

        if self.session_store.get_session() is None:
            self.navigator.go(navigation.LOGIN)
            return ApiResult.fail(ErrorKind.AUTH, "Not logged in")

        result = await self.api.delete(f"/employees/{employee_id}")
        if self._closed:
            return result
        if not result.ok:
            result = result.with_fallback("Error deleting employee")
            self.error = result.error.message
            return result

        logger.info("Deleted employee %s", employee_id)
        self.error = ""
        await self.refresh()
        return result

    def _filtered(self, query: QueryState) -> QueryState:
        if self.reset_page_on_query_change:
            return query.model_copy(update={"page": 1})
        return query

    async def _confirmed(self, prompt: str) -> bool:
        if self.confirm is None:
            return False
        answer = self.confirm(prompt)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)
