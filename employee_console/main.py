from __future__ import annotations

import logging

from employee_console.controllers.employee_form import EmployeeFormController
from employee_console.controllers.employee_list import ConfirmCallback, EmployeeListController, QueryState
from employee_console.core import navigation
from employee_console.core.auth_gate import AuthGate
from employee_console.core.config import Settings, settings
from employee_console.core.navigation import Navigator
from employee_console.core.session import SessionStore
from employee_console.services.api_client import ApiClient
from employee_console.services.auth_service import AuthService

logger = logging.getLogger(__name__)


class Console:
    """Wires the session store, router, API client and controllers together."""

    def __init__(
        self,
        config: Settings | None = None,
        session_store: SessionStore | None = None,
        navigator: Navigator | None = None,
    ) -> None:
        self.settings = config or settings
        self.session_store = session_store or SessionStore.from_settings(self.settings)
        self.navigator = navigator or Navigator()
        self.api = ApiClient(self.settings, self.session_store, on_unauthorized=self._to_login)
        self.auth_gate = AuthGate(self.session_store, self.navigator)
        self.auth = AuthService(self.api, self.session_store, self.navigator)

    def _to_login(self) -> None:
        self.navigator.go(navigation.LOGIN, replace=True)

    def dashboard(self) -> str | None:
        return self.auth_gate.guard(lambda: f"WELCOME ADMIN PANEL, {self.session_store.username}")

    def employee_list(
        self,
        *,
        confirm: ConfirmCallback | None = None,
        query: QueryState | None = None,
    ) -> EmployeeListController | None:
        self.navigator.go(navigation.EMPLOYEES)
        return self.auth_gate.guard(
            lambda: EmployeeListController(
                self.api,
                self.session_store,
                self.navigator,
                self.settings,
                confirm=confirm,
                query=query,
            )
        )

    def employee_form(self, employee_id: str | None = None) -> EmployeeFormController | None:
        route = navigation.EMPLOYEE_CREATE if employee_id is None else navigation.employee_edit(employee_id)
        self.navigator.go(route)
        return self.auth_gate.guard(
            lambda: EmployeeFormController(self.api, self.session_store, self.navigator, employee_id)
        )
