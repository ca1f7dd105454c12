from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

LOGIN = "/login"
REGISTER = "/register"
DASHBOARD = "/dashboard"
EMPLOYEES = "/employees"
EMPLOYEE_CREATE = "/employees/create"

PUBLIC_ROUTES = frozenset({LOGIN, REGISTER})


def employee_edit(employee_id: str) -> str:
    return f"/employees/edit/{employee_id}"


class Navigator:
    """Tracks the current route; listeners are told about every move."""

    def __init__(self, start: str = DASHBOARD) -> None:
        self.current = start
        self.history: list[str] = [start]
        self._listeners: list[Callable[[str], None]] = []

    def subscribe(self, listener: Callable[[str], None]) -> None:
        self._listeners.append(listener)

    def go(self, path: str, *, replace: bool = False) -> None:
        if path == self.current:
            return
        logger.debug("Navigating %s -> %s", self.current, path)
        if replace:
            self.history[-1] = path
        else:
            self.history.append(path)
        self.current = path
        for listener in self._listeners:
            listener(path)
