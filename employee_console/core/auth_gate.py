"""Guard for protected views: no session, no view."""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import TypeVar

from employee_console.core import navigation
from employee_console.core.navigation import Navigator
from employee_console.core.session import SessionStore

T = TypeVar("T")


class AuthGate:
    def __init__(self, session_store: SessionStore, navigator: Navigator) -> None:
        self.session_store = session_store
        self.navigator = navigator

    def allows(self) -> bool:
        # Only checks presence; an expired token is discovered by the next 401.
        return self.session_store.get_session() is not None

    def guard(self, view: Callable[[], T]) -> T | None:
        if not self.allows():
            self.navigator.go(navigation.LOGIN, replace=True)
            return None
        return view()

    def protect(self, view: Callable[..., T]) -> Callable[..., T | None]:
        @functools.wraps(view)
        def _guarded(*args, **kwargs):
            return self.guard(lambda: view(*args, **kwargs))

        return _guarded
