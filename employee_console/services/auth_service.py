from __future__ import annotations

import logging

from employee_console.core import navigation
from employee_console.core.navigation import Navigator
from employee_console.core.session import SessionStore
from employee_console.models.auth import LoginRequest, RegisterRequest, Session
from employee_console.models.result import ApiResult, ErrorKind
from employee_console.services.api_client import ApiClient

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


class AuthService:
    def __init__(self, api: ApiClient, session_store: SessionStore, navigator: Navigator) -> None:
        self.api = api
        self.session_store = session_store
        self.navigator = navigator

    async def login(self, username: str, password: str) -> ApiResult:
        if not username or not password:
            return ApiResult.fail(ErrorKind.VALIDATION, "Username and password are required")

        request = LoginRequest(username=username, password=password)
        result = await self.api.post("/auth/login", body=request.model_dump())
        if not result.ok:
            return result.with_fallback("Login failed")

        data = result.data if isinstance(result.data, dict) else {}
        token = data.get("token")
        if not token:
            return ApiResult.fail(ErrorKind.TRANSPORT, "Login failed: no token in response")

        self.session_store.set_session(Session(token=token, username=data.get("username") or username))
        logger.info("Logged in as %s", self.session_store.username)
        self.navigator.go(navigation.DASHBOARD)
        return result

    async def register(self, username: str, password: str, sno: str | int) -> ApiResult:
        if not username or not password or sno in (None, ""):
            return ApiResult.fail(ErrorKind.VALIDATION, "All fields are required")
        if len(username) < MIN_USERNAME_LENGTH:
            return ApiResult.fail(
                ErrorKind.VALIDATION,
                f"Username must be at least {MIN_USERNAME_LENGTH} characters",
                field="username",
            )
        if len(password) < MIN_PASSWORD_LENGTH:
            return ApiResult.fail(
                ErrorKind.VALIDATION,
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                field="password",
            )
        try:
            sno_number = int(sno)
        except (TypeError, ValueError):
            return ApiResult.fail(ErrorKind.VALIDATION, "Serial number must be a valid number", field="sno")

        request = RegisterRequest(username=username, password=password, sno=sno_number)
        result = await self.api.post("/auth/register", body=request.model_dump())
        if not result.ok:
            return result.with_fallback("Registration failed")

        logger.info("Registered user %s", username)
        self.navigator.go(navigation.LOGIN)
        return result

    def logout(self) -> None:
        self.session_store.clear_session()
        self.navigator.go(navigation.LOGIN)
