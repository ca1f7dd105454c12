from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from employee_console.core.config import Settings
from employee_console.core.session import SessionStore
from employee_console.models.employee import ImageFile, MultipartBody
from employee_console.models.result import ApiError, ApiResult, ErrorKind

logger = logging.getLogger(__name__)


def build_form_data(body: MultipartBody) -> aiohttp.FormData:
    form = aiohttp.FormData()
    for name, value in body.parts:
        if isinstance(value, ImageFile):
            form.add_field(name, value.content, filename=value.filename, content_type=value.content_type)
        else:
            form.add_field(name, value)
    return form


def _clean_params(params: dict[str, Any] | None) -> dict[str, str] | None:
    if not params:
        return None
    return {key: str(value) for key, value in params.items() if value is not None}


class ApiClient:
    """Thin aiohttp wrapper for the employee admin API.

    Every call settles into an ``ApiResult``. A 401 on a call that carried a
    token clears the session and fires ``on_unauthorized`` before the result
    is handed back, so callers only have to stop.
    """

    def __init__(
        self,
        settings: Settings,
        session_store: SessionStore,
        on_unauthorized: Callable[[], None] | None = None,
    ) -> None:
        self.base_url = settings.API_URL.rstrip("/")
        self.timeout = settings.REQUEST_TIMEOUT
        self.session_store = session_store
        self.on_unauthorized = on_unauthorized

    async def get(self, path: str, params: dict[str, Any] | None = None) -> ApiResult:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, body: Any = None, params: dict[str, Any] | None = None) -> ApiResult:
        return await self.request("POST", path, body=body, params=params)

    async def put(self, path: str, body: Any = None, params: dict[str, Any] | None = None) -> ApiResult:
        return await self.request("PUT", path, body=body, params=params)

    async def delete(self, path: str, params: dict[str, Any] | None = None) -> ApiResult:
        return await self.request("DELETE", path, params=params)

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> ApiResult:
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = {"Accept": "application/json"}
        token = self.session_store.token
        if token:
            headers["Authorization"] = f"Bearer {token}"

        kwargs: dict[str, Any] = {"headers": headers, "params": _clean_params(params)}
        if isinstance(body, MultipartBody):
            kwargs["data"] = build_form_data(body)
        elif body is not None:
            kwargs["json"] = body

        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(method, url, **kwargs) as response:
                    payload = await self._read_body(response)
                    status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("API request %s %s failed: %s", method, url, e)
            return ApiResult.failure(
                ApiError(kind=ErrorKind.TRANSPORT, message=f"Network error: {str(e) or type(e).__name__}")
            )

        if 200 <= status < 300:
            return ApiResult.success(payload, status=status)

        logger.error("API error %s %s -> %s: %s", method, url, status, payload)
        error = ApiError.from_status(status, self._server_message(payload))
        if error.kind is ErrorKind.AUTH and token:
            self._handle_unauthorized()
        return ApiResult.failure(error)

    def image_url(self, image: str | None) -> str | None:
        if not image:
            return None
        if image.startswith("data:"):
            return image
        return f"{self.base_url}/uploads/{image}"

    def _handle_unauthorized(self) -> None:
        logger.warning("Session rejected by the server, clearing it")
        self.session_store.clear_session()
        if self.on_unauthorized is not None:
            self.on_unauthorized()

    async def _read_body(self, response: aiohttp.ClientResponse) -> Any:
        if response.status == 204:
            return None
        if response.content_type == "application/json":
            try:
                return await response.json()
            except (aiohttp.ContentTypeError, ValueError):
                logger.debug("Response claimed JSON but did not parse")
                return None
        try:
            text = await response.text(errors="replace")
        except (UnicodeDecodeError, LookupError):
            logger.debug("Response body could not be decoded")
            return None
        return text or None

    @staticmethod
    def _server_message(payload: Any) -> str | None:
        if isinstance(payload, dict):
            message = payload.get("message") or payload.get("error")
            if isinstance(message, str) and message:
                return message
        return None
