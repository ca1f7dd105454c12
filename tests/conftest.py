from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from employee_console.core.config import Settings
from employee_console.core.navigation import Navigator
from employee_console.core.session import SessionStore
from employee_console.models.auth import Session
from employee_console.models.result import ApiResult
from employee_console.services.api_client import ApiClient

TEST_API_URL = "http://api.test/api"
TEST_TOKEN = "test-token-123"
TEST_USERNAME = "admin"


def make_employee(name: str = "Ann", employee_id: str = "e1", **overrides) -> dict:
    record = {
        "_id": employee_id,
        "name": name,
        "email": f"{name.lower()}@example.com",
        "mobile": "9876543210",
        "designation": "HR",
        "gender": "F",
        "course": ["MCA"],
        "image": f"{employee_id}.png",
        "createDate": "2024-03-01T10:00:00Z",
    }
    record.update(overrides)
    return record


def mock_response(
    status: int = 200,
    json_data: object = None,
    text: str = "",
    content_type: str = "application/json",
) -> MagicMock:
    response = MagicMock()
    response.status = status
    response.content_type = content_type
    response.json = AsyncMock(return_value=json_data)
    response.text = AsyncMock(return_value=text)
    return response


def mock_client_session(response: MagicMock) -> tuple[AsyncMock, MagicMock]:
    request_context = AsyncMock()
    request_context.__aenter__.return_value = response
    request_context.__aexit__.return_value = None

    session = MagicMock()
    session.request.return_value = request_context

    client_session = AsyncMock()
    client_session.__aenter__.return_value = session
    client_session.__aexit__.return_value = None
    return client_session, session


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        API_URL=TEST_API_URL,
        SESSION_FILE=str(tmp_path / "session.json"),
        PAGE_SIZE=10,
        REQUEST_TIMEOUT=5.0,
    )


@pytest.fixture
def session_store(settings) -> SessionStore:
    store = SessionStore.from_settings(settings)
    store.set_session(Session(token=TEST_TOKEN, username=TEST_USERNAME))
    return store


@pytest.fixture
def anonymous_store(tmp_path) -> SessionStore:
    return SessionStore(tmp_path / "anonymous.json")


@pytest.fixture
def navigator() -> Navigator:
    return Navigator()


@pytest.fixture
def api() -> MagicMock:
    client = MagicMock(spec=ApiClient)
    client.get = AsyncMock(return_value=ApiResult.success({}))
    client.post = AsyncMock(return_value=ApiResult.success({}))
    client.put = AsyncMock(return_value=ApiResult.success({}))
    client.delete = AsyncMock(return_value=ApiResult.success(None, status=204))
    return client


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
