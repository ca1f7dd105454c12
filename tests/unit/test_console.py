"""End-to-end wiring: real ApiClient, mocked aiohttp transport."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from employee_console.core import navigation
from employee_console.main import Console
from employee_console.models.employee import ImageFile
from tests.conftest import make_employee, mock_client_session, mock_response

CLIENT_SESSION = "employee_console.services.api_client.aiohttp.ClientSession"
PNG = ImageFile(filename="a.png", content_type="image/png", content=b"png")


@pytest.fixture
def console(settings, session_store) -> Console:
    return Console(config=settings, session_store=session_store)


async def _refresh(console: Console):
    return await console.employee_list().refresh()


async def _delete(console: Console):
    return await console.employee_list(confirm=lambda prompt: True).delete("e1")


async def _load(console: Console):
    return await console.employee_form("e1").load()


async def _create(console: Console):
    form = console.employee_form()
    for name, value in (("name", "Ann"), ("email", "ann@example.com"), ("mobile", "9876543210"), ("gender", "F")):
        form.set_field(name, value)
    form.set_image(PNG)
    return await form.submit()


@pytest.mark.anyio
@pytest.mark.parametrize("operation", [_refresh, _delete, _load, _create])
async def test_unauthorized_anywhere_logs_out_and_redirects(console, operation):
    mock_cs, _ = mock_client_session(mock_response(status=401, json_data={"message": "jwt expired"}))

    with patch(CLIENT_SESSION, return_value=mock_cs):
        result = await operation(console)

    assert result.is_unauthorized
    assert console.session_store.get_session() is None
    assert console.navigator.current == navigation.LOGIN
    assert console.employee_list() is None


@pytest.mark.anyio
async def test_list_scenario_page_two_of_three(console):
    body = {"employees": [make_employee(f"Emp{i}", employee_id=f"e{i}") for i in range(10)], "total": 25, "pages": 3}
    mock_cs, session = mock_client_session(mock_response(json_data=body))
    controller = console.employee_list()

    with patch(CLIENT_SESSION, return_value=mock_cs):
        await controller.go_to_page(2)
        assert controller.query.page == 1
        await controller.refresh()
        await controller.go_to_page(2)

    assert session.request.call_args.kwargs["params"]["page"] == "2"
    assert controller.page_label == "Page 2 of 3"
    assert controller.can_go_previous
    assert controller.can_go_next
    assert len(controller.employees) == 10


def test_protected_views_need_a_session(settings, anonymous_store):
    console = Console(config=settings, session_store=anonymous_store)

    assert console.dashboard() is None
    assert console.employee_list() is None
    assert console.employee_form("e1") is None
    assert console.navigator.current == navigation.LOGIN


def test_dashboard_greets_user(console):
    assert console.dashboard() == "WELCOME ADMIN PANEL, admin"
