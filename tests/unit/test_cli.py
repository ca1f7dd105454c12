from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from employee_console.cli import _report, load_image, parse_args, render_list, run
from employee_console.controllers.employee_list import QueryState
from employee_console.main import Console
from employee_console.models.result import ApiError, ApiResult
from tests.conftest import make_employee


@pytest.fixture
def console(settings, session_store) -> Console:
    console = Console(config=settings, session_store=session_store)
    console.api.get = AsyncMock(return_value=ApiResult.success({"employees": [], "total": 0, "pages": 0}))
    console.api.post = AsyncMock(return_value=ApiResult.success({"_id": "e1"}, status=201))
    console.api.put = AsyncMock(return_value=ApiResult.success({"_id": "e1"}))
    console.api.delete = AsyncMock(return_value=ApiResult.success(None, status=204))
    return console


def test_parse_list_defaults():
    args = parse_args(["list"])
    assert args.command == "list"
    assert args.page == 1
    assert args.search == ""
    assert args.sort == "name"
    assert not args.desc


def test_parse_rejects_unknown_sort_field():
    with pytest.raises(SystemExit):
        parse_args(["list", "--sort", "salary"])


def test_render_list_shows_page_and_controls(console):
    controller = console.employee_list(query=QueryState(page=2))
    controller.employees = []
    controller.total = 25
    controller.pages = 3

    output = render_list(controller, console)

    assert "Employees List (Count: 25)" in output
    assert "[Previous] Page 2 of 3 [Next]" in output


@pytest.mark.anyio
async def test_list_command_prints_rows(console, capsys):
    body = {"employees": [make_employee("Ann", employee_id="e1")], "total": 1, "pages": 1}
    console.api.get.return_value = ApiResult.success(body)

    code = await run(parse_args(["list", "--search", "an", "--sort", "email", "--desc"]), console)

    assert code == 0
    params = console.api.get.await_args.kwargs["params"]
    assert params == {"page": 1, "limit": 10, "search": "an", "sort": "email", "order": "desc"}
    out = capsys.readouterr().out
    assert "e1 | Ann | ann@example.com" in out
    assert "http://api.test/api/uploads/e1.png" in out
    assert "Page 1 of 1" in out


@pytest.mark.anyio
async def test_list_shows_display_id_and_record_key(console, capsys):
    body = {"employees": [make_employee("Ann", employee_id="64f1c0", id=17)], "total": 1, "pages": 1}
    console.api.get.return_value = ApiResult.success(body)

    await run(parse_args(["list", "--sort", "id"]), console)

    row = capsys.readouterr().out.splitlines()[2]
    assert row.startswith("17 | Ann | ")
    assert row.endswith(" | 64f1c0")
    assert console.api.get.await_args.kwargs["params"]["sort"] == "id"


def test_report_failure_without_error_detail(capsys):
    assert _report(ApiResult(ok=False)) == 1
    assert _report(None) == 0
    assert capsys.readouterr().err == ""


@pytest.mark.anyio
async def test_list_without_session(settings, anonymous_store, capsys):
    console = Console(config=settings, session_store=anonymous_store)

    code = await run(parse_args(["list"]), console)

    assert code == 1
    assert "employee-console login" in capsys.readouterr().err


@pytest.mark.anyio
async def test_create_command(console, tmp_path, capsys):
    image = tmp_path / "ann.png"
    image.write_bytes(b"\x89PNG")
    args = parse_args(
        [
            "create",
            "--name", "Ann",
            "--email", "ann@example.com",
            "--mobile", "9876543210",
            "--gender", "F",
            "--course", "MCA",
            "--course", "BSC",
            "--image", str(image),
        ]
    )

    code = await run(args, console)

    assert code == 0
    body = console.api.post.await_args.kwargs["body"]
    assert body.values("course[]") == ["MCA", "BSC"]
    assert body.values("designation") == ["HR"]
    assert "Employee created" in capsys.readouterr().out


@pytest.mark.anyio
async def test_create_with_unsupported_image(console, tmp_path, capsys):
    image = tmp_path / "ann.gif"
    image.write_bytes(b"GIF89a")
    args = parse_args(
        [
            "create",
            "--name", "Ann",
            "--email", "ann@example.com",
            "--mobile", "9876543210",
            "--gender", "F",
            "--image", str(image),
        ]
    )

    code = await run(args, console)

    assert code == 1
    console.api.post.assert_not_awaited()
    assert "Only JPG/PNG files are allowed" in capsys.readouterr().err


@pytest.mark.anyio
async def test_edit_command_updates_given_fields(console):
    console.api.get.return_value = ApiResult.success(make_employee("Bob", employee_id="e9"))

    code = await run(parse_args(["edit", "e9", "--mobile", "1234567890"]), console)

    assert code == 0
    body = console.api.put.await_args.kwargs["body"]
    assert body.values("mobile") == ["1234567890"]
    assert body.values("name") == ["Bob"]
    assert "image" not in body.names()


@pytest.mark.anyio
async def test_edit_missing_employee(console, capsys):
    console.api.get.return_value = ApiResult.failure(ApiError.from_status(404, "Employee not found"))

    code = await run(parse_args(["edit", "nope", "--name", "X"]), console)

    assert code == 1
    console.api.put.assert_not_awaited()
    assert "Employee not found" in capsys.readouterr().err


@pytest.mark.anyio
async def test_delete_with_yes(console):
    code = await run(parse_args(["delete", "e1", "--yes"]), console)

    assert code == 0
    console.api.delete.assert_awaited_once_with("/employees/e1")
    console.api.get.assert_awaited_once()


@pytest.mark.anyio
async def test_delete_declined_at_prompt(console, monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", lambda prompt: "n")

    code = await run(parse_args(["delete", "e1"]), console)

    assert code == 0
    console.api.delete.assert_not_awaited()
    assert "Cancelled" in capsys.readouterr().out


@pytest.mark.anyio
async def test_logout_command(console):
    code = await run(parse_args(["logout"]), console)

    assert code == 0
    assert console.session_store.get_session() is None


def test_load_image_guesses_type(tmp_path):
    path = tmp_path / "photo.jpg"
    path.write_bytes(b"\xff\xd8")

    image = load_image(str(path))

    assert image.filename == "photo.jpg"
    assert image.content_type == "image/jpeg"
    assert image.content == b"\xff\xd8"
