"""Command-line front end for the employee admin API.

    employee-console login --username admin
    employee-console list --search ann --sort email --desc --page 2
    employee-console create --name Ann --email ann@example.com --mobile 9876543210 \\
        --gender F --course MCA --course BSC --image ann.png
    employee-console edit 64f1c0... --mobile 9876500000
    employee-console delete 64f1c0...

Rows start with the display ID and end with the record key that edit and
delete expect. The session token is kept in SESSION_FILE between runs.
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import mimetypes
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path

from employee_console.controllers.employee_form import SCALAR_FIELDS, EmployeeFormController
from employee_console.controllers.employee_list import (
    SORTABLE_FIELDS,
    EmployeeListController,
    QueryState,
    SortOrder,
)
from employee_console.core import navigation
from employee_console.core.config import settings
from employee_console.main import Console
from employee_console.models.employee import COURSES, DESIGNATIONS, GENDERS, ImageFile
from employee_console.models.result import ApiResult

logger = logging.getLogger(__name__)

Handler = Callable[[Console, argparse.Namespace], Awaitable[int]]


def load_image(path: str) -> ImageFile:
    file_path = Path(path)
    content_type, _ = mimetypes.guess_type(file_path.name)
    return ImageFile(
        filename=file_path.name,
        content_type=content_type or "application/octet-stream",
        content=file_path.read_bytes(),
    )


def render_list(controller: EmployeeListController, console: Console) -> str:
    lines = [controller.count_label]
    query = controller.query
    arrow = "↑" if query.sort_order is SortOrder.ASC else "↓"
    lines.append(f"Sorted by {query.sort_field} {arrow}" + (f", search {query.search!r}" if query.search else ""))
    for employee in controller.employees:
        created = employee.create_date.date().isoformat() if employee.create_date else "-"
        image = console.api.image_url(employee.image) or "No Image"
        lines.append(
            " | ".join(
                [
                    employee.display_id,
                    employee.name,
                    employee.email,
                    employee.mobile,
                    employee.designation,
                    employee.gender,
                    ", ".join(employee.course),
                    created,
                    image,
                    employee.key,
                ]
            )
        )
    previous = "[Previous]" if controller.can_go_previous else " Previous "
    following = "[Next]" if controller.can_go_next else " Next "
    lines.append(f"{previous} {controller.page_label} {following}")
    return "\n".join(lines)


def _report(result: ApiResult | None) -> int:
    if result is None or result.ok:
        return 0
    if result.error is None:
        return 1
    print(f"Error: {result.error.message}", file=sys.stderr)
    return 1


def _apply_form_args(form: EmployeeFormController, args: argparse.Namespace) -> ApiResult | None:
    for name in SCALAR_FIELDS:
        value = getattr(args, name, None)
        if value is not None:
            form.set_field(name, value)
    if args.course is not None:
        for course in COURSES:
            form.set_course_membership(course, course in args.course)
    if args.image:
        result = form.set_image(load_image(args.image))
        if not result.ok:
            return result
    return None


async def cmd_login(console: Console, args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    result = await console.auth.login(args.username, password)
    if result.ok:
        print(f"Logged in as {console.session_store.username}")
    return _report(result)


async def cmd_register(console: Console, args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    result = await console.auth.register(args.username, password, args.sno)
    if result.ok:
        print("Registered. You can now log in.")
    return _report(result)


async def cmd_logout(console: Console, args: argparse.Namespace) -> int:
    console.auth.logout()
    print("Logged out")
    return 0


async def cmd_whoami(console: Console, args: argparse.Namespace) -> int:
    greeting = console.dashboard()
    if greeting is None:
        return 1
    print(greeting)
    return 0


async def cmd_list(console: Console, args: argparse.Namespace) -> int:
    query = QueryState(
        page=max(args.page, 1),
        page_size=console.settings.PAGE_SIZE,
        search=args.search,
        sort_field=args.sort,
        sort_order=SortOrder.DESC if args.desc else SortOrder.ASC,
    )
    controller = console.employee_list(query=query)
    if controller is None:
        return 1
    result = await controller.refresh()
    if result.ok:
        print(render_list(controller, console))
    return _report(result)


async def cmd_create(console: Console, args: argparse.Namespace) -> int:
    form = console.employee_form()
    if form is None:
        return 1
    problem = _apply_form_args(form, args)
    if problem is not None:
        return _report(problem)
    result = await form.submit()
    if result.ok:
        print("Employee created")
    return _report(result)


async def cmd_edit(console: Console, args: argparse.Namespace) -> int:
    form = console.employee_form(args.id)
    if form is None:
        return 1
    loaded = await form.load()
    if not loaded.ok:
        return _report(loaded)
    problem = _apply_form_args(form, args)
    if problem is not None:
        return _report(problem)
    result = await form.submit()
    if result.ok:
        print(f"Employee {args.id} updated")
    return _report(result)


async def cmd_delete(console: Console, args: argparse.Namespace) -> int:
    if args.yes:
        confirm = lambda prompt: True  # noqa: E731
    else:
        confirm = lambda prompt: input(f"{prompt} [y/N] ").strip().lower() in ("y", "yes")  # noqa: E731
    controller = console.employee_list(confirm=confirm)
    if controller is None:
        return 1
    result = await controller.delete(args.id)
    if result is None:
        print("Cancelled")
        return 0
    if result.ok:
        print(f"Employee {args.id} deleted ({controller.count_label})")
    return _report(result)


COMMANDS: dict[str, Handler] = {
    "login": cmd_login,
    "register": cmd_register,
    "logout": cmd_logout,
    "whoami": cmd_whoami,
    "list": cmd_list,
    "create": cmd_create,
    "edit": cmd_edit,
    "delete": cmd_delete,
}


def _add_form_arguments(parser: argparse.ArgumentParser, *, required: bool) -> None:
    parser.add_argument("--name", required=required)
    parser.add_argument("--email", required=required)
    parser.add_argument("--mobile", required=required, help="10 digits")
    parser.add_argument("--designation", choices=DESIGNATIONS, default=DESIGNATIONS[0] if required else None)
    parser.add_argument("--gender", choices=GENDERS, required=required)
    parser.add_argument(
        "--course",
        action="append",
        choices=COURSES,
        help="Repeat for several courses; on edit, replaces the stored set",
    )
    parser.add_argument("--image", required=required, help="JPG or PNG file")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="employee-console",
        description="Manage employee records through the admin API",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Log in and store the session")
    login.add_argument("--username", required=True)
    login.add_argument("--password")

    register = sub.add_parser("register", help="Create an account")
    register.add_argument("--username", required=True)
    register.add_argument("--password")
    register.add_argument("--sno", required=True, help="Serial number")

    sub.add_parser("logout", help="Forget the stored session")
    sub.add_parser("whoami", help="Show the logged-in user")

    listing = sub.add_parser("list", help="List employees")
    listing.add_argument("--page", type=int, default=1)
    listing.add_argument("--search", default="")
    listing.add_argument("--sort", choices=SORTABLE_FIELDS, default="name")
    listing.add_argument("--desc", action="store_true", help="Sort descending")

    create = sub.add_parser("create", help="Create an employee")
    _add_form_arguments(create, required=True)

    edit = sub.add_parser("edit", help="Edit an employee")
    edit.add_argument("id")
    _add_form_arguments(edit, required=False)

    delete = sub.add_parser("delete", help="Delete an employee")
    delete.add_argument("id")
    delete.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    return parser.parse_args(argv)


async def run(args: argparse.Namespace, console: Console | None = None) -> int:
    console = console or Console()
    code = await COMMANDS[args.command](console, args)
    if console.navigator.current == navigation.LOGIN and args.command not in ("login", "register", "logout"):
        print("Session expired or missing. Run: employee-console login", file=sys.stderr)
        code = code or 1
    return code


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    level = logging.DEBUG if args.verbose or settings.DEBUG else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
