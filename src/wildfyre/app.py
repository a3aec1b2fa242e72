"""Typer application and ``wildfyre`` console-script entry point.

Sub-commands:

* ``wildfyre request METHOD ADDRESS`` -- send one request and print the
  decoded JSON answer.
* ``wildfyre login USERNAME`` -- exchange credentials for a token and print
  it, ready for ``--token`` or ``WILDFYRE_TOKEN``.

Failures are reported on stderr and mapped to the exit codes of
:mod:`wildfyre.exit_codes`.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from wildfyre import __version__
from wildfyre.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE

app = typer.Typer(
    name="wildfyre",
    help="Talk to the WildFyre API from the command line.",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"wildfyre {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Send library log records to stderr through Rich."""
    logger = logging.getLogger("wildfyre")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    testing: Optional[bool] = typer.Option(
        None,
        "--testing/--production",
        help="Talk to the local testing server or to the public API.",
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Install the output manager and remember the selected environment."""
    from wildfyre.models import Environment
    from wildfyre.output import OutputManager, set_output

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose)

    environment: Optional[Environment] = None
    if testing is not None:
        environment = Environment.TESTING if testing else Environment.PRODUCTION

    ctx.ensure_object(dict)
    ctx.obj["environment"] = environment


def _resolve(ctx: typer.Context) -> Any:
    from wildfyre.config import resolve_config

    return resolve_config((ctx.obj or {}).get("environment"))


def _run(action: Callable[[], Any]) -> Any:
    """Run *action*, turning wildfyre failures into a clean exit."""
    from wildfyre.exceptions import IssueInTransferError, WildfyreError
    from wildfyre.output import debug, error

    try:
        return action()
    except IssueInTransferError as exc:
        error(str(exc))
        details = exc.json()
        if details is not None:
            debug(f"Server said: {json.dumps(details)}")
        raise typer.Exit(exc.exit_code) from exc
    except WildfyreError as exc:
        error(str(exc))
        raise typer.Exit(exc.exit_code) from exc
    except ValueError as exc:
        error(str(exc))
        raise typer.Exit(EXIT_INVALID_USAGE) from exc


def _parse_json_option(value: Optional[str]) -> Any:
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"not valid JSON: {exc}", param_hint="--json") from exc


@app.command("request")
def request_command(
    ctx: typer.Context,
    method: str = typer.Argument(..., help="HTTP method, e.g. GET or POST."),
    address: str = typer.Argument(..., help="Address relative to the API root, e.g. /users/."),
    json_body: Optional[str] = typer.Option(None, "--json", "-j", help="JSON body to send."),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", exists=True, dir_okay=False, help="File to upload (multipart)."
    ),
    token: Optional[str] = typer.Option(
        None, "--token", "-t", envvar="WILDFYRE_TOKEN", help="Authenticate with this token."
    ),
) -> None:
    """Send a request and print the JSON answer."""
    from wildfyre.http import Request
    from wildfyre.output import debug, format_response

    body = _parse_json_option(json_body)

    def _send() -> Any:
        request = Request(method, address, config=_resolve(ctx))
        if token is not None:
            request.add_token(token)
        if json_body is not None:
            request.add_json(body)
        if file is not None:
            request.add_file(file)
        debug(f"{method.upper()} {request.url}")
        return request.get_json()

    format_response(_run(_send))


@app.command("login")
def login_command(
    ctx: typer.Context,
    username: str = typer.Argument(..., help="Your username."),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, help="Your password."
    ),
) -> None:
    """Exchange a username and a password for a token."""
    from wildfyre.api import request_token
    from wildfyre.output import print_data, success

    token = _run(lambda: request_token(username, password, config=_resolve(ctx)))
    success(f"Logged in as {username}")
    print_data(token)


def main() -> None:
    """Entry point of the ``wildfyre`` console script."""
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from wildfyre.exceptions import WildfyreError
        from wildfyre.output import error

        if isinstance(exc, WildfyreError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc!r}")
        sys.exit(EXIT_GENERIC_FAILURE)
