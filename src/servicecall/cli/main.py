"""Command line entry point.

Handy for poking at other services by logical name from a shell:

    servicecall resolve catalog product get
    servicecall call catalog product get --param id=42
    servicecall list catalog product --data '{"filters": {"status": "active"}}'
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import typer
from rich.console import Console

from servicecall.adapters.json_exporter import export_response_json
from servicecall.cli.ui_components import build_endpoint_table, build_error_panel, print_response
from servicecall.core.config import ServiceCallSettings
from servicecall.core.domain.errors import CallError
from servicecall.core.domain.models import NormalizedResponse
from servicecall.core.logging_setup import configure_logging
from servicecall.core.services.service_call import ServiceCall

app = typer.Typer(no_args_is_help=True, help="Call other services by (service, namespace, method).")

_console = Console()

_state: dict[str, Any] = {}


def build_service_call(settings: ServiceCallSettings) -> ServiceCall:
    """Factory used by every command (tests replace it)."""

    return ServiceCall(settings)


def _parse_pairs(values: list[str] | None, *, option: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for raw in values or []:
        if "=" not in raw:
            raise typer.BadParameter(f"expected key=value, got {raw!r}", param_hint=option)
        key, value = raw.split("=", 1)
        pairs[key.strip()] = value.strip()
    return pairs


def _parse_data(data: str | None) -> Any:
    if data is None:
        return None
    try:
        return json.loads(data)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"invalid JSON: {exc.msg}", param_hint="--data") from exc


def _run(action: Callable[[ServiceCall], Awaitable[Any]]) -> Any:
    async def runner() -> Any:
        async with build_service_call(_state["settings"]) as client:
            return await action(client)

    try:
        return asyncio.run(runner())
    except CallError as exc:
        _console.print(build_error_panel(exc))
        raise typer.Exit(code=1) from exc


def _emit(response: NormalizedResponse, *, output: Path | None, show_headers: bool) -> None:
    print_response(_console, response, show_headers=show_headers)
    if output is not None:
        path = export_response_json(response=response, output_path=output)
        _console.print(f"[green]Saved response to:[/green] {path}")


@app.callback()
def main(
    discovery_host: Optional[str] = typer.Option(None, "--discovery-host", help="Discovery base URL."),
    service_name: Optional[str] = typer.Option(None, "--service-name", help="Calling service identity."),
    service_secret: Optional[str] = typer.Option(None, "--service-secret", help="Literal api secret."),
    environment: Optional[str] = typer.Option(None, "--environment", help="Runtime environment ('local' skips secrets)."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level for stderr output."),
) -> None:
    overrides = {
        "discovery_host": discovery_host,
        "service_name": service_name,
        "service_secret": service_secret,
        "environment": environment,
        "log_level": log_level,
    }
    settings = ServiceCallSettings(**{k: v for k, v in overrides.items() if v is not None})
    configure_logging(settings.log_level)
    _state["settings"] = settings


@app.command()
def resolve(service: str, namespace: str, method: str) -> None:
    """Show the physical endpoint behind a logical operation."""

    descriptor = _run(lambda client: client.resolve(service, namespace, method))
    _console.print(build_endpoint_table(descriptor))


@app.command()
def call(
    service: str,
    namespace: str,
    method: str,
    data: Optional[str] = typer.Option(None, "--data", "-d", help="Request data as JSON."),
    header: Optional[list[str]] = typer.Option(None, "--header", "-H", help="Extra header key=value."),
    param: Optional[list[str]] = typer.Option(None, "--param", "-p", help="Path parameter key=value."),
    safe: bool = typer.Option(False, "--safe", help="Do not fail on error statuses."),
    show_headers: bool = typer.Option(False, "--show-headers", help="Print response headers."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the response as JSON."),
) -> None:
    """Invoke one operation and print the normalized response."""

    request_data = _parse_data(data)
    headers = _parse_pairs(header, option="--header")
    params = _parse_pairs(param, option="--param")

    def action(client: ServiceCall) -> Awaitable[NormalizedResponse]:
        method_fn = client.safe_call if safe else client.call
        return method_fn(service, namespace, method, request_data, headers, params)

    _emit(_run(action), output=output, show_headers=show_headers)


@app.command(name="list")
def list_(
    service: str,
    namespace: str,
    data: Optional[str] = typer.Option(None, "--data", "-d", help="Filters/sorting as JSON."),
    param: Optional[list[str]] = typer.Option(None, "--param", "-p", help="Path parameter key=value."),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1, help="Items per page."),
    safe: bool = typer.Option(False, "--safe", help="Return the failing page instead of failing."),
    show_headers: bool = typer.Option(False, "--show-headers", help="Print response headers."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the response as JSON."),
) -> None:
    """Fetch every page of a list endpoint."""

    request_data = _parse_data(data)
    params = _parse_pairs(param, option="--param")

    def action(client: ServiceCall) -> Awaitable[NormalizedResponse]:
        method_fn = client.safe_list if safe else client.list
        return method_fn(service, namespace, request_data, params, page_size)

    _emit(_run(action), output=output, show_headers=show_headers)


def run() -> None:
    app()
