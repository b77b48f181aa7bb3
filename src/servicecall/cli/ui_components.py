"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from rendering details.
- Tables and panels are reused by several commands.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from servicecall.adapters.json_exporter import dump_response_json
from servicecall.core.domain.errors import CallError
from servicecall.core.domain.models import EndpointDescriptor, NormalizedResponse


def build_endpoint_table(descriptor: EndpointDescriptor) -> Table:
    table = Table(title=f"Endpoint {descriptor.cache_key}")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("Verb", descriptor.http_method)
    table.add_row("Base URL", escape(descriptor.base_url or "-"))
    table.add_row("Path", escape(descriptor.path))
    table.add_row("Invocation target", descriptor.invocation_target or "-")
    return table


def build_headers_table(response: NormalizedResponse) -> Table:
    table = Table(title="Response headers")
    table.add_column("Header", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for key in sorted(response.headers):
        table.add_row(escape(key), escape(response.headers[key]))
    return table


def print_response(console: Console, response: NormalizedResponse, *, show_headers: bool = False) -> None:
    """Status line, optional headers, then the full JSON document."""

    style = "green" if response.ok else "red"
    status = Text(f"{response.status_code} {response.status_message or ''}".rstrip(), style=f"bold {style}")
    console.print(status)
    if show_headers and response.headers:
        console.print(build_headers_table(response))
    console.print(Syntax(dump_response_json(response), "json", word_wrap=True))


def build_error_panel(error: CallError) -> Panel:
    body = Text()
    body.append(error.message + "\n\n")
    body.append(f"Kind: {error.kind.value}\n", style="bold")
    body.append(f"Code: {int(error.code)} ({error.code.name})")
    if error.status_code is not None:
        body.append(f"\nStatus: {error.status_code}")
    return Panel(body, title=Text("Call failed", style="bold red"), border_style="red")
