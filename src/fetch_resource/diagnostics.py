"""
Rich console output for request/response tracing and error reports.
"""
import json
from typing import Dict, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from .errors import ApiError, ClientError, format_body
from .types import RequestDescriptor, TransportResponse

console = Console(stderr=True)

SENSITIVE_HEADERS = ("authorization", "x-api-key")


def mask_header_value(value: str, visible_chars: int = 15) -> str:
    """Mask an auth header value, keeping the scheme visible."""
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)


def mask_headers(headers: Dict[str, str]) -> Dict[str, str]:
    """Return a copy of headers with credentials masked."""
    masked = dict(headers)
    for key in masked:
        if key.lower() in SENSITIVE_HEADERS:
            masked[key] = mask_header_value(masked[key])
    return masked


def _pretty_body(text: str) -> str:
    try:
        return json.dumps(json.loads(text), indent=2, ensure_ascii=False)
    except ValueError:
        return text


def print_request(
    descriptor: RequestDescriptor,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    out: Optional[Console] = None,
) -> None:
    """Print a request panel: method, url, masked headers and parameters."""
    out = out or console
    out.print(
        Panel(f"[bold cyan]{descriptor.method}[/bold cyan] {url}", title="[bold blue]Request[/bold blue]")
    )
    if headers:
        out.print("[bold]Headers:[/bold]", mask_headers(headers))
    if descriptor.parameters:
        body = json.dumps(descriptor.parameters, indent=2, ensure_ascii=False)
        out.print(Panel(Syntax(body, "json"), title="[bold]Parameters[/bold]"))


def print_response(response: TransportResponse, out: Optional[Console] = None) -> None:
    """Print a response panel: status, headers and body."""
    out = out or console
    if response.failed:
        out.print(
            Panel(f"[bold red]transport failure[/bold red] {response.error!r}", title="[bold blue]Response[/bold blue]")
        )
        return

    status_color = "green" if response.is_success else "red"
    out.print(
        Panel(
            f"[bold {status_color}]{response.status_code}[/bold {status_color}] {response.status_description}",
            title=f"[bold blue]Response[/bold blue] ({response.url})",
        )
    )
    out.print("[bold]Headers:[/bold]", response.headers)
    text = format_body(response.body)
    if text:
        out.print(Panel(Syntax(_pretty_body(text), "json"), title="[bold]Response Body[/bold]"))


def render_error_report(error: ClientError) -> Panel:
    """Build a panel holding the error's diagnostic report."""
    title = f"[bold red]{type(error).__name__}[/bold red]"
    if isinstance(error, ApiError):
        title += f" ({error.status_code})"
    return Panel(error.to_report().rstrip(), title=title, border_style="red")


def print_error_report(error: ClientError, out: Optional[Console] = None) -> None:
    """Print the diagnostic report of a ClientError."""
    (out or console).print(render_error_report(error))
