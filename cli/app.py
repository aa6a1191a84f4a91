from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer
import uvicorn

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_current, render_history
from models.records import Period
from settings import get_settings


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Run and query the piheat CPU temperature monitor.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Server base URL (defaults to API_BASE_URL env or http://localhost:8082).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("serve")
def serve_command(
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind (defaults to PIHEAT_HOST)."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to listen on (defaults to PIHEAT_PORT or 8082)."),
) -> None:
    """Run the HTTP server."""
    settings = get_settings()
    bind_host = host or settings.host
    bind_port = port or settings.port
    typer.echo(f"Pi Temperature Monitor starting on {bind_host}:{bind_port}")
    uvicorn.run("app.main:app", host=bind_host, port=bind_port, log_config=None)


@app.command("current")
def current_command(ctx: typer.Context) -> None:
    """Read the temperature through a running server."""
    state = _get_state(ctx)
    render_current(state.client.current())


@app.command("history")
def history_command(
    ctx: typer.Context,
    period: Period = typer.Option(Period.day, "--period", "-p", help="History range to fetch."),
) -> None:
    """Print the aggregated history series."""
    state = _get_state(ctx)
    render_history(period.value, state.client.history(period.value))
