from __future__ import annotations

from typing import Any, Dict, Iterable, List

import typer

WARNING_THRESHOLD = 60.0
CRITICAL_THRESHOLD = 75.0


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def status_for(temperature: float) -> tuple[str, str]:
    """Label and color matching the dashboard thresholds."""
    if temperature < WARNING_THRESHOLD:
        return "normal", typer.colors.GREEN
    if temperature < CRITICAL_THRESHOLD:
        return "warning", typer.colors.YELLOW
    return "critical", typer.colors.RED


def render_current(payload: Dict[str, Any]) -> None:
    echo_heading("Current CPU Temperature")
    temperature = float(payload.get("temperature", 0.0))
    echo_key_values(
        [
            ("temperature", f"{temperature:.1f}"),
            ("timestamp", payload.get("timestamp")),
        ]
    )
    label, color = status_for(temperature)
    typer.secho(f"status: {label}", fg=color)


def render_history(period: str, points: List[Dict[str, Any]]) -> None:
    echo_heading(f"History ({period})")
    if not points:
        typer.echo("No readings recorded.")
        return
    for point in points:
        typer.echo(f"  {point.get('timestamp')}  {float(point.get('temperature', 0.0)):.1f}")
