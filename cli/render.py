from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping

import typer

_RESULT_COLORS = {
    "keep": typer.colors.GREEN,
    "discard": typer.colors.RED,
    "ultra precise": typer.colors.GREEN,
    "very precise": typer.colors.CYAN,
    "precise": typer.colors.YELLOW,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_results(results: Mapping[str, str]) -> None:
    echo_heading("Results")
    if not results:
        typer.echo("No sensors evaluated.")
        return
    for name, classification in results.items():
        typer.echo(f"  - {name}: ", nl=False)
        typer.secho(classification, fg=_RESULT_COLORS.get(classification))


def render_report(payload: Dict[str, Any]) -> None:
    echo_key_values(
        [
            ("file_name", payload.get("file_name")),
            ("format", payload.get("format")),
            ("sensor_count", payload.get("sensor_count")),
        ]
    )
    typer.echo()
    render_results(payload.get("results") or {})

    diagnostics = payload.get("diagnostics") or []
    typer.echo()
    echo_heading("Skipped lines")
    if diagnostics:
        for item in diagnostics:
            typer.echo(f"  - line {item.get('line_number')}: {item.get('reason')} ({item.get('line')})")
    else:
        typer.echo("No lines skipped.")

    processing_ms = payload.get("processing_ms")
    if processing_ms is not None:
        typer.echo()
        typer.echo(f"Performance: {processing_ms / 1000:.5f} seconds")
