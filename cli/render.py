from __future__ import annotations

from typing import Any, Dict, Iterable, List

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_sensor(sensor: Dict[str, Any]) -> None:
    echo_key_values(
        [
            ("id", sensor.get("id")),
            ("location", sensor.get("location")),
            ("type", sensor.get("type")),
            ("status", sensor.get("status")),
        ]
    )


def render_sensors(sensors: List[Dict[str, Any]]) -> None:
    echo_heading("Sensors")
    if not sensors:
        typer.echo("No sensors found.")
        return
    for sensor in sensors:
        typer.echo(
            f"  - #{sensor.get('id')} {sensor.get('location')} "
            f"({sensor.get('type')}, {sensor.get('status')})"
        )


def render_readings(readings: List[Dict[str, Any]]) -> None:
    if not readings:
        typer.echo("No readings found.")
        return
    for reading in readings:
        typer.echo(
            f"  - #{reading.get('id')} sensor={reading.get('sensorId')} "
            f"{reading.get('timestamp')} value={reading.get('value')}"
        )


def render_page(payload: Dict[str, Any]) -> None:
    echo_heading("Readings")
    echo_key_values(
        [
            ("page", f"{payload.get('page')} of {payload.get('totalPages')}"),
            ("pageSize", payload.get("pageSize")),
            ("totalItems", payload.get("totalItems")),
            ("hasNext", payload.get("hasNext")),
            ("hasPrev", payload.get("hasPrev")),
        ]
    )
    typer.echo()
    render_readings(payload.get("results") or [])
