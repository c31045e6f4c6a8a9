from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import echo_heading, render_page, render_readings, render_sensor, render_sensors


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the SmartFarm sensor API.",
    context_settings={"help_option_names": ["-h", "--help"]},
)
sensors_app = typer.Typer(help="Manage sensors.")
readings_app = typer.Typer(help="Record and query readings.")
app.add_typer(sensors_app, name="sensors")
app.add_typer(readings_app, name="readings")


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
        help="Sensor API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each HTTP request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@sensors_app.command("list")
def list_sensors_command(
    ctx: typer.Context,
    status: Optional[str] = typer.Option(None, "--status", help="Only sensors with this status."),
) -> None:
    """List sensors."""
    state = _get_state(ctx)
    render_sensors(state.client.list_sensors(status))


@sensors_app.command("get")
def get_sensor_command(
    ctx: typer.Context,
    sensor_id: int = typer.Argument(..., help="Sensor identifier."),
) -> None:
    """Show one sensor."""
    state = _get_state(ctx)
    render_sensor(state.client.get_sensor(sensor_id))


@sensors_app.command("create")
def create_sensor_command(
    ctx: typer.Context,
    location: str = typer.Argument(..., help="Where the sensor is installed."),
    sensor_type: str = typer.Argument(..., metavar="TYPE", help="temperature, humidity or moisture."),
    status: str = typer.Argument("active", help="active or inactive."),
) -> None:
    """Register a new sensor."""
    state = _get_state(ctx)
    sensor = state.client.create_sensor(location, sensor_type, status)
    typer.secho(f"Sensor created. id={sensor.get('id')}", fg=typer.colors.GREEN)
    render_sensor(sensor)


@sensors_app.command("update")
def update_sensor_command(
    ctx: typer.Context,
    sensor_id: int = typer.Argument(..., help="Sensor identifier."),
    location: str = typer.Argument(...),
    sensor_type: str = typer.Argument(..., metavar="TYPE"),
    status: str = typer.Argument(...),
) -> None:
    """Replace every field of a sensor."""
    state = _get_state(ctx)
    render_sensor(state.client.update_sensor(sensor_id, location, sensor_type, status))


@sensors_app.command("delete")
def delete_sensor_command(
    ctx: typer.Context,
    sensor_id: int = typer.Argument(..., help="Sensor identifier."),
) -> None:
    """Delete a sensor. Its readings are kept."""
    state = _get_state(ctx)
    sensor = state.client.delete_sensor(sensor_id)
    typer.secho(f"Sensor {sensor.get('id')} deleted.", fg=typer.colors.GREEN)


@readings_app.command("for-sensor")
def sensor_readings_command(
    ctx: typer.Context,
    sensor_id: int = typer.Argument(..., help="Sensor identifier."),
) -> None:
    """List every reading of one sensor."""
    state = _get_state(ctx)
    echo_heading(f"Readings of sensor {sensor_id}")
    render_readings(state.client.list_sensor_readings(sensor_id))


@readings_app.command("add")
def add_reading_command(
    ctx: typer.Context,
    sensor_id: int = typer.Argument(..., help="Sensor identifier."),
    value: float = typer.Argument(..., help="Measured value."),
    timestamp: Optional[str] = typer.Option(
        None, "--timestamp", "-t", help="ISO-8601 timestamp (defaults to now, UTC)."
    ),
) -> None:
    """Record a reading for a sensor."""
    state = _get_state(ctx)
    if timestamp is None:
        now = datetime.now(timezone.utc)
        timestamp = now.isoformat(timespec="seconds").replace("+00:00", "Z")
    reading = state.client.add_reading(sensor_id, timestamp, value)
    typer.secho(f"Reading recorded. id={reading.get('id')}", fg=typer.colors.GREEN)


@readings_app.command("list")
def list_readings_command(
    ctx: typer.Context,
    page: Optional[int] = typer.Option(None, "--page", "-p"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l"),
    sensor_type: Optional[str] = typer.Option(None, "--type"),
    min_value: Optional[float] = typer.Option(None, "--min-value"),
    max_value: Optional[float] = typer.Option(None, "--max-value"),
    from_: Optional[str] = typer.Option(None, "--from", help="Earliest timestamp, inclusive."),
    to: Optional[str] = typer.Option(None, "--to", help="Latest timestamp, inclusive."),
) -> None:
    """Query readings with filters and pagination."""
    state = _get_state(ctx)
    payload = state.client.query_readings(
        {
            "page": page,
            "limit": limit,
            "type": sensor_type,
            "minValue": min_value,
            "maxValue": max_value,
            "from": from_,
            "to": to,
        }
    )
    render_page(payload)
