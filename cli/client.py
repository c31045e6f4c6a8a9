from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the sensor API."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def list_sensors(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"status": status} if status else None
        return self._request("GET", "/api/sensors", params=params)

    def get_sensor(self, sensor_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/sensors/{sensor_id}")

    def create_sensor(self, location: str, sensor_type: str, status: str) -> Dict[str, Any]:
        payload = {"location": location, "type": sensor_type, "status": status}
        return self._request("POST", "/api/sensors", json=payload)

    def update_sensor(
        self, sensor_id: int, location: str, sensor_type: str, status: str
    ) -> Dict[str, Any]:
        payload = {"location": location, "type": sensor_type, "status": status}
        return self._request("PUT", f"/api/sensors/{sensor_id}", json=payload)

    def delete_sensor(self, sensor_id: int) -> Dict[str, Any]:
        return self._request("DELETE", f"/api/sensors/{sensor_id}")

    def list_sensor_readings(self, sensor_id: int) -> List[Dict[str, Any]]:
        return self._request("GET", f"/api/sensors/{sensor_id}/readings")

    def add_reading(self, sensor_id: int, timestamp: str, value: float) -> Dict[str, Any]:
        payload = {"timestamp": timestamp, "value": value}
        return self._request("POST", f"/api/sensors/{sensor_id}/readings", json=payload)

    def query_readings(self, params: Dict[str, Any]) -> Dict[str, Any]:
        filtered = {key: value for key, value in params.items() if value is not None}
        return self._request("GET", "/api/readings", params=filtered)

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1) from exc
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        request_id: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("message") or data.get("error")
            request_id = data.get("requestId")
        except ValueError:
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        if request_id:
            message = f"{message} (request {request_id})"
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
