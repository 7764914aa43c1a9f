import json
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from preference_center.api.schemas import PreferencesView, UpdateRequest


class APIError(Exception):
    """Custom exception for API client errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PreferencesAPI:
    """Synchronous client for the preference center's own endpoints."""

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url
        self.client = httpx.Client(base_url=base_url, timeout=30.0, transport=transport)

    def _handle_response(self, response: httpx.Response) -> Any:
        if not response.is_success:
            try:
                body = response.json()
                detail = body.get("error", response.text) if isinstance(body, dict) else response.text
            except json.JSONDecodeError:
                detail = response.text
            raise APIError(
                f"API request failed: {response.status_code} - {detail}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except json.JSONDecodeError:
            return response.text

    def _send(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            raise APIError(f"Could not reach the preferences service: {e}") from e
        return self._handle_response(response)

    def fetch(self, encoded_id: str) -> PreferencesView:
        data = self._send("GET", f"/preferences/{encoded_id}/data")
        try:
            return PreferencesView.model_validate(data)
        except ValidationError as e:
            raise APIError(f"Unexpected preferences response: {e}") from e

    def submit(self, encoded_id: str, update: UpdateRequest) -> dict:
        data = self._send("POST", f"/preferences/{encoded_id}/data", json=update.to_wire())
        return data if isinstance(data, dict) else {}

    def close(self) -> None:
        self.client.close()
