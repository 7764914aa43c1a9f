# preference_center/customerio/client.py
import json
import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from preference_center.api.schemas import PreferencesView, UpdateRequest
from preference_center.core.settings import Region, Settings
from preference_center.customerio.translator import (
    MalformedVendorResponse,
    to_identify_payload,
    to_preferences_view,
)

logger = logging.getLogger(__name__)

APP_API_URLS = {
    Region.US: "https://api.customer.io/v1",
    Region.EU: "https://api-eu.customer.io/v1",
}
CDP_API_URLS = {
    Region.US: "https://cdp.customer.io/v1",
    Region.EU: "https://cdp-eu.customer.io/v1",
}


class CustomerIOError(Exception):
    """Raised when a Customer.io call fails, carrying the vendor status when there was one."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class CustomerIOConfigError(CustomerIOError):
    """Raised when the client is missing credentials or has an unknown region."""


class CustomerIOClient:
    """
    Async client for the two Customer.io calls the preference center needs:
    reading a customer's subscription preferences (App API, bearer key) and
    writing them back through an identify call (CDP API, basic auth).

    Each call is made exactly once; failures surface as CustomerIOError.
    """

    def __init__(
        self,
        app_api_key: str,
        cdp_api_key: str,
        region: str | Region = Region.US,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not app_api_key:
            raise CustomerIOConfigError("CUSTOMERIO_APP_API_KEY is required")
        if not cdp_api_key:
            raise CustomerIOConfigError("CUSTOMERIO_CDP_API_KEY is required")
        try:
            self.region = Region(region)
        except ValueError as e:
            raise CustomerIOConfigError(f"Unknown Customer.io region: {region!r}") from e

        self._app_api_key = app_api_key
        self._cdp_api_key = cdp_api_key
        self.base_url = APP_API_URLS[self.region]
        self.cdp_url = CDP_API_URLS[self.region]
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "CustomerIOClient":
        return cls(
            app_api_key=settings.CUSTOMERIO_APP_API_KEY,
            cdp_api_key=settings.CUSTOMERIO_CDP_API_KEY,
            region=settings.CUSTOMERIO_REGION,
            timeout=settings.CUSTOMERIO_TIMEOUT_SECONDS,
            **kwargs,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "CustomerIOClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    @staticmethod
    def _detail(response: httpx.Response) -> Any:
        try:
            return response.json()
        except json.JSONDecodeError:
            return response.text

    async def _request(self, action: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Customer.io {action} failed before a response arrived: {e!r}")
            raise CustomerIOError(f"Customer.io {action} failed: {e}") from e

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = self._detail(response)
            logger.error(f"Customer.io {action} failed: {response.status_code} - {detail}")
            raise CustomerIOError(
                f"Customer.io {action} failed: {response.status_code} - {detail}",
                status_code=response.status_code,
            ) from e
        return response

    async def fetch_preferences(self, customer_id: str) -> PreferencesView:
        logger.info(f"Fetching subscription preferences for customer {customer_id}")
        response = await self._request(
            "preferences fetch",
            "GET",
            f"{self.base_url}/customers/{quote(customer_id, safe='')}/subscription_preferences",
            headers={
                "Authorization": f"Bearer {self._app_api_key}",
                "Content-Type": "application/json",
            },
        )

        try:
            return to_preferences_view(response.json(), customer_id=customer_id)
        except (json.JSONDecodeError, MalformedVendorResponse, KeyError, ValueError) as e:
            logger.error(f"Unexpected subscription preferences body for customer {customer_id}: {response.text}")
            raise CustomerIOError(
                f"Customer.io returned an unexpected preferences response: {e}",
            ) from e

    async def update_preferences(self, customer_id: str, update: UpdateRequest) -> dict:
        logger.info(f"Updating subscription preferences for customer {customer_id}")
        response = await self._request(
            "preferences update",
            "POST",
            f"{self.cdp_url}/identify",
            json=to_identify_payload(customer_id, update),
            # CDP key as username, empty password
            auth=(self._cdp_api_key, ""),
            headers={"Content-Type": "application/json"},
        )

        try:
            body = response.json()
        except json.JSONDecodeError:
            return {}
        return body if isinstance(body, dict) else {}
