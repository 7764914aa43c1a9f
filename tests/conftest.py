# tests/conftest.py
import base64
import logging
from typing import Generator
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from preference_center.api.preferences import get_customerio_client
from preference_center.api.schemas import Customer, Header, Preferences, PreferencesView, Topic
from preference_center.core.settings import Settings
from preference_center.customerio.client import CustomerIOClient
from preference_center.main import app as fastapi_app

# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_mock_settings(**overrides) -> Settings:
    """
    Creates a Settings instance for testing without reading any .env file.
    """
    values = {
        "CUSTOMERIO_APP_API_KEY": "test_app_key",
        "CUSTOMERIO_CDP_API_KEY": "test_cdp_key",
        "CUSTOMERIO_REGION": "us",
        "PUBLIC_BASE_URL": "https://prefs.example.com",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def b64(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def make_view(customer_id: str = "1") -> PreferencesView:
    return PreferencesView(
        customer=Customer(id=customer_id, email="test@example.com", globally_unsubscribed=False),
        preferences=Preferences(
            header=Header(title="Test Email Preferences", subtitle="Manage your test preferences below."),
            topics=[
                Topic(id=1, name="Test Topic 1", description="Desc 1", subscribed=True),
                Topic(id=2, name="Test Topic 2", description="", subscribed=False),
                Topic(id=3, name="Test Topic 3", description="Desc 3", subscribed=True),
            ],
        ),
    )


@pytest.fixture
def mock_settings() -> Settings:
    return create_mock_settings()


@pytest.fixture
def preferences_view() -> PreferencesView:
    return make_view()


@pytest.fixture
def mock_customerio() -> AsyncMock:
    return AsyncMock(spec=CustomerIOClient)


@pytest.fixture
def client(mock_customerio: AsyncMock) -> Generator[TestClient, None, None]:
    """
    TestClient with the Customer.io dependency swapped for a mock.
    The lifespan is not entered, so no real vendor client is created.
    """
    fastapi_app.dependency_overrides[get_customerio_client] = lambda: mock_customerio
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()
