"""
Pytest configuration and fixtures for neorest tests.
"""

from unittest.mock import MagicMock

import pytest

from neorest.core.config import Settings
from neorest.graph.client import Client
from neorest.graph.transport import Transport

ENDPOINT = "http://foo:1234/db/data"


@pytest.fixture
def settings() -> Settings:
    """Provide test settings pointing at a local server."""
    return Settings(
        neo4j_rest_url="http://localhost:7474/db/data",
        neo4j_user="neo4j",
        neo4j_password="testpassword",
        neo4j_timeout=5.0,
    )


@pytest.fixture
def endpoint() -> str:
    return ENDPOINT


@pytest.fixture
def mock_transport() -> MagicMock:
    """Mock transport reporting a fixed endpoint."""
    transport = MagicMock(spec=Transport)
    transport.endpoint = ENDPOINT
    return transport


@pytest.fixture
def client(mock_transport: MagicMock) -> Client:
    """Client bound to the mock transport."""
    return Client(mock_transport)
