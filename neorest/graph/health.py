"""
Neo4j REST health check utilities.

Verifies the server answers on its data root and reports its version.
"""

import time
from typing import Any

from neorest.core.config import Settings
from neorest.graph.client import Client
from neorest.graph.exceptions import Neo4jConnectionError, Neo4jError
from neorest.graph.transport import HttpTransport


def get_neo4j_transport(settings: Settings) -> HttpTransport:
    """
    Create and return an HTTP transport for the configured server.

    Args:
        settings: Settings with Neo4j REST configuration

    Returns:
        HttpTransport instance

    Raises:
        Neo4jConnectionError: If the URL scheme is not HTTP(S)
    """
    if not settings.neo4j_rest_url.startswith(("http://", "https://")):
        raise Neo4jConnectionError(
            f"Invalid Neo4j REST URL scheme: {settings.neo4j_rest_url}"
        )
    return HttpTransport.from_settings(settings)


def check_neo4j_health(settings: Settings) -> bool:
    """
    Check if the Neo4j REST API is healthy and reachable.

    Args:
        settings: Settings with Neo4j REST configuration

    Returns:
        True if the server info lookup succeeds, False otherwise
    """
    try:
        with get_neo4j_transport(settings) as transport:
            Client(transport).get_server_info()
        return True
    except Neo4jError:
        return False


def check_neo4j_health_detailed(settings: Settings) -> dict[str, Any]:
    """
    Check Neo4j health with detailed information.

    Args:
        settings: Settings with Neo4j REST configuration

    Returns:
        Dictionary with status, url, and either latency and version
        or the error
    """
    start_time = time.time()
    try:
        with get_neo4j_transport(settings) as transport:
            info = Client(transport).get_server_info()

        latency_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "url": settings.neo4j_rest_url,
            "latency_ms": round(latency_ms, 2),
            "version": info["version"]["full"],
        }
    except Neo4jConnectionError as e:
        return {
            "status": "unhealthy",
            "url": settings.neo4j_rest_url,
            "error": f"Service unavailable: {e}",
        }
    except Neo4jError as e:
        return {
            "status": "unhealthy",
            "url": settings.neo4j_rest_url,
            "error": str(e),
        }
