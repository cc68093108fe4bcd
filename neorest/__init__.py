"""neorest - client library for the Neo4j REST API."""

from neorest.graph import (
    Algorithm,
    Client,
    CypherQuery,
    Direction,
    ErrorCode,
    HttpTransport,
    Neo4jConnectionError,
    Neo4jError,
    Neo4jResponseError,
    Neo4jServerError,
    Neo4jUsageError,
    Node,
    Path,
    PathFinder,
    Relationship,
    Transport,
    TransportResult,
)

__version__ = "0.1.0"

__all__ = [
    "Algorithm",
    "Client",
    "CypherQuery",
    "Direction",
    "ErrorCode",
    "HttpTransport",
    "Neo4jConnectionError",
    "Neo4jError",
    "Neo4jResponseError",
    "Neo4jServerError",
    "Neo4jUsageError",
    "Node",
    "Path",
    "PathFinder",
    "Relationship",
    "Transport",
    "TransportResult",
]
