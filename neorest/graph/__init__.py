# Graph module for the Neo4j REST API
"""
Graph layer for Neo4j REST operations including:
- Client: maps entity CRUD, path search and Cypher onto REST calls
- Node, Relationship, Path: entity model with lazy cross-references
- PathFinder, CypherQuery: request builders
- HttpTransport: httpx-backed transport
"""

from neorest.graph.client import Client
from neorest.graph.cypher import CypherQuery
from neorest.graph.entities import Direction, Node, Path, Relationship
from neorest.graph.exceptions import (
    ErrorCode,
    Neo4jConnectionError,
    Neo4jError,
    Neo4jResponseError,
    Neo4jServerError,
    Neo4jUsageError,
)
from neorest.graph.path_finder import Algorithm, PathFinder
from neorest.graph.transport import HttpTransport, Transport, TransportResult

__all__ = [
    # Exceptions
    "ErrorCode",
    "Neo4jConnectionError",
    "Neo4jError",
    "Neo4jResponseError",
    "Neo4jServerError",
    "Neo4jUsageError",
    # Client
    "Client",
    # Entities
    "Direction",
    "Node",
    "Path",
    "Relationship",
    # Builders
    "Algorithm",
    "CypherQuery",
    "PathFinder",
    # Transport
    "HttpTransport",
    "Transport",
    "TransportResult",
]
