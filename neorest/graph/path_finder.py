"""
Path search configuration.

A PathFinder describes one request to the server's path-finding
endpoint. It performs no search itself; the Client validates it and
turns it into a request body.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from neorest.graph.entities import Direction
from neorest.graph.exceptions import Neo4jUsageError

if TYPE_CHECKING:
    from neorest.graph.client import Client
    from neorest.graph.entities import Node, Path


class Algorithm(str, Enum):
    """Path-finding algorithms understood by the server."""

    SHORTEST_PATH = "shortestPath"
    DIJKSTRA = "dijkstra"

    @classmethod
    def parse(cls, value: Algorithm | str) -> Algorithm:
        """Convert an algorithm name.

        Raises:
            Neo4jUsageError: If the name is not a known algorithm
        """
        try:
            return cls(value)
        except ValueError as e:
            raise Neo4jUsageError(f"Unknown path algorithm: {value!r}") from e


class PathFinder:
    """Configuration for a path search between two nodes.

    Usage:
        finder = PathFinder(client, start_node=a, end_node=b, max_depth=3)
        paths = finder.get_paths()

        weighted = PathFinder(
            client,
            start_node=a,
            end_node=b,
            algorithm=Algorithm.DIJKSTRA,
            cost_property="distance",
        )
        best = weighted.get_single_path()
    """

    DEFAULT_MAX_DEPTH = 1
    DEFAULT_COST = 1

    def __init__(
        self,
        client: Client,
        start_node: Node | None = None,
        end_node: Node | None = None,
        type: str | None = None,
        direction: Direction | str | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        algorithm: Algorithm | str = Algorithm.SHORTEST_PATH,
        cost_property: str | None = None,
        default_cost: float = DEFAULT_COST,
    ) -> None:
        """Initialize path finder.

        Args:
            client: Client used by get_paths()/get_single_path()
            start_node: Node the paths start from (must be persisted)
            end_node: Node the paths end at (must be persisted)
            type: Relationship type to follow (any type when None)
            direction: Direction to follow; requires ``type``
            max_depth: Maximum path length (default: 1)
            algorithm: SHORTEST_PATH (default) or DIJKSTRA
            cost_property: Relationship property holding the cost
                           (required for DIJKSTRA)
            default_cost: Cost of relationships lacking ``cost_property``
        """
        self._client = client
        self.start_node = start_node
        self.end_node = end_node
        self.type = type
        self.direction = None if direction is None else Direction.parse(direction)
        self.max_depth = max_depth
        self.algorithm = Algorithm.parse(algorithm)
        self.cost_property = cost_property
        self.default_cost = default_cost

    def get_paths(self) -> list[Path] | None:
        """Run the search. See Client.get_paths."""
        return self._client.get_paths(self)

    def get_single_path(self) -> Path | None:
        """Run the search and return only the first path found."""
        return self._client.get_path(self)

    def __repr__(self) -> str:
        start = self.start_node.id if self.start_node is not None else None
        end = self.end_node.id if self.end_node is not None else None
        return (
            f"PathFinder(start={start!r}, end={end!r}, "
            f"algorithm={self.algorithm.value!r}, max_depth={self.max_depth!r})"
        )
