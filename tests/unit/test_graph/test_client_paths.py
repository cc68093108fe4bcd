"""
Unit tests for Client path search.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from neorest.graph.client import Client
from neorest.graph.entities import Direction, Node, Path, Relationship
from neorest.graph.exceptions import ErrorCode, Neo4jUsageError
from neorest.graph.path_finder import Algorithm, PathFinder
from neorest.graph.transport import TransportResult

PATHS = [
    {
        "start": "http://localhost:7474/db/data/node/123",
        "nodes": [
            "http://localhost:7474/db/data/node/123",
            "http://localhost:7474/db/data/node/341",
            "http://localhost:7474/db/data/node/456",
        ],
        "length": 2,
        "relationships": [
            "http://localhost:7474/db/data/relationship/564",
            "http://localhost:7474/db/data/relationship/32",
        ],
        "end": "http://localhost:7474/db/data/node/456",
    },
    {
        "start": "http://localhost:7474/db/data/node/123",
        "nodes": [
            "http://localhost:7474/db/data/node/123",
            "http://localhost:7474/db/data/node/41",
            "http://localhost:7474/db/data/node/456",
        ],
        "length": 2,
        "relationships": [
            "http://localhost:7474/db/data/relationship/437",
            "http://localhost:7474/db/data/relationship/97",
        ],
        "end": "http://localhost:7474/db/data/node/456",
    },
]


@pytest.fixture
def start(client: Client) -> Node:
    return Node(client, id=123)


@pytest.fixture
def end(client: Client) -> Node:
    return Node(client, id=456)


# =============================================================================
# Test: request body
# =============================================================================


class TestPathRequest:
    """Tests for the body sent to /node/{id}/paths."""

    def test_typed_search_returns_paths(
        self,
        client: Client,
        mock_transport: MagicMock,
        endpoint: str,
        start: Node,
        end: Node,
    ) -> None:
        finder = PathFinder(
            client,
            start_node=start,
            end_node=end,
            type="FOOTYPE",
            direction=Direction.OUT,
            max_depth=3,
        )
        mock_transport.post.return_value = TransportResult(code=200, data=PATHS)

        paths = client.get_paths(finder)

        mock_transport.post.assert_called_once_with(
            "/node/123/paths",
            {
                "to": f"{endpoint}/node/456",
                "relationships": {"type": "FOOTYPE", "direction": "out"},
                "max_depth": 3,
                "max depth": 3,
                "algorithm": "shortestPath",
            },
        )
        assert len(paths) == 2
        assert all(isinstance(path, Path) for path in paths)

        assert [rel.id for rel in paths[0].relationships] == [564, 32]
        assert [node.id for node in paths[0].nodes] == [123, 341, 456]
        assert [rel.id for rel in paths[1].relationships] == [437, 97]
        assert [node.id for node in paths[1].nodes] == [123, 41, 456]
        assert all(isinstance(rel, Relationship) for rel in paths[0].relationships)

    def test_max_depth_defaults_to_one(
        self,
        client: Client,
        mock_transport: MagicMock,
        endpoint: str,
        start: Node,
        end: Node,
    ) -> None:
        finder = PathFinder(
            client,
            start_node=start,
            end_node=end,
            type="FOOTYPE",
            direction=Direction.OUT,
        )
        mock_transport.post.return_value = TransportResult(code=200, data=[])

        paths = client.get_paths(finder)

        assert paths == []
        body = mock_transport.post.call_args.args[1]
        assert body["max_depth"] == 1
        assert body["max depth"] == 1

    def test_type_without_direction_searches_all_directions(
        self, client: Client, mock_transport: MagicMock, start: Node, end: Node
    ) -> None:
        finder = PathFinder(client, start_node=start, end_node=end, type="FOOTYPE")
        mock_transport.post.return_value = TransportResult(code=200, data=[])

        client.get_paths(finder)

        body = mock_transport.post.call_args.args[1]
        assert body["relationships"] == {"type": "FOOTYPE", "direction": "all"}

    def test_untyped_search_omits_relationships(
        self, client: Client, mock_transport: MagicMock, start: Node, end: Node
    ) -> None:
        finder = PathFinder(client, start_node=start, end_node=end)
        mock_transport.post.return_value = TransportResult(code=200, data=[])

        client.get_paths(finder)

        body = mock_transport.post.call_args.args[1]
        assert "relationships" not in body

    def test_dijkstra_sends_cost_settings(
        self,
        client: Client,
        mock_transport: MagicMock,
        endpoint: str,
        start: Node,
        end: Node,
    ) -> None:
        finder = PathFinder(
            client,
            start_node=start,
            end_node=end,
            algorithm=Algorithm.DIJKSTRA,
            cost_property="distance",
            default_cost=2,
        )
        mock_transport.post.return_value = TransportResult(code=200, data=[])

        paths = client.get_paths(finder)

        assert paths == []
        mock_transport.post.assert_called_once_with(
            "/node/123/paths",
            {
                "to": f"{endpoint}/node/456",
                "max_depth": 1,
                "max depth": 1,
                "algorithm": "dijkstra",
                "cost_property": "distance",
                "cost property": "distance",
                "default_cost": 2,
                "default cost": 2,
            },
        )


# =============================================================================
# Test: validation
# =============================================================================


class TestPathValidation:
    """Invalid finders raise before any request."""

    def test_direction_without_type_raises(
        self, client: Client, mock_transport: MagicMock, start: Node, end: Node
    ) -> None:
        finder = PathFinder(
            client, start_node=start, end_node=end, direction=Direction.OUT
        )

        with pytest.raises(Neo4jUsageError):
            client.get_paths(finder)
        mock_transport.post.assert_not_called()

    def test_unsaved_start_node_raises(
        self, client: Client, mock_transport: MagicMock, end: Node
    ) -> None:
        finder = PathFinder(client, start_node=Node(client), end_node=end)

        with pytest.raises(Neo4jUsageError):
            client.get_paths(finder)
        mock_transport.post.assert_not_called()

    def test_unsaved_end_node_raises(
        self, client: Client, mock_transport: MagicMock, start: Node
    ) -> None:
        finder = PathFinder(client, start_node=start, end_node=Node(client))

        with pytest.raises(Neo4jUsageError):
            client.get_paths(finder)
        mock_transport.post.assert_not_called()

    def test_missing_start_node_raises(
        self, client: Client, mock_transport: MagicMock, end: Node
    ) -> None:
        finder = PathFinder(client, end_node=end)

        with pytest.raises(Neo4jUsageError):
            client.get_paths(finder)

    def test_dijkstra_without_cost_property_raises(
        self, client: Client, mock_transport: MagicMock, start: Node, end: Node
    ) -> None:
        finder = PathFinder(
            client, start_node=start, end_node=end, algorithm=Algorithm.DIJKSTRA
        )

        with pytest.raises(Neo4jUsageError):
            client.get_paths(finder)
        mock_transport.post.assert_not_called()

    def test_unknown_algorithm_raises(
        self, client: Client, start: Node, end: Node
    ) -> None:
        with pytest.raises(Neo4jUsageError, match="astar"):
            PathFinder(client, start_node=start, end_node=end, algorithm="astar")

    def test_unknown_direction_raises(
        self, client: Client, start: Node, end: Node
    ) -> None:
        with pytest.raises(Neo4jUsageError, match="both"):
            PathFinder(
                client, start_node=start, end_node=end, type="KNOWS", direction="both"
            )

    def test_direction_changed_after_construction_is_checked(
        self, client: Client, mock_transport: MagicMock, start: Node, end: Node
    ) -> None:
        finder = PathFinder(client, start_node=start, end_node=end, type="KNOWS")
        finder.direction = "sideways"

        with pytest.raises(Neo4jUsageError):
            client.get_paths(finder)
        mock_transport.post.assert_not_called()


# =============================================================================
# Test: failures and single path
# =============================================================================


class TestPathResults:
    """Tests for non-200 outcomes and get_path."""

    def test_transport_failure_returns_none(
        self, client: Client, mock_transport: MagicMock, start: Node, end: Node
    ) -> None:
        finder = PathFinder(
            client,
            start_node=start,
            end_node=end,
            type="FOOTYPE",
            direction=Direction.OUT,
            max_depth=3,
        )
        mock_transport.post.return_value = TransportResult(code=400)

        assert client.get_paths(finder) is None
        assert client.last_error is ErrorCode.BAD_REQUEST

    def test_get_path_returns_first(
        self, client: Client, mock_transport: MagicMock, start: Node, end: Node
    ) -> None:
        mock_transport.post.return_value = TransportResult(code=200, data=PATHS)
        finder = PathFinder(client, start_node=start, end_node=end)

        path = finder.get_single_path()

        assert [node.id for node in path] == [123, 341, 456]
        assert len(path) == 2

    def test_get_path_without_results_returns_none(
        self, client: Client, mock_transport: MagicMock, start: Node, end: Node
    ) -> None:
        mock_transport.post.return_value = TransportResult(code=200, data=[])

        assert client.get_path(PathFinder(client, start_node=start, end_node=end)) is None
