"""
Neo4j REST client.

Maps entity operations onto the server's REST API: builds the verb,
relative path and body for each call, hands them to a Transport, and
decodes the result into entities.

Two error channels:
- Contract violations (unsaved entities, incomplete relationships or
  path finders) raise Neo4jUsageError before any request is sent.
- Remote outcomes (404, 409, 400, anything unexpected) are never
  raised. The call returns False/None and records an ErrorCode in
  ``last_error``. Metadata lookups are the exception: they raise
  Neo4jServerError, as they have no meaningful failure value.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

from neorest.core.logging import get_logger
from neorest.graph.cypher import CypherQuery
from neorest.graph.entities import (
    Direction,
    Node,
    Path,
    PropertyContainer,
    Relationship,
)
from neorest.graph.exceptions import (
    ErrorCode,
    Neo4jResponseError,
    Neo4jServerError,
    Neo4jUsageError,
)
from neorest.graph.path_finder import Algorithm, PathFinder
from neorest.graph.transport import Transport, TransportResult

logger = get_logger(__name__)

CYPHER_PATH = "/ext/CypherPlugin/graphdb/execute_query"

_ENTITY_URL = re.compile(r"/(?P<kind>node|relationship)/(?P<id>\d+)/?$")
_VERSION = re.compile(r"^(?P<major>\d+)\.(?P<minor>\d+)(?:\.(?P<release>[^.\-]+))?")


def entity_id_from_url(url: str) -> int:
    """Parse the identity from an entity URL's final path segment.

    Raises:
        Neo4jResponseError: If the final segment is not an integer
    """
    segment = url.rstrip("/").rsplit("/", 1)[-1]
    try:
        return int(segment)
    except ValueError as e:
        raise Neo4jResponseError(f"Not an entity URL: {url!r}") from e


def parse_version(version: str) -> dict[str, str | None]:
    """Split a server version string into its parts.

    ``"1.5.M01-793-gc100417-dirty"`` gives major ``"1"``, minor ``"5"``
    and release ``"M01"``. Parts that cannot be parsed are None.
    """
    match = _VERSION.match(version)
    if match is None:
        return {"full": version, "major": None, "minor": None, "release": None}
    return {
        "full": version,
        "major": match.group("major"),
        "minor": match.group("minor"),
        "release": match.group("release"),
    }


def _coerce_result(raw: TransportResult | Mapping[str, Any]) -> TransportResult:
    # Transports may hand back plain {"code", "headers", "data"} mappings.
    if isinstance(raw, Mapping):
        return TransportResult(
            code=int(raw["code"]),
            headers=raw.get("headers") or {},
            data=raw.get("data"),
        )
    return TransportResult(code=int(raw.code), headers=raw.headers or {}, data=raw.data)


class Client:
    """Request/response mapper between entities and the REST API.

    Usage:
        client = Client(HttpTransport.from_settings(get_settings()))

        node = Node(client, properties={"name": "Alice"})
        if not client.save_node(node):
            print("save failed:", client.last_error)

        rows = client.execute_cypher_query(
            CypherQuery(client, "START n=(?) RETURN n", [node.id])
        )

    A Client is not thread-safe: ``last_error`` is per-instance state.
    """

    def __init__(self, transport: Transport) -> None:
        """Initialize client.

        Args:
            transport: Any object implementing the Transport protocol
        """
        self._transport = transport
        self._last_error: ErrorCode | None = None

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def endpoint(self) -> str:
        """Absolute URL of the data root, as reported by the transport."""
        return self._transport.endpoint.rstrip("/")

    @property
    def last_error(self) -> ErrorCode | None:
        """Error recorded by the most recent operation, or None."""
        return self._last_error

    # =========================================================================
    # Nodes
    # =========================================================================

    def save_node(self, node: Node) -> bool:
        """Create the node, or update its properties if it has an identity.

        Returns:
            True on success. On creation the node receives the identity
            from the response's Location header.

        Raises:
            Neo4jUsageError: On update, if the node is a lazy stub whose
                properties were never loaded or assigned
        """
        self._last_error = None
        if node.is_persisted:
            return self._update_properties(f"/node/{node.id}/properties", node)

        result = self._call("post", "/node", node.properties or None)
        if result.code != 201:
            return self._fail("save_node", result)
        return self._assign_id_from_location(node, result)

    def get_node(self, node_id: int, force: bool = False) -> Node | None:
        """Fetch a node by identity.

        Args:
            node_id: Node identity
            force: Skip the request and return a lazy stub with only
                   the identity set

        Returns:
            The populated node, or None when the fetch failed
            (``last_error`` holds the reason).
        """
        self._last_error = None
        if force:
            return self._node_stub(node_id)

        node = Node(self, id=node_id)
        if not self._fetch_node(node):
            return None
        return node

    def load_node(self, node: Node) -> bool:
        """Refresh an existing node's properties in place.

        Raises:
            Neo4jUsageError: If the node has no identity
        """
        self._last_error = None
        self._require_id(node, "load")
        return self._fetch_node(node)

    def delete_node(self, node: Node) -> bool:
        """Delete a node.

        Raises:
            Neo4jUsageError: If the node has no identity
        """
        self._last_error = None
        self._require_id(node, "delete")
        result = self._call("delete", f"/node/{node.id}")
        if result.code != 204:
            return self._fail("delete_node", result)
        return True

    # =========================================================================
    # Relationships
    # =========================================================================

    def save_relationship(self, rel: Relationship) -> bool:
        """Create the relationship, or update its properties.

        Creation posts to the start node's relationship collection.

        Raises:
            Neo4jUsageError: On creation, if the start or end node is
                missing or unsaved, or the type is missing
            Neo4jUsageError: On update, if the relationship is an
                unloaded lazy stub
        """
        self._last_error = None
        if rel.is_persisted:
            return self._update_properties(f"/relationship/{rel.id}/properties", rel)

        start, end = rel.start_node, rel.end_node
        if start is None or not start.is_persisted:
            raise Neo4jUsageError("Relationship start node must be saved first")
        if end is None or not end.is_persisted:
            raise Neo4jUsageError("Relationship end node must be saved first")
        if not rel.type:
            raise Neo4jUsageError("Relationship type must be set")

        payload: dict[str, Any] = {"to": self._node_url(end.id), "type": rel.type}
        properties = rel.properties
        if properties:
            payload["data"] = properties

        result = self._call("post", f"/node/{start.id}/relationships", payload)
        if result.code != 201:
            return self._fail("save_relationship", result)
        return self._assign_id_from_location(rel, result)

    def get_relationship(
        self, relationship_id: int, force: bool = False
    ) -> Relationship | None:
        """Fetch a relationship by identity.

        Start and end nodes come back as lazy stubs.
        """
        self._last_error = None
        if force:
            return self._relationship_stub(relationship_id)

        rel = Relationship(self, id=relationship_id)
        if not self._fetch_relationship(rel):
            return None
        return rel

    def load_relationship(self, rel: Relationship) -> bool:
        """Refresh an existing relationship in place.

        Raises:
            Neo4jUsageError: If the relationship has no identity
        """
        self._last_error = None
        self._require_id(rel, "load")
        return self._fetch_relationship(rel)

    def delete_relationship(self, rel: Relationship) -> bool:
        """Delete a relationship.

        Raises:
            Neo4jUsageError: If the relationship has no identity
        """
        self._last_error = None
        self._require_id(rel, "delete")
        result = self._call("delete", f"/relationship/{rel.id}")
        if result.code != 204:
            return self._fail("delete_relationship", result)
        return True

    def get_node_relationships(
        self,
        node: Node,
        types: str | Iterable[str] | None = None,
        direction: Direction | str | None = None,
    ) -> list[Relationship] | None:
        """List relationships attached to a node.

        Args:
            node: A saved node
            types: One type, several types, or None for any type
            direction: OUT, IN, or ALL (default)

        Returns:
            Relationships with lazy endpoint nodes, or None on failure

        Raises:
            Neo4jUsageError: If the node has no identity
        """
        self._last_error = None
        self._require_id(node, "list relationships of")

        if isinstance(types, str):
            types = [types]
        type_names = list(types or [])
        direction = Direction.ALL if direction is None else Direction.parse(direction)

        path = f"/node/{node.id}/relationships/{direction.value}"
        if type_names:
            path += "/" + "&".join(type_names)

        result = self._call("get", path)
        if result.code != 200:
            self._fail("get_node_relationships", result)
            return None
        return [self._relationship_from_record(record) for record in result.data or []]

    # =========================================================================
    # Paths
    # =========================================================================

    def get_paths(self, finder: PathFinder) -> list[Path] | None:
        """Search for paths described by a PathFinder.

        Returns:
            Paths made of lazy stubs (possibly empty), or None when the
            server rejected the search

        Raises:
            Neo4jUsageError: If either end is unsaved, a direction is
                given without a type, or Dijkstra has no cost property
        """
        self._last_error = None
        body = self._build_path_request(finder)

        result = self._call("post", f"/node/{finder.start_node.id}/paths", body)
        if result.code != 200:
            self._fail("get_paths", result)
            return None
        return [self._path_from_record(record) for record in result.data or []]

    def get_path(self, finder: PathFinder) -> Path | None:
        """Return the first path found, or None."""
        paths = self.get_paths(finder)
        if not paths:
            return None
        return paths[0]

    def _build_path_request(self, finder: PathFinder) -> dict[str, Any]:
        start, end = finder.start_node, finder.end_node
        if start is None or not start.is_persisted:
            raise Neo4jUsageError("Path start node must be saved first")
        if end is None or not end.is_persisted:
            raise Neo4jUsageError("Path end node must be saved first")
        if finder.direction is not None and not finder.type:
            raise Neo4jUsageError("Path direction requires a relationship type")

        algorithm = Algorithm.parse(finder.algorithm)
        if algorithm is Algorithm.DIJKSTRA and not finder.cost_property:
            raise Neo4jUsageError("Dijkstra search requires a cost property")

        body: dict[str, Any] = {"to": self._node_url(end.id)}
        if finder.type:
            direction = (
                Direction.ALL if finder.direction is None else Direction.parse(finder.direction)
            )
            body["relationships"] = {"type": finder.type, "direction": direction.value}

        max_depth = finder.max_depth
        if max_depth is None:
            max_depth = PathFinder.DEFAULT_MAX_DEPTH
        # Server versions disagree on the key spelling; send both.
        body["max_depth"] = max_depth
        body["max depth"] = max_depth
        body["algorithm"] = algorithm.value

        if algorithm is Algorithm.DIJKSTRA:
            body["cost_property"] = finder.cost_property
            body["cost property"] = finder.cost_property
            body["default_cost"] = finder.default_cost
            body["default cost"] = finder.default_cost
        return body

    # =========================================================================
    # Cypher
    # =========================================================================

    def execute_cypher_query(self, query: CypherQuery) -> list[dict[str, Any]] | None:
        """Run a Cypher query through the server's Cypher plugin.

        Returns:
            One dict per row mapping column name to value, in column
            order; [] when the server returned no data; None on failure.
            Node and relationship records in the rows are decoded into
            entities.
        """
        self._last_error = None
        result = self._call("post", CYPHER_PATH, {"query": query.query_string})
        if not 200 <= result.code < 300:
            self._fail("execute_cypher_query", result)
            return None

        data = result.data
        if not data:
            return []
        columns = data.get("columns") or []
        return [
            dict(zip(columns, (self._decode_value(value) for value in row)))
            for row in data.get("data") or []
        ]

    def _decode_value(self, value: Any) -> Any:
        if isinstance(value, list):
            return [self._decode_value(item) for item in value]
        if not isinstance(value, Mapping) or not isinstance(value.get("self"), str):
            return value

        match = _ENTITY_URL.search(value["self"])
        if match is None:
            return value
        if match.group("kind") == "node":
            return Node(self, id=int(match.group("id")), properties=value.get("data"))
        return self._relationship_from_record(value)

    # =========================================================================
    # Metadata
    # =========================================================================

    def get_relationship_types(self) -> list[str]:
        """List every relationship type known to the server.

        Raises:
            Neo4jServerError: If the server does not answer 200
        """
        self._last_error = None
        result = self._call("get", "/relationship/types")
        if result.code != 200:
            raise Neo4jServerError(
                f"Unable to retrieve relationship types (status {result.code})",
                status_code=result.code,
            )
        return list(result.data or [])

    def get_server_info(self) -> dict[str, Any]:
        """Fetch the data root description, plus a parsed ``version``.

        Raises:
            Neo4jServerError: If the server does not answer 200
        """
        self._last_error = None
        result = self._call("get", "/")
        if result.code != 200:
            raise Neo4jServerError(
                f"Unable to retrieve server info (status {result.code})",
                status_code=result.code,
            )
        info = dict(result.data or {})
        info["version"] = parse_version(str(info.get("neo4j_version", "")))
        return info

    # =========================================================================
    # Internals
    # =========================================================================

    def _call(self, method: str, path: str, *body: Any) -> TransportResult:
        raw = getattr(self._transport, method)(path, *body)
        return _coerce_result(raw)

    def _fail(self, operation: str, result: TransportResult) -> bool:
        self._last_error = ErrorCode.from_status(result.code)
        logger.warning(
            "%s failed with status %d (%s)",
            operation,
            result.code,
            self._last_error.name,
            extra={"operation": operation, "status": result.code},
        )
        return False

    @staticmethod
    def _require_id(entity: PropertyContainer, action: str) -> None:
        if not entity.is_persisted:
            raise Neo4jUsageError(
                f"Cannot {action} {type(entity).__name__.lower()} without an id"
            )

    def _update_properties(self, path: str, entity: PropertyContainer) -> bool:
        # A stub's local map is empty; sending it would erase the stored one.
        if entity.is_lazy:
            raise Neo4jUsageError(
                f"Cannot save lazy {type(entity).__name__.lower()} {entity.id}; "
                "load it or assign its properties first"
            )
        result = self._call("put", path, entity.properties)
        if result.code != 204:
            return self._fail("update_properties", result)
        return True

    def _assign_id_from_location(
        self, entity: PropertyContainer, result: TransportResult
    ) -> bool:
        location = result.header("Location")
        try:
            entity.id = entity_id_from_url(location or "")
        except Neo4jResponseError:
            self._last_error = ErrorCode.UNKNOWN
            logger.warning("Created entity but Location header was %r", location)
            return False
        return True

    def _node_url(self, node_id: int | None) -> str:
        return f"{self.endpoint}/node/{node_id}"

    def _node_stub(self, node_id: int) -> Node:
        node = Node(self, id=node_id)
        node.use_lazy_load()
        return node

    def _relationship_stub(self, relationship_id: int) -> Relationship:
        rel = Relationship(self, id=relationship_id)
        rel.use_lazy_load()
        return rel

    def _node_from_url(self, url: str) -> Node:
        return self._node_stub(entity_id_from_url(url))

    def _fetch_node(self, node: Node) -> bool:
        result = self._call("get", f"/node/{node.id}/properties")
        if result.code not in (200, 204):
            return self._fail("get_node", result)
        node.properties = result.data or {}
        return True

    def _fetch_relationship(self, rel: Relationship) -> bool:
        result = self._call("get", f"/relationship/{rel.id}")
        if result.code != 200:
            return self._fail("get_relationship", result)
        self._populate_relationship(rel, result.data or {})
        return True

    def _populate_relationship(self, rel: Relationship, record: Mapping[str, Any]) -> None:
        rel.properties = record.get("data") or {}
        rel.type = record.get("type")
        if record.get("start"):
            rel.start_node = self._node_from_url(record["start"])
        if record.get("end"):
            rel.end_node = self._node_from_url(record["end"])

    def _relationship_from_record(self, record: Mapping[str, Any]) -> Relationship:
        rel = Relationship(self, id=entity_id_from_url(record["self"]))
        self._populate_relationship(rel, record)
        return rel

    def _path_from_record(self, record: Mapping[str, Any]) -> Path:
        nodes = [self._node_from_url(url) for url in record.get("nodes") or []]
        relationships = [
            self._relationship_stub(entity_id_from_url(url))
            for url in record.get("relationships") or []
        ]
        return Path(nodes, relationships)
