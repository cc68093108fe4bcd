"""
Entity model for the Neo4j REST client.

Node and Relationship are plain property holders with an optional
integer identity. Entities built from REST URLs (relationship endpoints,
path members) know only their identity: they are *lazy* and fetch their
properties through the owning Client on first property access.

Accessing ``id`` never triggers a fetch.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, Iterator

from neorest.graph.exceptions import Neo4jUsageError

if TYPE_CHECKING:
    from neorest.graph.client import Client
    from neorest.graph.path_finder import PathFinder


class Direction(str, Enum):
    """Relationship direction relative to a node, used in requests."""

    OUT = "out"
    IN = "in"
    ALL = "all"

    @classmethod
    def parse(cls, value: Direction | str) -> Direction:
        """Convert a direction name.

        Raises:
            Neo4jUsageError: If the name is not a known direction
        """
        try:
            return cls(value)
        except ValueError as e:
            raise Neo4jUsageError(f"Unknown relationship direction: {value!r}") from e


class PropertyContainer:
    """Shared identity and property handling for nodes and relationships."""

    def __init__(
        self,
        client: Client | None = None,
        id: int | None = None,
        properties: dict[str, Any] | None = None,
    ) -> None:
        self._client = client
        self._id = id
        self._properties: dict[str, Any] = dict(properties or {})
        self._lazy = False

    # =========================================================================
    # Identity
    # =========================================================================

    @property
    def id(self) -> int | None:
        """Server-assigned identity, or None when not persisted."""
        return self._id

    @id.setter
    def id(self, value: int | None) -> None:
        self._id = None if value is None else int(value)

    @property
    def is_persisted(self) -> bool:
        return self._id is not None

    @property
    def client(self) -> Client | None:
        return self._client

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def properties(self) -> dict[str, Any]:
        """Copy of the property map (loads a lazy entity first)."""
        self._load_if_lazy()
        return dict(self._properties)

    @properties.setter
    def properties(self, values: dict[str, Any]) -> None:
        self._lazy = False
        self._properties = dict(values)

    def get_property(self, name: str, default: Any = None) -> Any:
        self._load_if_lazy()
        return self._properties.get(name, default)

    def set_property(self, name: str, value: Any) -> None:
        """Set one property; None removes it, as the server stores no nulls."""
        self._load_if_lazy()
        if value is None:
            self._properties.pop(name, None)
        else:
            self._properties[name] = value

    def remove_property(self, name: str) -> None:
        self._load_if_lazy()
        self._properties.pop(name, None)

    # =========================================================================
    # Lazy loading
    # =========================================================================

    def use_lazy_load(self, lazy: bool = True) -> None:
        """Mark the entity as identity-only until its first property access."""
        self._lazy = lazy

    @property
    def is_lazy(self) -> bool:
        return self._lazy

    def _load_if_lazy(self) -> None:
        if self._lazy:
            self._lazy = False
            self.load()

    def _require_client(self) -> Client:
        if self._client is None:
            raise Neo4jUsageError(
                f"{type(self).__name__} is not bound to a client"
            )
        return self._client

    def load(self) -> bool:
        raise NotImplementedError


class Node(PropertyContainer):
    """A graph vertex.

    Usage:
        node = Node(client, properties={"name": "Alice"})
        node.save()
        friend = client.get_node(42)
        rel = node.relate_to(friend, "KNOWS")
        rel.save()
    """

    def save(self) -> bool:
        """Create or update this node. See Client.save_node."""
        return self._require_client().save_node(self)

    def load(self) -> bool:
        """Refresh properties from the server. See Client.load_node."""
        return self._require_client().load_node(self)

    def delete(self) -> bool:
        """Delete this node. See Client.delete_node."""
        return self._require_client().delete_node(self)

    def get_relationships(
        self,
        types: str | Iterable[str] | None = None,
        direction: Direction | str | None = None,
    ) -> list[Relationship] | None:
        """Fetch relationships attached to this node."""
        return self._require_client().get_node_relationships(self, types, direction)

    def relate_to(
        self,
        to: Node,
        type: str,
        properties: dict[str, Any] | None = None,
    ) -> Relationship:
        """Build an unsaved relationship from this node to another."""
        return Relationship(
            self._client,
            start_node=self,
            end_node=to,
            type=type,
            properties=properties,
        )

    def find_paths_to(
        self,
        to: Node,
        type: str | None = None,
        direction: Direction | str | None = None,
    ) -> PathFinder:
        """Build a path finder from this node to another."""
        from neorest.graph.path_finder import PathFinder

        return PathFinder(
            self._require_client(),
            start_node=self,
            end_node=to,
            type=type,
            direction=direction,
        )

    def __repr__(self) -> str:
        return f"Node(id={self._id!r})"


class Relationship(PropertyContainer):
    """A typed, directed edge between two nodes."""

    def __init__(
        self,
        client: Client | None = None,
        id: int | None = None,
        properties: dict[str, Any] | None = None,
        start_node: Node | None = None,
        end_node: Node | None = None,
        type: str | None = None,
    ) -> None:
        super().__init__(client, id, properties)
        self._start_node = start_node
        self._end_node = end_node
        self._type = type

    @property
    def start_node(self) -> Node | None:
        self._load_if_lazy()
        return self._start_node

    @start_node.setter
    def start_node(self, node: Node | None) -> None:
        self._start_node = node

    @property
    def end_node(self) -> Node | None:
        self._load_if_lazy()
        return self._end_node

    @end_node.setter
    def end_node(self, node: Node | None) -> None:
        self._end_node = node

    @property
    def type(self) -> str | None:
        self._load_if_lazy()
        return self._type

    @type.setter
    def type(self, value: str | None) -> None:
        self._type = value

    def save(self) -> bool:
        """Create or update this relationship. See Client.save_relationship."""
        return self._require_client().save_relationship(self)

    def load(self) -> bool:
        """Refresh from the server. See Client.load_relationship."""
        return self._require_client().load_relationship(self)

    def delete(self) -> bool:
        """Delete this relationship. See Client.delete_relationship."""
        return self._require_client().delete_relationship(self)

    def __repr__(self) -> str:
        return f"Relationship(id={self._id!r}, type={self._type!r})"


class Path:
    """Read-only result of a path search.

    Iterating a path yields its nodes in order; ``len(path)`` is the
    number of relationships traversed.
    """

    def __init__(
        self,
        nodes: Iterable[Node] = (),
        relationships: Iterable[Relationship] = (),
    ) -> None:
        self._nodes = tuple(nodes)
        self._relationships = tuple(relationships)

    @property
    def nodes(self) -> list[Node]:
        return list(self._nodes)

    @property
    def relationships(self) -> list[Relationship]:
        return list(self._relationships)

    @property
    def start_node(self) -> Node | None:
        return self._nodes[0] if self._nodes else None

    @property
    def end_node(self) -> Node | None:
        return self._nodes[-1] if self._nodes else None

    def __len__(self) -> int:
        return len(self._relationships)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __repr__(self) -> str:
        ids = [node.id for node in self._nodes]
        return f"Path(nodes={ids!r})"
