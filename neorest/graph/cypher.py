"""
Cypher query builder.

The Cypher plugin endpoint takes a literal query string, so positional
``?`` placeholders are substituted client-side before sending.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from neorest.graph.exceptions import Neo4jUsageError

if TYPE_CHECKING:
    from neorest.graph.client import Client

PLACEHOLDER = "?"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class CypherQuery:
    """A query template plus its positional parameters.

    Usage:
        query = CypherQuery(client, "START a=(?) RETURN a", [0])
        query.query_string        # "START a=(0) RETURN a"
        rows = query.get_result_set()
    """

    def __init__(
        self,
        client: Client,
        template: str,
        params: Sequence[Any] | None = None,
    ) -> None:
        self._client = client
        self._template = template
        self._params = list(params or [])
        self._query_string: str | None = None

    @property
    def template(self) -> str:
        return self._template

    @property
    def params(self) -> list[Any]:
        return list(self._params)

    @property
    def query_string(self) -> str:
        """The template with every placeholder replaced, left to right.

        Raises:
            Neo4jUsageError: If placeholder and parameter counts differ
        """
        if self._query_string is None:
            pieces = self._template.split(PLACEHOLDER)
            if len(pieces) - 1 != len(self._params):
                raise Neo4jUsageError(
                    f"Query has {len(pieces) - 1} placeholders "
                    f"but {len(self._params)} parameters"
                )
            parts = [pieces[0]]
            for value, piece in zip(self._params, pieces[1:]):
                parts.append(_format_value(value))
                parts.append(piece)
            self._query_string = "".join(parts)
        return self._query_string

    def get_result_set(self) -> list[dict[str, Any]] | None:
        """Execute the query. See Client.execute_cypher_query."""
        return self._client.execute_cypher_query(self)

    def __repr__(self) -> str:
        return f"CypherQuery({self._template!r}, {self._params!r})"
