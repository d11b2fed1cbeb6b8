"""Relay Connection and Edge types for GraphQL.

Factories that build a ``{Name}Connection { count edges pageInfo }`` and
``{Name}Edge { cursor node }`` pair for one node type, so resolvers can
return the pydantic ``Connection`` built by a cursor provider without
declaring the wrapper types by hand.

Example:
    LocationConnection = create_connection_type(Location, "Location")

    @strawberry.field
    def locations(self, first: int | None = None, after: str | None = None) -> LocationConnection:
        connection = Connection[Location].build(
            nodes=page,
            total_count=total,
            provider=OffsetCursorProvider(),
            page_request=PageRequest(first=first, after=after),
        )
        return LocationConnection.from_model(connection)

Annotations in this module are evaluated eagerly: the generated classes
refer to types that only exist inside the factory call.
"""

from collections.abc import Callable
from typing import Any

import strawberry
from pydantic import BaseModel
from strawberry.experimental import pydantic

from relay_cursors.core.pagination.schemas import Connection as ConnectionModel
from relay_cursors.graphql.types import PageInfoType

__all__ = [
    "create_connection_type",
    "create_edge_type",
    "create_node_type",
]


# ============================================================================
# Node and Edge Factories
# ============================================================================


def create_node_type(pydantic_model: type[BaseModel], name: str) -> type:
    """Create a Strawberry node type from a pydantic model.

    Args:
        pydantic_model: Model whose fields become the node's fields
        name: GraphQL type name

    Returns:
        A Strawberry type with ``from_pydantic()``
    """

    @pydantic.type(
        model=pydantic_model,
        all_fields=True,
        name=name,
        description=f"{name} node in a connection",
    )
    class NodeType:
        """Node type auto-generated from a pydantic model"""

    return NodeType


def create_edge_type(node_type: type, type_name_prefix: str) -> type:
    """Create a Relay Edge type for a Strawberry node type.

    Args:
        node_type: Strawberry type of the edge's node
        type_name_prefix: Prefix for the type name ("Location" -> "LocationEdge")

    Returns:
        A Strawberry Edge type class
    """

    @strawberry.type(
        name=f"{type_name_prefix}Edge",
        description=f"Edge containing a {type_name_prefix} node and cursor",
    )
    class Edge:
        node: node_type = strawberry.field(  # type: ignore[valid-type]
            description="The node containing the actual data"
        )
        cursor: str = strawberry.field(
            description="Opaque cursor for this edge used in pagination"
        )

    return Edge


# ============================================================================
# Connection Factory
# ============================================================================


def create_connection_type(
    node_type: type,
    type_name_prefix: str,
    page_info_type: type = PageInfoType,
) -> type:
    """Create a Relay Connection type with count, edges and page info.

    ``node_type`` may be a Strawberry type or a pydantic model; a model gets
    a generated ``{prefix}Node`` type and nodes are converted with
    ``from_pydantic()`` when a pydantic ``Connection`` is bridged.

    Args:
        node_type: Strawberry type or pydantic model of the nodes
        type_name_prefix: Prefix for the type names
            ("Location" -> "LocationConnection", "LocationEdge")
        page_info_type: Strawberry PageInfo type with ``from_model()``

    Returns:
        A Strawberry Connection type class with ``from_model()`` and an
        ``edge_type`` attribute
    """
    if isinstance(node_type, type) and issubclass(node_type, BaseModel):
        node_type = create_node_type(node_type, f"{type_name_prefix}Node")
    edge_type = create_edge_type(node_type, type_name_prefix)
    default_node_fn = getattr(node_type, "from_pydantic", None)

    @strawberry.type(
        name=f"{type_name_prefix}Connection",
        description=f"Relay connection for {type_name_prefix} with cursor-based pagination",
    )
    class Connection:
        count: int = strawberry.field(
            description="Total number of items across all pages"
        )
        edges: list[edge_type] = strawberry.field(  # type: ignore[valid-type]
            description="List of edges containing nodes and their cursors"
        )
        page_info: page_info_type = strawberry.field(  # type: ignore[valid-type]
            description="Pagination information including hasNextPage, hasPreviousPage, etc."
        )

        @classmethod
        def from_model(
            cls,
            connection: ConnectionModel,
            node_fn: Callable[[Any], Any] | None = None,
        ) -> "Connection":
            """Bridge a pydantic Connection built by a cursor provider.

            Args:
                connection: Connection with encoded edge cursors
                node_fn: Converts each node; defaults to ``from_pydantic()``
                    for generated node types, otherwise nodes pass unchanged
            """
            convert = node_fn or default_node_fn
            return cls(
                count=connection.count,
                edges=[
                    edge_type(
                        node=convert(edge.node) if convert else edge.node,
                        cursor=edge.cursor,
                    )
                    for edge in connection.edges
                ],
                page_info=page_info_type.from_model(connection.page_info),
            )

    Connection.edge_type = edge_type
    return Connection
