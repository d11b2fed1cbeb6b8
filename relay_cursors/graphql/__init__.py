"""Strawberry GraphQL integration for cursor kinds and Relay connections."""

from relay_cursors.graphql.connections import (
    create_connection_type,
    create_edge_type,
    create_node_type,
)
from relay_cursors.graphql.scalars import cursor_scalar
from relay_cursors.graphql.types import PageInfoType

__all__ = [
    "PageInfoType",
    "create_connection_type",
    "create_edge_type",
    "create_node_type",
    "cursor_scalar",
]
