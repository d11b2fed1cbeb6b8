"""Tests for Relay Connection and Edge GraphQL types."""
from __future__ import annotations

import pytest
import strawberry
from pydantic import BaseModel

from relay_cursors.core.pagination import (
    Connection,
    OffsetCursor,
    OffsetCursorProvider,
    PageRequest,
    PaginationMetadata,
)
from relay_cursors.graphql import create_connection_type


class Location(BaseModel):
    name: str


LOCATIONS = [Location(name=f"Location {i}") for i in range(13)]

LocationConnection = create_connection_type(Location, "Location")


@strawberry.type
class CityType:
    name: str


CityConnection = create_connection_type(CityType, "City")


def _location_page(first: int | None, after: str | None) -> Connection[Location]:
    request = PageRequest(first=first, after=after)
    provider = OffsetCursorProvider()
    metadata = PaginationMetadata(total_count=len(LOCATIONS), page_request=request)
    start = provider.start_offset(metadata)
    end = len(LOCATIONS) if first is None else start + first
    return Connection[Location].build(
        nodes=LOCATIONS[start:end],
        total_count=len(LOCATIONS),
        provider=provider,
        page_request=request,
    )


@strawberry.type
class Query:
    @strawberry.field
    def locations(
        self,
        first: int | None = None,
        after: str | None = None,
    ) -> LocationConnection:
        return LocationConnection.from_model(_location_page(first, after))

    @strawberry.field
    def cities(self) -> CityConnection:
        connection = Connection[Location].build(
            nodes=[Location(name="Lumiere")],
            total_count=1,
            provider=OffsetCursorProvider(),
        )
        return CityConnection.from_model(
            connection,
            node_fn=lambda node: CityType(name=node.name.upper()),
        )


schema = strawberry.Schema(query=Query)

LOCATIONS_QUERY = """
    query Locations($first: Int, $after: String) {
        locations(first: $first, after: $after) {
            count
            edges {
                cursor
                node { name }
            }
            pageInfo {
                hasPreviousPage
                hasNextPage
                startCursor
                endCursor
            }
        }
    }
"""


@pytest.mark.unit
class TestConnectionTypes:
    """Tests for generated Connection and Edge types."""

    def test_type_names_in_schema(self):
        """The factory should generate named Connection, Edge and Node types."""
        sdl = str(schema)

        assert "type LocationConnection" in sdl
        assert "type LocationEdge" in sdl
        assert "type LocationNode" in sdl
        assert "type CityConnection" in sdl
        assert "type CityEdge" in sdl

    def test_edge_type_attribute(self):
        """The connection should expose its edge type."""
        assert LocationConnection.edge_type is not CityConnection.edge_type

    def test_first_page(self):
        """The first page should carry count, edges and page info."""
        result = schema.execute_sync(LOCATIONS_QUERY, variable_values={"first": 2})

        assert result.errors is None
        data = result.data["locations"]
        assert data["count"] == 13
        assert data["edges"] == [
            {"cursor": OffsetCursor(0).encode(), "node": {"name": "Location 0"}},
            {"cursor": OffsetCursor(1).encode(), "node": {"name": "Location 1"}},
        ]
        assert data["pageInfo"] == {
            "hasPreviousPage": False,
            "hasNextPage": True,
            "startCursor": OffsetCursor(0).encode(),
            "endCursor": OffsetCursor(1).encode(),
        }

    def test_walk_pages_through_schema(self):
        """Following endCursor should visit every location once."""
        names: list[str] = []
        after = None

        while True:
            result = schema.execute_sync(
                LOCATIONS_QUERY,
                variable_values={"first": 5, "after": after},
            )
            assert result.errors is None
            data = result.data["locations"]
            names.extend(edge["node"]["name"] for edge in data["edges"])
            if not data["pageInfo"]["hasNextPage"]:
                break
            after = data["pageInfo"]["endCursor"]

        assert names == [location.name for location in LOCATIONS]

    def test_invalid_after_is_error(self):
        """A garbage after token should fail the field."""
        result = schema.execute_sync(
            LOCATIONS_QUERY,
            variable_values={"first": 5, "after": "not-a-real-token!!"},
        )

        assert result.errors

    def test_custom_node_fn(self):
        """node_fn should convert nodes for plain Strawberry node types."""
        result = schema.execute_sync("{ cities { count edges { node { name } } } }")

        assert result.errors is None
        assert result.data == {
            "cities": {"count": 1, "edges": [{"node": {"name": "LUMIERE"}}]}
        }

    def test_from_model_without_schema(self):
        """from_model should build instances directly from a pydantic Connection."""
        connection = LocationConnection.from_model(_location_page(1, None))

        assert connection.count == 13
        assert connection.edges[0].cursor == OffsetCursor(0).encode()
        assert connection.edges[0].node.name == "Location 0"
        assert connection.page_info.has_next_page is True
