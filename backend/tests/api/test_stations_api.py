"""Tests for stations API endpoints."""

import uuid

from fastapi.testclient import TestClient
from httpx import AsyncClient

PREFIX = "/api/v1"


class TestStationsAPI:
    """Station create/list/get/delete endpoints."""

    def test_create_station(self, client: TestClient) -> None:
        """Test creating a station strips its name."""
        response = client.post(f"{PREFIX}/stations", json={"name": "  Gangnam "})

        assert response.status_code == 201
        assert response.json()["name"] == "Gangnam"
        uuid.UUID(response.json()["id"])

    def test_create_station_duplicate(self, client: TestClient) -> None:
        """Test station names are unique."""
        client.post(f"{PREFIX}/stations", json={"name": "Gangnam"})

        assert client.post(f"{PREFIX}/stations", json={"name": "Gangnam"}).status_code == 409

    def test_create_station_blank_name(self, client: TestClient) -> None:
        """Test a blank name gives 422."""
        assert client.post(f"{PREFIX}/stations", json={"name": "  "}).status_code == 422
        assert client.post(f"{PREFIX}/stations", json={}).status_code == 422

    def test_get_and_list(self, client: TestClient) -> None:
        """Test a created station can be fetched and is listed."""
        station_id = client.post(f"{PREFIX}/stations", json={"name": "Yeoksam"}).json()["id"]

        assert client.get(f"{PREFIX}/stations/{station_id}").json() == {"id": station_id, "name": "Yeoksam"}
        assert [s["name"] for s in client.get(f"{PREFIX}/stations").json()] == ["Yeoksam"]

    def test_get_unknown_station(self, client: TestClient) -> None:
        """Test an unknown station gives 404."""
        assert client.get(f"{PREFIX}/stations/{uuid.uuid4()}").status_code == 404

    def test_delete_station_in_use(self, client: TestClient) -> None:
        """Test a station on a line cannot be deleted."""
        a = client.post(f"{PREFIX}/stations", json={"name": "A"}).json()["id"]
        b = client.post(f"{PREFIX}/stations", json={"name": "B"}).json()["id"]
        client.post(
            f"{PREFIX}/lines",
            json={"name": "L", "color": "red", "up_station_id": a, "down_station_id": b, "distance": 3},
        )

        assert client.delete(f"{PREFIX}/stations/{a}").status_code == 409

    async def test_delete_station_async(self, async_client: AsyncClient) -> None:
        """Test deleting an unused station with the async client."""
        station_id = (await async_client.post(f"{PREFIX}/stations", json={"name": "Gangnam"})).json()["id"]

        response = await async_client.delete(f"{PREFIX}/stations/{station_id}")

        assert response.status_code == 204
        assert (await async_client.get(f"{PREFIX}/stations/{station_id}")).status_code == 404
