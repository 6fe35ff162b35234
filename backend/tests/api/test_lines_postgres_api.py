"""Section management through the HTTP API with the SQL repositories on PostgreSQL."""

from httpx import AsyncClient

PREFIX = "/api/v1"


async def _create_stations(client: AsyncClient, *names: str) -> dict[str, str]:
    ids = {}
    for name in names:
        response = await client.post(f"{PREFIX}/stations", json={"name": name})
        assert response.status_code == 201
        ids[name] = response.json()["id"]
    return ids


async def _create_line(client: AsyncClient, up_station_id: str, down_station_id: str, distance: int) -> str:
    response = await client.post(
        f"{PREFIX}/lines",
        json={
            "name": "Shinbundang",
            "color": "bg-red-600",
            "up_station_id": up_station_id,
            "down_station_id": down_station_id,
            "distance": distance,
        },
    )
    assert response.status_code == 201
    return response.json()["id"]


async def test_section_edits_round_trip_through_database(db_client: AsyncClient) -> None:
    """Test split, merge and append requests are read back in line order."""
    ids = await _create_stations(db_client, "Gangnam", "Yangjae", "Jeongja", "Pangyo")
    line_id = await _create_line(db_client, ids["Gangnam"], ids["Yangjae"], 10)
    sections_url = f"{PREFIX}/lines/{line_id}/sections"

    split = await db_client.post(
        sections_url, json={"up_station_id": ids["Gangnam"], "down_station_id": ids["Jeongja"], "distance": 4}
    )
    assert split.status_code == 200

    line = (await db_client.get(f"{PREFIX}/lines/{line_id}")).json()
    assert [s["name"] for s in line["stations"]] == ["Gangnam", "Jeongja", "Yangjae"]
    assert [s["distance"] for s in line["sections"]] == [4, 6]

    merge = await db_client.delete(sections_url, params={"station_id": ids["Jeongja"]})
    assert merge.status_code == 200

    append = await db_client.post(
        sections_url, json={"up_station_id": ids["Yangjae"], "down_station_id": ids["Pangyo"], "distance": 3}
    )
    assert append.status_code == 200

    line = (await db_client.get(f"{PREFIX}/lines/{line_id}")).json()
    assert [s["name"] for s in line["stations"]] == ["Gangnam", "Yangjae", "Pangyo"]
    assert line["total_distance"] == 13


async def test_station_on_a_line_cannot_be_deleted_until_line_is(db_client: AsyncClient) -> None:
    """Test deleting a station a line runs through gives 409, and 204 once the line is gone."""
    ids = await _create_stations(db_client, "Gangnam", "Yangjae")
    line_id = await _create_line(db_client, ids["Gangnam"], ids["Yangjae"], 10)

    in_use = await db_client.delete(f"{PREFIX}/stations/{ids['Gangnam']}")
    assert in_use.status_code == 409

    assert (await db_client.delete(f"{PREFIX}/lines/{line_id}")).status_code == 204
    assert (await db_client.delete(f"{PREFIX}/stations/{ids['Gangnam']}")).status_code == 204


async def test_out_of_range_distances_are_rejected_before_storage(db_client: AsyncClient) -> None:
    """Test oversized sections and merges give 400 and leave the stored line unchanged."""
    ids = await _create_stations(db_client, "Gangnam", "Yangjae", "Jeongja")
    line_id = await _create_line(db_client, ids["Gangnam"], ids["Yangjae"], 2_000_000_000)
    sections_url = f"{PREFIX}/lines/{line_id}/sections"

    too_long = await db_client.post(
        sections_url, json={"up_station_id": ids["Yangjae"], "down_station_id": ids["Jeongja"], "distance": 3_000_000_000}
    )
    assert too_long.status_code == 400
    assert too_long.json()["detail"]["code"] == "invalid_distance"

    appended = await db_client.post(
        sections_url, json={"up_station_id": ids["Yangjae"], "down_station_id": ids["Jeongja"], "distance": 2_000_000_000}
    )
    assert appended.status_code == 200

    merge = await db_client.delete(sections_url, params={"station_id": ids["Yangjae"]})
    assert merge.status_code == 400
    assert merge.json()["detail"]["code"] == "invalid_distance"

    line = (await db_client.get(f"{PREFIX}/lines/{line_id}")).json()
    assert [s["distance"] for s in line["sections"]] == [2_000_000_000, 2_000_000_000]
