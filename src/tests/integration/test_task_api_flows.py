"""End-to-end flows over the HTTP API."""

from fastapi.testclient import TestClient


class TestTaskApiFlows:
    """Scenario tests driving the API the way a client would."""

    def test_milk_and_taxes_scenario(self, client: TestClient) -> None:
        """Create two tasks, filter, delete one and verify every view."""
        milk = client.post(
            "/task/",
            json={"text": "buy milk", "tags": ["errand", "home"], "due": "2024-03-01T00:00:00Z"},
        ).json()["id"]
        taxes = client.post(
            "/task/",
            json={"text": "file taxes", "tags": ["finance"], "due": "2024-04-15T00:00:00Z"},
        ).json()["id"]
        assert (milk, taxes) == (0, 1)

        assert [t["id"] for t in client.get("/tag/errand/").json()] == [milk]
        assert [t["id"] for t in client.get("/due/2024/4/15/").json()] == [taxes]

        assert client.delete(f"/task/{milk}/").status_code == 200

        assert client.get("/tag/errand/").json() == []
        assert client.get(f"/task/{milk}/").status_code == 404
        remaining = client.get("/task/").json()
        assert [t["text"] for t in remaining] == ["file taxes"]

    def test_zone_preserving_due_lookup(self, client: TestClient) -> None:
        """A due time late in the evening at -05:00 stays on its local day."""
        client.post("/task/", json={"text": "late", "due": "2024-03-01T23:30:00-05:00"})

        assert [t["text"] for t in client.get("/due/2024/3/1/").json()] == ["late"]
        assert client.get("/due/2024/3/2/").json() == []

    def test_clear_then_recreate(self, client: TestClient) -> None:
        """Ids keep growing across a full clear."""
        client.post("/task/", json={"text": "a"})
        client.delete("/task/")

        response = client.post("/task/", json={"text": "b"})

        assert response.json() == {"id": 1}
        assert [t["id"] for t in client.get("/task/").json()] == [1]
