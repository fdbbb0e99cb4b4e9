"""API integration tests

Runs the real FastAPI app against the in-memory store and a recording
insight generator.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from acclog.api.app import create_app
from acclog.errors import PermanentGenerationError, TransientGenerationError

HEADERS = {"X-User-Id": "user-1"}


@pytest.fixture
def client(memory_store, fake_generator):
    return TestClient(create_app(memory_store, fake_generator))


def _post_entry(client, text, rating, timestamp, headers=HEADERS):
    return client.post(
        "/api/entries",
        json={"text": text, "rating": rating, "timestamp": timestamp},
        headers=headers,
    )


@pytest.fixture
def seeded(client):
    _post_entry(client, "Closed out the audit", 6, "2026-01-12T10:00:00Z")
    _post_entry(client, "Launched search", 9, "2026-02-03T10:00:00Z")
    _post_entry(client, "Mentored two interns", 7, "2026-02-18T10:00:00Z")
    _post_entry(client, "Started the roadmap", 5, "2026-03-02T10:00:00Z")
    return client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["storage"]["configured"] is True
    assert data["llm"]["configured"] is True


def test_root(client):
    assert client.get("/").json()["status"] == "running"


def test_missing_owner_header_is_rejected(client):
    response = client.get("/api/entries")
    assert response.status_code == 401
    assert "X-User-Id" in response.json()["detail"]


class TestEntries:
    def test_create_entry(self, client):
        response = _post_entry(client, "  Shipped v2  ", 8, "2026-02-10T09:00:00Z")

        assert response.status_code == 201
        data = response.json()
        assert data["text"] == "Shipped v2"
        assert data["rating"] == 8
        assert data["id"]
        assert "aiInsight" not in data

    def test_create_entry_with_compliment(self, client, fake_generator):
        response = client.post(
            "/api/entries?compliment=true", json={"text": "Ran 10k", "rating": 7}, headers=HEADERS
        )

        assert response.status_code == 201
        assert response.json()["aiInsight"] == "Nice work."
        assert fake_generator.compliments == [("Ran 10k", 7)]

    @pytest.mark.parametrize("rating", [0, 11, "7", None])
    def test_invalid_rating(self, client, rating):
        body = {"text": "x", "rating": rating}
        response = client.post("/api/entries", json=body, headers=HEADERS)
        assert response.status_code == 400
        assert "Rating must be a number between 1 and 10" in response.json()["error"]

    def test_empty_text(self, client):
        response = client.post("/api/entries", json={"text": "  ", "rating": 5}, headers=HEADERS)
        assert response.status_code == 400

    def test_unparseable_timestamp(self, client):
        body = {"text": "Shipped v2", "rating": 5, "timestamp": "yesterday"}
        response = client.post("/api/entries", json=body, headers=HEADERS)

        assert response.status_code == 400
        assert "timestamp" in response.json()["error"]
        assert client.get("/api/entries", headers=HEADERS).json()["count"] == 0

    def test_list_entries_newest_first(self, seeded):
        data = seeded.get("/api/entries", headers=HEADERS).json()
        assert data["count"] == 4
        assert [e["text"] for e in data["entries"]][0] == "Started the roadmap"

    def test_entries_are_scoped_to_owner(self, seeded):
        data = seeded.get("/api/entries", headers={"X-User-Id": "someone-else"}).json()
        assert data == {"entries": [], "count": 0}


class TestTimeframes:
    def test_list_months(self, seeded):
        response = seeded.get("/api/timeframes/month", headers=HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert data["timeframeType"] == "month"
        assert [t["key"] for t in data["timeframes"]] == ["2026-03", "2026-02", "2026-01"]
        feb = data["timeframes"][1]
        assert feb["label"] == "February 2026"
        assert feb["stats"] == {"count": 2, "averageRating": 8.0}

    def test_list_years(self, seeded):
        data = seeded.get("/api/timeframes/year", headers=HEADERS).json()
        assert [t["key"] for t in data["timeframes"]] == ["2026"]
        assert data["timeframes"][0]["stats"]["count"] == 4

    def test_unknown_granularity(self, client):
        response = client.get("/api/timeframes/week", headers=HEADERS)
        assert response.status_code == 400

    def test_bucket_view(self, seeded):
        data = seeded.get("/api/timeframes/month/2026-02", headers=HEADERS).json()

        assert data["label"] == "February 2026"
        assert [e["text"] for e in data["entries"]] == ["Mentored two interns", "Launched search"]
        assert data["previousKey"] == "2026-01"
        assert data["nextKey"] == "2026-03"
        assert data["insight"] is None
        assert data["isStale"] is False

    def test_bucket_with_malformed_key(self, client):
        response = client.get("/api/timeframes/month/2026-13", headers=HEADERS)
        assert response.status_code == 400


class TestInsights:
    def test_generate_then_read_back(self, seeded, fake_generator):
        response = seeded.post("/api/insights/month/2026-02", headers=HEADERS)

        assert response.status_code == 200
        insight = response.json()["insight"]
        assert insight["id"] == "month_2026-02"
        assert insight["timeframeType"] == "month"
        assert insight["accomplishmentCount"] == 2
        assert len(insight["accomplishmentIds"]) == 2
        assert insight["content"] == fake_generator.response

        bucket = seeded.get("/api/timeframes/month/2026-02", headers=HEADERS).json()
        assert bucket["insight"]["content"] == fake_generator.response
        assert bucket["insightGenerated"] == "just now"
        assert bucket["isStale"] is False

        health = seeded.get("/health").json()
        assert health["insights"]["insights.generate.success"] == 1

    def test_new_entry_marks_insight_stale(self, seeded, fake_generator):
        seeded.post("/api/insights/month/2026-02", headers=HEADERS)
        _post_entry(seeded, "Fixed the flaky deploy", 4, "2026-02-25T10:00:00Z")

        bucket = seeded.get("/api/timeframes/month/2026-02", headers=HEADERS).json()
        cached = seeded.get("/api/insights/month/2026-02", headers=HEADERS).json()

        assert bucket["isStale"] is True
        assert cached["isStale"] is True
        assert len(fake_generator.calls) == 1

    def test_regenerate_clears_staleness(self, seeded, fake_generator):
        seeded.post("/api/insights/month/2026-02", headers=HEADERS)
        _post_entry(seeded, "Fixed the flaky deploy", 4, "2026-02-25T10:00:00Z")

        fake_generator.response = "Updated summary."
        response = seeded.post("/api/insights/month/2026-02", headers=HEADERS)

        assert response.json()["insight"]["accomplishmentCount"] == 3
        bucket = seeded.get("/api/timeframes/month/2026-02", headers=HEADERS).json()
        assert bucket["insight"]["content"] == "Updated summary."
        assert bucket["isStale"] is False

    def test_cached_insight_miss(self, seeded):
        data = seeded.get("/api/insights/year/2026", headers=HEADERS).json()
        assert data == {"insight": None, "isStale": False}

    def test_empty_bucket_is_refused(self, seeded, fake_generator):
        response = seeded.post("/api/insights/month/2024-06", headers=HEADERS)
        assert response.status_code == 409
        assert fake_generator.calls == []

    def test_transient_failure(self, seeded, fake_generator):
        fake_generator.error = TransientGenerationError("quota")
        response = seeded.post("/api/insights/month/2026-02", headers=HEADERS)
        assert response.status_code == 429

    def test_permanent_failure_hides_details(self, seeded, fake_generator):
        fake_generator.error = PermanentGenerationError("API key not valid: sk-123")
        response = seeded.post("/api/insights/month/2026-02", headers=HEADERS)
        assert response.status_code == 502
        assert "sk-123" not in response.text

    def test_no_generator_configured(self, memory_store):
        client = TestClient(create_app(memory_store, None, use_defaults=False))
        _post_entry(client, "Launched search", 9, "2026-02-03T10:00:00Z")

        response = client.post("/api/insights/month/2026-02", headers=HEADERS)

        assert response.status_code == 503
        assert client.get("/health").json()["llm"]["configured"] is False


def test_no_store_configured():
    client = TestClient(create_app(None, None, use_defaults=False))

    assert client.get("/api/entries", headers=HEADERS).json() == {"entries": [], "count": 0}
    assert _post_entry(client, "x", 5, "2026-02-03T10:00:00Z").status_code == 503
