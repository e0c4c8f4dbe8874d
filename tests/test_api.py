from __future__ import annotations

import httpx
from fastapi.testclient import TestClient

import seo_audit.api as api
from seo_audit.engine.analyzer import audit


def test_health():
    client = TestClient(api.app)
    assert client.get("/health").json() == {"ok": True}


def test_audit_returns_wire_json(good_page, monkeypatch):
    requested: list[str] = []

    async def fake_run_audit(url: str):
        requested.append(url)
        return audit(good_page)

    monkeypatch.setattr(api, "run_audit", fake_run_audit)
    response = TestClient(api.app).post("/audit", json={"url": "solar.example.com/guide"})

    assert response.status_code == 200
    body = response.json()
    assert requested == ["https://solar.example.com/guide"]
    assert body["score"] == 100
    assert body["passedChecks"] == len(body["issues"])
    assert body["pageTitle"] == "Solar Panels Guide for Homeowners"
    assert {"name", "score", "issueCount"} <= set(body["categoryScores"][0])


def test_audit_rejects_bad_url():
    response = TestClient(api.app).post("/audit", json={"url": "ftp://example.com"})
    assert response.status_code == 400
    assert "http" in response.json()["detail"]


def test_audit_maps_fetch_failure_to_500(monkeypatch):
    async def failing_run_audit(url: str):
        raise httpx.ConnectError("refused")

    monkeypatch.setattr(api, "run_audit", failing_run_audit)
    response = TestClient(api.app).post("/audit", json={"url": "https://example.com"})
    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to perform SEO audit"
