from __future__ import annotations

import json

import httpx

import seo_audit.main as main
from seo_audit.engine.analyzer import audit


def test_cli_writes_json(good_page, monkeypatch, tmp_path):
    async def fake_run_audit(url: str):
        return audit(good_page)

    monkeypatch.setattr(main, "run_audit", fake_run_audit)
    out = tmp_path / "out" / "audit.json"

    assert main.cli(["solar.example.com/guide", "--out", str(out)]) == 0
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["score"] == 100
    assert payload["url"] == "https://solar.example.com/guide"


def test_cli_rejects_bad_url(tmp_path):
    assert main.cli(["ftp://example.com", "--out", str(tmp_path / "a.json")]) == 2


def test_cli_reports_fetch_failure(monkeypatch, tmp_path):
    async def failing_run_audit(url: str):
        raise httpx.ConnectError("refused")

    monkeypatch.setattr(main, "run_audit", failing_run_audit)
    assert main.cli(["https://example.com", "--out", str(tmp_path / "a.json")]) == 1
