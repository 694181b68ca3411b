# tests/test_api_scrape.py
from types import SimpleNamespace

from propeval.adapters import og_scraper

HTML = '<html><head><meta property="og:title" content="Duplex downtown" /></head></html>'


def test_scrape_endpoint_returns_preview(client, monkeypatch):
    calls = []

    def fake_get(url, headers=None, timeout=None):
        calls.append(url)
        return SimpleNamespace(status_code=200, text=HTML, headers={})

    monkeypatch.setattr(og_scraper.requests, "get", fake_get)

    r = client.get("/scrape", params={"url": "api-test.example.com/duplex"})
    assert r.status_code == 200, r.text
    assert r.json()["title"] == "Duplex downtown"
    assert r.json()["url"] == "https://api-test.example.com/duplex"

    # second hit is served from the cache
    client.get("/scrape", params={"url": "https://api-test.example.com/duplex/"})
    assert len(calls) == 1


def test_scrape_upstream_failure_is_502(client, monkeypatch):
    monkeypatch.setattr(
        og_scraper.requests,
        "get",
        lambda url, headers=None, timeout=None: SimpleNamespace(status_code=404, text="", headers={}),
    )
    r = client.get("/scrape", params={"url": "https://api-test.example.com/missing"})
    assert r.status_code == 502


def test_scrape_blank_url_is_400(client):
    r = client.get("/scrape", params={"url": "   "})
    assert r.status_code == 400
