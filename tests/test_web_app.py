# tests/test_web_app.py

import asyncio
import json

import pytest
from fastapi.testclient import TestClient

import astrobio_navigator.web.app as web_app_module
import astrobio_navigator.web.security as security_module
from astrobio_navigator.catalog.snapshot import CatalogSnapshot
from astrobio_navigator.config.settings import Settings
from astrobio_navigator.errors import ModelCallError
from astrobio_navigator.models.analysis import (
    AnalysisResult,
    CandidateStatus,
    Citation,
    RelatedCandidate,
)
from astrobio_navigator.models.paper import CatalogEntry
from astrobio_navigator.web.app import app
from astrobio_navigator.web.security import reset_rate_limits

PDF_BYTES = b"%PDF-1.4 fake document"
PAPER_URL = "https://www.ncbi.nlm.nih.gov/pmc/articles/PMC3630201/"


class DummyClient:
    model = "dummy-model"

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.prompts = []

    def generate(self, prompt, *, document=None, json_mode=False, use_url_context=False):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


def make_catalog():
    return CatalogSnapshot([
        CatalogEntry(
            id="ID00001",
            title="Mice in Bion-M 1 space mission",
            content="Bone and muscle changes in mice after 30 days in orbit.",
            link="https://example.org/ID00001",
            authors="Andreev-Andrievskiy A, Popova A, Boyle R",
            images="https://cdn.example/pone.0104830.g001.jpg : https://example.org/logo.jpg",
        ),
        CatalogEntry(
            id="ID00002",
            title="Microgravity induces pelvic bone loss",
            content="Osteoclast activity in spaceflight.",
            link="https://example.org/ID00002",
        ),
    ])


@pytest.fixture
def client():
    app.state.catalog = make_catalog()
    app.state.analysis_client = DummyClient()
    app.state.feature_client = DummyClient()
    reset_rate_limits()
    yield TestClient(app)
    reset_rate_limits()


def upload(client, content=PDF_BYTES, content_type="application/pdf"):
    return client.post(
        "/analyze/pdf",
        files={"file": ("paper.pdf", content, content_type)},
    )


def test_health_reports_catalog_size(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "catalog_size": 2}


def test_list_and_search_papers(client):
    r = client.get("/papers")
    assert r.status_code == 200
    data = r.json()
    assert [p["id"] for p in data] == ["ID00001", "ID00002"]
    assert data[0]["authors_preview"] == "Andreev-Andrievskiy A, Popova A"
    assert data[0]["more_authors"] == 1

    r = client.get("/papers", params={"q": "osteoclast"})
    assert [p["id"] for p in r.json()] == ["ID00002"]

    r = client.get("/papers", params={"limit": 1})
    assert len(r.json()) == 1


def test_get_paper_and_404(client):
    r = client.get("/papers/ID00001")
    assert r.status_code == 200
    detail = r.json()
    assert detail["authors"] == ["Andreev-Andrievskiy A", "Popova A", "Boyle R"]
    assert detail["image_urls"] == ["https://cdn.example/pone.0104830.g001.jpg"]

    r = client.get("/papers/NOPE")
    assert r.status_code == 404


def test_analyze_pdf_returns_serialized_result(client, monkeypatch):
    captured = {}

    def fake_analyze_document(document, catalog, *, client=None, settings=None):
        captured["document"] = document
        captured["catalog"] = catalog
        captured["client"] = client
        return AnalysisResult(
            keywords=("microgravity", "bone"),
            summary="Bone loss study.",
            related_papers=(
                RelatedCandidate(
                    id="ID00002",
                    title="Microgravity induces pelvic bone loss",
                    link="https://example.org/ID00002",
                    relevance_score=0.7,
                    matching_keywords=["microgravity", "bone"],
                ),
            ),
            citations=(
                Citation(
                    paper_title="Microgravity induces pelvic bone loss",
                    paper_link="https://example.org/ID00002",
                    citation_text="pelvic bone loss",
                    context="results",
                    line_number="12",
                ),
            ),
            cross_references=(),
            candidate_statuses=(
                CandidateStatus(
                    paper_id="ID00002",
                    paper_title="Microgravity induces pelvic bone loss",
                    succeeded=True,
                    citation_count=1,
                ),
            ),
        )

    monkeypatch.setattr(web_app_module, "analyze_document", fake_analyze_document)

    r = upload(client)

    assert r.status_code == 200
    body = r.json()
    assert body["keywords"] == ["microgravity", "bone"]
    assert body["related_papers"][0]["matching_keywords"] == ["microgravity", "bone"]
    assert body["citations"][0]["line_number"] == "12"
    assert body["cross_references"] == []
    assert body["candidate_statuses"][0]["succeeded"] is True

    assert captured["document"].content == PDF_BYTES
    assert captured["document"].filename == "paper.pdf"
    assert captured["catalog"] is app.state.catalog
    assert captured["client"] is app.state.analysis_client


def test_analyze_pdf_rejects_non_pdf(client, monkeypatch):
    def should_not_run(*args, **kwargs):
        raise AssertionError("pipeline must not run for invalid uploads")

    monkeypatch.setattr(web_app_module, "analyze_document", should_not_run)

    r = upload(client, content=b"hello", content_type="text/plain")

    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid file type. Please upload a PDF file."


def test_analyze_pdf_rejects_oversized_upload(client, monkeypatch):
    monkeypatch.setattr(web_app_module, "get_settings", lambda: Settings(MAX_UPLOAD_BYTES=8))

    r = upload(client)

    assert r.status_code == 413


def test_model_failure_maps_to_bad_gateway(client, monkeypatch):
    def failing(*args, **kwargs):
        raise ModelCallError("Failed to extract keywords: quota", status_code=429)

    monkeypatch.setattr(web_app_module, "analyze_document", failing)

    r = upload(client)

    assert r.status_code == 502
    assert "Failed to extract keywords" in r.json()["detail"]


def test_summary_endpoint(client):
    app.state.feature_client = DummyClient("A short summary.")

    r = client.post(
        "/papers/summary",
        json={
            "paper_url": PAPER_URL,
            "complexity_level": "ELI10",
            "user_profile": {"age": 12, "experience_level": "Beginner", "learning_style": "visual"},
        },
    )

    assert r.status_code == 200
    assert r.json() == {"summary": "A short summary."}
    prompt = app.state.feature_client.prompts[0]
    assert "ELI10 level" in prompt
    assert "Age: 12" in prompt


def test_quiz_and_mindmap_endpoints(client):
    app.state.feature_client = DummyClient(json.dumps({
        "quiz": [{"question": "Q?", "options": ["a", "b", "c", "d"], "answer": "b"}]
    }))
    r = client.post("/papers/quiz", json={"paper_url": PAPER_URL})
    assert r.status_code == 200
    assert r.json()["quiz"][0]["answer"] == "b"

    app.state.feature_client = DummyClient(json.dumps({
        "nodes": [{"id": "1", "data": {"label": "Topic"}, "position": {"x": 400, "y": 200}}],
        "edges": [],
    }))
    r = client.post("/papers/mindmap", json={"paper_url": PAPER_URL})
    assert r.status_code == 200
    assert r.json()["nodes"][0]["data"]["label"] == "Topic"


def test_narration_endpoint(client):
    app.state.feature_client = DummyClient("Today we look at mice in orbit.")

    r = client.post("/papers/narration", json={"paper_url": PAPER_URL})

    assert r.status_code == 200
    assert r.json() == {"narration_script": "Today we look at mice in orbit."}

    r = client.post("/papers/narration", json={"paper_url": "ftp://example.org/x"})
    assert r.status_code == 400


def test_chat_validation_errors(client):
    r = client.post("/papers/chat", json={"paper_url": PAPER_URL, "question": "  "})
    assert r.status_code == 400
    assert r.json()["detail"] == "No question provided"

    r = client.post("/papers/chat", json={"paper_url": "not-a-url", "question": "Why?"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid research paper URL format"


def test_chat_model_failure_is_bad_gateway(client):
    app.state.feature_client = DummyClient(error=ModelCallError("upstream down"))

    r = client.post("/papers/chat", json={"paper_url": PAPER_URL, "question": "Why?"})

    assert r.status_code == 502
    assert "Failed to generate chatbot response" in r.json()["detail"]


def test_ai_endpoints_are_rate_limited(client, monkeypatch):
    monkeypatch.setattr(
        security_module,
        "get_settings",
        lambda: Settings(RATE_LIMIT_MAX_REQUESTS=2, RATE_LIMIT_WINDOW_SECONDS=60),
    )
    app.state.feature_client = DummyClient("answer")
    payload = {"paper_url": PAPER_URL, "question": "Why?"}

    assert client.post("/papers/chat", json=payload).status_code == 200
    assert client.post("/papers/chat", json=payload).status_code == 200
    assert client.post("/papers/chat", json=payload).status_code == 429


def test_catalog_reload_requires_api_key(client, monkeypatch):
    monkeypatch.setattr(security_module, "get_settings", lambda: Settings(API_KEY="secret"))
    monkeypatch.setattr(
        web_app_module,
        "load_catalog",
        lambda: CatalogSnapshot(make_catalog().entries[:1], source="test"),
    )

    assert client.post("/catalog/reload").status_code == 401

    r = client.post("/catalog/reload", headers={"X-API-Key": "secret"})
    assert r.status_code == 200
    assert r.json() == {"source": "test", "paper_count": 1}
    assert len(app.state.catalog) == 1


def test_missing_catalog_is_loaded_off_the_event_loop(client, monkeypatch):
    seen = {}

    def fake_load_catalog():
        try:
            asyncio.get_running_loop()
            seen["on_event_loop"] = True
        except RuntimeError:
            seen["on_event_loop"] = False
        return make_catalog()

    monkeypatch.setattr(web_app_module, "load_catalog", fake_load_catalog)
    app.state.catalog = None

    r = client.get("/papers/ID00002")

    assert r.status_code == 200
    assert seen == {"on_event_loop": False}
    assert len(app.state.catalog) == 2


def test_ai_routes_require_the_api_key_when_configured(client, monkeypatch):
    monkeypatch.setattr(security_module, "get_settings", lambda: Settings(API_KEY="secret"))
    app.state.feature_client = DummyClient("answer")
    payload = {"paper_url": PAPER_URL, "question": "Why?"}

    assert client.post("/papers/chat", json=payload).status_code == 401
    assert client.post("/papers/chat", json=payload, headers={"X-API-Key": "nope"}).status_code == 401
    r = client.post("/papers/chat", json=payload, headers={"X-API-Key": "secret"})
    assert r.status_code == 200

    # catalog reads stay open
    assert client.get("/papers").status_code == 200


def test_rate_limit_window_resets(client, monkeypatch):
    now = {"t": 1000.0}
    monkeypatch.setattr(security_module.time, "time", lambda: now["t"])
    monkeypatch.setattr(
        security_module,
        "get_settings",
        lambda: Settings(RATE_LIMIT_MAX_REQUESTS=1, RATE_LIMIT_WINDOW_SECONDS=60),
    )
    app.state.feature_client = DummyClient("answer")
    payload = {"paper_url": PAPER_URL, "question": "Why?"}

    assert client.post("/papers/chat", json=payload).status_code == 200
    r = client.post("/papers/chat", json=payload)
    assert r.status_code == 429
    assert r.json()["detail"] == "Too many AI requests. Try again later."

    now["t"] += 60
    assert client.post("/papers/chat", json=payload).status_code == 200
