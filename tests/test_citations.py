# tests/test_citations.py

import json

from astrobio_navigator.crossref.citations import CitationExtractor, build_citation_prompt
from astrobio_navigator.errors import ModelCallError
from astrobio_navigator.models.analysis import RelatedCandidate, UploadedDocument

DOCUMENT = UploadedDocument(content=b"%PDF-1.4 fake", filename="upload.pdf")


def make_candidates(n):
    return [
        RelatedCandidate(
            id=f"P{i}",
            title=f"Paper {i}",
            link=f"https://example.org/P{i}",
            relevance_score=1.0 - i * 0.05,
            matching_keywords=["bone"],
        )
        for i in range(1, n + 1)
    ]


def report_for(paper_id):
    return json.dumps({
        "citations": [
            {"citationText": f"quote from {paper_id}", "context": "ctx", "lineNumber": "p. 3"}
        ],
        "crossReferences": [
            {"citationText": f"method of {paper_id}", "context": "same assay"}
        ],
    })


class DummyClient:
    """
    Answers citation prompts by the candidate link in the prompt.

    `behaviour` maps paper id -> response text, or an Exception to raise.
    """

    model = "dummy-model"

    def __init__(self, behaviour=None):
        self.behaviour = behaviour or {}
        self.calls = []

    def generate(self, prompt, *, document=None, json_mode=False, use_url_context=False):
        paper_id = prompt.split("https://example.org/")[1].split()[0]
        self.calls.append({"paper_id": paper_id, "document": document, "json_mode": json_mode})
        outcome = self.behaviour.get(paper_id, report_for(paper_id))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingLimiter:
    def __init__(self):
        self.acquired = 0
        self.penalties = []

    def acquire(self):
        self.acquired += 1
        return 0.0

    def penalize(self, seconds):
        self.penalties.append(seconds)


def test_prompt_names_the_candidate_link_and_title():
    candidate = make_candidates(1)[0]
    prompt = build_citation_prompt(candidate)
    assert "https://example.org/P1" in prompt
    assert "Paper 1" in prompt
    assert '"crossReferences"' in prompt


def test_only_top_candidates_are_analyzed():
    client = DummyClient()
    limiter = RecordingLimiter()
    extractor = CitationExtractor(client, limiter, candidate_limit=5)

    batch = extractor.extract(DOCUMENT, make_candidates(10))

    assert [c["paper_id"] for c in client.calls] == ["P1", "P2", "P3", "P4", "P5"]
    assert limiter.acquired == 5
    assert len(batch.citations) == 5
    assert len(batch.cross_references) == 5
    assert all(c["document"] is DOCUMENT and c["json_mode"] for c in client.calls)


def test_citations_are_tagged_with_their_source_paper():
    extractor = CitationExtractor(DummyClient(), RecordingLimiter())
    batch = extractor.extract(DOCUMENT, make_candidates(1))

    citation = batch.citations[0]
    assert citation.paper_title == "Paper 1"
    assert citation.paper_link == "https://example.org/P1"
    assert citation.citation_text == "quote from P1"
    assert citation.line_number == "p. 3"
    assert batch.cross_references[0].paper_title == "Paper 1"


def test_failed_call_does_not_stop_the_loop():
    client = DummyClient({"P3": ModelCallError("boom", status_code=500)})
    limiter = RecordingLimiter()
    batch = CitationExtractor(client, limiter).extract(DOCUMENT, make_candidates(5))

    assert [c["paper_id"] for c in client.calls] == ["P1", "P2", "P3", "P4", "P5"]
    assert [c.paper_title for c in batch.citations] == [
        "Paper 1", "Paper 2", "Paper 4", "Paper 5",
    ]

    statuses = {s.paper_id: s for s in batch.statuses}
    assert statuses["P3"].succeeded is False
    assert "boom" in statuses["P3"].reason
    assert all(statuses[p].succeeded for p in ("P1", "P2", "P4", "P5"))
    assert limiter.penalties == []


def test_prose_response_yields_no_citations_for_that_paper_only():
    client = DummyClient({"P2": "I could not find any overlapping citations, sorry."})
    limiter = RecordingLimiter()
    batch = CitationExtractor(client, limiter).extract(DOCUMENT, make_candidates(5))

    assert "Paper 2" not in {c.paper_title for c in batch.citations}
    assert len(batch.citations) == 4
    assert len(batch.cross_references) == 4
    assert limiter.acquired == 5

    status = batch.statuses[1]
    assert status.paper_id == "P2"
    assert status.succeeded is False
    assert status.citation_count == 0


def test_rate_limited_call_penalizes_the_limiter():
    client = DummyClient({"P1": ModelCallError("slow down", status_code=429)})
    limiter = RecordingLimiter()
    CitationExtractor(client, limiter, backoff_seconds=7.5).extract(DOCUMENT, make_candidates(2))

    assert limiter.penalties == [7.5]
    assert len(client.calls) == 2


def test_successful_candidate_with_no_matches_is_still_a_success():
    client = DummyClient({"P1": '{"citations": [], "crossReferences": []}'})
    batch = CitationExtractor(client, RecordingLimiter()).extract(DOCUMENT, make_candidates(1))

    assert batch.citations == []
    assert batch.statuses[0].succeeded is True
    assert batch.statuses[0].citation_count == 0


def test_no_candidates_means_no_calls():
    client = DummyClient()
    limiter = RecordingLimiter()
    batch = CitationExtractor(client, limiter).extract(DOCUMENT, [])

    assert client.calls == []
    assert limiter.acquired == 0
    assert batch.statuses == []


def test_malformed_report_is_a_failure_not_an_empty_success():
    client = DummyClient({
        "P1": '{"citations": [{"citationText": "a quote", "context": "ctx"},], "crossReferences": []}',
        "P2": '{"error": "could not open the URL"}',
    })
    batch = CitationExtractor(client, RecordingLimiter()).extract(DOCUMENT, make_candidates(3))

    statuses = {s.paper_id: s for s in batch.statuses}
    assert statuses["P1"].succeeded is False
    assert statuses["P2"].succeeded is False
    assert statuses["P1"].reason
    assert statuses["P3"].succeeded is True
    assert [c.paper_title for c in batch.citations] == ["Paper 3"]
