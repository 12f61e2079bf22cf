"""Tests for existence-checked report retrieval. No live HTTP."""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
import requests

from injury_report_pipeline.errors import (
    ExtractionError,
    FetchExhausted,
    ProbeTransportError,
    RetrievalError,
)
from injury_report_pipeline.fetcher import ReportFetcher, extract_pdf_text
from injury_report_pipeline.models import CandidateLocation

NOW = datetime(2026, 1, 22, 22, 37, 45, tzinfo=timezone.utc)
BASE = "https://ak-static.cms.nba.com/referee/injury/Injury-Report_"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _mock_response(status_code=200, content=b"%PDF-1.7", reason="OK"):
    """Create a mock requests.Response."""
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status_code
    resp.ok = status_code < 400
    resp.reason = reason
    resp.content = content
    return resp


def _candidates(n):
    return [CandidateLocation(url=f"https://example.com/r{i}.pdf", label=f"slot {i}") for i in range(n)]


def _fetcher(session, extract_text=lambda content: "report text"):
    return ReportFetcher(session=session, extract_text=extract_text, clock=lambda: NOW)


# ---------------------------------------------------------------------------
# 1. Existence probe
# ---------------------------------------------------------------------------

class TestUrlExists:
    """Tests for the HEAD probe and its GET fallback."""

    def test_head_ok(self):
        session = MagicMock()
        session.head.return_value = _mock_response(200)
        assert _fetcher(session).url_exists("https://example.com/a.pdf") is True
        session.get.assert_not_called()

    def test_negative_head_is_final(self):
        session = MagicMock()
        session.head.return_value = _mock_response(404, reason="Not Found")
        assert _fetcher(session).url_exists("https://example.com/a.pdf") is False
        session.get.assert_not_called()

    def test_head_transport_failure_falls_back_to_get(self):
        session = MagicMock()
        session.head.side_effect = requests.exceptions.ConnectionError("reset")
        get_response = _mock_response(200)
        session.get.return_value = get_response

        assert _fetcher(session).url_exists("https://example.com/a.pdf") is True
        assert session.get.call_args.kwargs["stream"] is True
        get_response.close.assert_called_once()

    def test_fallback_get_negative(self):
        session = MagicMock()
        session.head.side_effect = requests.exceptions.Timeout("slow")
        session.get.return_value = _mock_response(403, reason="Forbidden")
        assert _fetcher(session).url_exists("https://example.com/a.pdf") is False

    def test_both_probes_fail(self):
        session = MagicMock()
        session.head.side_effect = requests.exceptions.ConnectionError("down")
        session.get.side_effect = requests.exceptions.ConnectionError("still down")
        with pytest.raises(ProbeTransportError):
            _fetcher(session).url_exists("https://example.com/a.pdf")


# ---------------------------------------------------------------------------
# 2. Retrieval
# ---------------------------------------------------------------------------

class TestFetchPdf:

    def test_returns_content(self):
        session = MagicMock()
        session.get.return_value = _mock_response(200, content=b"%PDF data")
        assert _fetcher(session).fetch_pdf("https://example.com/a.pdf") == b"%PDF data"

    def test_http_error_status(self):
        session = MagicMock()
        session.get.return_value = _mock_response(503, reason="Service Unavailable")
        with pytest.raises(RetrievalError, match="503 Service Unavailable") as exc_info:
            _fetcher(session).fetch_pdf("https://example.com/a.pdf")
        assert exc_info.value.status_code == 503

    def test_transport_error(self):
        session = MagicMock()
        session.get.side_effect = requests.exceptions.ConnectionError("reset")
        with pytest.raises(RetrievalError):
            _fetcher(session).fetch_pdf("https://example.com/a.pdf")


# ---------------------------------------------------------------------------
# 3. Text extraction
# ---------------------------------------------------------------------------

class TestExtractPdfText:

    @patch("injury_report_pipeline.fetcher.pdfplumber.open")
    def test_joins_pages(self, mock_open):
        page1, page2, page3 = MagicMock(), MagicMock(), MagicMock()
        page1.extract_text.return_value = "page one"
        page2.extract_text.return_value = None
        page3.extract_text.return_value = "page three"
        mock_open.return_value.__enter__.return_value.pages = [page1, page2, page3]

        assert extract_pdf_text(b"%PDF") == "page one\n\npage three"

    @patch("injury_report_pipeline.fetcher.pdfplumber.open")
    def test_wraps_parser_failure(self, mock_open):
        mock_open.side_effect = ValueError("not a PDF")
        with pytest.raises(ExtractionError, match="not a PDF"):
            extract_pdf_text(b"<html>")


# ---------------------------------------------------------------------------
# 4. Candidate search
# ---------------------------------------------------------------------------

class TestFetchLatest:
    """Tests for the ordered candidate search."""

    def test_first_existing_candidate_wins(self):
        session = MagicMock()
        session.head.side_effect = [_mock_response(404), _mock_response(200), _mock_response(200)]
        session.get.return_value = _mock_response(200)

        artifact = _fetcher(session).fetch_latest(_candidates(3))

        assert artifact.source_url == "https://example.com/r1.pdf"
        assert artifact.report_label == "slot 1"
        assert artifact.raw_text == "report text"
        assert artifact.fetched_at == NOW
        probed = [c.args[0] for c in session.head.call_args_list]
        assert probed == ["https://example.com/r0.pdf", "https://example.com/r1.pdf"]

    def test_retrieval_failure_moves_on(self):
        session = MagicMock()
        session.head.return_value = _mock_response(200)
        session.get.side_effect = [_mock_response(500, reason="Server Error"), _mock_response(200)]

        artifact = _fetcher(session).fetch_latest(_candidates(3))
        assert artifact.source_url == "https://example.com/r1.pdf"

    def test_extraction_failure_moves_on(self):
        session = MagicMock()
        session.head.return_value = _mock_response(200)
        session.get.return_value = _mock_response(200)
        extract = MagicMock(side_effect=[ExtractionError("garbled"), "second report"])

        artifact = _fetcher(session, extract_text=extract).fetch_latest(_candidates(2))
        assert artifact.raw_text == "second report"
        assert artifact.source_url == "https://example.com/r1.pdf"

    def test_probe_failure_moves_on(self):
        session = MagicMock()
        session.head.side_effect = [requests.exceptions.ConnectionError("down"), _mock_response(200)]
        session.get.side_effect = [requests.exceptions.ConnectionError("down"), _mock_response(200)]

        artifact = _fetcher(session).fetch_latest(_candidates(2))
        assert artifact.source_url == "https://example.com/r1.pdf"

    def test_all_negative_exhausts(self):
        session = MagicMock()
        session.head.return_value = _mock_response(404)

        with pytest.raises(FetchExhausted, match="checked 4 candidates") as exc_info:
            _fetcher(session).fetch_latest(_candidates(4))
        assert exc_info.value.tried == 4
        assert exc_info.value.last_error is None
        session.get.assert_not_called()

    def test_exhausted_carries_last_error(self):
        session = MagicMock()
        session.head.return_value = _mock_response(200)
        session.get.side_effect = [
            _mock_response(500, reason="Server Error"),
            _mock_response(502, reason="Bad Gateway"),
        ]

        with pytest.raises(FetchExhausted) as exc_info:
            _fetcher(session).fetch_latest(_candidates(2))
        assert isinstance(exc_info.value.last_error, RetrievalError)
        assert exc_info.value.last_error.status_code == 502
        assert "502 Bad Gateway" in str(exc_info.value)


class TestFetchLatestReport:
    """Candidate generation wired to the search."""

    def test_default_uses_exact_minute(self):
        session = MagicMock()
        session.head.side_effect = [_mock_response(404), _mock_response(200)]
        session.get.return_value = _mock_response(200)

        artifact = _fetcher(session).fetch_latest_report(lookback_steps=2, step_minutes=15)

        probed = [c.args[0] for c in session.head.call_args_list]
        assert probed == [BASE + "2026-01-22_05_37PM.pdf", BASE + "2026-01-22_05_22PM.pdf"]
        assert artifact.report_label == "2026-01-22 05:22 PM ET"

    def test_aligned_to_quarter_hour_when_enabled(self):
        session = MagicMock()
        session.head.return_value = _mock_response(200)
        session.get.return_value = _mock_response(200)
        fetcher = ReportFetcher(
            session=session,
            extract_text=lambda content: "",
            clock=lambda: NOW,
            align_to_step=True,
        )

        artifact = fetcher.fetch_latest_report(lookback_steps=8, step_minutes=15)

        assert artifact.source_url == BASE + "2026-01-22_05_30PM.pdf"
        assert artifact.report_label == "2026-01-22 05:30 PM ET"
