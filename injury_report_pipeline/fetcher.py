"""
Existence-checked retrieval of the official NBA injury report PDF.

Candidates are probed strictly in order with a cheap HEAD request and only
downloaded once the probe says the file exists. A failure on one candidate
is logged and the search moves on; only running out of candidates is fatal.
"""

import io
import logging
from typing import Callable, Iterable, Optional

import pdfplumber
import requests

from .candidates import build_candidates, floor_to_step, utc_now
from .errors import (
    ExtractionError,
    FetchExhausted,
    InjuryReportError,
    ProbeTransportError,
    RetrievalError,
)
from .models import CachedArtifact, CandidateLocation

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15

# Standard headers to mimic a normal browser request
BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "application/pdf,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Cache-Control": "no-cache",
}


def extract_pdf_text(content: bytes) -> str:
    """
    Extract the text of every page of a PDF.

    Args:
        content: Raw PDF bytes.

    Returns:
        Page texts joined with newlines. Pages without a text layer
        contribute an empty string.

    Raises:
        ExtractionError: pdfplumber could not read the document.
    """
    try:
        with pdfplumber.open(io.BytesIO(content)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        raise ExtractionError(f"Could not extract text from PDF: {e}") from e
    return "\n".join(pages)


class ReportFetcher:
    """Locates and downloads the most recent published injury report."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        extract_text: Callable[[bytes], str] = extract_pdf_text,
        clock: Callable = utc_now,
        align_to_step: bool = False,
    ):
        """
        Args:
            session: requests session to reuse. A new one is created if omitted.
            timeout: Per-request timeout in seconds.
            extract_text: Turns downloaded bytes into report text.
            clock: Returns the current time as an aware datetime.
            align_to_step: Floor "now" to the step boundary before building
                           candidates. Off by default, so candidates start at
                           the exact current minute.
        """
        self.session = session or requests.Session()
        self.session.headers.update(BROWSER_HEADERS)
        self.timeout = timeout
        self.extract_text = extract_text
        self.clock = clock
        self.align_to_step = align_to_step

    def url_exists(self, url: str) -> bool:
        """
        Check whether a report exists at ``url``.

        A HEAD request answers the question directly. Only when the HEAD
        request cannot be executed at all do we retry the check with a
        streamed GET; a negative HEAD answer is final.

        Raises:
            ProbeTransportError: Neither probe could be executed.
        """
        try:
            response = self.session.head(url, timeout=self.timeout, allow_redirects=True)
            return response.ok
        except requests.exceptions.RequestException as e:
            logger.debug("HEAD probe failed for %s (%s), falling back to GET", url, e)

        try:
            response = self.session.get(url, timeout=self.timeout, stream=True)
        except requests.exceptions.RequestException as e:
            raise ProbeTransportError(f"Existence check failed for {url}: {e}") from e
        response.close()
        return response.ok

    def fetch_pdf(self, url: str) -> bytes:
        """
        Download a report.

        Raises:
            RetrievalError: Transport failure or non-success status.
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise RetrievalError(f"Failed to fetch PDF from {url}: {e}") from e
        if not response.ok:
            raise RetrievalError(
                f"Failed to fetch PDF: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )
        return response.content

    def fetch_latest(self, candidates: Iterable[CandidateLocation]) -> CachedArtifact:
        """
        Return the first candidate that exists and can be read.

        Args:
            candidates: Locations ordered most recent first.

        Returns:
            CachedArtifact for the first usable candidate.

        Raises:
            FetchExhausted: No candidate produced a report.
        """
        candidates = list(candidates)
        last_error = None

        for candidate in candidates:
            try:
                if not self.url_exists(candidate.url):
                    logger.debug("No report published at %s", candidate.label)
                    continue
                content = self.fetch_pdf(candidate.url)
                text = self.extract_text(content)
            except InjuryReportError as e:
                logger.warning("Candidate %s failed: %s", candidate.label, e)
                last_error = e
                continue

            logger.info("Fetched injury report %s (%d chars)", candidate.label, len(text))
            return CachedArtifact(
                fetched_at=self.clock(),
                source_url=candidate.url,
                report_label=candidate.label,
                raw_text=text,
            )

        raise FetchExhausted(len(candidates), last_error)

    def fetch_latest_report(self, lookback_steps: int, step_minutes: int) -> CachedArtifact:
        """Generate candidates from the current time and fetch the newest report."""
        now = self.clock()
        if self.align_to_step:
            now = floor_to_step(now, step_minutes)
        candidates = build_candidates(now, lookback_steps, step_minutes)
        logger.info(
            "Searching %d report candidates from %s back", len(candidates), candidates[0].label
        )
        return self.fetch_latest(candidates)
