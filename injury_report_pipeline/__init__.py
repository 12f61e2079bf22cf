"""Locate, cache and summarize the official NBA injury report."""

from .cache import InjuryReportCache
from .errors import (
    ExtractionError,
    FetchExhausted,
    InjuryReportError,
    ProbeTransportError,
    RetrievalError,
)
from .fetcher import ReportFetcher
from .models import (
    CachedArtifact,
    CacheResult,
    CandidateLocation,
    InjuryStatus,
    InjurySummary,
    PlayerEntry,
    TeamSummary,
)
from .monitor import InjuryReport, InjuryReportService
from .normalize import normalize_for_parsing
from .parser import summarize
from .teams import resolve_team_name
