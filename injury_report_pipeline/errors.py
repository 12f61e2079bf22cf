"""Exceptions raised while locating and retrieving injury reports."""

from typing import Optional


class InjuryReportError(Exception):
    """Base class for injury report pipeline errors."""


class ProbeTransportError(InjuryReportError):
    """The lightweight existence check could not be executed at all."""


class RetrievalError(InjuryReportError):
    """A confirmed candidate could not be downloaded."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ExtractionError(InjuryReportError):
    """Downloaded content could not be turned into text."""


class FetchExhausted(InjuryReportError):
    """Every candidate was tried and none produced a usable report."""

    def __init__(self, tried: int, last_error: Optional[BaseException] = None):
        self.tried = tried
        self.last_error = last_error
        super().__init__(
            f"Failed to locate a recent NBA injury report PDF "
            f"(checked {tried} candidates). Last error: {last_error}"
        )
