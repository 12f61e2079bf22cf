"""
Single-flight TTL cache for the latest injury report.

Finding the report can take a dozen HTTP round trips, so at most one
refresh runs at a time per cache. Callers arriving while it runs get the
previous value flagged as stale, or wait for the refresh when nothing has
been cached yet.
"""

import logging
import threading
from concurrent.futures import Future
from typing import Callable, Optional

from .candidates import utc_now
from .models import CachedArtifact, CacheResult

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK_STEPS = 8  # 2h at 15 minute steps
DEFAULT_STEP_MINUTES = 15


class InjuryReportCache:
    """Holds one cached report and at most one outstanding refresh."""

    def __init__(
        self,
        refresh: Callable[[int, int], CachedArtifact],
        clock: Callable = utc_now,
    ):
        """
        Args:
            refresh: Called as ``refresh(lookback_steps, step_minutes)`` to
                     locate and fetch a new report.
            clock: Returns the current time as an aware datetime.
        """
        self._refresh = refresh
        self._clock = clock
        self._lock = threading.Lock()
        self._cached: Optional[CachedArtifact] = None
        self._in_flight: Optional[Future] = None

    def _is_fresh(self, value: CachedArtifact, max_age_seconds: float) -> bool:
        age = (self._clock() - value.fetched_at).total_seconds()
        return age <= max_age_seconds

    def read(self, max_age_seconds: float) -> Optional[CachedArtifact]:
        """Return the cached report if it is at most ``max_age_seconds`` old."""
        with self._lock:
            cached = self._cached
        if cached is not None and self._is_fresh(cached, max_age_seconds):
            return cached
        return None

    def get_or_refresh(
        self,
        max_age_seconds: float,
        lookback_steps: int = DEFAULT_LOOKBACK_STEPS,
        step_minutes: int = DEFAULT_STEP_MINUTES,
    ) -> CacheResult:
        """
        Return a fresh report, refreshing it if needed.

        Args:
            max_age_seconds: Oldest cached value accepted as fresh.
            lookback_steps: Candidate steps searched by a new refresh.
            step_minutes: Minutes between candidates.

        Returns:
            CacheResult. ``stale`` is True only when another caller's refresh
            is running and the previous value was served instead.

        Raises:
            FetchExhausted: The refresh this call started or waited on failed.
        """
        with self._lock:
            cached = self._cached
            if cached is not None and self._is_fresh(cached, max_age_seconds):
                return CacheResult(value=cached, stale=False)

            in_flight = self._in_flight
            if in_flight is not None and cached is not None:
                logger.debug("Refresh in progress, serving stale report %s", cached.report_label)
                return CacheResult(value=cached, stale=True)

            owner = in_flight is None
            if owner:
                in_flight = Future()
                self._in_flight = in_flight

        if not owner:
            logger.debug("Waiting for in-flight injury report refresh")
            return CacheResult(value=in_flight.result(), stale=False)

        logger.info(
            "Refreshing injury report (lookback_steps=%d, step_minutes=%d)",
            lookback_steps, step_minutes,
        )
        try:
            value = self._refresh(lookback_steps, step_minutes)
        except BaseException as e:
            with self._lock:
                self._in_flight = None
            logger.error("Injury report refresh failed: %s", e)
            in_flight.set_exception(e)
            raise

        with self._lock:
            self._cached = value
            self._in_flight = None
        in_flight.set_result(value)
        return CacheResult(value=value, stale=False)
