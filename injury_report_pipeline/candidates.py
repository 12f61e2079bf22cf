"""
Candidate URL generation for the official NBA injury report.

The league publishes the report as a PDF whose filename encodes the Eastern
time it was issued, e.g. ``Injury-Report_2026-01-22_05_30PM.pdf``. There is
no index to list, so we walk backward from "now" in fixed steps and let the
fetcher probe each guess in order.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Tuple
from zoneinfo import ZoneInfo

from .models import CandidateLocation

PUBLISHER_TZ = ZoneInfo("America/New_York")
REPORT_URL_TEMPLATE = (
    "https://ak-static.cms.nba.com/referee/injury/"
    "Injury-Report_{date}_{hour}_{minute}{ampm}.pdf"
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(moment: datetime) -> datetime:
    # Naive datetimes are taken to be UTC.
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def format_publisher_parts(moment: datetime, tz: ZoneInfo = PUBLISHER_TZ) -> Tuple[str, str, str, str]:
    """
    Format an instant the way the publisher names its files.

    Returns:
        (date, hour, minute, ampm) such as ("2026-01-22", "05", "30", "PM"),
        with the hour on a zero-padded 12-hour clock.
    """
    local = _as_utc(moment).astimezone(tz).replace(second=0, microsecond=0)
    hour12 = local.hour % 12 or 12
    ampm = "AM" if local.hour < 12 else "PM"
    return local.strftime("%Y-%m-%d"), f"{hour12:02d}", f"{local.minute:02d}", ampm


def floor_to_step(moment: datetime, step_minutes: int) -> datetime:
    """Round an instant down to the previous ``step_minutes`` boundary."""
    if step_minutes <= 0:
        raise ValueError(f"step_minutes must be positive, got {step_minutes}")
    utc = _as_utc(moment)
    epoch_minutes = int(utc.timestamp() // 60)
    floored = epoch_minutes - epoch_minutes % step_minutes
    return datetime.fromtimestamp(floored * 60, tz=timezone.utc)


def build_candidates(
    now: datetime,
    lookback_steps: int,
    step_minutes: int,
    tz: ZoneInfo = PUBLISHER_TZ,
) -> List[CandidateLocation]:
    """
    Build candidate report locations, most recent first.

    Produces one candidate for each of ``now - i * step_minutes`` with
    ``i = 0..lookback_steps``. Instants that format to the same filename
    are collapsed, keeping the earliest (most recent) occurrence.

    Args:
        now: Reference instant. Naive values are treated as UTC.
        lookback_steps: Number of steps to go back from ``now``.
        step_minutes: Size of each step.
        tz: Timezone the publisher uses in its filenames.

    Returns:
        Ordered, de-duplicated list of CandidateLocation.
    """
    if lookback_steps < 0:
        raise ValueError(f"lookback_steps must be >= 0, got {lookback_steps}")
    if step_minutes <= 0:
        raise ValueError(f"step_minutes must be positive, got {step_minutes}")

    start = _as_utc(now)
    seen = set()
    candidates = []
    for i in range(lookback_steps + 1):
        date_str, hour, minute, ampm = format_publisher_parts(
            start - timedelta(minutes=i * step_minutes), tz
        )
        url = REPORT_URL_TEMPLATE.format(date=date_str, hour=hour, minute=minute, ampm=ampm)
        if url in seen:
            continue
        seen.add(url)
        candidates.append(
            CandidateLocation(url=url, label=f"{date_str} {hour}:{minute} {ampm} ET")
        )
    return candidates
