"""
Injury Report Monitor -- composes the pipeline.

Owns one report cache, summarizes the cached report text on every request,
and produces the same payload the dashboard's injury endpoint serves.
"""

import dataclasses
import json
import logging
from typing import Optional

from .cache import InjuryReportCache
from .candidates import utc_now
from .config import PipelineConfig
from .errors import InjuryReportError
from .fetcher import ReportFetcher
from .models import InjuryStatus
from .parser import summarize

logger = logging.getLogger(__name__)


class InjuryReport:
    """Container for one injury report payload with formatting helpers."""

    def __init__(self, data: dict):
        self.data = data

    @property
    def ok(self) -> bool:
        return bool(self.data.get("ok"))

    def to_json(self, indent: int = 2) -> str:
        """Return the full payload as formatted JSON."""
        return json.dumps(self.data, indent=indent, default=str)

    def to_dict(self) -> dict:
        return self.data

    def summary(self) -> str:
        """Return a human-readable summary of the injury report."""
        if not self.ok:
            return f"Injury report unavailable: {self.data.get('error', 'unknown error')}"

        lines = [f"=== NBA INJURY REPORT -- {self.data.get('reportLabel', '?')} ==="]
        if self.data.get("stale"):
            lines.append("(stale copy, a refresh is in progress)")
        lines.append(f"Source: {self.data.get('sourceUrl', '?')}")
        lines.append("")

        teams = self.data.get("summary", {}).get("byTeamName", {})
        if not teams:
            lines.append("No injuries listed.")
            return "\n".join(lines)

        for team_name in sorted(teams):
            team = teams[team_name]
            counts = team.get("counts", {})
            count_str = ", ".join(
                f"{status.value} {counts.get(status.value, 0)}" for status in InjuryStatus
            )
            lines.append(f"--- {team_name} ({count_str}) ---")
            for player in team.get("players", []):
                reason = player.get("reason") or "Undisclosed"
                lines.append(f"  [{player['status'].upper()}] {player['name']} -- {reason}")
            lines.append("")

        return "\n".join(lines).rstrip()


class InjuryReportService:
    """
    Main injury report orchestrator.

    Locates the latest official report through a single-flight cache and
    summarizes it per team.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        fetcher: Optional[ReportFetcher] = None,
        clock=utc_now,
    ):
        """
        Args:
            config: Pipeline settings. Falls back to PipelineConfig.from_env().
            fetcher: Report fetcher to use. Built from ``config`` if omitted.
            clock: Returns the current time as an aware datetime.
        """
        self.config = config or PipelineConfig.from_env()
        self.fetcher = fetcher or ReportFetcher(
            timeout=self.config.timeout,
            clock=clock,
            align_to_step=self.config.align_to_step,
        )
        self.cache = InjuryReportCache(self.fetcher.fetch_latest_report, clock=clock)

    def get_report(self, max_age_seconds: Optional[float] = None) -> InjuryReport:
        """
        Return the latest injury report, summarized by team.

        Args:
            max_age_seconds: Freshness window. Defaults to the configured value.

        Returns:
            InjuryReport. When no report could be located the payload has
            ``ok`` False and an ``error`` message instead of a summary.
        """
        if max_age_seconds is None:
            max_age_seconds = self.config.max_age_seconds

        try:
            result = self.cache.get_or_refresh(
                max_age_seconds,
                lookback_steps=self.config.lookback_steps,
                step_minutes=self.config.step_minutes,
            )
        except InjuryReportError as e:
            logger.error("Could not load injury report: %s", e)
            return InjuryReport({"ok": False, "error": str(e)})

        artifact = result.value
        summary = summarize(artifact.raw_text)
        return InjuryReport({
            "ok": True,
            "stale": result.stale,
            "fetchedAtMs": artifact.fetched_at_ms,
            "sourceUrl": artifact.source_url,
            "reportLabel": artifact.report_label,
            "summary": summary.to_dict(),
        })


def main(argv=None):
    """CLI entry point for the injury report pipeline."""
    import argparse

    parser = argparse.ArgumentParser(
        description="NBA injury report -- locate the latest official report and summarize it"
    )
    parser.add_argument(
        "--format",
        choices=["summary", "json"],
        default="summary",
        help="Output format (default: summary)",
    )
    parser.add_argument(
        "--max-age",
        type=float,
        default=None,
        help="Seconds a cached report stays fresh (default: INJURY_REPORT_MAX_AGE or 3600)",
    )
    parser.add_argument(
        "--lookback-steps",
        type=int,
        default=None,
        help="Number of earlier publishing slots to try",
    )
    parser.add_argument(
        "--step-minutes",
        type=int,
        default=None,
        help="Minutes between publishing slots",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)
    if args.lookback_steps is not None and args.lookback_steps < 0:
        parser.error("--lookback-steps must be >= 0")
    if args.step_minutes is not None and args.step_minutes <= 0:
        parser.error("--step-minutes must be positive")
    if args.max_age is not None and args.max_age < 0:
        parser.error("--max-age must be >= 0")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    config = PipelineConfig.from_env()
    overrides = {}
    if args.lookback_steps is not None:
        overrides["lookback_steps"] = args.lookback_steps
    if args.step_minutes is not None:
        overrides["step_minutes"] = args.step_minutes
    if overrides:
        config = dataclasses.replace(config, **overrides)

    service = InjuryReportService(config=config)
    report = service.get_report(max_age_seconds=args.max_age)

    if args.format == "json":
        print(report.to_json())
    else:
        print(report.summary())
    return 0 if report.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
