"""
Data types shared across the injury report pipeline.

The ``to_dict`` helpers produce the JSON shape served to dashboard clients
(camelCase keys), so they can be dumped straight into a response body.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional


class InjuryStatus(str, Enum):
    """Game status as printed on the official report."""

    OUT = "Out"
    DOUBTFUL = "Doubtful"
    QUESTIONABLE = "Questionable"
    PROBABLE = "Probable"

    @classmethod
    def from_token(cls, token: str) -> Optional["InjuryStatus"]:
        """Return the status for an exact status word, else None."""
        for status in cls:
            if status.value == token:
                return status
        return None


@dataclass(frozen=True)
class CandidateLocation:
    """One hypothesized URL for a published report."""

    url: str
    label: str


@dataclass(frozen=True)
class CachedArtifact:
    """A fetched report plus the text extracted from it."""

    fetched_at: datetime
    source_url: str
    report_label: str
    raw_text: str

    @property
    def fetched_at_ms(self) -> int:
        """Fetch time as epoch milliseconds."""
        return int(self.fetched_at.timestamp() * 1000)


@dataclass(frozen=True)
class CacheResult:
    """A cached report and whether it was served while a refresh ran."""

    value: CachedArtifact
    stale: bool


@dataclass
class PlayerEntry:
    """One listed player: "Last, First" name, status and free-text reason."""

    name: str
    status: InjuryStatus
    reason: str = ""

    def to_dict(self) -> dict:
        """Return the JSON shape of this entry."""
        return {"name": self.name, "status": self.status.value, "reason": self.reason}


def _zero_counts() -> Dict[InjuryStatus, int]:
    return {status: 0 for status in InjuryStatus}


@dataclass
class TeamSummary:
    """Status counts and listed players for one team."""

    team_name: str
    counts: Dict[InjuryStatus, int] = field(default_factory=_zero_counts)
    players: List[PlayerEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Return the JSON shape of this team, with counts keyed by status word."""
        return {
            "teamName": self.team_name,
            "counts": {status.value: n for status, n in self.counts.items()},
            "players": [p.to_dict() for p in self.players],
        }


@dataclass
class InjurySummary:
    """Per-team summaries keyed by resolved team name."""

    by_team_name: Dict[str, TeamSummary] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Return the JSON shape served as the report summary."""
        return {
            "byTeamName": {
                name: team.to_dict() for name, team in self.by_team_name.items()
            }
        }
