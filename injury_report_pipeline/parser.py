"""
Turns extracted injury report text into a per-team summary.

The report has no reliable column separators once extracted, so the parser
walks the normalized token stream as a small state machine:

    NoTeam --(team tail)--> InTeam --("Last,")--> PendingPlayer
                               ^                      |
                               +------(flush)---------+

Team tails switch team context, a token containing a comma starts a player,
status words attach to the current player, and everything else is collected
as that player's reason. Nothing here raises on odd input; unrecognized text
is simply skipped.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Union

from .models import InjuryStatus, InjurySummary, PlayerEntry, TeamSummary
from .normalize import tokenize
from .teams import is_team_tail, resolve_team_name

logger = logging.getLogger(__name__)

# Extraction artifacts that show up between a status and its reason
NOISE_TOKENS = frozenset({"-", "Â·", "·"})

DEFAULT_PLAYER_STATUS = InjuryStatus.OUT


@dataclass(frozen=True)
class NoTeam:
    """No team seen yet; players and statuses are ignored."""


@dataclass(frozen=True)
class InTeam:
    team: str


@dataclass
class PendingPlayer:
    team: str
    name: str
    status: InjuryStatus = DEFAULT_PLAYER_STATUS
    reason_tokens: List[str] = field(default_factory=list)


ParserState = Union[NoTeam, InTeam, PendingPlayer]


class SummaryAggregator:
    """Accumulates counts and player entries per team."""

    def __init__(self):
        self.by_team_name = {}

    def team(self, team_name: str) -> TeamSummary:
        """Return the summary for ``team_name``, creating it on first use."""
        summary = self.by_team_name.get(team_name)
        if summary is None:
            summary = TeamSummary(team_name=team_name)
            self.by_team_name[team_name] = summary
        return summary

    def count(self, team_name: str, status: InjuryStatus):
        self.team(team_name).counts[status] += 1

    def add_player(self, team_name: str, entry: PlayerEntry):
        summary = self.team(team_name)
        summary.counts[entry.status] += 1
        summary.players.append(entry)

    def summary(self) -> InjurySummary:
        return InjurySummary(by_team_name=self.by_team_name)


def _flush(state: ParserState, aggregator: SummaryAggregator) -> ParserState:
    """Commit a pending player to its team and fall back to team context."""
    if not isinstance(state, PendingPlayer):
        return state
    reason = " ".join(state.reason_tokens).strip()
    aggregator.add_player(state.team, PlayerEntry(name=state.name, status=state.status, reason=reason))
    return InTeam(state.team)


def summarize_tokens(tokens: Sequence[str]) -> InjurySummary:
    """Run the extraction state machine over already-normalized tokens."""
    aggregator = SummaryAggregator()
    state: ParserState = NoTeam()

    i = 0
    while i < len(tokens):
        token = tokens[i]
        status = InjuryStatus.from_token(token)

        if is_team_tail(token):
            state = _flush(state, aggregator)
            team_name = resolve_team_name(tokens, i)
            if team_name:
                state = InTeam(team_name)

        elif "," in token:
            state = _flush(state, aggregator)
            surname = token[:-1] if token.endswith(",") else token
            name = surname
            if i + 1 < len(tokens) and "," not in tokens[i + 1]:
                name = f"{surname}, {tokens[i + 1]}"
                i += 1
            if isinstance(state, InTeam):
                state = PendingPlayer(team=state.team, name=name)

        elif status is not None:
            if isinstance(state, PendingPlayer):
                # The reason column always follows the status column.
                state.status = status
                state.reason_tokens = []
            elif isinstance(state, InTeam):
                aggregator.count(state.team, status)

        elif isinstance(state, PendingPlayer) and token not in NOISE_TOKENS:
            state.reason_tokens.append(token)

        i += 1

    _flush(state, aggregator)
    return aggregator.summary()


def summarize(raw_text: str) -> InjurySummary:
    """
    Summarize injury report text by team.

    Args:
        raw_text: Text extracted from the report PDF, in any state of
                  smashing; it is normalized first.

    Returns:
        InjurySummary keyed by full team name. Empty when nothing
        recognizable is found.
    """
    summary = summarize_tokens(tokenize(raw_text))
    logger.debug(
        "Summarized %d teams, %d players",
        len(summary.by_team_name),
        sum(len(t.players) for t in summary.by_team_name.values()),
    )
    return summary
