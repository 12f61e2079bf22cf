"""
Team-name resolution for tokenized injury report text.

The report prints the full team name ("Los Angeles Lakers") in its own
column, but after extraction that column runs straight into its neighbours.
We anchor on the nickname ("Lakers") and walk backward, collecting city
tokens until something that cannot be part of a team name shows up.
"""

import re
from typing import Callable, List, Optional, Sequence, Tuple

TEAM_TAILS = frozenset({
    "Hawks", "Celtics", "Nets", "Hornets", "Bulls", "Cavaliers", "Mavericks",
    "Nuggets", "Pistons", "Warriors", "Rockets", "Pacers", "Clippers", "Lakers",
    "Grizzlies", "Heat", "Bucks", "Timberwolves", "Pelicans", "Knicks", "Thunder",
    "Magic", "Suns", "Spurs", "Raptors", "Jazz", "Wizards", "Kings", "Blazers",
    "76ers", "Sixers",
})

SIXERS_TAIL = "76ers"
SIXERS_FULL_NAME = "Philadelphia 76ers"

MAX_LOOKBACK = 3

# Assignment / roster markers printed in the reason column
NON_TEAM_MARKERS = frozenset({"GLeague", "G", "League", "Two-Way", "On", "Assignment"})

# Compared lowercase. Status words and the "Not Yet Submitted" note are
# included because they sit right before a team name once a previous team's
# rows end.
MEDICAL_NOISE_WORDS = frozenset({
    "injury", "illness", "contusion", "fracture", "management",
    "injurymanagement", "recovery", "rest", "notyetsubmitted",
    "not", "yet", "submitted",
    "out", "doubtful", "questionable", "probable", "available",
    "sprain", "strain", "soreness", "surgery", "tear", "tendinitis",
    "tendinopathy", "inflammation", "bruise", "concussion", "protocol",
    "reconditioning", "conditioning", "personal", "reasons", "suspension",
    "left", "right", "ankle", "knee", "hamstring", "foot", "back", "hip",
    "shoulder", "hand", "finger", "wrist", "elbow", "calf", "thigh", "groin",
    "achilles", "quad", "toe", "neck", "thumb", "abdominal", "oblique",
})

_DATE_RE = re.compile(r"\d{2}/\d{2}/\d{4}")
_TIME_ET_RE = re.compile(r"\d{1,2}:\d{2}\(ET\)")
_MATCHUP_RE = re.compile(r"[A-Z]{2,3}@[A-Z]{2,3}")
_ALPHA_RE = re.compile(r"^[A-Za-z]+$")


def _is_allcaps_marker(token: str) -> bool:
    return token == token.upper() and len(token) >= 4


# Checked in this order; the first match names the stop reason.
STOP_RULES: Tuple[Tuple[str, Callable[[str], bool]], ...] = (
    ("date", lambda t: _DATE_RE.search(t) is not None),
    ("time", lambda t: _TIME_ET_RE.search(t) is not None),
    ("matchup", lambda t: _MATCHUP_RE.search(t) is not None),
    ("slash", lambda t: "/" in t),
    ("marker", lambda t: t in NON_TEAM_MARKERS),
    ("medical", lambda t: t.lower() in MEDICAL_NOISE_WORDS),
    ("allcaps", _is_allcaps_marker),
    ("non_alpha", lambda t: _ALPHA_RE.match(t) is None),
)


def first_stop_reason(token: str) -> Optional[str]:
    """Return the name of the first stop rule ``token`` triggers, if any."""
    for name, predicate in STOP_RULES:
        if predicate(token):
            return name
    return None


def is_team_tail(token: str) -> bool:
    return token in TEAM_TAILS


def resolve_team_name(tokens: Sequence[str], tail_index: int) -> Optional[str]:
    """
    Build a full team name ending at ``tokens[tail_index]``.

    Scans back at most MAX_LOOKBACK tokens, stopping before the first token
    that trips a stop rule.

    Returns:
        The resolved name, or None when the tokens do not form a team name.
    """
    tail = tokens[tail_index]
    if not is_team_tail(tail):
        return None
    if tail == SIXERS_TAIL:
        return SIXERS_FULL_NAME

    parts: List[str] = [tail]
    j = tail_index - 1
    while j >= 0 and len(parts) <= MAX_LOOKBACK:
        if first_stop_reason(tokens[j]) is not None:
            break
        parts.insert(0, tokens[j])
        j -= 1

    # Team names are at least city + nickname.
    if len(parts) < 2:
        return None
    return " ".join(parts)
