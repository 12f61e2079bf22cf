"""
Text normalization for extracted injury report text.

PDF text extraction tends to smash table cells together
("LosAngelesLakersJames,LeBronOutInjury/Illness..."). The passes below
re-insert separators at likely boundaries. They run in a fixed order because
later passes rely on spaces inserted by earlier ones.
"""

import re
from typing import List

_LINE_BREAK_RE = re.compile(r"\r?\n")
_BOILERPLATE_RES = (
    re.compile(r"InjuryReport:\S+"),
    re.compile(r"Page\d+of\d+"),
    re.compile(r"GameDateGameTimeMatchupTeamPlayerNameCurrentStatusReason"),
)
_MATCHUP_RE = re.compile(r"([A-Z]{2,3}@[A-Z]{2,3})")
_STATUS_RE = re.compile(r"(Out|Doubtful|Questionable|Probable)")
_CLOSE_PAREN_RE = re.compile(r"\)(?=\w)")
_LOWER_UPPER_RE = re.compile(r"(?<=[a-z])(?=[A-Z])")
_UPPER_TITLE_RE = re.compile(r"(?<=[A-Z])(?=[A-Z][a-z])")
_DIGIT_RUN_RE = re.compile(r"[0-9]+(?=[A-Za-z])")
_SIXERS_DETACH_RE = re.compile(r"(?<=[A-Za-z])(?=76ers)")
_WHITESPACE_RE = re.compile(r"\s+")


def collapse_line_breaks(text: str) -> str:
    return _LINE_BREAK_RE.sub(" ", text)


def strip_boilerplate(text: str) -> str:
    """Remove report headers, page footers and the column banner."""
    for pattern in _BOILERPLATE_RES:
        text = pattern.sub(" ", text)
    return text


def space_matchups(text: str) -> str:
    """Isolate ``LAL@BOS`` style matchup codes."""
    return _MATCHUP_RE.sub(r" \1 ", text)


def space_status_words(text: str) -> str:
    return _STATUS_RE.sub(r" \1 ", text)


def space_after_commas(text: str) -> str:
    return text.replace(",", ", ")


def space_after_close_paren(text: str) -> str:
    return _CLOSE_PAREN_RE.sub(") ", text)


def split_case_transitions(text: str) -> str:
    """Split ``lowerUpper`` and ``UPPERTitle`` boundaries."""
    text = _LOWER_UPPER_RE.sub(" ", text)
    return _UPPER_TITLE_RE.sub(" ", text)


def _split_digit_run(match: "re.Match") -> str:
    digits = match.group(0)
    if digits == "76" and match.string.startswith("ers", match.end()):
        return digits
    return digits + " "


def split_digit_letter(text: str) -> str:
    """
    Split a digit from a following letter.

    ``76ers`` is a team nickname, not a number followed by a word, so it is
    kept whole and detached from a smashed city instead
    ("Philadelphia76ers" -> "Philadelphia 76ers").
    """
    text = _DIGIT_RUN_RE.sub(_split_digit_run, text)
    return _SIXERS_DETACH_RE.sub(" ", text)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


NORMALIZATION_PASSES = (
    collapse_line_breaks,
    strip_boilerplate,
    space_matchups,
    space_status_words,
    space_after_commas,
    space_after_close_paren,
    split_case_transitions,
    split_digit_letter,
    collapse_whitespace,
)


def normalize_for_parsing(text: str) -> str:
    """Apply every normalization pass in order."""
    for rewrite in NORMALIZATION_PASSES:
        text = rewrite(text)
    return text


def tokenize(text: str) -> List[str]:
    """Normalize ``text`` and split it into non-empty tokens."""
    return normalize_for_parsing(text).split()
