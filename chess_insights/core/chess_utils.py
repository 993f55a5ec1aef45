# chess_insights/core/chess_utils.py
"""
Provides a collection of pure, stateless functions for PGN header interpretation.

This module is the "math library" of the import side: it maps raw header
strings (results, time controls, ratings, dates) onto the engine's enums and
values. It depends only on the data contracts in `types.py`, and every
function is deterministic and tolerant of malformed input.
"""

import re
from datetime import datetime, time
from typing import Final, List, Mapping, Optional, Tuple

from chess_insights.types import GameResult, PlayerColor, TimeControl

# Upper bounds (exclusive) of the base time, in seconds, for each category.
# Anything at or above the last bound is correspondence.
TIME_CONTROL_THRESHOLDS: Final[List[Tuple[int, TimeControl]]] = [
    (180, TimeControl.BULLET),
    (600, TimeControl.BLITZ),
    (1800, TimeControl.RAPID),
    (86400, TimeControl.CLASSICAL),
]

_BASE_TIME_PATTERN = re.compile(r"^(\d+)")
# Daily games are exported as "1/<seconds per move>".
_CORRESPONDENCE_PATTERN = re.compile(r"^\d+/\d+$")
_PGN_DATE_FORMAT = "%Y.%m.%d"
_PGN_TIME_FORMAT = "%H:%M:%S"


def categorize_time_control(time_control_tag: Optional[str]) -> Optional[TimeControl]:
    """
    Categorizes a PGN TimeControl tag by the base time per player.

    - Bullet: < 3 minutes
    - Blitz: >= 3 minutes and < 10 minutes
    - Rapid: >= 10 minutes and < 30 minutes
    - Classical: >= 30 minutes and < 1 day
    - Correspondence: 1 day or more, or a moves/seconds daily format

    Args:
        time_control_tag: The raw string from the PGN "TimeControl" header.
                          e.g., "300+5", "600", "1/259200".

    Returns:
        A `TimeControl`, or None if the tag is missing or malformed.
    """
    if not time_control_tag or time_control_tag in ("-", "?"):
        return None

    tag = time_control_tag.strip()
    if _CORRESPONDENCE_PATTERN.match(tag):
        return TimeControl.CORRESPONDENCE

    match = _BASE_TIME_PATTERN.match(tag)
    if not match:
        return None

    base_seconds = int(match.group(1))
    for upper_bound, category in TIME_CONTROL_THRESHOLDS:
        if base_seconds < upper_bound:
            return category
    return TimeControl.CORRESPONDENCE


def parse_result(result_tag: Optional[str], player_color: PlayerColor) -> GameResult:
    """
    Translates a PGN Result tag into the result from `player_color`'s point of view.

    Unfinished or unknown results ("*") count as draws.
    """
    if result_tag == "1-0":
        return GameResult.WIN if player_color is PlayerColor.WHITE else GameResult.LOSS
    if result_tag == "0-1":
        return GameResult.WIN if player_color is PlayerColor.BLACK else GameResult.LOSS
    return GameResult.DRAW


def safe_get_rating(rating_tag: Optional[str]) -> Optional[int]:
    """Parses an Elo header value, returning None for '?', '-' or garbage."""
    try:
        rating = int(str(rating_tag).strip())
    except (TypeError, ValueError):
        return None
    return rating if rating > 0 else None


def parse_game_date(headers: Mapping[str, str]) -> Optional[datetime]:
    """
    Derives the game's start timestamp from its headers.

    `UTCDate` (with `UTCTime` when present) is preferred over `Date`. Dates
    with unknown parts such as "2024.??.??" yield None.
    """
    date_tag = headers.get("UTCDate") or headers.get("Date")
    if not date_tag:
        return None
    try:
        day = datetime.strptime(date_tag.strip(), _PGN_DATE_FORMAT).date()
    except ValueError:
        return None

    time_tag = headers.get("UTCTime") if headers.get("UTCDate") else None
    return datetime.combine(day, _parse_start_time(time_tag))


def _parse_start_time(time_tag: Optional[str]) -> time:
    """Parses a PGN time tag, defaulting to midnight when absent or malformed."""
    if not time_tag:
        return time()
    try:
        return datetime.strptime(time_tag.strip(), _PGN_TIME_FORMAT).time()
    except ValueError:
        return time()


def fullmoves_from_plies(plies: int) -> int:
    """Converts a ply count into the number of full moves started (ceil(plies / 2))."""
    return (plies + 1) // 2
