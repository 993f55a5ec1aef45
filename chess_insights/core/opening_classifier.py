# chess_insights/core/opening_classifier.py
"""
Provides a pure function to assign a game to one opening bucket.

The classifier compares the leading plies of a game against every eligible
line of the static opening book and keeps the longest line that matches; ties
go to the line declared first. When nothing matches, the bucket comes from the
explicit catch-all table in `opening_book`, so every non-empty game receives
exactly one bucket.
"""
from typing import Optional, Sequence, Tuple

import structlog

from chess_insights.core.opening_book import (ANY, CATCH_ALL_TABLE,
                                              CATEGORY_CATCH_ALLS, lines_for)
from chess_insights.exceptions import NoMovesError
from chess_insights.types import OpeningBucket, OpeningLine, PlayerColor, Token

logger = structlog.get_logger(__name__)

DEFAULT_MAX_BOOK_PLIES = 20


def line_matches(line: OpeningLine, moves: Sequence[str]) -> bool:
    """
    Checks whether every move of `line` equals the game's move at the same ply.

    A line longer than the available moves never matches. `ANY` entries in the
    line match whatever was played on that ply.
    """
    if len(line.moves) > len(moves):
        return False
    return all(expected == ANY or expected == played for expected, played in zip(line.moves, moves))


def find_best_line(
    moves: Sequence[str], color: Optional[PlayerColor] = None
) -> Optional[OpeningLine]:
    """
    Returns the most specific matching book line, or None.

    Args:
        moves: The game's leading moves without check suffixes.
        color: The perspective whose lines are eligible; None allows all lines.
    """
    best: Optional[OpeningLine] = None
    for line in lines_for(color):
        # Strictly longer only: an equally long later line never displaces an earlier one.
        if (best is None or len(line) > len(best)) and line_matches(line, moves):
            best = line
    return best


def catch_all_bucket(moves: Sequence[str], color: Optional[PlayerColor] = None) -> OpeningBucket:
    """
    Resolves the catch-all bucket for a game that matched no book line.

    The category is looked up by perspective and White's first move. A game of
    fewer than two plies says nothing about Black's reply, so without a
    perspective it is filed under White.
    """
    perspective = color
    if perspective is None and len(moves) < 2:
        perspective = PlayerColor.WHITE
    first_move = moves[0] if len(moves) >= 2 else None

    category = CATCH_ALL_TABLE.get((perspective, first_move), CATCH_ALL_TABLE[(perspective, None)])
    return CATEGORY_CATCH_ALLS[category]


def classify(
    tokens: Sequence[Token],
    color: Optional[PlayerColor] = None,
    max_book_plies: int = DEFAULT_MAX_BOOK_PLIES,
) -> OpeningBucket:
    """
    Classifies the opening of a tokenized game.

    Args:
        tokens: The game's tokens, ply 1 first.
        color: The player whose repertoire is being classified. White-owned lines
            are used for White, Black-owned lines for Black, and all lines when None.
        max_book_plies: Only this many leading plies are compared with the book.

    Returns:
        Exactly one `OpeningBucket`.

    Raises:
        NoMovesError: If `tokens` is empty.
    """
    if not tokens:
        raise NoMovesError("Cannot classify the opening of a game with no moves.")

    moves: Tuple[str, ...] = tuple(token.base for token in tokens[:max_book_plies])
    best = find_best_line(moves, color)
    if best is not None:
        return best.bucket

    bucket = catch_all_bucket(moves, color)
    logger.debug("No opening line matched; using catch-all bucket.", bucket=bucket.value, first_moves=moves[:4])
    return bucket
