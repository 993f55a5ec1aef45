# chess_insights/core/tokenizer.py
"""
Turns a game's move source into an ordered sequence of typed `Token`s.

This module acts as the Anti-Corruption Layer between loose move text (a raw
PGN movetext blob, or an already split move list handed over by a game
collaborator) and the engine. Every move is parsed exactly once into structured
fields (piece, destination square, capture/check/castle flags) so that the
classifier and the detectors never inspect raw strings. No board is replayed:
tokens that do not look like SAN are kept as opaque tokens and simply never
match anything downstream.
"""
import re
from typing import List, Optional, Sequence, Union

import chess
import structlog

from chess_insights.exceptions import EmptyGameError
from chess_insights.types import PlayerColor, Token

logger = structlog.get_logger(__name__)

RESULT_MARKERS = frozenset({"1-0", "0-1", "1/2-1/2", "*"})

_TAG_PAIR_PATTERN = re.compile(r"^\s*\[[^\]]*\]\s*$", re.MULTILINE)
_BRACE_COMMENT_PATTERN = re.compile(r"\{[^}]*\}")
_LINE_COMMENT_PATTERN = re.compile(r";[^\n]*")
# Matches only variations with no nested variation inside; applied repeatedly.
_INNERMOST_VARIATION_PATTERN = re.compile(r"\([^()]*\)")
_NAG_PATTERN = re.compile(r"\$\d+")
_MOVE_NUMBER_PATTERN = re.compile(r"\b\d+\.+")
_BARE_MOVE_NUMBER_PATTERN = re.compile(r"^\d+\.*$")
_ANNOTATION_GLYPHS_PATTERN = re.compile(r"[!?]+$")
_CASTLE_PATTERN = re.compile(r"^(O-O(?:-O)?)([+#])?$")


def _strip_movetext(text: str) -> List[str]:
    """Removes everything from PGN text that is not a move and splits it into words."""
    cleaned = _TAG_PAIR_PATTERN.sub(" ", text)
    cleaned = _BRACE_COMMENT_PATTERN.sub(" ", cleaned)
    cleaned = _LINE_COMMENT_PATTERN.sub(" ", cleaned)
    while True:
        without_variations = _INNERMOST_VARIATION_PATTERN.sub(" ", cleaned)
        if without_variations == cleaned:
            break
        cleaned = without_variations
    cleaned = _NAG_PATTERN.sub(" ", cleaned)
    cleaned = _MOVE_NUMBER_PATTERN.sub(" ", cleaned)
    return [word for word in cleaned.split() if word not in RESULT_MARKERS]


def _strip_move_list(moves: Sequence[str]) -> List[str]:
    """
    Cleans an already split move list, dropping blanks, numbers and results.

    Elements carrying their move number ("1.e4", "3...Nc6") are split from it.
    """
    words: List[str] = []
    for raw in moves:
        for word in _MOVE_NUMBER_PATTERN.sub(" ", str(raw)).split():
            if word in RESULT_MARKERS or _BARE_MOVE_NUMBER_PATTERN.match(word):
                continue
            words.append(word)
    return words


def normalize_move(word: str) -> str:
    """
    Normalizes a single move word.

    Trailing annotation glyphs ("!", "?!", ...) are dropped and castling
    written with zeros is spelled with the letter O.
    """
    move = _ANNOTATION_GLYPHS_PATTERN.sub("", word)
    if move.startswith("0-0"):
        move = move.replace("0", "O")
    return move


def parse_token(ply: int, san: str) -> Token:
    """
    Builds a `Token` for one normalized move, extracting its structured fields.

    Args:
        ply: The 1-based ply index of the move.
        san: The normalized move text.

    Returns:
        A `Token`. If the text is not recognizable SAN, only `ply`, `color`
        and `san` are populated.
    """
    color = PlayerColor.for_ply(ply)
    is_check = san.endswith(("+", "#"))
    is_mate = san.endswith("#")

    if _CASTLE_PATTERN.match(san):
        return Token(ply=ply, color=color, san=san, piece=chess.KING,
                     is_castle=True, is_check=is_check, is_mate=is_mate)

    match = chess.SAN_REGEX.match(san)
    if not match:
        return Token(ply=ply, color=color, san=san)

    piece_symbol, _, _, to_square_name, promotion_part = match.groups()
    promotion: Optional[chess.PieceType] = None
    if promotion_part:
        promotion = chess.Piece.from_symbol(promotion_part[-1].lower()).piece_type

    return Token(
        ply=ply,
        color=color,
        san=san,
        piece=chess.Piece.from_symbol(piece_symbol).piece_type if piece_symbol else chess.PAWN,
        to_square=chess.parse_square(to_square_name),
        promotion=promotion,
        is_capture="x" in san,
        is_check=is_check,
        is_mate=is_mate,
    )


def tokenize(move_source: Union[str, Sequence[str]], game_id: Optional[str] = None) -> List[Token]:
    """
    Converts a move source into ply-indexed tokens.

    Args:
        move_source: Either raw PGN text/movetext, or a sequence of move strings.
        game_id: Optional identity of the game, attached to the error for reporting.

    Returns:
        A new list of `Token`s, ply 1 first.

    Raises:
        EmptyGameError: If no move tokens survive cleanup.
    """
    if isinstance(move_source, str):
        words = _strip_movetext(move_source)
    else:
        words = _strip_move_list(move_source)

    moves = [move for move in (normalize_move(word) for word in words) if move]
    tokens = [parse_token(ply, move) for ply, move in enumerate(moves, start=1)]
    if not tokens:
        raise EmptyGameError("No move tokens could be derived from the move source.", game_id=game_id)

    unrecognized = sum(1 for token in tokens if not token.is_recognized)
    if unrecognized:
        logger.debug("Kept unrecognized move tokens as opaque.", game_id=game_id, count=unrecognized)
    return tokens
