# chess_insights/core/detectors.py
"""
Contains the per-game pattern detectors.

Each detector is a small, pure function over a game's typed tokens and a few
pieces of metadata, returning one signal (a ply, a count or a flag). They are
independent of each other and only read `Token` fields, so unrecognized tokens
(no piece, no square) can never match and never raise.

The queen tempo-loss and Nc7-fork detectors are textual heuristics: no board is
replayed, so they flag move patterns that usually accompany the motif rather
than proving it happened. Their windows are configured in
`DetectorSettingsModel`.
"""

from typing import Iterator, Optional, Sequence, TYPE_CHECKING

import chess

from chess_insights.types import GameResult, PlayerColor, SignalSet, Token

if TYPE_CHECKING:
    from chess_insights.config.settings import DetectorSettingsModel

# The square a knight forks king and rook from, indexed by the victim's color.
FORK_SQUARES = {
    PlayerColor.BLACK: chess.C7,
    PlayerColor.WHITE: chess.C2,
}


def _moves_by(tokens: Sequence[Token], color: PlayerColor, max_ply: Optional[int] = None) -> Iterator[Token]:
    for token in tokens:
        if max_ply is not None and token.ply > max_ply:
            break
        if token.color is color:
            yield token


def castling_ply(tokens: Sequence[Token], color: PlayerColor) -> Optional[int]:
    """Returns the ply of the first castling move by `color`, or None if it never castled."""
    for token in _moves_by(tokens, color):
        if token.is_castle:
            return token.ply
    return None


def queen_moves_in_window(tokens: Sequence[Token], color: PlayerColor, window_plies: int = 20) -> int:
    """Counts queen moves by `color` within the first `window_plies` plies."""
    return sum(1 for token in _moves_by(tokens, color, window_plies) if token.piece == chess.QUEEN)


def _is_quick(total_plies: int, max_fullmoves: int) -> bool:
    return total_plies / 2 <= max_fullmoves


def is_quick_loss(result: GameResult, total_plies: int, max_fullmoves: int = 15) -> bool:
    """A loss that ended within `max_fullmoves` full moves."""
    return result is GameResult.LOSS and _is_quick(total_plies, max_fullmoves)


def is_quick_win(result: GameResult, total_plies: int, max_fullmoves: int = 15) -> bool:
    """A win that ended within `max_fullmoves` full moves."""
    return result is GameResult.WIN and _is_quick(total_plies, max_fullmoves)


def queen_tempo_loss(
    tokens: Sequence[Token],
    color: PlayerColor,
    window_plies: int = 20,
    max_gap_plies: Optional[int] = None,
) -> bool:
    """
    Heuristic for an early queen excursion that had to be repeated.

    Flags the game when a queen move by `color` that neither captures nor
    gives check is followed, inside the window, by another queen move of the
    same player (no more than `max_gap_plies` later when a gap is set). A
    non-forcing queen move followed by a second queen move is the textual
    trace of a queen being chased; whether it was really attacked is not
    verified.
    """
    queen_moves = [
        token for token in _moves_by(tokens, color, window_plies) if token.piece == chess.QUEEN
    ]
    for index, first in enumerate(queen_moves[:-1]):
        if first.is_capture or first.is_check:
            continue
        follow_up = queen_moves[index + 1]
        if max_gap_plies is None or follow_up.ply - first.ply <= max_gap_plies:
            return True
    return False


def nc7_fork_detected(
    tokens: Sequence[Token],
    color: PlayerColor,
    followup_plies: int = 4,
    scan_plies: Optional[int] = None,
) -> bool:
    """
    Heuristic for the classic knight fork on c7 (c2 against White).

    Flags the game when an opponent knight lands on the fork square of
    `color` and the opponent makes a capture within `followup_plies` plies
    afterwards, which is how the king-and-rook fork usually cashes in.
    """
    opponent = color.opponent
    fork_square = FORK_SQUARES[color]
    for index, token in enumerate(tokens):
        if scan_plies is not None and token.ply > scan_plies:
            break
        if token.color is not opponent or token.piece != chess.KNIGHT or token.to_square != fork_square:
            continue
        last_ply = token.ply + followup_plies
        for later in tokens[index + 1:]:
            if later.ply > last_ply:
                break
            if later.color is opponent and later.is_capture:
                return True
    return False


def early_checks_received(tokens: Sequence[Token], color: PlayerColor, window_plies: int = 20) -> int:
    """Counts checks given to `color` by the opponent within the first `window_plies` plies."""
    return sum(1 for token in _moves_by(tokens, color.opponent, window_plies) if token.is_check)


def detect_signals(
    tokens: Sequence[Token],
    color: PlayerColor,
    result: GameResult,
    total_plies: int,
    settings: "DetectorSettingsModel",
) -> SignalSet:
    """
    Runs every detector for one game and bundles the results.

    Args:
        tokens: The game's tokens.
        color: The color played by the user whose habits are analysed.
        result: The game result from that player's point of view.
        total_plies: The length of the game in plies.
        settings: Detector windows and thresholds.

    Returns:
        The game's `SignalSet`.
    """
    return SignalSet(
        castled_at_ply=castling_ply(tokens, color),
        queen_moves_first_10=queen_moves_in_window(tokens, color, settings.opening_window_plies),
        is_quick_loss=is_quick_loss(result, total_plies, settings.quick_game_max_fullmoves),
        is_quick_win=is_quick_win(result, total_plies, settings.quick_game_max_fullmoves),
        early_checks_received=early_checks_received(tokens, color, settings.early_checks_window_plies),
        queen_tempo_loss=queen_tempo_loss(
            tokens, color, settings.queen_tempo_window_plies, settings.queen_tempo_max_gap_plies
        ),
        nc7_fork_detected=nc7_fork_detected(
            tokens, color, settings.fork_followup_plies, settings.fork_scan_plies
        ),
    )
