# chess_insights/core/pgn_parser.py
"""
Parses `python-chess` game objects into the engine's `Game` data contract.

This module acts as an Anti-Corruption Layer, translating data from the external
`python-chess` library into our domain's pure data structures. Header values
are interpreted from the point of view of one player (the user whose games are
being analysed), so a single PGN record becomes a `Game` with a player color,
a result for that player and the opponent's details.
"""
from typing import List, Optional

import chess
import chess.pgn
import structlog

from chess_insights.core.chess_utils import (categorize_time_control,
                                             fullmoves_from_plies,
                                             parse_game_date, parse_result,
                                             safe_get_rating)
from chess_insights.exceptions import PgnParsingError
from chess_insights.types import Game, PlayerColor

logger = structlog.get_logger(__name__)

_URL_PREFIXES = ("http://", "https://")


def resolve_player_color(headers: chess.pgn.Headers, player_name: Optional[str]) -> Optional[PlayerColor]:
    """Finds which side `player_name` played, comparing names case-insensitively."""
    if not player_name:
        return None
    wanted = player_name.strip().lower()
    if headers.get("White", "").strip().lower() == wanted:
        return PlayerColor.WHITE
    if headers.get("Black", "").strip().lower() == wanted:
        return PlayerColor.BLACK
    return None


def _game_url(headers: chess.pgn.Headers) -> Optional[str]:
    for tag_name in ("Link", "Site"):
        value = headers.get(tag_name, "")
        if value.startswith(_URL_PREFIXES):
            return value
    return None


def _mainline_san(game: chess.pgn.Game) -> List[str]:
    """Replays the main line once to render every move in SAN."""
    board = game.board()
    moves: List[str] = []
    for move in game.mainline_moves():
        moves.append(board.san(move))
        board.push(move)
    return moves


def game_from_pgn(game: chess.pgn.Game, player_name: Optional[str], game_id: str) -> Game:
    """
    Converts a `chess.pgn.Game` into a `Game` seen from `player_name`'s side.

    Args:
        game: A game object loaded by the `python-chess` library.
        player_name: The user whose games are analysed. When it matches neither
            player (or is None) the game is read from White's side.
        game_id: The identity assigned to the game by the caller.

    Returns:
        A `Game` record carrying the split SAN move list and the raw PGN.

    Raises:
        PgnParsingError: If the record holds illegal moves or starts from a
            custom position, which the ply-based opening book cannot describe.
    """
    headers = game.headers

    if game.errors:
        logger.warning("Skipping game with PGN errors.", game_id=game_id, error=str(game.errors[0]))
        raise PgnParsingError(f"Corrupt or illegal move data in game {game_id}.") from game.errors[0]
    if "FEN" in headers:
        raise PgnParsingError(f"Game {game_id} starts from a custom position.")

    player_color = resolve_player_color(headers, player_name)
    if player_color is None:
        logger.warning(
            "Player not found in game headers; reading the game from White's side.",
            game_id=game_id, player=player_name,
            white=headers.get("White"), black=headers.get("Black"),
        )
        player_color = PlayerColor.WHITE

    try:
        moves = _mainline_san(game)
    except (AssertionError, ValueError) as e:
        raise PgnParsingError(f"Corrupt or illegal move data in game {game_id}.") from e

    opponent_color = player_color.opponent
    return Game(
        game_id=game_id,
        player_color=player_color,
        result=parse_result(headers.get("Result"), player_color),
        game_date=parse_game_date(headers),
        time_control=categorize_time_control(headers.get("TimeControl")),
        opponent_name=headers.get(opponent_color.value.capitalize()),
        opponent_rating=safe_get_rating(headers.get(f"{opponent_color.value.capitalize()}Elo")),
        player_rating=safe_get_rating(headers.get(f"{player_color.value.capitalize()}Elo")),
        total_moves=fullmoves_from_plies(len(moves)),
        moves=tuple(moves),
        pgn_raw=str(game),
        game_url=_game_url(headers),
    )
