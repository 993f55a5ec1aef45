# tests/core/test_annotator.py
import pytest

from chess_insights.config.settings import AnalysisSettings
from chess_insights.core.annotator import annotate_game, default_bucket
from chess_insights.exceptions import EmptyGameError
from chess_insights.types import (Game, GameResult, OpeningBucket,
                                  PlayerColor)


def _game(**kwargs) -> Game:
    fields = dict(game_id="g1", player_color=PlayerColor.WHITE, result=GameResult.LOSS)
    fields.update(kwargs)
    return Game(**fields)


def test_annotate_game_from_move_list():
    game = _game(moves=("e4", "e5", "Qh5", "Nc6", "Bc4", "Nf6", "Qf3", "Nd4"), total_moves=None)

    annotated = annotate_game(game)

    assert annotated.game is game
    assert annotated.opening_bucket is OpeningBucket.KINGS_PAWN_OTHER
    assert annotated.total_moves == 4
    assert len(annotated.tokens) == 8
    assert annotated.signals.queen_moves_first_10 == 2
    assert annotated.signals.queen_tempo_loss is True
    assert annotated.signals.is_quick_loss is True


def test_annotate_game_from_raw_pgn_keeps_given_length():
    game = _game(
        player_color=PlayerColor.BLACK, result=GameResult.WIN, total_moves=40,
        pgn_raw='[White "a"]\n\n1. e4 c5 2. Nf3 d6 3. d4 cxd4 4. Nxd4 Nf6 5. Nc3 a6 0-1',
    )

    annotated = annotate_game(game, AnalysisSettings())

    assert annotated.opening_bucket is OpeningBucket.SICILIAN_NAJDORF
    assert annotated.total_moves == 40
    assert annotated.signals.is_quick_win is False


def test_annotate_game_without_moves_raises():
    with pytest.raises(EmptyGameError):
        annotate_game(_game())
    with pytest.raises(EmptyGameError):
        annotate_game(_game(moves=(), pgn_raw="1-0"))


def test_default_bucket():
    assert default_bucket(PlayerColor.WHITE) is OpeningBucket.OTHER_WHITE
    assert default_bucket(PlayerColor.BLACK) is OpeningBucket.OTHER_BLACK


def test_game_coerces_plain_strings_to_enums():
    game = Game(game_id="g2", player_color="white", result="win", time_control="bullet", moves=("e4", "e5"))

    assert game.player_color is PlayerColor.WHITE
    assert game.result is GameResult.WIN
    assert annotate_game(game).signals.is_quick_win is True


def test_game_rejects_unknown_color():
    with pytest.raises(ValueError):
        Game(game_id="g3", player_color="green", result="win")
