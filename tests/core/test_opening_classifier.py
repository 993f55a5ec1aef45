# tests/core/test_opening_classifier.py
import pytest

from chess_insights.core import opening_classifier
from chess_insights.core.opening_book import (OPENING_CATEGORIES,
                                              OPENING_LABELS, OPENING_LINES)
from chess_insights.core.opening_classifier import classify
from chess_insights.core.tokenizer import tokenize
from chess_insights.exceptions import ClassifyError, NoMovesError
from chess_insights.types import (OpeningBucket, OpeningCategory, OpeningLine,
                                  PlayerColor)

NAJDORF = "e4 c5 Nf3 d6 d4 cxd4 Nxd4 Nf6 Nc3 a6".split()


def _classify(moves, color=None):
    return classify(tokenize(moves), color)


def test_italian_game_from_white_side():
    assert _classify(["e4", "e5", "Nf3", "Nc6", "Bc4"], PlayerColor.WHITE) is OpeningBucket.ITALIAN_GAME


def test_najdorf_wins_over_shorter_sicilian_lines():
    assert _classify(NAJDORF, PlayerColor.BLACK) is OpeningBucket.SICILIAN_NAJDORF
    assert _classify(NAJDORF + ["Be3", "e5"], PlayerColor.BLACK) is OpeningBucket.SICILIAN_NAJDORF


@pytest.mark.parametrize("moves, expected", [
    (["e4", "e5", "Nf3", "Nc6", "Bc4"], OpeningBucket.ITALIAN_GAME),
    (NAJDORF, OpeningBucket.SICILIAN_NAJDORF),
    (["c4"], OpeningBucket.ENGLISH_OPENING),
])
def test_examples_without_perspective(moves, expected):
    assert _classify(moves) is expected


def test_longest_prefix_falls_back_to_shorter_line():
    assert _classify(["e4", "c5", "Nf3", "d6"], PlayerColor.BLACK) is OpeningBucket.SICILIAN_OTHER


def test_check_suffixes_are_ignored_when_matching():
    moves = ["e4", "e5", "Nf3", "Nc6", "Bb5+"]
    assert _classify(moves, PlayerColor.WHITE) is OpeningBucket.RUY_LOPEZ


def test_wildcards_match_any_reply():
    assert _classify(["d4", "Nf6", "Bf4"], PlayerColor.WHITE) is OpeningBucket.LONDON_SYSTEM
    assert _classify(["d4", "d5", "Bf4"], PlayerColor.WHITE) is OpeningBucket.LONDON_SYSTEM


def test_lines_longer_than_the_game_are_not_eligible():
    # The Najdorf needs ten plies; with nine only the Sicilian catch-all line fits.
    assert _classify(NAJDORF[:9], PlayerColor.BLACK) is OpeningBucket.SICILIAN_OTHER


def test_only_leading_plies_are_considered():
    tokens = tokenize(NAJDORF)
    assert classify(tokens, PlayerColor.BLACK, max_book_plies=4) is OpeningBucket.SICILIAN_OTHER


def test_classification_is_idempotent():
    tokens = tokenize(NAJDORF)
    assert classify(tokens, PlayerColor.BLACK) is classify(tokens, PlayerColor.BLACK)


def test_ties_go_to_the_first_declared_line(monkeypatch):
    lines = (
        OpeningLine(OpeningBucket.VIENNA_GAME, PlayerColor.WHITE, ("e4", "e5", "Nc3")),
        OpeningLine(OpeningBucket.BISHOPS_OPENING, PlayerColor.WHITE, ("e4", "*", "Nc3")),
    )
    monkeypatch.setattr(opening_classifier, "lines_for", lambda color: lines)
    assert _classify(["e4", "e5", "Nc3"]) is OpeningBucket.VIENNA_GAME


@pytest.mark.parametrize("moves, color, expected", [
    (["a3", "e5"], PlayerColor.WHITE, OpeningBucket.OTHER_WHITE),
    (["e4", "e6", "d4", "d5"], PlayerColor.WHITE, OpeningBucket.KINGS_PAWN_OTHER),
    (["e4", "c5", "Nf3", "d6"], PlayerColor.WHITE, OpeningBucket.KINGS_PAWN_OTHER),
    (["d4", "Nf6", "Nf3", "e6", "g3"], PlayerColor.WHITE, OpeningBucket.D4_OTHER),
    (["e4"], PlayerColor.WHITE, OpeningBucket.OTHER_WHITE),
    (["e4", "a6"], PlayerColor.BLACK, OpeningBucket.KINGS_PAWN_OTHER),
    (["d4", "a6"], PlayerColor.BLACK, OpeningBucket.D4_OTHER),
    (["b4", "e5"], PlayerColor.BLACK, OpeningBucket.OTHER_BLACK),
    (["e4", "a6"], None, OpeningBucket.KINGS_PAWN_OTHER),
    (["e4"], PlayerColor.BLACK, OpeningBucket.OTHER_BLACK),
    (["e4"], None, OpeningBucket.OTHER_WHITE),
])
def test_catch_all_buckets(moves, color, expected):
    assert _classify(moves, color) is expected


def test_opaque_tokens_never_match():
    assert _classify(["e4", "zz9", "Nf3"], PlayerColor.BLACK) is OpeningBucket.KINGS_PAWN_OTHER


def test_no_tokens_raises():
    with pytest.raises(NoMovesError):
        classify([])
    assert issubclass(NoMovesError, ClassifyError)


def test_book_tables_cover_the_taxonomy():
    assert set(OPENING_LABELS) == set(OpeningBucket)
    assert set(OPENING_CATEGORIES) == set(OpeningBucket)
    assert OPENING_CATEGORIES[OpeningBucket.ITALIAN_GAME] is OpeningCategory.WHITE_E4
    assert OPENING_CATEGORIES[OpeningBucket.OTHER_WHITE] is OpeningCategory.WHITE_OTHER
    assert OPENING_CATEGORIES[OpeningBucket.SICILIAN_NAJDORF] is OpeningCategory.BLACK_VS_E4
    assert OPENING_CATEGORIES[OpeningBucket.D4_OTHER] is OpeningCategory.BLACK_VS_D4
    assert all(line.moves[0] != "*" for line in OPENING_LINES)


def test_numbered_move_list_still_matches_the_book():
    moves = ["1.e4", "e5", "2.Nf3", "Nc6", "3.Bb5"]
    assert _classify(moves, PlayerColor.WHITE) is OpeningBucket.RUY_LOPEZ
