# tests/core/test_tokenizer.py
import chess
import pytest

from chess_insights.core.tokenizer import normalize_move, parse_token, tokenize
from chess_insights.exceptions import EmptyGameError, ParseError
from chess_insights.types import PlayerColor

PGN_TEXT = """[Event "Casual game"]
[White "alice"]
[Black "bob"]

1. e4 {best by test} e5 (1... c5 2. Nf3 (2. c3 d5)) 2. Nf3 $1 Nc6 3. Bb5!? a6 ; the main line
4. Ba4 1-0
"""


def test_tokenize_strips_pgn_noise():
    tokens = tokenize(PGN_TEXT)
    assert [t.san for t in tokens] == ["e4", "e5", "Nf3", "Nc6", "Bb5", "a6", "Ba4"]


def test_tokenize_move_list_drops_numbers_blanks_and_results():
    tokens = tokenize(["1.", "e4", " ", "e5", "2.", "Nf3", "1-0"])
    assert [t.san for t in tokens] == ["e4", "e5", "Nf3"]


def test_tokenize_move_list_splits_numbered_elements():
    tokens = tokenize(["1.e4", "e5", "2.Nf3", "2...Nc6", "3. Bc4", "1-0"])
    assert [t.san for t in tokens] == ["e4", "e5", "Nf3", "Nc6", "Bc4"]
    assert all(t.is_recognized for t in tokens)


def test_plies_and_colors_alternate_from_white():
    tokens = tokenize("1. d4 d5 2. c4")
    assert [t.ply for t in tokens] == [1, 2, 3]
    assert [t.color for t in tokens] == [PlayerColor.WHITE, PlayerColor.BLACK, PlayerColor.WHITE]


def test_tokenize_does_not_mutate_input():
    moves = ["e4", "e5", "0-0"]
    tokenize(moves)
    assert moves == ["e4", "e5", "0-0"]


def test_castling_with_zeros_is_normalized():
    tokens = tokenize(["e4", "e5", "0-0", "0-0-0"])
    assert tokens[2].san == "O-O"
    assert tokens[3].san == "O-O-O"
    assert tokens[2].is_castle and tokens[3].is_castle
    assert tokens[2].piece == chess.KING


def test_normalize_move_drops_annotation_glyphs():
    assert normalize_move("Nxe5?!") == "Nxe5"
    assert normalize_move("Qh5??") == "Qh5"
    assert normalize_move("0-0+") == "O-O+"


def test_parse_token_fields():
    token = parse_token(5, "Qxd4+")
    assert token.color is PlayerColor.WHITE
    assert token.piece == chess.QUEEN
    assert token.to_square == chess.D4
    assert token.is_capture and token.is_check and not token.is_mate
    assert token.base == "Qxd4"


def test_parse_token_promotion_with_mate():
    token = parse_token(40, "e8=Q#")
    assert token.piece == chess.PAWN
    assert token.promotion == chess.QUEEN
    assert token.to_square == chess.E8
    assert token.is_mate and token.is_check


def test_unrecognized_tokens_are_kept_as_opaque():
    tokens = tokenize(["e4", "zz9", "Nf3"])
    assert len(tokens) == 3
    opaque = tokens[1]
    assert opaque.san == "zz9"
    assert not opaque.is_recognized
    assert opaque.piece is None and opaque.to_square is None


@pytest.mark.parametrize("source", ["", "   ", "1-0", ["1.", "*"], []])
def test_empty_source_raises(source):
    with pytest.raises(EmptyGameError):
        tokenize(source)


def test_empty_game_error_carries_game_id():
    with pytest.raises(ParseError) as excinfo:
        tokenize("{only a comment} *", game_id="g-1")
    assert excinfo.value.game_id == "g-1"
