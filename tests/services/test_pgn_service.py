# tests/services/test_pgn_service.py
import chess.pgn
import pytest

from chess_insights.exceptions import PgnServiceError
from chess_insights.services.pgn_service import PgnService
from chess_insights.types import Game, SkippedGame

GOOD_GAME = """[Event "Live Chess"]
[Site "Chess.com"]
[Link "https://www.chess.com/game/live/123456789"]
[White "alice"]
[Black "bob"]
[Result "1-0"]

1. e4 e5 2. Nf3 Nc6 3. Bc4 Bc5 1-0
"""

BAD_GAME = """[Event "Casual"]
[White "alice"]
[Black "bob"]
[Date "2024.01.02"]
[Result "*"]

1. e4 e5 2. Ke3 *
"""

LOCAL_GAME = """[Event "Casual"]
[White "carol"]
[Black "alice"]
[Date "2024.01.03"]
[Result "1/2-1/2"]

1. d4 d5 1/2-1/2
"""

PGN_TEXT = "\n".join([GOOD_GAME, BAD_GAME, LOCAL_GAME])


def test_extract_game_id_from_urls_and_fallback():
    headers = chess.pgn.Headers(Site="https://lichess.org/AbCd1234")
    assert PgnService._extract_game_id(headers, 1) == "lichess_AbCd1234"

    headers = chess.pgn.Headers(Link="https://www.chess.com/game/daily/42")
    assert PgnService._extract_game_id(headers, 1) == "chesscom_42"

    headers = chess.pgn.Headers(White="Ann Lee", Black="Bo", Date="2024.01.02")
    assert PgnService._extract_game_id(headers, 3) == "local_Ann_Lee_vs_Bo_2024.01.02_3"


def test_read_games_converts_and_reports_skips():
    result = PgnService().read_games(PGN_TEXT, "alice")

    assert [g.game_id for g in result.games] == ["chesscom_123456789", "local_carol_vs_alice_2024.01.03_3"]
    assert [s.game_id for s in result.skipped] == ["local_alice_vs_bob_2024.01.02_2"]
    assert result.games[1].player_color.value == "black"


def test_read_games_on_empty_text():
    result = PgnService().read_games("", "alice")
    assert result.games == [] and result.skipped == []


@pytest.mark.asyncio
async def test_stream_games_from_file(tmp_path):
    path = tmp_path / "games.pgn"
    path.write_text(PGN_TEXT, encoding="utf-8")

    records = [record async for record in PgnService().stream_games(path, "alice")]

    assert [type(r) for r in records] == [Game, SkippedGame, Game]


@pytest.mark.asyncio
async def test_load_games_from_file(tmp_path):
    path = tmp_path / "games.pgn"
    path.write_text(PGN_TEXT, encoding="utf-8")

    result = await PgnService().load_games(path, "alice")

    assert len(result.games) == 2
    assert len(result.skipped) == 1


@pytest.mark.asyncio
async def test_stream_games_missing_file(tmp_path):
    with pytest.raises(PgnServiceError):
        async for _ in PgnService().stream_games(tmp_path / "missing.pgn", "alice"):
            pass
