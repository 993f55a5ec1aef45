# chess_insights/services/pgn_service.py
"""
Provides a service for turning PGN files and text into `Game` records.

This module acts as a stateless adapter between PGN sources and the engine.
It encapsulates reading games with `python-chess`, extracting stable game IDs
from headers, and converting each record into a `Game` from the analysed
player's point of view. Records that cannot be converted are reported as
`SkippedGame`s instead of aborting the import.
"""

import asyncio
import io
import re
from pathlib import Path
from typing import AsyncGenerator, Generator, List, Optional, TextIO, Tuple, Union

import chess.pgn
import structlog

from chess_insights.core.pgn_parser import game_from_pgn
from chess_insights.exceptions import PgnParsingError, PgnServiceError
from chess_insights.types import Game, ImportResult, SkippedGame

logger = structlog.get_logger(__name__)


class PgnService:
    """A stateless service for reading PGN games into engine records."""

    # A declarative, data-driven list of patterns for game ID extraction.
    # The patterns are tried in order, prioritizing Lichess and Chess.com URLs.
    _GAME_ID_EXTRACTION_PATTERNS: List[Tuple[str, re.Pattern]] = [
        ("Link", re.compile(r"lichess\.org/([a-zA-Z0-9]{8})")),
        ("Site", re.compile(r"lichess\.org/([a-zA-Z0-9]{8})")),
        ("Link", re.compile(r"chess\.com/game/(?:live|daily)/(\d+)")),
        ("Site", re.compile(r"chess\.com/game/(?:live|daily)/(\d+)")),
    ]

    @classmethod
    def _extract_game_id(cls, headers: chess.pgn.Headers, ordinal: int) -> str:
        """
        Extracts a unique ID from a game's PGN headers.

        It prioritizes IDs found in Lichess or Chess.com URLs in the "Link" or
        "Site" tags. Otherwise it falls back to an ID built from the player
        names, the date and the game's position in its source, so that two
        local games between the same players on the same day stay distinct.

        Args:
            headers: The PGN headers for a single game.
            ordinal: The 1-based position of the game in its source.

        Returns:
            A string representing the unique ID for the game.
        """
        for tag_name, pattern in cls._GAME_ID_EXTRACTION_PATTERNS:
            if header_value := headers.get(tag_name):
                if match := pattern.search(str(header_value)):
                    prefix = "lichess" if "lichess" in str(header_value) else "chesscom"
                    return f"{prefix}_{match.group(1)}"

        white = headers.get("White", "Unknown").replace(" ", "_")
        black = headers.get("Black", "Unknown").replace(" ", "_")
        date = headers.get("Date", "0000.00.00")
        return f"local_{white}_vs_{black}_{date}_{ordinal}"

    def _sync_game_streamer(self, pgn_handle: TextIO) -> Generator[chess.pgn.Game, None, None]:
        """
        A synchronous generator that yields games from an open text handle.

        This is a helper function designed to be run in a separate thread when
        reading files, to avoid blocking the main asyncio event loop.
        """
        while True:
            # `chess.pgn.read_game` is a blocking call; move errors are
            # collected on `game.errors` instead of being raised.
            game = chess.pgn.read_game(pgn_handle)
            if game is None:
                break
            yield game

    def _convert(
        self, pgn_game: chess.pgn.Game, player_name: Optional[str], ordinal: int
    ) -> Union[Game, SkippedGame]:
        game_id = self._extract_game_id(pgn_game.headers, ordinal)
        try:
            return game_from_pgn(pgn_game, player_name, game_id)
        except PgnParsingError as e:
            return SkippedGame(game_id=game_id, reason=str(e))

    @staticmethod
    def _collect(records: List[Union[Game, SkippedGame]]) -> ImportResult:
        result = ImportResult()
        for record in records:
            if isinstance(record, SkippedGame):
                result.skipped.append(record)
            else:
                result.games.append(record)
        return result

    def read_games(self, pgn_text: str, player_name: Optional[str]) -> ImportResult:
        """
        Reads every game in a PGN string.

        Args:
            pgn_text: The content of a PGN file, one or more games.
            player_name: The user whose games are analysed.

        Returns:
            An `ImportResult` with the converted games in source order and the
            records that could not be converted.
        """
        records = [
            self._convert(pgn_game, player_name, ordinal)
            for ordinal, pgn_game in enumerate(self._sync_game_streamer(io.StringIO(pgn_text)), start=1)
        ]
        result = self._collect(records)
        logger.info("PGN text imported.", games=len(result.games), skipped=len(result.skipped))
        return result

    async def stream_games(
        self, pgn_filepath: Path, player_name: Optional[str]
    ) -> AsyncGenerator[Union[Game, SkippedGame], None]:
        """
        Asynchronously streams games from a PGN file one by one.

        This approach is memory-efficient as it does not load the entire PGN
        file into memory. It uses `asyncio.to_thread` to run the blocking
        reads of the `python-chess` library in a worker thread.

        Args:
            pgn_filepath: The path to the input PGN file.
            player_name: The user whose games are analysed.

        Yields:
            A `Game` for every convertible record, or a `SkippedGame` for a
            record that could not be converted.

        Raises:
            PgnServiceError: If the file cannot be found or read.
        """
        def _get_next_game(generator):
            """Wrapper to catch StopIteration for use with `to_thread`."""
            try:
                return next(generator)
            except StopIteration:
                return None

        try:
            with pgn_filepath.open("r", encoding="utf-8", errors="replace") as pgn_handle:
                game_generator = self._sync_game_streamer(pgn_handle)
                ordinal = 0
                while True:
                    # Offload the blocking `next(generator)` call to a thread.
                    pgn_game = await asyncio.to_thread(_get_next_game, game_generator)
                    if pgn_game is None:
                        break
                    ordinal += 1
                    yield self._convert(pgn_game, player_name, ordinal)
        except FileNotFoundError as e:
            raise PgnServiceError(f"Input PGN file not found: {pgn_filepath}") from e
        except OSError as e:
            raise PgnServiceError(f"Failed to stream games from {pgn_filepath}: {e}") from e

    async def load_games(self, pgn_filepath: Path, player_name: Optional[str]) -> ImportResult:
        """Reads a whole PGN file through `stream_games`."""
        records = [record async for record in self.stream_games(pgn_filepath, player_name)]
        result = self._collect(records)
        logger.info(
            "PGN file imported.", path=str(pgn_filepath),
            games=len(result.games), skipped=len(result.skipped),
        )
        return result
