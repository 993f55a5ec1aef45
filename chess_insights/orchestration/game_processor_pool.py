# chess_insights/orchestration/game_processor_pool.py
"""
The worker-management engine of the application.

Games are annotated concurrently, bounded by a semaphore, and the results are
collected back in input order. A game that cannot be annotated is reported as
a `SkippedGame` and counted; it never aborts the rest of the batch.
"""

import asyncio
import uuid
from typing import Awaitable, Callable, List, Optional, Sequence, TYPE_CHECKING, Union

import structlog

from chess_insights.exceptions import ChessInsightsError, EmptyGameError
from chess_insights.orchestration.game_processor import GameProcessor
from chess_insights.statistics import StatisticsTracker, StatKey
from chess_insights.tracing import CorrelationID
from chess_insights.types import AnnotatedGame, BatchResult, SkippedGame

if TYPE_CHECKING:
    from chess_insights.config.settings import RunConfig
    from chess_insights.types import Game

logger = structlog.get_logger(__name__)

ProgressCallback = Callable[[int, int], Awaitable[None]]


class GameProcessorPool:
    """Manages the concurrent annotation of a batch of games."""

    def __init__(
        self,
        config: "RunConfig",
        processor: GameProcessor,
        tracker: StatisticsTracker,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self._config = config
        self._processor = processor
        self._tracker = tracker
        self._progress_callback = progress_callback
        self._completed = 0

    async def _process_one_game_wrapper(
        self, game: "Game", cid: CorrelationID, semaphore: asyncio.Semaphore, total: int
    ) -> Union[AnnotatedGame, SkippedGame]:
        """A safe wrapper for annotating a single game."""
        async with semaphore:
            cid.bind()
            try:
                annotated = await self._processor.process_game(game)
                self._tracker.add_stat(StatKey.GAMES_ANNOTATED)
                return annotated
            except EmptyGameError as e:
                logger.warning("Skipped game with no moves.", game_id=game.game_id, error=str(e))
                self._tracker.record_skip(StatKey.SKIPPED_NO_MOVES)
                return SkippedGame(game_id=game.game_id, reason=str(e))
            except ChessInsightsError as e:
                logger.warning("Skipped game due to an analysis error.", game_id=game.game_id, error=str(e))
                self._tracker.record_skip(StatKey.SKIPPED_UNREADABLE)
                return SkippedGame(game_id=game.game_id, reason=str(e))
            except Exception as e:
                logger.error("Unhandled exception in game task.", game_id=game.game_id, exc_info=e)
                self._tracker.record_skip(StatKey.SKIPPED_UNEXPECTED_ERROR)
                return SkippedGame(game_id=game.game_id, reason=f"Unexpected error: {e!r}")
            finally:
                structlog.contextvars.clear_contextvars()
                self._completed += 1
                if self._progress_callback:
                    await self._progress_callback(self._completed, total)

    async def run(self, games: Sequence["Game"], run_id: str) -> BatchResult:
        """
        Annotates every game and returns the results in input order.

        Args:
            games: The games to annotate.
            run_id: The identifier of the run, bound into every log event.

        Returns:
            A `BatchResult` with the annotated games and the skipped ones.
        """
        semaphore = asyncio.Semaphore(self._config.concurrency)
        self._completed = 0
        self._tracker.add_stat(StatKey.GAMES_READ, len(games))

        tasks = [
            asyncio.create_task(self._process_one_game_wrapper(
                game,
                CorrelationID(run_id=run_id, game_id=game.game_id, task_id=uuid.uuid4().hex[:8]),
                semaphore,
                len(games),
            ))
            for game in games
        ]
        # gather preserves the order of `tasks`, which is the input order.
        outcomes: List[Union[AnnotatedGame, SkippedGame]] = await asyncio.gather(*tasks)

        result = BatchResult()
        for outcome in outcomes:
            if isinstance(outcome, SkippedGame):
                result.skipped.append(outcome)
            else:
                result.annotated.append(outcome)

        logger.info(
            "All game annotation tasks completed.",
            annotated=len(result.annotated), skipped=len(result.skipped),
        )
        return result
