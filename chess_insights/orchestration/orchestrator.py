# chess_insights/orchestration/orchestrator.py
"""
The top-level analysis orchestrator.

It annotates a batch of games through the `GameProcessorPool` and then runs
the single aggregation step over the filtered annotations: global statistics,
the per-opening table and the weekly score trend.
"""

import uuid
from pathlib import Path
from typing import Awaitable, Callable, Iterable, Optional, Sequence

import punq
import structlog

from chess_insights.config.settings import RunConfig
from chess_insights.core import stats_aggregator
from chess_insights.exceptions import PgnServiceError
from chess_insights.orchestration.game_processor_pool import GameProcessorPool
from chess_insights.services.pgn_service import PgnService
from chess_insights.statistics import StatisticsTracker, StatKey
from chess_insights.types import (AnalysisReport, FilterState, Game,
                                  SkippedGame)

logger = structlog.get_logger(__name__)

ProgressCallback = Callable[[int, int], Awaitable[None]]


class AnalysisOrchestrator:
    def __init__(
        self,
        config: RunConfig,
        container: punq.Container,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self._config = config
        self._container = container
        self._progress_callback = progress_callback

    @property
    def tracker(self) -> StatisticsTracker:
        return self._container.resolve(StatisticsTracker)

    async def run(
        self,
        games: Sequence[Game],
        filter_state: Optional[FilterState] = None,
        import_skipped: Iterable[SkippedGame] = (),
    ) -> AnalysisReport:
        """
        Annotates `games` and aggregates the ones accepted by the filter.

        Args:
            games: The games to analyse, already converted to `Game` records.
            filter_state: The filter applied before aggregation; the run
                config's filter when None.
            import_skipped: Records already rejected while importing, reported
                alongside the games skipped during annotation.

        Returns:
            The `AnalysisReport` of the run.
        """
        run_id = f"run-{uuid.uuid4().hex[:8]}"
        filter_state = filter_state or self._config.filter_state
        logger.info("Starting analysis orchestration.", run_id=run_id, games=len(games))

        pool = self._container.resolve(GameProcessorPool, progress_callback=self._progress_callback)
        batch = await pool.run(games, run_id)

        selected = stats_aggregator.filter_games(batch.annotated, filter_state)
        self.tracker.set_stat(StatKey.GAMES_IN_FILTER, len(selected))

        report = AnalysisReport(
            annotated=batch.annotated,
            skipped=list(import_skipped) + batch.skipped,
            stats=stats_aggregator.calculate_stats(selected),
            opening_stats=stats_aggregator.calculate_opening_stats(selected),
            score_trend=stats_aggregator.calculate_score_over_time(selected),
            filtered_games=len(selected),
        )
        logger.info(
            "Analysis run finished.", run_id=run_id,
            annotated=len(report.annotated), skipped=len(report.skipped),
            filtered_games=report.filtered_games,
        )
        return report

    async def run_file(
        self, pgn_path: Optional[Path] = None, filter_state: Optional[FilterState] = None
    ) -> AnalysisReport:
        """
        Imports a PGN file for the configured player, then runs the analysis.

        Raises:
            PgnServiceError: If no input file is configured or it cannot be read.
        """
        path = pgn_path or (Path(self._config.input_pgn_path) if self._config.input_pgn_path else None)
        if path is None:
            raise PgnServiceError("No input PGN file configured for this run.")

        imported = await self._container.resolve(PgnService).load_games(path, self._config.player_name)
        if imported.skipped:
            self.tracker.add_stat(StatKey.GAMES_READ, len(imported.skipped))
            for _ in imported.skipped:
                self.tracker.record_skip(StatKey.SKIPPED_UNREADABLE)
        return await self.run(imported.games, filter_state, imported.skipped)
