# chess_insights/api.py
"""
Convenience entry points for callers that do not manage an event loop.
"""

import asyncio
from typing import Optional, Sequence

from chess_insights.config.settings import AnalysisSettings, RunConfig, settings
from chess_insights.containers import get_container
from chess_insights.core.annotator import annotate_game
from chess_insights.orchestration.orchestrator import AnalysisOrchestrator
from chess_insights.types import AnalysisReport, FilterState, Game

__all__ = ["analyze_games", "annotate_game"]


def analyze_games(
    games: Sequence[Game],
    filter_state: Optional[FilterState] = None,
    analysis_settings: Optional[AnalysisSettings] = None,
    concurrency: Optional[int] = None,
) -> AnalysisReport:
    """
    Annotates and aggregates a batch of games synchronously.

    Must not be called from inside a running event loop; use
    `AnalysisOrchestrator.run` there instead.
    """
    run_config = RunConfig(
        concurrency=concurrency or settings.default_concurrency,
        analysis_settings=analysis_settings or settings.analysis_settings,
        filter_state=filter_state or FilterState(),
    )
    orchestrator = AnalysisOrchestrator(run_config, get_container(run_config))
    return asyncio.run(orchestrator.run(games))
