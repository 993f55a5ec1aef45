# chess_insights/orchestration/game_processor.py
"""
Defines the `GameProcessor`, responsible for executing the annotation
pipeline for a single game.
"""

from typing import List, TYPE_CHECKING

from chess_insights.core.annotator import build_annotated_game
from chess_insights.orchestration.pipeline_stages import run_game_processing_pipeline
from chess_insights.types import AnnotatedGame, GameContext, ProcessingStage

if TYPE_CHECKING:
    from chess_insights.config.settings import RunConfig
    from chess_insights.types import Game


class GameProcessor:
    """Runs the sequential annotation pipeline for a single game."""

    def __init__(self, config: "RunConfig", pipeline: List[ProcessingStage]):
        """
        Initializes the GameProcessor.

        Args:
            config: The complete run configuration object.
            pipeline: A pre-constructed list of `ProcessingStage` objects.
        """
        self._config = config
        self._pipeline = pipeline

    async def process_game(self, game: "Game") -> AnnotatedGame:
        """
        Executes the full annotation pipeline for a single game.

        Raises:
            EmptyGameError: If the game has no moves.
        """
        context = GameContext(
            game_id=game.game_id,
            game=game,
            settings=self._config.analysis_settings,
        )
        final_context = await run_game_processing_pipeline(context, self._pipeline)
        return build_annotated_game(
            game, final_context.tokens, final_context.opening_bucket, final_context.signals
        )
