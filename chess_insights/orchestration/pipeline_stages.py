# chess_insights/orchestration/pipeline_stages.py
"""
Defines the individual, sequential stages of the game annotation pipeline.

Each stage is a class that conforms to the `ProcessingStage` protocol. It
performs one well-defined part of the per-game workflow: tokenizing the moves,
classifying the opening, or running the pattern detectors. The pipeline is
executed by passing a mutable `GameContext` object from one stage to the next,
with each stage reading from and writing to it.
"""

from typing import Callable, List, Optional, Sequence, TYPE_CHECKING

import structlog

from chess_insights.core.annotator import default_bucket, total_plies_of
from chess_insights.exceptions import NoMovesError
from chess_insights.statistics import StatKey
from chess_insights.tracing import trace_stage
from chess_insights.types import (GameContext, GameResult, OpeningBucket,
                                  PlayerColor, ProcessingStage, SignalSet,
                                  Token)

if TYPE_CHECKING:
    from chess_insights.config.settings import DetectorSettingsModel
    from chess_insights.statistics import StatisticsTracker
    from chess_insights.types import Game

    TokenizerFunc = Callable[["Game"], List[Token]]
    ClassifierFunc = Callable[[Sequence[Token], Optional[PlayerColor], int], OpeningBucket]
    DetectorFunc = Callable[[Sequence[Token], PlayerColor, GameResult, int, "DetectorSettingsModel"], SignalSet]

logger = structlog.get_logger(__name__)


class TokenizeStage(ProcessingStage):
    """Turns the game's move source into typed tokens."""
    def __init__(self, tokenizer_func: "TokenizerFunc"):
        self._tokenizer_func = tokenizer_func

    @trace_stage
    async def execute(self, context: GameContext) -> GameContext:
        # EmptyGameError propagates; the pool reports the game as skipped.
        context.tokens = self._tokenizer_func(context.game)
        return context


class ClassifyStage(ProcessingStage):
    """Assigns the opening bucket from the player's perspective."""
    def __init__(self, classifier_func: "ClassifierFunc", tracker: "StatisticsTracker"):
        self._classifier_func = classifier_func
        self._tracker = tracker

    @trace_stage
    async def execute(self, context: GameContext) -> GameContext:
        color = context.game.player_color
        try:
            context.opening_bucket = self._classifier_func(
                context.tokens, color, context.settings.classifier.max_book_plies
            )
        except NoMovesError:
            # Tokenization guarantees moves, so this is a broken invariant, not a bad game.
            logger.error("Opening classification failed; using the default bucket.", game_id=context.game_id)
            context.opening_bucket = default_bucket(color)
            context.classifier_fallback = True
            self._tracker.add_stat(StatKey.CLASSIFIER_FALLBACKS)
        return context


class DetectStage(ProcessingStage):
    """Runs every pattern detector over the tokens."""
    def __init__(self, detector_func: "DetectorFunc"):
        self._detector_func = detector_func

    @trace_stage
    async def execute(self, context: GameContext) -> GameContext:
        game = context.game
        context.signals = self._detector_func(
            context.tokens, game.player_color, game.result,
            total_plies_of(game, context.tokens), context.settings.detectors,
        )
        return context


async def run_game_processing_pipeline(
    context: GameContext,
    stages: List[ProcessingStage],
) -> GameContext:
    """Executes a list of processing stages sequentially on a GameContext."""
    current_context = context
    for stage in stages:
        current_context = await stage.execute(current_context)
    return current_context
