# tests/orchestration/test_pipeline_stages.py
import pytest
from unittest.mock import MagicMock

from chess_insights.config.settings import AnalysisSettings
from chess_insights.core.tokenizer import tokenize
from chess_insights.exceptions import EmptyGameError, NoMovesError
from chess_insights.orchestration.pipeline_stages import (ClassifyStage,
                                                          DetectStage,
                                                          TokenizeStage,
                                                          run_game_processing_pipeline)
from chess_insights.statistics import StatisticsTracker, StatKey
from chess_insights.types import (Game, GameContext, GameResult,
                                  OpeningBucket, PlayerColor, SignalSet)


def _context(**game_fields) -> GameContext:
    fields = dict(game_id="test_game", player_color=PlayerColor.BLACK, result=GameResult.WIN)
    fields.update(game_fields)
    game = Game(**fields)
    return GameContext(game_id=game.game_id, game=game, settings=AnalysisSettings())


@pytest.mark.asyncio
async def test_tokenize_stage():
    # Arrange
    tokens = tokenize(["e4", "e5"])
    mock_tokenizer_func = MagicMock(return_value=tokens)
    stage = TokenizeStage(tokenizer_func=mock_tokenizer_func)
    context = _context(moves=("e4", "e5"))

    # Act
    result_context = await stage.execute(context)

    # Assert
    mock_tokenizer_func.assert_called_once_with(context.game)
    assert result_context.tokens == tokens


@pytest.mark.asyncio
async def test_tokenize_stage_propagates_empty_game():
    stage = TokenizeStage(tokenizer_func=MagicMock(side_effect=EmptyGameError("empty", game_id="test_game")))
    with pytest.raises(EmptyGameError):
        await stage.execute(_context())


@pytest.mark.asyncio
async def test_classify_stage_uses_player_perspective():
    # Arrange
    mock_classifier_func = MagicMock(return_value=OpeningBucket.CARO_KANN)
    tracker = StatisticsTracker()
    stage = ClassifyStage(classifier_func=mock_classifier_func, tracker=tracker)
    context = _context()
    context.tokens = tokenize(["e4", "c6"])

    # Act
    result_context = await stage.execute(context)

    # Assert
    mock_classifier_func.assert_called_once_with(context.tokens, PlayerColor.BLACK, 20)
    assert result_context.opening_bucket is OpeningBucket.CARO_KANN
    assert result_context.classifier_fallback is False
    assert tracker.get(StatKey.CLASSIFIER_FALLBACKS) == 0


@pytest.mark.asyncio
async def test_classify_stage_falls_back_on_no_moves():
    # Arrange
    tracker = StatisticsTracker()
    stage = ClassifyStage(classifier_func=MagicMock(side_effect=NoMovesError("no moves")), tracker=tracker)
    context = _context()

    # Act
    result_context = await stage.execute(context)

    # Assert
    assert result_context.opening_bucket is OpeningBucket.OTHER_BLACK
    assert result_context.classifier_fallback is True
    assert tracker.get(StatKey.CLASSIFIER_FALLBACKS) == 1


@pytest.mark.asyncio
async def test_detect_stage():
    # Arrange
    signals = MagicMock(spec=SignalSet)
    mock_detector_func = MagicMock(return_value=signals)
    stage = DetectStage(detector_func=mock_detector_func)
    context = _context(total_moves=None)
    context.tokens = tokenize(["e4", "e5", "Nf3"])

    # Act
    result_context = await stage.execute(context)

    # Assert
    mock_detector_func.assert_called_once_with(
        context.tokens, PlayerColor.BLACK, GameResult.WIN, 3, context.settings.detectors
    )
    assert result_context.signals is signals


@pytest.mark.asyncio
async def test_run_game_processing_pipeline_runs_stages_in_order():
    calls = []

    class RecordingStage:
        def __init__(self, name):
            self.name = name

        async def execute(self, context):
            calls.append(self.name)
            return context

    context = _context()
    result = await run_game_processing_pipeline(context, [RecordingStage("a"), RecordingStage("b")])

    assert calls == ["a", "b"]
    assert result is context
