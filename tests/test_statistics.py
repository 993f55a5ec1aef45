# tests/test_statistics.py
import pytest
import structlog

from chess_insights.statistics import STAT_DISPLAY_NAMES, StatisticsTracker, StatKey
from chess_insights.tracing import CorrelationID, trace_stage


def test_record_skip_counts_reason_and_total():
    tracker = StatisticsTracker()
    tracker.record_skip(StatKey.SKIPPED_NO_MOVES)
    tracker.record_skip(StatKey.SKIPPED_UNREADABLE)
    tracker.record_skip(StatKey.SKIPPED_UNREADABLE)

    assert tracker.get(StatKey.SKIPPED_NO_MOVES) == 1
    assert tracker.get(StatKey.SKIPPED_UNREADABLE) == 2
    assert tracker.get(StatKey.GAMES_SKIPPED_TOTAL) == 3
    assert tracker.get(StatKey.CLASSIFIER_FALLBACKS) == 0


def test_summary_lists_non_zero_counters_in_key_order():
    tracker = StatisticsTracker()
    tracker.set_stat(StatKey.GAMES_IN_FILTER, 4)
    tracker.add_stat(StatKey.GAMES_READ, 5)
    tracker.set_stat(StatKey.CLASSIFIER_FALLBACKS, 0)

    assert list(tracker.summary().items()) == [
        (STAT_DISPLAY_NAMES[StatKey.GAMES_READ], 5),
        (STAT_DISPLAY_NAMES[StatKey.GAMES_IN_FILTER], 4),
    ]


def test_every_key_has_a_display_name():
    assert set(STAT_DISPLAY_NAMES) == set(StatKey)


def test_correlation_id_binds_context():
    structlog.contextvars.clear_contextvars()
    cid = CorrelationID(run_id="run-1", game_id="g1", task_id="abc")
    cid.bind()
    try:
        bound = structlog.contextvars.get_contextvars()
        assert bound == {"run_id": "run-1", "correlation_id": "g1:abc"}
    finally:
        structlog.contextvars.clear_contextvars()


@pytest.mark.asyncio
async def test_trace_stage_returns_the_wrapped_result():
    class Stage:
        @trace_stage
        async def execute(self, context):
            return context + 1

    assert await Stage().execute(41) == 42
