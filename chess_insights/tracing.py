# chess_insights/tracing.py
"""
Per-game traceability for the annotation pipeline.

A `CorrelationID` ties every log event of one game's annotation to its run;
`trace_stage` reports how long each pipeline stage took for that game.
"""

import functools
import time
from dataclasses import dataclass
from typing import Any, Callable

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CorrelationID:
    """Identifies the annotation of one game in one run."""
    run_id: str
    game_id: str
    task_id: str

    @property
    def short_id(self) -> str:
        return f"{self.game_id}:{self.task_id}"

    def bind(self) -> None:
        """Binds the ids into structlog's context for the current task."""
        structlog.contextvars.bind_contextvars(run_id=self.run_id, correlation_id=self.short_id)


def trace_stage(func: Callable) -> Callable:
    """Wraps a stage's async `execute(context)` with a timed debug event."""
    @functools.wraps(func)
    async def wrapper(stage: Any, context: Any, *args: Any, **kwargs: Any) -> Any:
        started = time.perf_counter()
        result = await func(stage, context, *args, **kwargs)
        logger.debug(
            "Processing stage finished.",
            stage=type(stage).__name__,
            game_id=getattr(context, "game_id", None),
            elapsed_ms=round((time.perf_counter() - started) * 1000, 3),
        )
        return result
    return wrapper
