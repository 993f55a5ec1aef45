# chess_insights/statistics.py
"""
Manages run statistics for the Chess Insights engine.

This module provides the StatisticsTracker class, a centralized component
for counting what happened to each game of an analysis run, so that skipped
games are always surfaced with a count. It uses a type-safe Enum for keys.
"""
from collections import Counter
from enum import Enum, auto
from typing import Dict

import structlog

logger = structlog.get_logger(__name__)


class StatKey(Enum):
    """Enumeration for keys used in the StatisticsTracker for type safety."""
    GAMES_READ = auto()
    GAMES_ANNOTATED = auto()
    GAMES_SKIPPED_TOTAL = auto()
    SKIPPED_NO_MOVES = auto()
    SKIPPED_UNREADABLE = auto()
    SKIPPED_UNEXPECTED_ERROR = auto()
    CLASSIFIER_FALLBACKS = auto()
    GAMES_IN_FILTER = auto()


# A mapping for user-friendly display names, decoupled from the keys.
STAT_DISPLAY_NAMES: Dict[StatKey, str] = {
    StatKey.GAMES_READ: "Total Games Read",
    StatKey.GAMES_ANNOTATED: "Games Annotated",
    StatKey.GAMES_SKIPPED_TOTAL: "Total Games Skipped",
    StatKey.SKIPPED_NO_MOVES: "Skipped (Game Had No Moves)",
    StatKey.SKIPPED_UNREADABLE: "Skipped (Unreadable PGN Record)",
    StatKey.SKIPPED_UNEXPECTED_ERROR: "Skipped (Unexpected Error)",
    StatKey.CLASSIFIER_FALLBACKS: "Opening Classifier Fallbacks",
    StatKey.GAMES_IN_FILTER: "Games Matching Filter",
}


class StatisticsTracker:
    """
    A stateful class to aggregate and report statistics for an analysis run.
    """

    def __init__(self):
        """Initializes the StatisticsTracker with all counters set to zero."""
        self.stats: Counter[StatKey] = Counter()
        logger.debug("StatisticsTracker initialized.")

    def add_stat(self, key: StatKey, count: int = 1) -> None:
        """Increments a statistic by a given amount."""
        self.stats[key] += count

    def set_stat(self, key: StatKey, value: int) -> None:
        """Directly sets a statistic to a specific value."""
        self.stats[key] = value

    def get(self, key: StatKey) -> int:
        return self.stats.get(key, 0)

    def record_skip(self, reason_key: StatKey) -> None:
        """Counts one skipped game under its reason and in the total."""
        self.add_stat(reason_key)
        self.add_stat(StatKey.GAMES_SKIPPED_TOTAL)

    def summary(self) -> Dict[str, int]:
        """The non-zero counters keyed by display name, in `StatKey` order."""
        return {
            STAT_DISPLAY_NAMES[key]: self.stats[key]
            for key in StatKey
            if self.stats[key]
        }

    def log_summary(self) -> None:
        """Logs the run summary, one aligned line per non-zero counter."""
        logger.info("=" * 12 + " Analysis Run Summary " + "=" * 12)
        for name, value in self.summary().items():
            logger.info(f"{name:<40}: {value:>6}")
        logger.info("-" * 46)
