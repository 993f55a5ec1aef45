# chess_insights/core/stats_aggregator.py
"""
Provides pure functions to fold annotated games into portfolio statistics.

All statistics are built from raw sums held in a `StatsAccumulator`.
Accumulators over disjoint partitions of a collection can be merged by adding
their sums, and percentages and means are only derived at the very end in
`to_stats`, so aggregating in parts gives exactly the same result as
aggregating the whole collection at once.
"""

from collections import defaultdict
from dataclasses import dataclass, fields
from datetime import date, timedelta
from typing import Dict, Iterable, List, Sequence, Tuple

from chess_insights.types import (ALL, AnalysisStats, AnnotatedGame,
                                  FilterState, GameResult, OpeningBucket,
                                  OpeningStats, ScorePoint)

_BUCKET_ORDER: Dict[OpeningBucket, int] = {bucket: index for index, bucket in enumerate(OpeningBucket)}


def score_percent(wins: int, draws: int, total: int) -> float:
    """(wins + draws / 2) / total as a percentage rounded to one decimal, 0 for no games."""
    if total == 0:
        return 0.0
    return round((wins + 0.5 * draws) / total * 100, 1)


def win_percent(wins: int, losses: int) -> float:
    """Wins over decisive games as a percentage rounded to one decimal, 0 without decisive games."""
    decisive = wins + losses
    if decisive == 0:
        return 0.0
    return round(wins / decisive * 100, 1)


def _mean(total: float, count: int, digits: int) -> float:
    return round(total / count, digits) if count else 0.0


# --- Filtering ---

def _matches(value, criterion) -> bool:
    return criterion == ALL or value == criterion


def game_matches_filter(game: AnnotatedGame, filter_state: FilterState) -> bool:
    """
    Checks a single game against every criterion of `filter_state`.

    Date bounds are inclusive. Games without a date are never excluded by the
    date criterion.
    """
    record = game.game
    date_range = filter_state.date_range
    if record.game_date is not None:
        played_on = record.game_date.date()
        if date_range.start is not None and played_on < date_range.start:
            return False
        if date_range.end is not None and played_on > date_range.end:
            return False

    return (
        _matches(record.time_control, filter_state.time_control)
        and _matches(record.player_color, filter_state.color)
        and _matches(game.opening_bucket, filter_state.opening_bucket)
    )


def filter_games(games: Iterable[AnnotatedGame], filter_state: FilterState) -> List[AnnotatedGame]:
    """Returns a new list of the games accepted by `filter_state`, in input order."""
    return [game for game in games if game_matches_filter(game, filter_state)]


# --- Accumulation ---

@dataclass
class StatsAccumulator:
    """Raw sums over a collection of annotated games."""
    total_games: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    game_length_sum: int = 0
    games_with_length: int = 0
    queen_moves_sum: int = 0
    castling_ply_sum: int = 0
    castled_games: int = 0
    quick_losses: int = 0
    quick_wins: int = 0
    early_checks_received: int = 0
    queen_tempo_loss_games: int = 0
    nc7_fork_games: int = 0

    def add(self, game: AnnotatedGame) -> "StatsAccumulator":
        """Folds one game into the sums and returns the accumulator."""
        signals = game.signals
        result = game.game.result
        self.total_games += 1
        self.wins += result is GameResult.WIN
        self.losses += result is GameResult.LOSS
        self.draws += result is GameResult.DRAW
        if game.total_moves is not None:
            self.game_length_sum += game.total_moves
            self.games_with_length += 1
        self.queen_moves_sum += signals.queen_moves_first_10
        if signals.castled_at_ply is not None:
            self.castling_ply_sum += signals.castled_at_ply
            self.castled_games += 1
        self.quick_losses += signals.is_quick_loss
        self.quick_wins += signals.is_quick_win
        self.early_checks_received += signals.early_checks_received
        self.queen_tempo_loss_games += signals.queen_tempo_loss
        self.nc7_fork_games += signals.nc7_fork_detected
        return self

    def merge(self, other: "StatsAccumulator") -> "StatsAccumulator":
        """Returns a new accumulator holding the sums of both operands."""
        return StatsAccumulator(**{
            f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)
        })

    def to_stats(self) -> AnalysisStats:
        return AnalysisStats(
            total_games=self.total_games,
            wins=self.wins,
            losses=self.losses,
            draws=self.draws,
            score_percent=score_percent(self.wins, self.draws, self.total_games),
            avg_game_length=_mean(self.game_length_sum, self.games_with_length, 1),
            avg_queen_moves_first_10=_mean(self.queen_moves_sum, self.total_games, 2),
            avg_castling_ply=_mean(self.castling_ply_sum, self.castled_games, 1),
            quick_losses=self.quick_losses,
            quick_wins=self.quick_wins,
            early_checks_received=self.early_checks_received,
            queen_tempo_loss_games=self.queen_tempo_loss_games,
            nc7_fork_games=self.nc7_fork_games,
        )


def accumulate(games: Iterable[AnnotatedGame]) -> StatsAccumulator:
    accumulator = StatsAccumulator()
    for game in games:
        accumulator.add(game)
    return accumulator


def calculate_stats(games: Iterable[AnnotatedGame]) -> AnalysisStats:
    """Aggregates an (already filtered) collection into `AnalysisStats`."""
    return accumulate(games).to_stats()


def calculate_opening_stats(games: Iterable[AnnotatedGame]) -> List[OpeningStats]:
    """
    Aggregates results per opening bucket.

    Returns one row per bucket with at least one game, sorted by descending
    game count; equal counts keep the taxonomy's declaration order.
    """
    # games, wins, draws, losses
    counts: Dict[OpeningBucket, List[int]] = defaultdict(lambda: [0, 0, 0, 0])
    for game in games:
        row = counts[game.opening_bucket]
        row[0] += 1
        result = game.game.result
        if result is GameResult.WIN:
            row[1] += 1
        elif result is GameResult.DRAW:
            row[2] += 1
        else:
            row[3] += 1

    rows = [
        OpeningStats(
            bucket=bucket, games=total, wins=wins, draws=draws, losses=losses,
            score_percent=score_percent(wins, draws, total),
            win_percent=win_percent(wins, losses),
        )
        for bucket, (total, wins, draws, losses) in counts.items()
    ]
    rows.sort(key=lambda row: (-row.games, _BUCKET_ORDER[row.bucket]))
    return rows


def aggregate(
    games: Iterable[AnnotatedGame], filter_state: FilterState
) -> Tuple[AnalysisStats, List[OpeningStats]]:
    """Filters `games` and folds the survivors into global and per-opening statistics."""
    selected = filter_games(games, filter_state)
    return calculate_stats(selected), calculate_opening_stats(selected)


# --- Trend ---

def week_start(day: date) -> date:
    """The Sunday on or before `day`."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def calculate_score_over_time(games: Sequence[AnnotatedGame]) -> List[ScorePoint]:
    """
    Groups dated games into Sunday-start weeks and scores each week.

    Undated games are left out. Points are returned in ascending week order.
    """
    # wins, draws, total
    weekly: Dict[date, List[int]] = defaultdict(lambda: [0, 0, 0])
    for game in games:
        if game.game.game_date is None:
            continue
        bucket = weekly[week_start(game.game.game_date.date())]
        bucket[0] += game.game.result is GameResult.WIN
        bucket[1] += game.game.result is GameResult.DRAW
        bucket[2] += 1

    return [
        ScorePoint(week_start=week, score_percent=score_percent(wins, draws, total), games=total)
        for week, (wins, draws, total) in sorted(weekly.items())
    ]
