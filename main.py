# main.py
"""
The command-line entry point for analysing a PGN file of one player's games.
"""
import argparse
import asyncio
import sys
from datetime import date
from pathlib import Path

import structlog

from chess_insights.config.settings import RunConfig, settings
from chess_insights.containers import get_container
from chess_insights.core.opening_book import OPENING_LABELS
from chess_insights.exceptions import PgnServiceError
from chess_insights.orchestration.orchestrator import AnalysisOrchestrator
from chess_insights.statistics import StatisticsTracker
from chess_insights.types import (ALL, DateRange, FilterState, OpeningBucket,
                                  PlayerColor, TimeControl)
from chess_insights.utils.logging_config import setup_logging

logger = structlog.get_logger("chess_insights.main")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Opening and habit statistics for a player's games.")
    parser.add_argument("pgn", type=Path, help="PGN file with the player's games")
    parser.add_argument("--player", required=True, help="Player name as it appears in the White/Black tags")
    parser.add_argument("--color", choices=[ALL] + [c.value for c in PlayerColor], default=ALL)
    parser.add_argument("--time-control", choices=[ALL] + [t.value for t in TimeControl], default=ALL)
    parser.add_argument("--opening", choices=[ALL] + [b.value for b in OpeningBucket], default=ALL)
    parser.add_argument("--since", type=date.fromisoformat, default=None, help="First day included, YYYY-MM-DD")
    parser.add_argument("--until", type=date.fromisoformat, default=None, help="Last day included, YYYY-MM-DD")
    parser.add_argument("--concurrency", type=int, default=settings.default_concurrency)
    parser.add_argument("--json-logs", action="store_true", help="Render log output as JSON")
    parser.add_argument("--log-level", default=settings.default_log_level)
    parser.add_argument("--log-file", type=Path, default=None, help="Also append JSON log lines to this file")
    return parser


def _filter_from_args(args: argparse.Namespace) -> FilterState:
    return FilterState(
        date_range=DateRange(start=args.since, end=args.until),
        time_control=ALL if args.time_control == ALL else TimeControl(args.time_control),
        color=ALL if args.color == ALL else PlayerColor(args.color),
        opening_bucket=ALL if args.opening == ALL else OpeningBucket(args.opening),
    )


def main() -> int:
    args = _build_parser().parse_args()
    setup_logging(log_level=args.log_level, json_console=args.json_logs, log_file=args.log_file)

    run_config = RunConfig(
        input_pgn_path=str(args.pgn),
        player_name=args.player,
        concurrency=args.concurrency,
        analysis_settings=settings.analysis_settings,
        filter_state=_filter_from_args(args),
    )
    container = get_container(run_config)
    orchestrator = AnalysisOrchestrator(run_config, container)

    try:
        report = asyncio.run(orchestrator.run_file())
    except PgnServiceError as e:
        logger.error("Could not read the input file.", error=str(e))
        return 1

    stats = report.stats
    logger.info(
        "Overall statistics.",
        games=stats.total_games, wins=stats.wins, draws=stats.draws, losses=stats.losses,
        score_percent=stats.score_percent, avg_game_length=stats.avg_game_length,
        avg_castling_ply=stats.avg_castling_ply, avg_queen_moves_first_10=stats.avg_queen_moves_first_10,
        quick_losses=stats.quick_losses, quick_wins=stats.quick_wins,
        early_checks_received=stats.early_checks_received,
        queen_tempo_loss_games=stats.queen_tempo_loss_games, nc7_fork_games=stats.nc7_fork_games,
    )
    for row in report.opening_stats:
        logger.info(
            "Opening.", opening=OPENING_LABELS[row.bucket], games=row.games,
            wins=row.wins, draws=row.draws, losses=row.losses,
            score_percent=row.score_percent, win_percent=row.win_percent,
        )
    for point in report.score_trend:
        logger.info("Week.", week_start=point.week_start.isoformat(), games=point.games, score_percent=point.score_percent)

    container.resolve(StatisticsTracker).log_summary()
    return 0


if __name__ == "__main__":
    sys.exit(main())
