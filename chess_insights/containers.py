# chess_insights/containers.py
"""
Defines the Dependency Injection (DI) container for the application.

This module uses the `punq` library to manage the creation and wiring of
all services and components for the annotation pipeline. This centralizes the
application's dependency graph, making it easy to swap a collaborator in tests.
"""

import punq

from chess_insights.config.settings import RunConfig
from chess_insights.core import annotator, detectors, opening_classifier
from chess_insights.orchestration.game_processor import GameProcessor
from chess_insights.orchestration.game_processor_pool import GameProcessorPool
from chess_insights.orchestration.pipeline_factory import create_pipeline
from chess_insights.services.pgn_service import PgnService
from chess_insights.statistics import StatisticsTracker


def get_container(run_config: RunConfig) -> punq.Container:
    """
    Initializes and returns a DI container configured for a specific analysis run.
    """
    container = punq.Container()

    # Register instances that are created outside the container's control.
    container.register(RunConfig, instance=run_config)
    container.register(StatisticsTracker, instance=StatisticsTracker())

    container.register(PgnService)

    def create_game_processor() -> GameProcessor:
        services = {
            "tokenizer_func": annotator.tokenize_game,
            "classifier_func": opening_classifier.classify,
            "detector_func": detectors.detect_signals,
            "statistics_tracker": container.resolve(StatisticsTracker),
        }
        return GameProcessor(run_config, create_pipeline(services))

    container.register(GameProcessor, factory=create_game_processor)
    container.register(
        GameProcessorPool,
        factory=lambda progress_callback=None: GameProcessorPool(
            run_config,
            container.resolve(GameProcessor),
            container.resolve(StatisticsTracker),
            progress_callback,
        ),
    )

    return container
