# chess_insights/orchestration/pipeline_factory.py
"""
A factory for creating the game annotation pipeline.

This module's sole responsibility is to construct and return the list of
`ProcessingStage` objects in the correct sequential order. Keeping it apart
from the stages and the processor lets the container bind services late,
without circular imports.
"""

from typing import Any, Dict, List

from chess_insights.orchestration.pipeline_stages import (ClassifyStage,
                                                          DetectStage,
                                                          TokenizeStage)
from chess_insights.types import ProcessingStage


def create_pipeline(services: Dict[str, Any]) -> List[ProcessingStage]:
    """
    Builds and returns the list of processing stages in their correct execution order.
    """
    return [
        TokenizeStage(services["tokenizer_func"]),
        ClassifyStage(services["classifier_func"], services["statistics_tracker"]),
        DetectStage(services["detector_func"]),
    ]
