# chess_insights/config/settings.py
"""
Configuration settings for the Chess Insights engine, powered by Pydantic.

This module centralizes all tunable parameters, default values, and configuration
schemas. The heuristic detectors in particular are approximations whose windows
are expected to be tuned, so every window and threshold lives here rather than
in the detector code.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from chess_insights.exceptions import ConfigurationError
from chess_insights.types import FilterState

# --- Nested Models for Configuration Schemas ---

class ClassifierSettingsModel(BaseModel):
    """Settings for the opening classifier."""
    max_book_plies: int = Field(20, ge=1, description="Only this many leading plies of a game are matched against the opening book.")

class DetectorSettingsModel(BaseModel):
    """
    Windows and thresholds for the per-game pattern detectors.

    All windows are expressed in plies counted from the start of the game
    (ply 1 is White's first move), so 20 plies cover the first 10 full moves.
    """
    opening_window_plies: int = Field(20, ge=1, description="Window for counting the player's queen moves.")
    quick_game_max_fullmoves: int = Field(15, ge=1, description="Games of at most this many full moves count as quick wins/losses.")
    queen_tempo_window_plies: int = Field(20, ge=1, description="Window in which repeated queen moves count as a tempo loss.")
    queen_tempo_max_gap_plies: Optional[int] = Field(None, ge=1, description="Maximum distance between the two queen moves; None means anywhere in the window.")
    fork_followup_plies: int = Field(4, ge=1, description="Plies after the knight lands on the fork square in which an opponent capture confirms the fork.")
    fork_scan_plies: Optional[int] = Field(None, ge=1, description="Only knight landings up to this ply are considered; None scans the whole game.")
    early_checks_window_plies: int = Field(20, ge=1, description="Window for counting checks given by the opponent.")

    @model_validator(mode='after')
    def validate_tempo_gap_fits_window(self) -> 'DetectorSettingsModel':
        """A tempo gap longer than the tempo window can never be reached."""
        gap = self.queen_tempo_max_gap_plies
        if gap is not None and gap >= self.queen_tempo_window_plies:
            raise ConfigurationError("queen_tempo_max_gap_plies must be smaller than queen_tempo_window_plies.")
        return self

class AnalysisSettings(BaseModel):
    """Groups all settings related to the core game analysis logic."""
    classifier: ClassifierSettingsModel = Field(default_factory=ClassifierSettingsModel)
    detectors: DetectorSettingsModel = Field(default_factory=DetectorSettingsModel)


class RunConfig(BaseModel):
    """
    Encapsulates all configuration for a single, complete analysis run.

    This object is typically constructed from command-line arguments and the
    main settings.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    input_pgn_path: Optional[str] = None
    player_name: Optional[str] = None
    concurrency: int = Field(8, ge=1)
    analysis_settings: AnalysisSettings = Field(default_factory=AnalysisSettings)
    filter_state: FilterState = Field(default_factory=FilterState)

# --- Main Application Settings Class ---

class Settings(BaseSettings):
    """
    Main configuration class for the application.

    It loads settings from environment variables with the prefix 'CHESS_INSIGHTS_'.
    Nested models can be configured using a double underscore delimiter, e.g.,
    `CHESS_INSIGHTS_ANALYSIS_SETTINGS__DETECTORS__FORK_FOLLOWUP_PLIES=6`.
    """
    model_config = SettingsConfigDict(env_prefix='CHESS_INSIGHTS_', env_nested_delimiter='__')

    analysis_settings: AnalysisSettings = Field(default_factory=AnalysisSettings)
    default_concurrency: int = 8
    default_log_level: str = "INFO"

# A singleton instance of the settings, accessible throughout the application.
settings = Settings()
