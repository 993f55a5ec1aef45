# chess_insights/exceptions.py
"""
Defines custom exceptions for the Chess Insights engine.

Centralizing exceptions in this module prevents circular dependencies that can
arise when different components need to catch errors defined in others. A clear
exception hierarchy, with a common `ChessInsightsError` base, lets batch
callers skip a single bad game without swallowing unrelated failures.
"""

from typing import Optional


class ChessInsightsError(Exception):
    """Base class for all application-specific, catchable errors."""
    pass


class ParseError(ChessInsightsError):
    """Base class for errors raised while turning a move source into tokens."""
    pass


class EmptyGameError(ParseError):
    """
    Raised when no move tokens can be derived from a game's move source.

    Batch callers should skip and report the game rather than abort.

    Attributes:
        game_id: The identity of the offending game, when known.
    """
    def __init__(self, message: str, game_id: Optional[str] = None):
        super().__init__(message)
        self.game_id = game_id


class ClassifyError(ChessInsightsError):
    """Base class for opening classification errors."""
    pass


class NoMovesError(ClassifyError):
    """
    Raised when the opening classifier receives an empty token sequence.

    The tokenizer rejects empty games upstream, so reaching this indicates a
    broken invariant in the caller.
    """
    pass


class PgnError(ChessInsightsError):
    """Base class for errors related to PGN (Portable Game Notation) handling."""
    pass


class PgnParsingError(PgnError):
    """
    Raised when a single PGN game record cannot be converted into a `Game`.

    This indicates a problem with the game record itself rather than a file
    I/O or format-level issue.
    """
    pass


class PgnServiceError(PgnError):
    """
    Raised for file I/O errors when reading PGN files.

    This typically wraps lower-level exceptions like `FileNotFoundError` or `IOError`.
    """
    pass


class ConfigurationError(ChessInsightsError, ValueError):
    """
    Raised for invalid combinations of settings.

    It subclasses `ValueError` so that pydantic validators raising it report
    a regular `ValidationError`.
    """
    pass
