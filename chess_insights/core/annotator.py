# chess_insights/core/annotator.py
"""
Builds the per-game annotation: tokens, opening bucket and signals.

`annotate_game` is the synchronous composition of the tokenizer, the opening
classifier and the detectors for one game. The asynchronous pipeline stages in
`chess_insights.orchestration` run the same steps one by one and share the
helpers defined here, so both paths produce identical annotations.
"""
from typing import List, Optional, Sequence

import structlog

from chess_insights.config.settings import AnalysisSettings
from chess_insights.core import detectors, opening_classifier, tokenizer
from chess_insights.core.chess_utils import fullmoves_from_plies
from chess_insights.exceptions import EmptyGameError, NoMovesError
from chess_insights.types import (AnnotatedGame, Game, MoveSource,
                                  OpeningBucket, PlayerColor, SignalSet, Token)

logger = structlog.get_logger(__name__)

_DEFAULT_BUCKETS = {
    PlayerColor.WHITE: OpeningBucket.OTHER_WHITE,
    PlayerColor.BLACK: OpeningBucket.OTHER_BLACK,
}


def default_bucket(color: PlayerColor) -> OpeningBucket:
    """The bucket assigned when classification itself fails."""
    return _DEFAULT_BUCKETS[color]


def move_source_of(game: Game) -> MoveSource:
    """
    Picks the move source of a game: the split move list, else the raw PGN.

    Raises:
        EmptyGameError: If the game carries neither.
    """
    if game.moves:
        return game.moves
    if game.pgn_raw:
        return game.pgn_raw
    raise EmptyGameError("Game has neither a move list nor raw PGN.", game_id=game.game_id)


def tokenize_game(game: Game) -> List[Token]:
    return tokenizer.tokenize(move_source_of(game), game_id=game.game_id)


def total_plies_of(game: Game, tokens: Sequence[Token]) -> int:
    """The game length in plies: twice the recorded full moves, else the token count."""
    if game.total_moves is not None:
        return game.total_moves * 2
    return len(tokens)


def build_annotated_game(
    game: Game, tokens: Sequence[Token], bucket: OpeningBucket, signals: SignalSet
) -> AnnotatedGame:
    """Assembles the annotation, deriving `total_moves` from the plies when the game has none."""
    total_moves = game.total_moves if game.total_moves is not None else fullmoves_from_plies(len(tokens))
    return AnnotatedGame(
        game=game, tokens=tuple(tokens), opening_bucket=bucket,
        signals=signals, total_moves=total_moves,
    )


def annotate_game(game: Game, settings: Optional[AnalysisSettings] = None) -> AnnotatedGame:
    """
    Annotates one game.

    Args:
        game: The game to annotate. It is never mutated.
        settings: Classifier and detector settings; defaults apply when None.

    Returns:
        The game's `AnnotatedGame`.

    Raises:
        EmptyGameError: If no move tokens can be derived from the game.
    """
    settings = settings or AnalysisSettings()
    tokens = tokenize_game(game)
    try:
        bucket = opening_classifier.classify(
            tokens, game.player_color, settings.classifier.max_book_plies
        )
    except NoMovesError:
        logger.error("Opening classification failed; using the default bucket.", game_id=game.game_id)
        bucket = default_bucket(game.player_color)

    signals = detectors.detect_signals(
        tokens, game.player_color, game.result, total_plies_of(game, tokens), settings.detectors
    )
    return build_annotated_game(game, tokens, bucket, signals)
