# chess_insights/types.py
"""
A central module for shared data structures and service interfaces (Protocols).
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import (TYPE_CHECKING, List, Optional, Protocol, Sequence, Tuple,
                    TypeAlias, Union)

if TYPE_CHECKING:
    import chess
    from chess_insights.config.settings import AnalysisSettings

# Wildcard value for every `FilterState` criterion.
ALL = "all"

class PlayerColor(str, Enum):
    WHITE = "white"; BLACK = "black"

    @property
    def opponent(self) -> "PlayerColor":
        return PlayerColor.BLACK if self is PlayerColor.WHITE else PlayerColor.WHITE

    @classmethod
    def for_ply(cls, ply: int) -> "PlayerColor":
        """White owns odd plies, Black owns even plies."""
        return cls.WHITE if ply % 2 == 1 else cls.BLACK

class GameResult(str, Enum):
    WIN = "win"; LOSS = "loss"; DRAW = "draw"

class TimeControl(str, Enum):
    BULLET = "bullet"; BLITZ = "blitz"; RAPID = "rapid"
    CLASSICAL = "classical"; CORRESPONDENCE = "correspondence"

class OpeningCategory(str, Enum):
    WHITE_E4 = "white_e4"; WHITE_D4 = "white_d4"; WHITE_OTHER = "white_other"
    BLACK_VS_E4 = "black_vs_e4"; BLACK_VS_D4 = "black_vs_d4"; BLACK_VS_OTHER = "black_vs_other"

class OpeningBucket(str, Enum):
    """
    The closed opening taxonomy.

    Member values are persisted by collaborators, so renaming one is a
    breaking change. Declaration order is the tie-break order used when
    sorting opening tables.
    """
    # White, 1.e4
    ITALIAN_GAME = "italian_game"
    RUY_LOPEZ = "ruy_lopez"
    SCOTCH_GAME = "scotch_game"
    KINGS_GAMBIT = "kings_gambit"
    VIENNA_GAME = "vienna_game"
    BISHOPS_OPENING = "bishops_opening"
    FOUR_KNIGHTS = "four_knights"
    PETROV_DEFENSE = "petrov_defense"
    CENTER_GAME = "center_game"
    DANISH_GAMBIT = "danish_gambit"
    PONZIANI = "ponziani"
    # White, 1.d4
    LONDON_SYSTEM = "london_system"
    QUEENS_GAMBIT = "queens_gambit"
    CATALAN = "catalan"
    TROMPOWSKY = "trompowsky"
    COLLE_SYSTEM = "colle_system"
    TORRE_ATTACK = "torre_attack"
    VERESOV = "veresov"
    BLACKMAR_DIEMER = "blackmar_diemer"
    RICHTER_VERESOV = "richter_veresov"
    # White, other first moves
    ENGLISH_OPENING = "english_opening"
    RETI_OPENING = "reti_opening"
    KINGS_INDIAN_ATTACK = "kings_indian_attack"
    BIRDS_OPENING = "birds_opening"
    LARSEN_OPENING = "larsen_opening"
    GROB_ATTACK = "grob_attack"
    OTHER_WHITE = "other_white"
    # Black against 1.e4
    SICILIAN_NAJDORF = "sicilian_najdorf"
    SICILIAN_DRAGON = "sicilian_dragon"
    SICILIAN_SCHEVENINGEN = "sicilian_scheveningen"
    SICILIAN_SVESHNIKOV = "sicilian_sveshnikov"
    SICILIAN_CLASSICAL = "sicilian_classical"
    SICILIAN_KAN = "sicilian_kan"
    SICILIAN_TAIMANOV = "sicilian_taimanov"
    SICILIAN_ACCELERATED_DRAGON = "sicilian_accelerated_dragon"
    SICILIAN_ALAPIN = "sicilian_alapin"
    SICILIAN_CLOSED = "sicilian_closed"
    SICILIAN_OTHER = "sicilian_other"
    FRENCH_DEFENSE = "french_defense"
    CARO_KANN = "caro_kann"
    SCANDINAVIAN = "scandinavian"
    ALEKHINE_DEFENSE = "alekhine_defense"
    PIRC_DEFENSE = "pirc_defense"
    MODERN_DEFENSE = "modern_defense"
    PHILIDOR_DEFENSE = "philidor_defense"
    OWEN_DEFENSE = "owen_defense"
    KINGS_PAWN_OTHER = "kings_pawn_other"
    # Black against 1.d4
    KINGS_INDIAN = "kings_indian"
    GRUNFELD = "grunfeld"
    NIMZO_INDIAN = "nimzo_indian"
    QUEENS_INDIAN = "queens_indian"
    BOGO_INDIAN = "bogo_indian"
    BENONI = "benoni"
    DUTCH_DEFENSE = "dutch_defense"
    SLAV_DEFENSE = "slav_defense"
    SEMI_SLAV = "semi_slav"
    QUEENS_GAMBIT_DECLINED = "queens_gambit_declined"
    QUEENS_GAMBIT_ACCEPTED = "queens_gambit_accepted"
    TARRASCH_DEFENSE = "tarrasch_defense"
    CHIGORIN_DEFENSE = "chigorin_defense"
    BUDAPEST_GAMBIT = "budapest_gambit"
    BENKO_GAMBIT = "benko_gambit"
    D4_OTHER = "d4_other"
    # Black against other first moves
    ENGLISH_SYMMETRICAL = "english_symmetrical"
    ANGLO_INDIAN = "anglo_indian"
    OTHER_BLACK = "other_black"

# --- ENGINE DATA CONTRACTS ---

@dataclass(frozen=True, slots=True)
class Token:
    """A single move of the game, parsed once into structured fields."""
    ply: int; color: PlayerColor; san: str
    piece: Optional["chess.PieceType"] = None
    to_square: Optional["chess.Square"] = None
    promotion: Optional["chess.PieceType"] = None
    is_capture: bool = False; is_check: bool = False; is_mate: bool = False
    is_castle: bool = False

    @property
    def base(self) -> str:
        """The move text without its check or mate suffix."""
        return self.san.rstrip("+#")

    @property
    def is_recognized(self) -> bool:
        return self.is_castle or self.to_square is not None

@dataclass(frozen=True)
class Game:
    game_id: str; player_color: PlayerColor; result: GameResult
    game_date: Optional[datetime] = None; time_control: Optional[TimeControl] = None
    opponent_name: Optional[str] = None; opponent_rating: Optional[int] = None
    player_rating: Optional[int] = None; total_moves: Optional[int] = None
    moves: Optional[Tuple[str, ...]] = None; pgn_raw: Optional[str] = None
    game_url: Optional[str] = None

    def __post_init__(self):
        # Collaborators may hand over plain strings ("white", "win", "blitz").
        object.__setattr__(self, "player_color", PlayerColor(self.player_color))
        object.__setattr__(self, "result", GameResult(self.result))
        if self.time_control is not None:
            object.__setattr__(self, "time_control", TimeControl(self.time_control))

@dataclass(frozen=True, slots=True)
class OpeningLine:
    bucket: OpeningBucket; color: PlayerColor; moves: Tuple[str, ...]

    def __len__(self) -> int:
        return len(self.moves)

@dataclass(frozen=True, slots=True)
class SignalSet:
    castled_at_ply: Optional[int]; queen_moves_first_10: int
    is_quick_loss: bool; is_quick_win: bool; early_checks_received: int
    queen_tempo_loss: bool; nc7_fork_detected: bool

@dataclass(frozen=True)
class AnnotatedGame:
    game: Game; tokens: Tuple[Token, ...]; opening_bucket: OpeningBucket
    signals: SignalSet; total_moves: Optional[int]

@dataclass(frozen=True, slots=True)
class AnalysisStats:
    total_games: int; wins: int; losses: int; draws: int; score_percent: float
    avg_game_length: float; avg_queen_moves_first_10: float; avg_castling_ply: float
    quick_losses: int; quick_wins: int; early_checks_received: int
    queen_tempo_loss_games: int; nc7_fork_games: int

@dataclass(frozen=True, slots=True)
class OpeningStats:
    bucket: OpeningBucket; games: int; wins: int; draws: int; losses: int
    score_percent: float; win_percent: float

@dataclass(frozen=True, slots=True)
class ScorePoint:
    week_start: date; score_percent: float; games: int

@dataclass(frozen=True, slots=True)
class DateRange:
    start: Optional[date] = None; end: Optional[date] = None

@dataclass(frozen=True)
class FilterState:
    date_range: DateRange = field(default_factory=DateRange)
    time_control: Union[TimeControl, str] = ALL
    color: Union[PlayerColor, str] = ALL
    opening_bucket: Union[OpeningBucket, str] = ALL

# --- BATCH RESULTS ---

@dataclass(frozen=True, slots=True)
class SkippedGame:
    game_id: str; reason: str

@dataclass
class BatchResult:
    annotated: List[AnnotatedGame] = field(default_factory=list)
    skipped: List[SkippedGame] = field(default_factory=list)

@dataclass
class ImportResult:
    games: List[Game] = field(default_factory=list)
    skipped: List[SkippedGame] = field(default_factory=list)

@dataclass
class AnalysisReport:
    annotated: List[AnnotatedGame]; skipped: List[SkippedGame]
    stats: AnalysisStats; opening_stats: List[OpeningStats]
    score_trend: List[ScorePoint]; filtered_games: int

@dataclass
class GameContext:
    game_id: str; game: Game; settings: "AnalysisSettings"
    tokens: List[Token] = field(default_factory=list)
    opening_bucket: Optional[OpeningBucket] = None
    signals: Optional[SignalSet] = None
    classifier_fallback: bool = False

MoveSource: TypeAlias = Union[str, Sequence[str]]


# --- PROTOCOLS ---

class ProcessingStage(Protocol):
    """Protocol for a single, named stage in the game processing pipeline."""
    async def execute(self, context: "GameContext") -> "GameContext": ...
