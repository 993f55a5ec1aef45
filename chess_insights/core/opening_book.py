# chess_insights/core/opening_book.py
"""
The static opening book: canonical lines, categories, catch-alls and labels.

Everything in this module is read-only data built once at import time. Lines
are stored in a tuple whose order is the classifier's tie-break priority
(earlier wins), so narrower sub-variations do not need to be listed first;
their greater length already makes them win.

A line is owned by the side whose theoretical choice it records. Moves of the
other side that do not change the identity of the line are written as the
wildcard `ANY`, e.g. the London System is defined by White's `d4` and `Bf4`
whatever Black answers in between.
"""
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from chess_insights.types import (OpeningBucket, OpeningCategory, OpeningLine,
                                  PlayerColor)

ANY = "*"

_B = OpeningBucket
_W = PlayerColor.WHITE
_K = PlayerColor.BLACK


def _line(bucket: OpeningBucket, color: PlayerColor, moves: str) -> OpeningLine:
    return OpeningLine(bucket=bucket, color=color, moves=tuple(moves.split()))


OPENING_LINES: Tuple[OpeningLine, ...] = (
    # --- White, 1.e4 ---
    _line(_B.RUY_LOPEZ, _W, "e4 e5 Nf3 Nc6 Bb5"),
    _line(_B.ITALIAN_GAME, _W, "e4 e5 Nf3 Nc6 Bc4"),
    _line(_B.SCOTCH_GAME, _W, "e4 e5 Nf3 Nc6 d4"),
    _line(_B.PONZIANI, _W, "e4 e5 Nf3 Nc6 c3"),
    _line(_B.FOUR_KNIGHTS, _W, "e4 e5 Nf3 Nc6 Nc3 Nf6"),
    _line(_B.PETROV_DEFENSE, _W, "e4 e5 Nf3 Nf6"),
    _line(_B.PHILIDOR_DEFENSE, _W, "e4 e5 Nf3 d6"),
    _line(_B.BISHOPS_OPENING, _W, "e4 e5 Bc4"),
    _line(_B.KINGS_GAMBIT, _W, "e4 e5 f4"),
    _line(_B.VIENNA_GAME, _W, "e4 e5 Nc3"),
    _line(_B.DANISH_GAMBIT, _W, "e4 e5 d4 exd4 c3"),
    _line(_B.CENTER_GAME, _W, "e4 e5 d4"),
    _line(_B.SICILIAN_ALAPIN, _W, "e4 c5 c3"),
    _line(_B.SICILIAN_CLOSED, _W, "e4 c5 Nc3 Nc6"),
    _line(_B.SICILIAN_CLOSED, _W, "e4 c5 Nc3 * g3"),
    _line(_B.SCANDINAVIAN, _W, "e4 d5"),

    # --- White, 1.d4 ---
    _line(_B.QUEENS_GAMBIT, _W, "d4 * c4"),
    _line(_B.QUEENS_GAMBIT, _W, "d4 * Nf3 * c4"),
    _line(_B.CATALAN, _W, "d4 * c4 * g3"),
    _line(_B.CATALAN, _W, "d4 * c4 * Nf3 * g3"),
    _line(_B.CATALAN, _W, "d4 * Nf3 * c4 * g3"),
    _line(_B.LONDON_SYSTEM, _W, "d4 * Bf4"),
    _line(_B.LONDON_SYSTEM, _W, "d4 * Nf3 * Bf4"),
    _line(_B.TROMPOWSKY, _W, "d4 Nf6 Bg5"),
    _line(_B.TORRE_ATTACK, _W, "d4 * Nf3 * Bg5"),
    _line(_B.COLLE_SYSTEM, _W, "d4 * Nf3 * e3 * Bd3"),
    _line(_B.COLLE_SYSTEM, _W, "d4 * e3 * Nf3 * Bd3"),
    _line(_B.RICHTER_VERESOV, _W, "d4 Nf6 Nc3 d5 Bg5"),
    _line(_B.VERESOV, _W, "d4 d5 Nc3 * Bg5"),
    _line(_B.BLACKMAR_DIEMER, _W, "d4 d5 e4"),

    # --- White, other first moves ---
    _line(_B.ENGLISH_OPENING, _W, "c4"),
    _line(_B.RETI_OPENING, _W, "Nf3"),
    _line(_B.KINGS_INDIAN_ATTACK, _W, "Nf3 * g3 * Bg2 * d3"),
    _line(_B.KINGS_INDIAN_ATTACK, _W, "Nf3 * g3 * Bg2 * O-O * d3"),
    _line(_B.BIRDS_OPENING, _W, "f4"),
    _line(_B.LARSEN_OPENING, _W, "b3"),
    _line(_B.GROB_ATTACK, _W, "g4"),

    # --- Black against 1.e4: Sicilian ---
    _line(_B.SICILIAN_OTHER, _K, "e4 c5"),
    _line(_B.SICILIAN_ALAPIN, _K, "e4 c5 c3"),
    _line(_B.SICILIAN_CLOSED, _K, "e4 c5 Nc3 * g3"),
    _line(_B.SICILIAN_NAJDORF, _K, "e4 c5 Nf3 d6 d4 cxd4 Nxd4 Nf6 Nc3 a6"),
    _line(_B.SICILIAN_DRAGON, _K, "e4 c5 Nf3 d6 d4 cxd4 Nxd4 Nf6 Nc3 g6"),
    _line(_B.SICILIAN_SCHEVENINGEN, _K, "e4 c5 Nf3 d6 d4 cxd4 Nxd4 Nf6 Nc3 e6"),
    _line(_B.SICILIAN_CLASSICAL, _K, "e4 c5 Nf3 d6 d4 cxd4 Nxd4 Nf6 Nc3 Nc6"),
    _line(_B.SICILIAN_CLASSICAL, _K, "e4 c5 Nf3 Nc6 d4 cxd4 Nxd4 Nf6 Nc3 d6"),
    _line(_B.SICILIAN_SVESHNIKOV, _K, "e4 c5 Nf3 Nc6 d4 cxd4 Nxd4 Nf6 Nc3 e5"),
    _line(_B.SICILIAN_ACCELERATED_DRAGON, _K, "e4 c5 Nf3 Nc6 d4 cxd4 Nxd4 g6"),
    _line(_B.SICILIAN_ACCELERATED_DRAGON, _K, "e4 c5 Nf3 g6"),
    _line(_B.SICILIAN_TAIMANOV, _K, "e4 c5 Nf3 e6 d4 cxd4 Nxd4 Nc6"),
    _line(_B.SICILIAN_KAN, _K, "e4 c5 Nf3 e6 d4 cxd4 Nxd4 a6"),

    # --- Black against 1.e4: other defences ---
    _line(_B.FRENCH_DEFENSE, _K, "e4 e6"),
    _line(_B.CARO_KANN, _K, "e4 c6"),
    _line(_B.SCANDINAVIAN, _K, "e4 d5"),
    _line(_B.ALEKHINE_DEFENSE, _K, "e4 Nf6"),
    _line(_B.PHILIDOR_DEFENSE, _K, "e4 d6"),
    _line(_B.PHILIDOR_DEFENSE, _K, "e4 e5 Nf3 d6"),
    _line(_B.PIRC_DEFENSE, _K, "e4 d6 * Nf6 * g6"),
    _line(_B.MODERN_DEFENSE, _K, "e4 d6 * g6"),
    _line(_B.MODERN_DEFENSE, _K, "e4 g6"),
    _line(_B.OWEN_DEFENSE, _K, "e4 b6"),
    _line(_B.PETROV_DEFENSE, _K, "e4 e5 Nf3 Nf6"),

    # --- Black against 1.d4 ---
    _line(_B.KINGS_INDIAN, _K, "d4 Nf6 c4 g6"),
    _line(_B.GRUNFELD, _K, "d4 Nf6 c4 g6 * d5"),
    _line(_B.NIMZO_INDIAN, _K, "d4 Nf6 c4 e6 Nc3 Bb4"),
    _line(_B.QUEENS_INDIAN, _K, "d4 Nf6 c4 e6 Nf3 b6"),
    _line(_B.BOGO_INDIAN, _K, "d4 Nf6 c4 e6 Nf3 Bb4"),
    _line(_B.QUEENS_GAMBIT_DECLINED, _K, "d4 Nf6 c4 e6"),
    _line(_B.BENONI, _K, "d4 Nf6 c4 c5"),
    _line(_B.BENKO_GAMBIT, _K, "d4 Nf6 c4 c5 d5 b5"),
    _line(_B.BUDAPEST_GAMBIT, _K, "d4 Nf6 c4 e5"),
    _line(_B.QUEENS_GAMBIT_DECLINED, _K, "d4 d5"),
    _line(_B.QUEENS_GAMBIT_ACCEPTED, _K, "d4 d5 c4 dxc4"),
    _line(_B.SLAV_DEFENSE, _K, "d4 d5 c4 c6"),
    _line(_B.SEMI_SLAV, _K, "d4 d5 c4 c6 * e6"),
    _line(_B.SEMI_SLAV, _K, "d4 d5 c4 c6 * Nf6 * e6"),
    _line(_B.QUEENS_GAMBIT_DECLINED, _K, "d4 d5 c4 e6"),
    _line(_B.TARRASCH_DEFENSE, _K, "d4 d5 c4 e6 * c5"),
    _line(_B.CHIGORIN_DEFENSE, _K, "d4 d5 c4 Nc6"),
    _line(_B.DUTCH_DEFENSE, _K, "d4 f5"),
    _line(_B.DUTCH_DEFENSE, _K, "d4 e6 * f5"),
    _line(_B.QUEENS_GAMBIT_DECLINED, _K, "d4 e6"),
    _line(_B.BENONI, _K, "d4 c5"),
    _line(_B.MODERN_DEFENSE, _K, "d4 g6"),
    _line(_B.KINGS_INDIAN, _K, "d4 g6 * Nf6 * d6"),
    _line(_B.KINGS_INDIAN, _K, "d4 g6 * d6 * Nf6"),
    _line(_B.KINGS_INDIAN, _K, "d4 g6 * Bg7 * d6"),

    # --- Black against other first moves ---
    _line(_B.ENGLISH_SYMMETRICAL, _K, "c4 c5"),
    _line(_B.ANGLO_INDIAN, _K, "c4 Nf6"),
    _line(_B.ANGLO_INDIAN, _K, "c4 e6"),
    _line(_B.ANGLO_INDIAN, _K, "Nf3 Nf6"),
    _line(_B.ANGLO_INDIAN, _K, "Nf3 d5"),
    _line(_B.ANGLO_INDIAN, _K, "Nf3 c5"),
)

LONGEST_LINE_PLIES: int = max(len(line) for line in OPENING_LINES)


_CATEGORY_LAST_BUCKETS: Tuple[Tuple[OpeningCategory, OpeningBucket], ...] = (
    (OpeningCategory.WHITE_E4, _B.PONZIANI),
    (OpeningCategory.WHITE_D4, _B.RICHTER_VERESOV),
    (OpeningCategory.WHITE_OTHER, _B.OTHER_WHITE),
    (OpeningCategory.BLACK_VS_E4, _B.KINGS_PAWN_OTHER),
    (OpeningCategory.BLACK_VS_D4, _B.D4_OTHER),
    (OpeningCategory.BLACK_VS_OTHER, _B.OTHER_BLACK),
)


def _build_categories() -> Dict[OpeningBucket, OpeningCategory]:
    """Assigns buckets to categories, which occupy contiguous runs of the enum."""
    categories: Dict[OpeningBucket, OpeningCategory] = {}
    buckets = iter(OpeningBucket)
    for category, last_bucket in _CATEGORY_LAST_BUCKETS:
        for bucket in buckets:
            categories[bucket] = category
            if bucket is last_bucket:
                break
    return categories


OPENING_CATEGORIES: Mapping[OpeningBucket, OpeningCategory] = MappingProxyType(_build_categories())

# The catch-all bucket of each category, used when no line matches.
CATEGORY_CATCH_ALLS: Mapping[OpeningCategory, OpeningBucket] = MappingProxyType({
    OpeningCategory.WHITE_E4: _B.KINGS_PAWN_OTHER,
    OpeningCategory.WHITE_D4: _B.D4_OTHER,
    OpeningCategory.WHITE_OTHER: _B.OTHER_WHITE,
    OpeningCategory.BLACK_VS_E4: _B.KINGS_PAWN_OTHER,
    OpeningCategory.BLACK_VS_D4: _B.D4_OTHER,
    OpeningCategory.BLACK_VS_OTHER: _B.OTHER_BLACK,
})

# Category of an unmatched game, keyed by perspective and White's first move.
# A `None` first move means "any other first move, or too short to tell".
CATCH_ALL_TABLE: Mapping[Tuple[Optional[PlayerColor], Optional[str]], OpeningCategory] = MappingProxyType({
    (_W, "e4"): OpeningCategory.WHITE_E4,
    (_W, "d4"): OpeningCategory.WHITE_D4,
    (_W, None): OpeningCategory.WHITE_OTHER,
    (_K, "e4"): OpeningCategory.BLACK_VS_E4,
    (_K, "d4"): OpeningCategory.BLACK_VS_D4,
    (_K, None): OpeningCategory.BLACK_VS_OTHER,
    (None, "e4"): OpeningCategory.BLACK_VS_E4,
    (None, "d4"): OpeningCategory.BLACK_VS_D4,
    (None, None): OpeningCategory.BLACK_VS_OTHER,
})

OPENING_LABELS: Mapping[OpeningBucket, str] = MappingProxyType({
    _B.ITALIAN_GAME: "Italian Game",
    _B.RUY_LOPEZ: "Ruy Lopez",
    _B.SCOTCH_GAME: "Scotch Game",
    _B.KINGS_GAMBIT: "King's Gambit",
    _B.VIENNA_GAME: "Vienna Game",
    _B.BISHOPS_OPENING: "Bishop's Opening",
    _B.FOUR_KNIGHTS: "Four Knights Game",
    _B.PETROV_DEFENSE: "Petrov Defense",
    _B.CENTER_GAME: "Center Game",
    _B.DANISH_GAMBIT: "Danish Gambit",
    _B.PONZIANI: "Ponziani Opening",
    _B.LONDON_SYSTEM: "London System",
    _B.QUEENS_GAMBIT: "Queen's Gambit",
    _B.CATALAN: "Catalan Opening",
    _B.TROMPOWSKY: "Trompowsky Attack",
    _B.COLLE_SYSTEM: "Colle System",
    _B.TORRE_ATTACK: "Torre Attack",
    _B.VERESOV: "Veresov Attack",
    _B.BLACKMAR_DIEMER: "Blackmar-Diemer Gambit",
    _B.RICHTER_VERESOV: "Richter-Veresov Attack",
    _B.ENGLISH_OPENING: "English Opening",
    _B.RETI_OPENING: "Reti Opening",
    _B.KINGS_INDIAN_ATTACK: "King's Indian Attack",
    _B.BIRDS_OPENING: "Bird's Opening",
    _B.LARSEN_OPENING: "Larsen's Opening",
    _B.GROB_ATTACK: "Grob Attack",
    _B.OTHER_WHITE: "Other (White)",
    _B.SICILIAN_NAJDORF: "Sicilian Najdorf",
    _B.SICILIAN_DRAGON: "Sicilian Dragon",
    _B.SICILIAN_SCHEVENINGEN: "Sicilian Scheveningen",
    _B.SICILIAN_SVESHNIKOV: "Sicilian Sveshnikov",
    _B.SICILIAN_CLASSICAL: "Sicilian Classical",
    _B.SICILIAN_KAN: "Sicilian Kan",
    _B.SICILIAN_TAIMANOV: "Sicilian Taimanov",
    _B.SICILIAN_ACCELERATED_DRAGON: "Sicilian Accelerated Dragon",
    _B.SICILIAN_ALAPIN: "Sicilian Alapin",
    _B.SICILIAN_CLOSED: "Closed Sicilian",
    _B.SICILIAN_OTHER: "Sicilian Defense (Other)",
    _B.FRENCH_DEFENSE: "French Defense",
    _B.CARO_KANN: "Caro-Kann Defense",
    _B.SCANDINAVIAN: "Scandinavian Defense",
    _B.ALEKHINE_DEFENSE: "Alekhine's Defense",
    _B.PIRC_DEFENSE: "Pirc Defense",
    _B.MODERN_DEFENSE: "Modern Defense",
    _B.PHILIDOR_DEFENSE: "Philidor Defense",
    _B.OWEN_DEFENSE: "Owen's Defense",
    _B.KINGS_PAWN_OTHER: "Other vs 1.e4",
    _B.KINGS_INDIAN: "King's Indian Defense",
    _B.GRUNFELD: "Grunfeld Defense",
    _B.NIMZO_INDIAN: "Nimzo-Indian Defense",
    _B.QUEENS_INDIAN: "Queen's Indian Defense",
    _B.BOGO_INDIAN: "Bogo-Indian Defense",
    _B.BENONI: "Benoni Defense",
    _B.DUTCH_DEFENSE: "Dutch Defense",
    _B.SLAV_DEFENSE: "Slav Defense",
    _B.SEMI_SLAV: "Semi-Slav Defense",
    _B.QUEENS_GAMBIT_DECLINED: "Queen's Gambit Declined",
    _B.QUEENS_GAMBIT_ACCEPTED: "Queen's Gambit Accepted",
    _B.TARRASCH_DEFENSE: "Tarrasch Defense",
    _B.CHIGORIN_DEFENSE: "Chigorin Defense",
    _B.BUDAPEST_GAMBIT: "Budapest Gambit",
    _B.BENKO_GAMBIT: "Benko Gambit",
    _B.D4_OTHER: "Other vs 1.d4",
    _B.ENGLISH_SYMMETRICAL: "English Symmetrical",
    _B.ANGLO_INDIAN: "Anglo-Indian Defense",
    _B.OTHER_BLACK: "Other (Black)",
})


_LINES_BY_COLOR: Mapping[PlayerColor, Tuple[OpeningLine, ...]] = MappingProxyType({
    color: tuple(line for line in OPENING_LINES if line.color is color)
    for color in PlayerColor
})


def lines_for(color: Optional[PlayerColor]) -> Tuple[OpeningLine, ...]:
    """Returns the book lines owned by `color`, or all lines for `None`, in priority order."""
    if color is None:
        return OPENING_LINES
    return _LINES_BY_COLOR[color]
