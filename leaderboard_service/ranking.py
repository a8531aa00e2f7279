"""Ordering rules for the leaderboard.

Entries rank by difficulty tier first (HARD > MEDIUM > EASY), then by score
(higher first), then by completion time (lower first). Only the top
``MAX_ENTRIES`` survive a ranking pass.
"""
import math
import re
from typing import Iterable, List, Optional

from leaderboard_service.models import Difficulty, Entry

MAX_ENTRIES = 5

# ASCII decimal digits only: no "1_0", no non-Latin numerals
_INT_RE = re.compile(r"\s*[+-]?[0-9]+\s*")

TIER_RANK = {
    Difficulty.EASY.value: 0,
    Difficulty.MEDIUM.value: 1,
    Difficulty.HARD.value: 2,
}


def time_to_seconds(time: str) -> int:
    """Convert ``mm:ss`` into total seconds.

    Raises ValueError when the value has no colon or either half is not a
    base-10 integer.
    """
    if not isinstance(time, str):
        raise ValueError(f"time must be a 'mm:ss' string, got {time!r}")
    parts = time.split(":")
    if len(parts) < 2:
        raise ValueError(f"time must be 'mm:ss', got {time!r}")
    minutes, seconds = parts[0], parts[1]
    if not (_INT_RE.fullmatch(minutes) and _INT_RE.fullmatch(seconds)):
        raise ValueError(f"time must be 'mm:ss' with decimal digits, got {time!r}")
    return int(minutes, 10) * 60 + int(seconds, 10)


def score_value(score) -> Optional[float]:
    if isinstance(score, bool):
        return None
    try:
        value = float(score)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(value):
        return None
    return value


def rank_key(entry: Entry):
    # unknown tiers (only possible in a hand-edited blob) rank below EASY
    tier = TIER_RANK.get(str(entry.difficulty).upper(), -1)

    score = score_value(entry.score)
    try:
        seconds = time_to_seconds(entry.time)
    except ValueError:
        seconds = None

    return (
        -tier,
        score is None,
        -score if score is not None else 0.0,
        seconds is None,
        seconds if seconds is not None else 0,
    )


def rank(entries: Iterable[Entry], limit: int = MAX_ENTRIES) -> List[Entry]:
    return sorted(entries, key=rank_key)[:limit]
