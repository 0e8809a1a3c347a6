"""
Score and status classification.

Single mapping table for the score colours and status badges that the
SkillSync cards render.
"""

import math
from enum import Enum
from typing import Optional, Union

from skillsync.utils.constants import (
    MAX_MATCH_SCORE,
    MIN_MATCH_SCORE,
    STATUS_BADGES,
    BadgeCategory,
    MatchTier,
)


def tier(score: float) -> MatchTier:
    """
    Classify a 0-100 match score.

    HIGH from 90, MEDIUM from 70, LOW below. Values outside 0-100 are
    classified by the same rule.
    """
    return MatchTier.from_score(score)


def badge_category(status: Optional[Union[str, Enum]]) -> BadgeCategory:
    """Map a lifecycle status to its badge category; unknown statuses are NEUTRAL."""
    if isinstance(status, Enum):
        status = status.value
    if not isinstance(status, str):
        return BadgeCategory.NEUTRAL
    return STATUS_BADGES.get(status.strip().lower(), BadgeCategory.NEUTRAL)


def percent_from_fraction(value: float) -> int:
    """Convert a 0-1 score to a 0-100 integer, clamped."""
    scaled = math.floor(abs(value) * 100 + 0.5)
    percent = scaled if value >= 0 else -scaled
    return max(MIN_MATCH_SCORE, min(MAX_MATCH_SCORE, percent))
