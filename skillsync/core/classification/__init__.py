"""Score tier and status badge classification."""

from .score_classifier import badge_category, percent_from_fraction, tier

__all__ = [
    "badge_category",
    "percent_from_fraction",
    "tier",
]
