"""
Tests for skillsync.core.classification — score tiers and status badges.
"""

import pytest

from skillsync.core.classification import badge_category, percent_from_fraction, tier
from skillsync.utils.constants import (
    ApplicationStatus,
    BadgeCategory,
    EventStatus,
    MatchTier,
)


# ── tier() ──────────────────────────────────────────────────────────────────


class TestTier:
    @pytest.mark.parametrize("score", [90, 95, 100])
    def test_high(self, score):
        assert tier(score) == MatchTier.HIGH

    @pytest.mark.parametrize("score", [70, 80, 89])
    def test_medium(self, score):
        assert tier(score) == MatchTier.MEDIUM

    @pytest.mark.parametrize("score", [0, 50, 69])
    def test_low(self, score):
        assert tier(score) == MatchTier.LOW

    def test_boundary_just_below_high(self):
        assert tier(89.99) == MatchTier.MEDIUM

    def test_out_of_range_values_do_not_fail(self):
        assert tier(-5) == MatchTier.LOW
        assert tier(150) == MatchTier.HIGH

    def test_monotonic_in_score(self):
        order = {MatchTier.LOW: 0, MatchTier.MEDIUM: 1, MatchTier.HIGH: 2}
        ranks = [order[tier(s)] for s in range(0, 101)]
        assert ranks == sorted(ranks)


# ── badge_category() ────────────────────────────────────────────────────────


class TestBadgeCategory:
    @pytest.mark.parametrize("status", ["accepted", "completed", "interview"])
    def test_positive(self, status):
        assert badge_category(status) == BadgeCategory.POSITIVE

    @pytest.mark.parametrize("status", ["applied", "reviewing", "current", "pending"])
    def test_neutral(self, status):
        assert badge_category(status) == BadgeCategory.NEUTRAL

    def test_rejected_is_negative(self):
        assert badge_category("rejected") == BadgeCategory.NEGATIVE

    def test_offer_and_hired_are_positive(self):
        assert badge_category("offer") == BadgeCategory.POSITIVE
        assert badge_category("hired") == BadgeCategory.POSITIVE

    def test_case_and_whitespace_insensitive(self):
        assert badge_category("  Rejected ") == BadgeCategory.NEGATIVE

    def test_accepts_enum_members(self):
        assert badge_category(EventStatus.COMPLETED) == BadgeCategory.POSITIVE
        assert badge_category(ApplicationStatus.REJECTED) == BadgeCategory.NEGATIVE

    @pytest.mark.parametrize("status", ["withdrawn", "", None, 42])
    def test_unknown_falls_back_to_neutral(self, status):
        assert badge_category(status) == BadgeCategory.NEUTRAL


# ── percent_from_fraction() ─────────────────────────────────────────────────


class TestPercentFromFraction:
    def test_rounds_half_up(self):
        assert percent_from_fraction(0.875) == 88
        assert percent_from_fraction(0.5) == 50

    def test_clamps(self):
        assert percent_from_fraction(1.3) == 100
        assert percent_from_fraction(-0.2) == 0

    def test_feeds_tier(self):
        assert tier(percent_from_fraction(0.92)) == MatchTier.HIGH
