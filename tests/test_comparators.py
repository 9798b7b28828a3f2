"""
Tests for the attribute comparators.

Covers the four match policies, their shared absence rules and the
weighted overall combination.
"""

import pytest

from vinoscore.comparators import (
    MatchPolicy,
    banded_numeric,
    compare,
    contains_either_way,
    exact_match,
    fuzzy_match,
    set_overlap,
    weighted_overall,
)
from vinoscore.config import STANDARD_BLIND_TASTING_POLICY, ComparisonWeights


class TestExactMatch:
    """Test exact categorical matching."""

    def test_case_insensitive_equal(self):
        assert exact_match("France", "france") == 100

    def test_different_values(self):
        assert exact_match("France", "Italy") == 0

    def test_both_absent_is_full_score(self):
        """No claim and no truth means no contradiction."""
        assert exact_match(None, None) == 100

    def test_one_absent_is_zero(self):
        assert exact_match("France", None) == 0
        assert exact_match(None, "France") == 0

    def test_blank_string_counts_as_absent(self):
        assert exact_match("   ", None) == 100


class TestFuzzyMatch:
    """Test fuzzy substring matching."""

    def test_equal_values(self):
        assert fuzzy_match("Burgundy", "BURGUNDY") == 100

    def test_substring_gets_partial_credit(self):
        assert fuzzy_match("Napa Valley", "Napa") == 70
        assert fuzzy_match("Napa", "Napa Valley") == 70

    def test_unrelated_values(self):
        assert fuzzy_match("Burgundy", "Bordeaux") == 0

    def test_absence_rules(self):
        assert fuzzy_match(None, None) == 100
        assert fuzzy_match("Rioja", None) == 0


class TestSetOverlap:
    """Test grape variety set overlap."""

    def test_case_changes_do_not_matter(self):
        assert set_overlap(["Pinot Noir"], ["pinot noir"]) == 100

    def test_extra_guesses_are_penalized(self):
        """One correct out of two guessed against one actual -> 50."""
        assert set_overlap(["Pinot Noir"], ["Pinot Noir", "Syrah"]) == 50

    def test_substring_either_direction(self):
        assert set_overlap(["Cabernet Sauvignon", "Merlot"], ["Cabernet"]) == 50
        assert set_overlap(["Syrah"], ["Syrah blend"]) == 100

    def test_rounds_to_nearest(self):
        assert set_overlap(["Grenache", "Syrah", "Mourvedre"], ["Syrah"]) == 33
        assert set_overlap(["Grenache", "Syrah"], ["Grenache", "Syrah", "Cinsault"]) == 67

    def test_both_empty(self):
        assert set_overlap([], []) == 100
        assert set_overlap(None, None) == 100

    def test_one_empty(self):
        assert set_overlap(["Syrah"], []) == 0
        assert set_overlap([], ["Syrah"]) == 0

    def test_blank_entries_ignored(self):
        assert set_overlap(["Syrah", ""], ["syrah", "  "]) == 100


class TestBandedNumeric:
    """Test vintage distance bands."""

    @pytest.mark.parametrize("actual,guessed,expected", [
        (2018, 2018, 100),
        (2018, 2020, 75),
        (2018, 2016.5, 75),
        (2018, 2023, 50),
        (2018, 2013, 50),
        (2018, 2024, 0),
    ])
    def test_bands(self, actual, guessed, expected):
        assert banded_numeric(actual, guessed) == expected

    def test_absence_rules(self):
        assert banded_numeric(None, None) == 100
        assert banded_numeric(2018, None) == 0
        assert banded_numeric(None, 2018) == 0

    def test_zero_is_a_value_not_absence(self):
        assert banded_numeric(0, 0) == 100
        assert banded_numeric(0, None) == 0


class TestCompareDispatch:
    """Test policy-based dispatch."""

    def test_dispatch_by_enum(self):
        assert compare(MatchPolicy.FUZZY, "Napa Valley", "Napa") == 70
        assert compare(MatchPolicy.BANDED_NUMERIC, 2010, 2012) == 75

    def test_dispatch_by_value(self):
        assert compare("exact", "Red", "red") == 100
        assert compare("set_overlap", ["Merlot"], ["Merlot"]) == 100


class TestContainsEitherWay:

    def test_containment(self):
        assert contains_either_way("Cabernet", "cabernet sauvignon")
        assert contains_either_way("Cabernet Sauvignon", "cabernet")

    def test_absent_never_matches(self):
        assert not contains_either_way(None, "Merlot")
        assert not contains_either_way("", "Merlot")


class TestWeightedOverall:
    """Test weighted combination of sub-scores."""

    def test_standard_weights(self):
        breakdown = {'wine_type': 100, 'grape_variety': 50, 'region': 100, 'vintage': 100}
        assert weighted_overall(breakdown, STANDARD_BLIND_TASTING_POLICY.weights) == 85

    def test_all_perfect(self):
        breakdown = {'wine_type': 100, 'grape_variety': 100, 'region': 100, 'vintage': 100}
        assert weighted_overall(breakdown, STANDARD_BLIND_TASTING_POLICY.weights) == 100

    def test_halves_round_up(self):
        """32.5 rounds to 33, not to the even 32."""
        weights = ComparisonWeights(weights={'a': 0.5, 'b': 0.5})
        assert weighted_overall({'a': 0, 'b': 65}, weights) == 33

    def test_missing_dimension_counts_as_zero(self):
        weights = ComparisonWeights(weights={'a': 0.5, 'b': 0.5})
        assert weighted_overall({'a': 100}, weights) == 50
