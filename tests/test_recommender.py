"""
Tests for recommendation scoring and ranking.
"""

import pandas as pd
import pytest

from vinoscore.config import RecommendationPolicy
from vinoscore.constants import Messages
from vinoscore.recommender import (
    RecommendationScorer,
    exclude_tasted_wines,
    rank_recommendations,
    wine_records_from_dataframe,
)
from vinoscore.schema import PreferenceProfile, WineRecord


@pytest.fixture
def profile():
    return {
        'grape_varieties': ['Pinot Noir'],
        'regions': ['Burgundy'],
        'price_min': 20,
        'price_max': 60,
    }


@pytest.fixture
def history():
    return [{'id': 'h1', 'wine_type': 'RED', 'grape_variety': ['Pinot Noir'], 'region': 'Oregon'}]


@pytest.fixture
def candidates():
    return [
        {'id': 'c1', 'wine_type': 'WHITE', 'grape_variety': ['Chardonnay'],
         'region': 'Napa Valley', 'price': 100, 'rating': 4.0},
        {'id': 'c2', 'wine_type': 'RED', 'grape_variety': ['Pinot Noir'],
         'region': 'Burgundy', 'price': 45, 'rating': 3.5},
        {'id': 'c3', 'wine_type': 'RED', 'grape_variety': ['Pinot Noir', 'Gamay'],
         'region': 'Oregon', 'price': 30, 'rating': 4.0},
    ]


class TestRankRecommendations:
    """Test ranking end to end."""

    def test_scores_and_order(self, candidates, profile, history):
        result = rank_recommendations(candidates, profile, history)

        assert [c.id for c in result.recommendations] == ['c2', 'c3', 'c1']
        assert [c.recommendation_score for c in result.recommendations] == pytest.approx([9.0, 8.0, 4.0])
        assert result.based_on == {'candidate_count': 3, 'history_count': 1}

    def test_explanation_for_top_pick(self, candidates, profile, history):
        result = rank_recommendations(candidates, profile, history)

        assert result.explanation == (
            "Recommended because it matches your preferred grape variety (Pinot Noir)"
            " and comes from your preferred region (Burgundy)"
            " and is similar to wines you've enjoyed before"
            " and fits your price range."
        )

    def test_limit_truncates(self, candidates, profile, history):
        result = rank_recommendations(candidates, profile, history, limit=1)

        assert [c.id for c in result.recommendations] == ['c2']
        assert result.based_on['candidate_count'] == 3

    def test_zero_or_negative_limit(self, candidates, profile):
        assert rank_recommendations(candidates, profile, limit=0).recommendations == []
        assert rank_recommendations(candidates, profile, limit=-3).recommendations == []

    def test_invalid_limit_uses_default(self, candidates, profile):
        result = rank_recommendations(candidates, profile, limit="lots")
        assert len(result.recommendations) == 3

    @pytest.mark.parametrize("limit", [float('inf'), float('-inf'), float('nan')])
    def test_non_finite_limit_uses_default(self, candidates, profile, limit):
        result = rank_recommendations(candidates, profile, limit=limit)
        assert len(result.recommendations) == 3

    def test_same_inputs_same_result(self, candidates, profile, history):
        first = rank_recommendations(candidates, profile, history)
        second = rank_recommendations(candidates, profile, history)

        assert first == second
        assert first.model_dump_json() == second.model_dump_json()

    def test_no_candidates(self, profile):
        result = rank_recommendations([], profile)

        assert result.recommendations == []
        assert result.explanation == Messages.NO_RECOMMENDATIONS

    def test_ties_keep_input_order(self):
        wines = [{'id': str(i), 'rating': 3.0} for i in range(5)]

        result = rank_recommendations(wines, {})

        assert [c.id for c in result.recommendations] == ['0', '1', '2', '3', '4']

    def test_no_preferences_falls_back_to_rating(self):
        wines = [{'id': 'a', 'rating': 3.2}, {'id': 'b', 'rating': 4.4}, {'id': 'c'}]

        result = rank_recommendations(wines, None)

        assert [c.id for c in result.recommendations] == ['b', 'a', 'c']
        assert result.recommendations[-1].recommendation_score == 0.0
        assert result.explanation == "Recommended because it is highly rated (4.4/5 stars)."

    def test_generic_explanation(self):
        result = rank_recommendations([{'id': 'a', 'rating': 3.0}], {})
        assert result.explanation == Messages.GENERIC_RECOMMENDATION

    def test_dataframe_candidates(self, profile):
        df = pd.DataFrame([
            {'id': 1, 'grape_variety': 'Pinot Noir', 'region': 'Burgundy', 'price': 40.0, 'rating': 4.0},
            {'id': 2, 'grape_variety': None, 'region': None, 'price': None, 'rating': 4.5},
        ])

        result = rank_recommendations(df, profile)

        assert [c.id for c in result.recommendations] == ['1', '2']
        assert result.recommendations[0].recommendation_score == pytest.approx(8.5)
        assert result.recommendations[1].recommendation_score == pytest.approx(4.5)

    def test_custom_policy(self, candidates, profile, history):
        policy = RecommendationPolicy(grape_weight=0, region_weight=0, history_weight=0, price_weight=0)

        result = rank_recommendations(candidates, profile, history, policy=policy)

        assert [c.id for c in result.recommendations] == ['c1', 'c3', 'c2']


class TestRecommendationScorer:
    """Test individual match predicates."""

    def test_grape_match_either_direction(self):
        scorer = RecommendationScorer(PreferenceProfile(grape_varieties=['Cabernet']), [])
        wine = WineRecord(grape_variety=['Cabernet Sauvignon', 'Merlot'])

        assert scorer.matching_grapes(wine) == ['Cabernet']
        assert scorer.score(wine) == pytest.approx(2.0)

    def test_each_preferred_grape_counts(self):
        scorer = RecommendationScorer(PreferenceProfile(grape_varieties=['Grenache', 'Syrah']), [])
        wine = WineRecord(grape_variety=['Grenache', 'Syrah', 'Mourvedre'], rating=3.0)

        assert scorer.score(wine) == pytest.approx(7.0)

    def test_history_counts_each_similar_wine(self):
        history = [
            WineRecord(id='h1', wine_type='RED'),
            WineRecord(id='h2', region='Rioja'),
            WineRecord(id='h3', wine_type='WHITE'),
        ]
        scorer = RecommendationScorer(PreferenceProfile(), history)
        wine = WineRecord(wine_type='red', region='rioja')

        assert len(scorer.similar_history(wine)) == 2

    def test_missing_values_never_match_history(self):
        scorer = RecommendationScorer(PreferenceProfile(), [WineRecord(id='h1')])
        assert scorer.similar_history(WineRecord()) == []

    def test_history_is_capped(self):
        history = [WineRecord(id=str(i), wine_type='RED') for i in range(80)]
        scorer = RecommendationScorer(PreferenceProfile(), history)

        assert len(scorer.history) == 50
        assert scorer.score(WineRecord(wine_type='RED')) == pytest.approx(50.0)

    @pytest.mark.parametrize("price_min,price_max,price,expected", [
        (20, 60, 20, True),
        (20, 60, 60, True),
        (20, 60, 61, False),
        (None, 30, 10, True),
        (50, None, 500, True),
        (None, None, 10, False),
        (20, 60, None, False),
    ])
    def test_fits_price(self, price_min, price_max, price, expected):
        scorer = RecommendationScorer(PreferenceProfile(price_min=price_min, price_max=price_max), [])
        assert scorer.fits_price(WineRecord(price=price)) is expected

    def test_negative_rating_floors_at_zero(self):
        scorer = RecommendationScorer(PreferenceProfile(), [])
        assert scorer.score(WineRecord(rating=-2.0)) == 0.0


class TestCandidateHelpers:

    def test_exclude_tasted_wines(self):
        kept = exclude_tasted_wines(
            [{'id': 'a'}, {'id': 'b'}, {'name': 'no id'}],
            [{'id': 'b'}],
        )
        assert [wine.id for wine in kept] == ['a', None]

    def test_dataframe_nan_cells_become_absent(self):
        df = pd.DataFrame([{'id': 7, 'vintage': float('nan'), 'region': float('nan'), 'rating': 4.1}])

        records = wine_records_from_dataframe(df)

        assert records[0].id == '7'
        assert records[0].vintage is None
        assert records[0].region is None
        assert records[0].rating == pytest.approx(4.1)

    def test_empty_dataframe(self):
        assert wine_records_from_dataframe(pd.DataFrame()) == []
