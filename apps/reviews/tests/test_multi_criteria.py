import math
from types import MappingProxyType
import pytest
from hypothesis import given, strategies as st

from apps.reviews.services.multi_criteria import (
    MULTI_CRITERIA_WEIGHTS,
    calculate_weighted_rating,
    overall_rating_from_criteria,
)
from apps.reviews.services.types import CRITERIA, CriteriaRatings


ratings = st.integers(min_value=1, max_value=5)
optional_ratings = st.one_of(st.none(), ratings)
criteria_strategy = st.builds(
    CriteriaRatings,
    quality=optional_ratings,
    timeliness=optional_ratings,
    communication=optional_ratings,
    value=optional_ratings,
)
non_empty_criteria = criteria_strategy.filter(lambda c: bool(c.present()))


class TestWeights:
    """Test the weight configuration."""

    def test_weights_sum_to_one(self):
        assert math.fsum(MULTI_CRITERIA_WEIGHTS.values()) == 1.0

    def test_every_criterion_weighted(self):
        assert set(MULTI_CRITERIA_WEIGHTS) == set(CRITERIA)
        assert all(weight > 0 for weight in MULTI_CRITERIA_WEIGHTS.values())

    def test_timeliness_and_value_weigh_the_same(self):
        assert MULTI_CRITERIA_WEIGHTS['timeliness'] == MULTI_CRITERIA_WEIGHTS['value']


class TestCalculateWeightedRating:
    """Test the multi-criteria score."""

    def test_no_criteria_returns_none(self):
        """Absent criteria give no score, not 0."""
        assert calculate_weighted_rating(CriteriaRatings()) is None

    def test_empty_mapping_returns_none(self):
        assert calculate_weighted_rating({}) is None

    def test_all_ones(self):
        assert calculate_weighted_rating(CriteriaRatings(1, 1, 1, 1)) == 1

    def test_all_fives(self):
        assert calculate_weighted_rating(CriteriaRatings(5, 5, 5, 5)) == 5

    def test_full_criteria(self):
        """0.3*5 + 0.25*4 + 0.2*3 + 0.25*4 = 4.1"""
        criteria = CriteriaRatings(quality=5, timeliness=4, communication=3, value=4)

        assert calculate_weighted_rating(criteria) == 4.1

    def test_weights_renormalized_over_present_criteria(self):
        """Quality 5 and value 3 only: (0.3*5 + 0.25*3) / 0.55"""
        assert calculate_weighted_rating({'quality': 5, 'value': 3}) == 4.1

    def test_accepts_model_field_names(self):
        data = {
            'quality_rating': 4,
            'timeliness_rating': None,
            'communication_rating': 4,
            'value_rating': None,
        }

        assert calculate_weighted_rating(data) == 4

    def test_custom_weights(self):
        weights = {'quality': 0.5, 'timeliness': 0.5, 'communication': 0.0001, 'value': 0.0001}

        assert calculate_weighted_rating({'quality': 5, 'timeliness': 1}, weights) == 3

    @pytest.mark.parametrize('name', CRITERIA)
    @pytest.mark.parametrize('rating', [1, 2, 3, 4, 5])
    def test_single_criterion_returns_its_value(self, name, rating):
        assert calculate_weighted_rating({name: rating}) == rating

    @given(non_empty_criteria)
    def test_result_in_rating_bounds(self, criteria):
        assert 1 <= calculate_weighted_rating(criteria) <= 5

    @given(non_empty_criteria)
    def test_result_has_one_decimal(self, criteria):
        result = calculate_weighted_rating(criteria)

        assert round(result * 10) == pytest.approx(result * 10)

    @given(criteria_strategy)
    def test_deterministic(self, criteria):
        assert calculate_weighted_rating(criteria) == calculate_weighted_rating(criteria)

    @given(ratings, st.sets(st.sampled_from(CRITERIA), min_size=1))
    def test_uniform_values_return_that_value(self, rating, names):
        """Same value on any subset of criteria gives that value."""
        criteria = CriteriaRatings(**{name: rating for name in names})

        assert calculate_weighted_rating(criteria) == rating

    @given(non_empty_criteria, st.data())
    def test_raising_a_criterion_never_lowers_the_score(self, criteria, data):
        present = dict(criteria.present())
        name = data.draw(st.sampled_from(sorted(present)))
        raised = data.draw(st.integers(min_value=present[name], max_value=5))

        improved = CriteriaRatings(**{**present, name: raised})

        assert calculate_weighted_rating(improved) >= calculate_weighted_rating(criteria)

    @given(non_empty_criteria)
    def test_swapping_equal_weight_criteria(self, criteria):
        """Timeliness and value share a weight, so swapping them changes nothing."""
        swapped = CriteriaRatings(
            quality=criteria.quality,
            timeliness=criteria.value,
            communication=criteria.communication,
            value=criteria.timeliness,
        )

        assert calculate_weighted_rating(swapped) == calculate_weighted_rating(criteria)


class TestOverallRatingFromCriteria:
    """Test the stored overall rating."""

    def test_falls_back_without_criteria(self):
        assert overall_rating_from_criteria(CriteriaRatings(), fallback=4) == 4

    def test_weighted_score_rounded_half_up(self):
        """4.5 rounds to 5."""
        criteria = CriteriaRatings(quality=4, timeliness=5, communication=4, value=5)

        assert overall_rating_from_criteria(criteria, fallback=1) == 5

    def test_weighted_score_rounded_down(self):
        criteria = CriteriaRatings(quality=3, timeliness=4, communication=3, value=3)

        assert overall_rating_from_criteria(criteria, fallback=5) == 3


class TestCriteriaFromMapping:
    """Test building criteria from request or row data."""

    def test_plain_and_suffixed_keys(self):
        criteria = CriteriaRatings.from_mapping({'quality': 5, 'value_rating': 2})

        assert criteria == CriteriaRatings(quality=5, value=2)

    def test_read_only_mapping(self):
        data = MappingProxyType({'timeliness_rating': 4, 'communication': 3})

        criteria = CriteriaRatings.from_mapping(data)

        assert criteria.present() == (('timeliness', 4), ('communication', 3))

    def test_plain_key_wins(self):
        assert CriteriaRatings.from_mapping({'quality': 1, 'quality_rating': 5}).quality == 1
