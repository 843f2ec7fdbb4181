import numpy as np
import pytest

from product_space.aggregate import Aggregation, AverageDivisor, aggregate, logical_and


@pytest.fixture
def by_year():
    return {
        2000: np.reshape([0.5, 0.5, 0.5, 0.5, 1.5, 1.5, 1.5, 1.5], (4, 2), order="F"),
        2001: np.reshape([0.5, 0.5, 1.5, 1.5, 0.5, 0.5, 1.5, 1.5], (4, 2), order="F"),
        2002: np.reshape([0.5, 1.5, 0.5, 1.5, 0.5, 1.5, 0.5, 1.5], (4, 2), order="F"),
    }


class TestAggregate:

    def test_no_years(self, by_year):
        assert aggregate(by_year, [], (4, 2)) is None
        assert aggregate(by_year, [], (4, 2), mode=Aggregation.CUTOFF_CHAIN, cutoff=1.0) is None

    def test_single_year_missing(self, by_year):
        assert aggregate(by_year, [1999], (4, 2)) is None

    def test_single_year_is_a_copy(self, by_year):
        res = aggregate(by_year, [2000], (4, 2))
        np.testing.assert_array_equal(res, by_year[2000])
        res[0, 0] = 99.0
        assert by_year[2000][0, 0] == 0.5

    def test_single_year_cutoff(self, by_year):
        res = aggregate(by_year, [2001], (4, 2), mode=Aggregation.CUTOFF_CHAIN, cutoff=1.0)
        np.testing.assert_array_equal(res, [[0, 0], [0, 0], [1, 1], [1, 1]])
        assert by_year[2001][2, 0] == 1.5

    def test_cutoff_chain(self, by_year):
        res = aggregate(by_year, [2000, 2001, 2002], (4, 2), mode=Aggregation.CUTOFF_CHAIN, cutoff=1.0)
        np.testing.assert_array_equal(res, [[0, 0], [0, 0], [0, 0], [0, 1]])
        # yearly inputs are left untouched
        assert by_year[2002][1, 0] == 1.5

    def test_cutoff_chain_skips_missing_years(self, by_year):
        res = aggregate(by_year, [2001, 1999, 2002], (4, 2), mode="cutoff_chain", cutoff=1.0)
        np.testing.assert_array_equal(res, [[0, 0], [0, 0], [0, 0], [1, 1]])

    def test_cutoff_chain_all_missing_is_neutral(self, by_year):
        res = aggregate(by_year, [1990, 1991], (4, 2), mode=Aggregation.CUTOFF_CHAIN, cutoff=1.0)
        np.testing.assert_array_equal(res, np.ones((4, 2)))

    def test_average(self, by_year):
        res = aggregate(by_year, [2000, 2001], (4, 2))
        np.testing.assert_allclose(res, (by_year[2000] + by_year[2001]) / 2)

    def test_average_divides_by_requested_years(self):
        by_year = {1: np.full((2, 2), 2.0), 2: np.full((2, 2), 4.0)}
        res = aggregate(by_year, [1, 2, 3], (2, 2))
        np.testing.assert_allclose(res, np.full((2, 2), 2.0))

    def test_average_divides_by_found_years(self):
        by_year = {1: np.full((2, 2), 2.0), 2: np.full((2, 2), 4.0)}
        res = aggregate(by_year, [1, 2, 3], (2, 2), divisor=AverageDivisor.FOUND)
        np.testing.assert_allclose(res, np.full((2, 2), 3.0))

    def test_average_all_missing_is_zero(self, by_year):
        np.testing.assert_array_equal(aggregate(by_year, [1, 2], (4, 2)), np.zeros((4, 2)))
        np.testing.assert_array_equal(aggregate(by_year, [1, 2], (4, 2), divisor="found"), np.zeros((4, 2)))

    def test_average_keeps_nan(self):
        by_year = {1: np.array([[np.nan, 1.0]]), 2: np.array([[1.0, 1.0]])}
        res = aggregate(by_year, [1, 2], (1, 2))
        assert np.isnan(res[0, 0])
        assert res[0, 1] == 1.0

    def test_strict_missing_years(self, by_year):
        assert aggregate(by_year, [2000, 1999], (4, 2), skip_missing=False) is None
        assert aggregate(by_year, [2000, 2001], (4, 2), skip_missing=False) is not None

    def test_unknown_mode(self, by_year):
        with pytest.raises(ValueError):
            aggregate(by_year, [2000], (4, 2), mode="median")


class TestLogicalAnd:

    def test_product_of_binary_years(self):
        by_year = {
            1: np.array([[1.0, 1.0], [0.0, 1.0]]),
            2: np.array([[1.0, 0.0], [1.0, 1.0]]),
        }
        np.testing.assert_array_equal(logical_and(by_year, [1, 2], (2, 2)), [[1, 0], [0, 1]])

    def test_availability(self):
        by_year = {1: np.eye(2)}
        assert logical_and(by_year, [], (2, 2)) is None
        assert logical_and(by_year, [3], (2, 2)) is None
        np.testing.assert_array_equal(logical_and(by_year, [1, 3], (2, 2)), np.eye(2))
        assert logical_and(by_year, [1, 3], (2, 2), skip_missing=False) is None
