"""
Unit tests for the console readiness chart.
"""

import numpy as np
import pytest

from readiness_engine.errors import DegenerateInputFailure, NumericalDegeneracyWarning
from readiness_engine.output.ascii_plot import ascii_plot, normalize, sample_columns


class TestSampleColumns:

    def test_keeps_both_ends(self):
        idx = sample_columns(1009, 100)
        assert idx[0] == 0
        assert idx[-1] == 1008
        assert idx.size == 100
        assert np.all(np.diff(idx) > 0)

    def test_short_series_uses_every_point(self):
        np.testing.assert_array_equal(sample_columns(5, 100), [0, 1, 2, 3, 4])


class TestNormalize:

    def test_range(self):
        norm = normalize([2.0, 3.0, 4.0])
        np.testing.assert_allclose(norm, [0.0, 0.5, 1.0])

    def test_flat_series_warns(self):
        with pytest.warns(NumericalDegeneracyWarning):
            norm = normalize([0.3, 0.3, 0.3])
        np.testing.assert_array_equal(norm, 0.0)


class TestAsciiPlot:

    def test_dimensions(self):
        P = np.sin(np.linspace(0.0, 6.0, 500))
        chart = ascii_plot(P, width=60, height=10)
        rows = chart.split("\n")
        assert len(rows) == 10
        assert all(len(row) == 60 for row in rows)
        for col in zip(*rows):
            assert set(col) != {" "}

    def test_rising_series_marks_corners(self):
        rows = ascii_plot(np.linspace(0.0, 1.0, 20), width=20, height=5).split("\n")
        assert rows[-1][0] == "•"
        assert rows[0][-1] != " "

    def test_single_sample(self):
        assert ascii_plot([0.42]) == "•"

    def test_flat_series(self):
        with pytest.warns(NumericalDegeneracyWarning):
            chart = ascii_plot(np.full(30, 0.5), width=30, height=4)
        bottom = chart.split("\n")[-1]
        assert bottom[0] == "•"
        assert set(bottom[1:]) == {"─"}

    @pytest.mark.parametrize("values", [[], [0.1, np.nan, 0.3], [np.inf, 0.0]])
    def test_bad_series(self, values):
        with pytest.raises(DegenerateInputFailure):
            ascii_plot(values)

    def test_zero_area(self):
        with pytest.raises(DegenerateInputFailure):
            ascii_plot([0.1, 0.2], width=0)
