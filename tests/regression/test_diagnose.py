"""
Tests for diagnose().

Tests the complete pipeline: rows -> transform -> external solve ->
sufficient statistics -> diagnostics.
"""

import math

import numpy as np
import pytest

from pywls.core.exceptions import DimensionError, ValidationError
from pywls.regression import (
    FitSolution,
    SufficientStatistics,
    compute_akaike_ic,
    compute_bayes_ic,
    compute_log_likelihood,
    compute_r_squared,
    compute_residual_sum_of_squares,
    diagnose,
    transform,
)


@pytest.fixture
def pipeline(weighted_rows):
    design = transform(weighted_rows, backend='cpu')
    beta, *_ = np.linalg.lstsq(design.X, design.y, rcond=None)
    return design, beta, design.sufficient_statistics()


class TestDiagnoseBasic:

    def test_returns_fit_solution(self, pipeline):
        _, beta, stats = pipeline
        result = diagnose(beta, stats)
        assert isinstance(result, FitSolution)
        assert result.k == 4
        assert result.count == 200
        assert result.is_finite
        assert result.warnings == ()
        assert result.backend_name == 'cpu_sufficient_stats'

    def test_matches_individual_functions(self, pipeline):
        _, beta, stats = pipeline
        result = diagnose(beta, stats, should_intercept=True)

        rss = compute_residual_sum_of_squares(
            beta, stats.sum_of_y_squared, stats.vector_of_xy, stats.matrix_of_xx
        )
        ll = compute_log_likelihood(stats.count, stats.sum_of_log_weights, rss)
        assert result.rss == rss
        assert result.r_squared == compute_r_squared(
            stats.sum_of_y_squared, stats.sum_of_weights, stats.sum_of_y, rss, True
        )
        assert result.log_likelihood == ll
        assert result.aic == compute_akaike_ic(beta, ll, True)
        assert result.bic == compute_bayes_ic(beta, ll, stats.count, True)

    def test_rss_matches_weighted_residuals(self, weighted_data, pipeline):
        x, y, w = weighted_data
        _, beta, stats = pipeline
        fitted = beta[0] + x @ beta[1:]
        direct = float(np.sum(w * (y - fitted) ** 2))
        assert diagnose(beta, stats).rss == pytest.approx(direct, rel=1e-8)

    def test_good_fit_has_high_r_squared(self, pipeline):
        _, beta, stats = pipeline
        assert diagnose(beta, stats).r_squared > 0.8

    def test_more_parameters_penalized(self, pipeline):
        _, beta, stats = pipeline
        result = diagnose(beta, stats)
        assert result.bic - result.aic == pytest.approx(
            4 * math.log(200) - 8, abs=1e-9
        )

    def test_timing_sections(self, pipeline):
        _, beta, stats = pipeline
        timing = diagnose(beta, stats).timing
        assert {'total_seconds', 'rss', 'r_squared', 'likelihood'} <= set(timing)

    def test_summary_runs(self, pipeline):
        _, beta, stats = pipeline
        s = diagnose(beta, stats).summary()
        assert "R-squared" in s
        assert "BIC" in s
        assert "Observations: 200" in s

    def test_repr(self, pipeline):
        _, beta, stats = pipeline
        assert repr(diagnose(beta, stats)).startswith("FitSolution(count=200, k=4")


class TestDiagnoseInterceptDefault:
    """Without an explicit keyword, R² follows the design the stats came from."""

    @pytest.fixture
    def through_origin(self):
        design = transform(
            x=[1.0, 2.0, 3.0, 4.0], y=[2.1, 3.9, 6.2, 7.8],
            should_intercept=False, backend='cpu',
        )
        beta, *_ = np.linalg.lstsq(design.X, design.y, rcond=None)
        return beta, design.sufficient_statistics()

    def test_no_intercept_design_uses_uncentred_r_squared(self, through_origin):
        beta, stats = through_origin
        assert stats.should_intercept is False

        result = diagnose(beta, stats)
        # RSS = 0.097 against Σy² = 118.9, not the centred 18.9
        assert result.r_squared == pytest.approx(1.0 - 0.097 / 118.9, rel=1e-9)
        assert result.r_squared == diagnose(beta, stats, should_intercept=False).r_squared
        assert result.r_squared != diagnose(beta, stats, should_intercept=True).r_squared
        assert result.info['should_intercept'] is False

    def test_no_intercept_design_parameter_count(self, through_origin):
        beta, stats = through_origin
        implicit = diagnose(beta, stats)
        explicit = diagnose(beta, stats, should_intercept=False)
        assert implicit.aic == explicit.aic
        assert implicit.bic == explicit.bic

    def test_intercept_design_uses_centred_r_squared(self, pipeline):
        _, beta, stats = pipeline
        assert stats.should_intercept is True
        result = diagnose(beta, stats)
        assert result.r_squared == diagnose(beta, stats, should_intercept=True).r_squared
        assert result.info['should_intercept'] is True

    def test_explicit_keyword_overrides_stats(self, through_origin):
        beta, stats = through_origin
        result = diagnose(beta, stats, should_intercept=True)
        assert result.r_squared == pytest.approx(1.0 - 0.097 / 18.9, rel=1e-9)
        assert result.info['should_intercept'] is True

    def test_merged_partitions_keep_intercept_flag(self):
        x = np.arange(1.0, 9.0)
        y = 2.0 * x + np.array([0.1, -0.2, 0.15, 0.0, -0.1, 0.05, 0.2, -0.05])
        first = transform(x=x[:4], y=y[:4], should_intercept=False, backend='cpu')
        second = transform(x=x[4:], y=y[4:], should_intercept=False, backend='cpu')
        merged = first.sufficient_statistics() + second.sufficient_statistics()
        assert merged.should_intercept is False

        whole = transform(x=x, y=y, should_intercept=False, backend='cpu')
        beta, *_ = np.linalg.lstsq(whole.X, whole.y, rcond=None)
        assert diagnose(beta, merged).r_squared == pytest.approx(
            diagnose(beta, whole.sufficient_statistics()).r_squared, rel=1e-12
        )


class TestDiagnoseDegenerate:
    """Degenerate inputs produce non-finite values plus warnings, not errors."""

    def test_perfect_fit(self):
        x = np.arange(10.0)
        design = transform(x=x, y=3.0 + 2.0 * x, should_intercept=True, backend='cpu')
        stats = design.sufficient_statistics()
        result = diagnose(np.array([3.0, 2.0]), stats)
        assert result.rss == pytest.approx(0.0, abs=1e-9)
        assert result.r_squared == pytest.approx(1.0)

    def test_exact_zero_rss_reports_infinite_likelihood(self):
        stats = SufficientStatistics(
            count=10, sum_of_y_squared=4.0, sum_of_weights=10.0, sum_of_y=2.0,
            sum_of_log_weights=0.0, vector_of_xy=[2.0], matrix_of_xx=[[1.0]],
        )
        # RSS = 4 + 2 * (-4 + 2) = 0
        result = diagnose([2.0], stats, should_intercept=False)
        assert result.rss == 0.0
        assert result.log_likelihood == math.inf
        assert result.aic == -math.inf
        assert any("log_likelihood" in w for w in result.warnings)

    def test_empty_statistics(self):
        result = diagnose(np.zeros(2), SufficientStatistics.zeros(2))
        assert math.isnan(result.r_squared)
        assert math.isnan(result.log_likelihood)
        assert result.warnings

    def test_summary_lists_warnings(self):
        result = diagnose(np.zeros(1), SufficientStatistics.zeros(1))
        assert "Warning:" in result.summary()


class TestDiagnoseValidation:

    def test_beta_length_mismatch(self, pipeline):
        _, beta, stats = pipeline
        with pytest.raises(DimensionError):
            diagnose(beta[:3], stats)

    def test_beta_non_finite(self, pipeline):
        _, beta, stats = pipeline
        bad = beta.copy()
        bad[0] = np.nan
        with pytest.raises(ValidationError, match="beta"):
            diagnose(bad, stats)

    def test_beta_must_be_1d(self, pipeline):
        _, beta, stats = pipeline
        with pytest.raises(DimensionError):
            diagnose(beta.reshape(-1, 1), stats)
