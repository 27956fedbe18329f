"""Tests for tenant_analytics.analytics.trends — rolling-window trends + sparklines."""
import pytest
from types import SimpleNamespace

from tenant_analytics.analytics.trends import (
    compute_trend,
    window_values,
    build_trends,
    build_sparklines,
    TrendIndicator,
)


def _history(attr, values):
    return [SimpleNamespace(**{attr: v}) for v in values]


def _full_history(n, value=10):
    """Snapshot-like objects carrying every tracked metric."""
    attrs = dict(
        active_user_count=value, reach_outs_30d=value, total_reach_outs=value,
        avg_replies_per_reach_out=value, percent_reach_outs_with_reply=value,
        active_partnerships=value, percent_users_reached_out=value,
        avg_response_time_hours=value, check_in_completion_rate=value,
    )
    return [SimpleNamespace(**{k: v + i for k, v in attrs.items()}) for i in range(n)]


class TestComputeTrend:

    def test_rolling_window_scenario(self):
        history = _history('x', [10, 12, 14, 16, 18, 20, 22, 24])
        window = window_values(history, 'x')
        assert window == [12, 14, 16, 18, 20, 22, 24]
        trend = compute_trend(24, window)
        assert trend == TrendIndicator(percent_change=100, is_positive=True)
        assert trend.to_dict() == {'value': 100, 'isPositive': True}

    def test_matches_formula_for_two_samples(self):
        trend = compute_trend(30, [40, 30])
        assert trend.percent_change == 25
        assert trend.is_positive is False

    def test_fewer_than_two_samples_is_none(self):
        assert compute_trend(5, [5]) is None
        assert compute_trend(5, []) is None
        assert compute_trend(5, None) is None

    def test_zero_baseline_is_none(self):
        assert compute_trend(10, [0, 4, 10]) is None

    def test_no_change_is_positive(self):
        trend = compute_trend(7, [7, 7])
        assert trend.percent_change == 0
        assert trend.is_positive is True

    def test_percent_change_rounds_half_up(self):
        assert compute_trend(205, [200, 205]).percent_change == 3

    def test_percent_change_never_negative(self):
        trend = compute_trend(1, [100, 1])
        assert trend.percent_change == 99
        assert trend.is_positive is False


class TestBuildTrends:

    def test_null_for_single_snapshot(self):
        history = _full_history(1)
        metrics = history[-1]
        trends = build_trends(metrics, history)
        assert len(trends) == 9
        assert all(v is None for v in trends.values())

    def test_uses_last_seven_snapshots(self):
        history = _full_history(10, value=10)   # values 10..19
        metrics = history[-1]
        trends = build_trends(metrics, history)
        # window = 13..19, current 19 → 46%
        assert trends['totalActiveUsers'] == {'value': 46, 'isPositive': True}
        assert trends['checkInCompletionRate'] == {'value': 46, 'isPositive': True}


class TestBuildSparklines:

    def test_last_seven_oldest_first(self):
        history = _full_history(9, value=0)
        sparklines = build_sparklines(history)
        assert sparklines['totalReachOuts'] == [{'value': v} for v in range(2, 9)]

    def test_short_history(self):
        sparklines = build_sparklines(_full_history(2, value=5))
        assert sparklines['activePartnerships'] == [{'value': 5}, {'value': 6}]

    def test_empty_history(self):
        sparklines = build_sparklines([])
        assert all(series == [] for series in sparklines.values())
