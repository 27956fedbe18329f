"""
Trend calculator — current value vs the oldest value in a rolling window.

The window is the most recent TREND_WINDOW snapshot values, oldest first, and
already includes the snapshot written this run.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from tenant_analytics.config import TREND_WINDOW, SPARKLINE_POINTS, TRACKED_METRICS
from tenant_analytics.analytics.metrics import round_half_up


@dataclass
class TrendIndicator:
    percent_change: int
    is_positive: bool

    def to_dict(self) -> Dict:
        return {'value': self.percent_change, 'isPositive': self.is_positive}


def compute_trend(current: float, window: Sequence[float]) -> Optional[TrendIndicator]:
    """Compare `current` to window[0].

    Returns None when the window holds fewer than 2 samples or the baseline is
    exactly zero.
    """
    if window is None or len(window) < 2:
        return None

    oldest = window[0] or 0
    if oldest == 0:
        return None

    change = abs(current - oldest) / oldest * 100
    return TrendIndicator(
        percent_change=round_half_up(change),
        is_positive=current >= oldest,
    )


def window_values(history: Sequence, attr: str, size: int = TREND_WINDOW) -> List[float]:
    """Last `size` values of `attr` from a chronologically ordered history."""
    return [getattr(s, attr) or 0 for s in list(history)[-size:]]


def build_trends(metrics, history: Sequence) -> Dict[str, Optional[Dict]]:
    """Trend per tracked metric, keyed by document name."""
    trends = {}
    for attr, key in TRACKED_METRICS:
        trend = compute_trend(getattr(metrics, attr), window_values(history, attr))
        trends[key] = trend.to_dict() if trend else None
    return trends


def build_sparklines(history: Sequence) -> Dict[str, List[Dict]]:
    """Last SPARKLINE_POINTS values per tracked metric, oldest → newest."""
    return {
        key: [{'value': v} for v in window_values(history, attr, SPARKLINE_POINTS)]
        for attr, key in TRACKED_METRICS
    }
