"""
Historical series builder — four chart resolutions from the snapshot history.

Every resolution goes through the same three steps:
  1. filter to the resolution's last N calendar days (relative to the run's `now`)
  2. bucket by UTC day or week, keeping the latest snapshot of each bucket
  3. stride-sample down to the target point count with sample_series()

The activity series (reach-outs / replies per period) is volume data, so it is
SUMMED into its output buckets instead of being sampled.
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence

from tenant_analytics.config import (
    RESOLUTIONS, ALL_TIME_LONG_SPAN_DAYS, ALL_TIME_LONG_SPAN_TARGET,
    ACTIVITY_SUM_DAYS, TRACKED_METRICS,
)
from tenant_analytics.analytics.records import as_utc

logger = logging.getLogger('analytics.historical')

_WEEKDAYS = ['Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun']
_MONTHS = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
           'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']


# ── Sampling ─────────────────────────────────────────────────────────────────

def sample_series(points: Sequence, target: int) -> List:
    """
    Reduce an ordered series to at most `target` points.

    Picks index floor(i * stride) for i in [0, target), stride = len / target.
    The most recent point always ends the result: if the stride skipped it, it
    takes the final slot, so a chart never looks stale and never grows past
    `target`.
    """
    points = list(points)
    if target <= 0:
        return []
    if len(points) <= target:
        return points

    # floor(i * len / target) in integer arithmetic
    indices = [i * len(points) // target for i in range(target)]
    indices[-1] = len(points) - 1
    return [points[i] for i in indices]


# ── Labels ───────────────────────────────────────────────────────────────────

def label_for(resolution: str, when) -> str:
    """'Mon 1/13' for 7d, '1/13' for 30d, 'Jan 13' for 90d and all."""
    day = when.date() if isinstance(when, datetime) else when
    if resolution == '7d':
        return f"{_WEEKDAYS[day.weekday()]} {day.month}/{day.day}"
    if resolution == '30d':
        return f"{day.month}/{day.day}"
    return f"{_MONTHS[day.month - 1]} {day.day}"


# ── Windowing + bucketing ────────────────────────────────────────────────────

def _timestamp(snapshot) -> datetime:
    return as_utc(snapshot.timestamp)


def in_window(history: Sequence, now: datetime, window_days: Optional[int]) -> List:
    """Snapshots from the last `window_days` UTC calendar days (today included), oldest first."""
    ordered = sorted(history, key=_timestamp)
    if window_days is None:
        return ordered
    start_of_today = as_utc(now).replace(hour=0, minute=0, second=0, microsecond=0)
    cutoff = start_of_today - timedelta(days=window_days - 1)
    return [s for s in ordered if _timestamp(s) >= cutoff]


def bucket_latest(snapshots: Sequence, bucket_days: int = 1) -> List:
    """Keep the latest snapshot of each `bucket_days`-wide UTC day bucket.

    Buckets are counted from the first snapshot's day. Input must be ordered.
    """
    if not snapshots:
        return []
    origin = _timestamp(snapshots[0]).date()
    buckets = {}
    for snapshot in snapshots:
        key = (_timestamp(snapshot).date() - origin).days // bucket_days
        buckets[key] = snapshot
    return [buckets[key] for key in sorted(buckets)]


def all_time_target(snapshots: Sequence) -> int:
    """Point count for 'all', from the real timestamp span of the history."""
    target = RESOLUTIONS['all']['target']
    if len(snapshots) < 2:
        return target
    span = _timestamp(snapshots[-1]) - _timestamp(snapshots[0])
    if span > timedelta(days=ALL_TIME_LONG_SPAN_DAYS):
        return ALL_TIME_LONG_SPAN_TARGET
    return target


def resolution_points(history: Sequence, now: datetime) -> Dict[str, List]:
    """Sampled snapshots per resolution, shared by every metric series."""
    points = {}
    for resolution, res in RESOLUTIONS.items():
        windowed = in_window(history, now, res['window_days'])
        bucketed = bucket_latest(windowed, res['bucket_days'])
        target = all_time_target(windowed) if resolution == 'all' else res['target']
        points[resolution] = sample_series(bucketed, target)
    return points


# ── Series ───────────────────────────────────────────────────────────────────

def metric_series(points: Dict[str, List], attr: str) -> Dict[str, List[Dict]]:
    return {
        resolution: [
            {'date': label_for(resolution, _timestamp(s)), 'value': getattr(s, attr) or 0}
            for s in snapshots
        ]
        for resolution, snapshots in points.items()
    }


def build_activity_series(history: Sequence, now: datetime) -> Dict[str, List[Dict]]:
    """Reach-outs / replies per period, summed (never sampled) into buckets."""
    series = {}
    for resolution, res in RESOLUTIONS.items():
        days = bucket_latest(in_window(history, now, res['window_days']), 1)
        sum_days = ACTIVITY_SUM_DAYS[resolution]

        chunks = {}
        if days:
            origin = _timestamp(days[0]).date()
            for snapshot in days:
                day = _timestamp(snapshot).date()
                key = (day - origin).days // sum_days
                chunk = chunks.setdefault(key, {'day': day, 'reachOuts': 0, 'replies': 0})
                chunk['reachOuts'] += snapshot.reach_outs_today or 0
                chunk['replies'] += snapshot.replies_today or 0

        series[resolution] = [
            {
                'date': label_for(resolution, chunks[key]['day']),
                'reachOuts': chunks[key]['reachOuts'],
                'replies': chunks[key]['replies'],
            }
            for key in sorted(chunks)
        ]
    return series


def build_historical(history: Sequence, now: datetime) -> Dict:
    """Every tracked metric at four resolutions, plus the activity series."""
    points = resolution_points(history, now)
    historical = {key: metric_series(points, attr) for attr, key in TRACKED_METRICS}
    historical['activityData'] = build_activity_series(history, now)
    logger.debug("Built historical series from %d snapshots (all=%d points)",
                 len(history), len(points['all']))
    return historical
