"""
Metrics calculator — one point-in-time snapshot of scalar statistics.

Pure Python over TenantRecords; no store access. Every ratio guards its
denominator so empty tenants resolve to 0 instead of raising.

Denominators differ on purpose:
- avg_replies_per_reach_out divides by ALL approved reach-outs (overall
  responsiveness, zero-reply reach-outs included).
- avg_response_time_hours averages only reach-outs that got a reply;
  unanswered ones are excluded, not counted as zero.
"""
import logging
from collections import Counter
from dataclasses import dataclass, field, asdict
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List

from tenant_analytics.config import (
    REACH_OUT_WINDOW_DAYS, HIGH_TEMPTATION_LEVEL, TRIGGER_TOP_N, ACTIVITY_WEEKS,
)
from tenant_analytics.analytics.records import TenantRecords, as_utc

logger = logging.getLogger('analytics.metrics')

SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400


def round_half_up(value, digits: int = 0):
    """Round like a dashboard reader expects (2.5 → 3), not banker's rounding."""
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if digits == 0 else float(rounded)


def percent(numerator, denominator) -> int:
    """Integer percentage with a zero-safe denominator."""
    return round_half_up(100 * numerator / max(1, denominator))


@dataclass
class TenantMetrics:
    """Scalar snapshot fields plus per-run breakdowns that are not historized."""
    active_user_count: int = 0
    reach_outs_30d: int = 0
    total_reach_outs: int = 0
    avg_replies_per_reach_out: float = 0.0
    percent_reach_outs_with_reply: int = 0
    active_partnerships: int = 0
    percent_users_reached_out: int = 0
    avg_response_time_hours: float = 0.0
    check_in_completion_rate: int = 0
    check_ins_completed: int = 0
    check_ins_possible: int = 0
    reach_outs_today: int = 0
    replies_today: int = 0
    total_replies: int = 0
    trigger_distribution: List[Dict] = field(default_factory=list)
    activity_data: List[Dict] = field(default_factory=list)

    # Columns persisted on MetricSnapshot
    SNAPSHOT_FIELDS = (
        'active_user_count', 'reach_outs_30d', 'total_reach_outs',
        'avg_replies_per_reach_out', 'percent_reach_outs_with_reply',
        'active_partnerships', 'percent_users_reached_out',
        'avg_response_time_hours', 'check_in_completion_rate',
        'check_ins_completed', 'check_ins_possible',
        'reach_outs_today', 'replies_today',
    )

    def snapshot_fields(self) -> Dict:
        data = asdict(self)
        return {k: data[k] for k in self.SNAPSHOT_FIELDS}


def compute_metrics(records: TenantRecords, now: datetime) -> TenantMetrics:
    """Turn one tenant's raw records into a TenantMetrics snapshot."""
    now = as_utc(now)
    m = TenantMetrics()

    m.active_user_count = len(records.users)

    # ── Reach-outs + replies ──
    window_start = now - timedelta(days=REACH_OUT_WINDOW_DAYS)
    m.total_reach_outs = len(records.reach_outs)
    m.reach_outs_30d = sum(1 for r in records.reach_outs if _between(r.created_at, window_start, now))

    replies_by_reach_out = records.replies_by_reach_out()
    response_hours = []
    with_reply = 0
    for reach_out in records.reach_outs:
        replies = replies_by_reach_out.get(reach_out.id, [])
        m.total_replies += len(replies)
        if not replies:
            continue
        with_reply += 1
        dated = [reply.created_at for reply in replies if reply.created_at is not None]
        if reach_out.created_at is None or not dated:
            continue
        response_hours.append((min(dated) - reach_out.created_at).total_seconds() / SECONDS_PER_HOUR)

    m.avg_replies_per_reach_out = round_half_up(m.total_replies / max(1, m.total_reach_outs), 1)
    m.percent_reach_outs_with_reply = percent(with_reply, m.total_reach_outs)
    if response_hours:
        m.avg_response_time_hours = round_half_up(sum(response_hours) / len(response_hours), 1)

    authors = {r.author_id for r in records.reach_outs if r.author_id}
    m.percent_users_reached_out = percent(len(authors), m.active_user_count)

    # ── Partnerships + check-ins ──
    m.active_partnerships = sum(1 for p in records.partnerships if p.status == 'active')
    m.check_ins_completed, m.check_ins_possible = _check_in_totals(records, now)
    rate = percent(m.check_ins_completed, m.check_ins_possible) if m.check_ins_possible else 0
    m.check_in_completion_rate = min(100, max(0, rate))

    m.trigger_distribution = compute_trigger_distribution(records)

    # ── Today's activity (feeds the historical activity series) ──
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    m.reach_outs_today = sum(
        1 for r in records.reach_outs if _between(r.created_at, start_of_day, now, inclusive=True)
    )
    m.replies_today = sum(
        1 for replies in replies_by_reach_out.values()
        for reply in replies if _between(reply.created_at, start_of_day, now, inclusive=True)
    )

    m.activity_data = compute_weekly_activity(records, now, replies_by_reach_out)

    logger.debug("Computed metrics: users=%d reach_outs=%d replies=%d partnerships=%d",
                 m.active_user_count, m.total_reach_outs, m.total_replies, m.active_partnerships)
    return m


def _between(when, start, end, inclusive=False) -> bool:
    """start <= when < end (or <= end). Undated records fall outside every range."""
    if when is None:
        return False
    return start <= when <= end if inclusive else start <= when < end


def _check_in_totals(records: TenantRecords, now: datetime):
    """(check-ins completed, check-ins possible) across active AND ended partnerships.

    Possible = whole days each partnership has been active (ended_at or now).
    Partnerships without a creation time contribute neither side.
    """
    counted = {}
    for p in records.partnerships:
        if p.created_at is None:
            continue
        end = p.ended_at or now
        counted[p.id] = max(0, int((end - p.created_at).total_seconds() // SECONDS_PER_DAY))

    completed = sum(1 for c in records.check_ins if c.partnership_id in counted)
    return completed, sum(counted.values())


def compute_trigger_distribution(records: TenantRecords) -> List[Dict]:
    """Top trigger tags among high-temptation check-ins, as % of those check-ins."""
    qualifying = [c for c in records.check_ins if (c.temptation_level or 0) >= HIGH_TEMPTATION_LEVEL]
    if not qualifying:
        return []

    counts = Counter()
    for check_in in qualifying:
        counts.update(check_in.triggers)

    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))[:TRIGGER_TOP_N]
    return [
        {'trigger': trigger, 'percentage': percent(count, len(qualifying))}
        for trigger, count in ranked
    ]


def compute_weekly_activity(records: TenantRecords, now: datetime, replies_by_reach_out=None) -> List[Dict]:
    """Reach-outs and their replies per week, oldest week first."""
    if replies_by_reach_out is None:
        replies_by_reach_out = records.replies_by_reach_out()

    weeks = []
    for i in range(ACTIVITY_WEEKS - 1, -1, -1):
        week_start = now - timedelta(days=(i + 1) * 7)
        week_end = now - timedelta(days=i * 7)
        in_week = [r for r in records.reach_outs if _between(r.created_at, week_start, week_end)]
        weeks.append({
            'date': week_start.date().isoformat(),
            'reachOuts': len(in_week),
            'replies': sum(len(replies_by_reach_out.get(r.id, [])) for r in in_week),
        })
    return weeks
