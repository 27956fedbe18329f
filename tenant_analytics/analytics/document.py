"""
Analytics document assembly + persistence.

The document has three parts read by the presentation layer:
  stats      — scalar metrics + trends
  timeSeries — funnel steps, check-in trend, trigger distribution, weekly activity
  historical — four-resolution series, activity series, sparklines
"""
import logging
from datetime import datetime
from typing import Dict, List, Sequence

from tenant_analytics.config import TRACKED_METRICS
from tenant_analytics.models.analytics_document import AnalyticsDocument
from tenant_analytics.analytics.historical import build_historical
from tenant_analytics.analytics.trends import build_trends, build_sparklines

logger = logging.getLogger('analytics.document')


def build_document(metrics, funnel: List, history: Sequence, now: datetime) -> Dict:
    """Assemble the full analytics document from this run's results + history."""
    updated = now.isoformat()

    stats = {key: getattr(metrics, attr) for attr, key in TRACKED_METRICS}
    stats['checkInsCompleted'] = metrics.check_ins_completed
    stats['checkInsPossible'] = metrics.check_ins_possible
    stats['trends'] = build_trends(metrics, history)
    stats['lastUpdated'] = updated

    time_series = {
        'activityData': metrics.activity_data,
        'funnelSteps': [step.to_dict() for step in funnel],
        'checkInTrendData': check_in_trend(metrics),
        'triggerData': metrics.trigger_distribution,
        'lastUpdated': updated,
    }

    historical = build_historical(history, now)
    historical['sparklines'] = build_sparklines(history)
    historical['lastUpdated'] = updated

    return {'stats': stats, 'timeSeries': time_series, 'historical': historical}


def check_in_trend(metrics) -> List[Dict]:
    """Completion rate per week of activity_data.

    Check-ins are not historized per week, so every week carries the current
    rate.
    """
    return [
        {'date': week['date'], 'completionRate': metrics.check_in_completion_rate}
        for week in metrics.activity_data
    ]


def persist_document(ctx, document: Dict) -> AnalyticsDocument:
    """Replace the tenant's stored document in one commit."""
    session = ctx.session
    try:
        row = session.get(AnalyticsDocument, ctx.tenant_id)
        if row is None:
            row = AnalyticsDocument(tenant_id=ctx.tenant_id)
            session.add(row)
        row.stats = document['stats']
        row.time_series = document['timeSeries']
        row.historical = document['historical']
        row.updated_at = ctx.now
        session.commit()
    except Exception:
        session.rollback()
        raise
    logger.info("Analytics document written for tenant %s", ctx.tenant_id)
    return row


def get_document(session, tenant_id: str):
    """Stored document for a tenant, or None."""
    return session.get(AnalyticsDocument, tenant_id)
