"""
Snapshot store — append-only, tenant-scoped MetricSnapshot persistence.

append_snapshot() commits on its own so the row survives whatever the later
pipeline stages do. Snapshots are never updated or deleted here.
"""
import logging
from typing import List

from sqlalchemy import select, func

from tenant_analytics.models.metric_snapshot import MetricSnapshot
from tenant_analytics.analytics.records import as_utc

logger = logging.getLogger('services.snapshots')


class SnapshotOrderError(Exception):
    """A snapshot timestamp did not advance past the tenant's latest one."""


def latest_timestamp(ctx):
    """Newest snapshot timestamp for the tenant, or None."""
    value = ctx.session.scalar(
        select(func.max(MetricSnapshot.timestamp))
        .where(MetricSnapshot.tenant_id == ctx.tenant_id)
    )
    return as_utc(value)


def append_snapshot(ctx, metrics) -> MetricSnapshot:
    """Insert + commit one snapshot for ctx.tenant_id at ctx.now.

    Raises SnapshotOrderError if ctx.now is not strictly after the latest
    stored timestamp. Store errors roll back and propagate; retrying is the
    caller's decision.
    """
    timestamp = as_utc(ctx.now)
    latest = latest_timestamp(ctx)
    if latest is not None and timestamp <= latest:
        raise SnapshotOrderError(
            f"Snapshot for tenant {ctx.tenant_id} at {timestamp.isoformat()} "
            f"does not advance past {latest.isoformat()}"
        )

    snapshot = MetricSnapshot(
        tenant_id=ctx.tenant_id,
        timestamp=timestamp,
        **metrics.snapshot_fields(),
    )
    session = ctx.session
    try:
        session.add(snapshot)
        session.commit()
    except Exception:
        session.rollback()
        logger.error("Failed to persist snapshot for tenant %s", ctx.tenant_id, exc_info=True)
        raise

    logger.info("Snapshot stored for tenant %s at %s", ctx.tenant_id, timestamp.isoformat())
    return snapshot


def load_history(ctx) -> List[MetricSnapshot]:
    """Full snapshot history for the tenant, oldest → newest."""
    stmt = (
        select(MetricSnapshot)
        .where(MetricSnapshot.tenant_id == ctx.tenant_id)
        .order_by(MetricSnapshot.timestamp.asc())
    )
    return list(ctx.session.scalars(stmt))
