"""
MetricSnapshot model — one immutable row of scalar metrics per tenant per run.

The append-only sequence is the only historical record: trends, sparklines and
the historical series are all rebuilt from it.
"""
from sqlalchemy import Column, Integer, Text, Float, DateTime, ForeignKey, UniqueConstraint

from tenant_analytics.database import Base


class MetricSnapshot(Base):
    __tablename__ = 'metric_snapshots'
    __table_args__ = (
        UniqueConstraint('tenant_id', 'timestamp', name='uq_metric_snapshot_tenant_timestamp'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Text, ForeignKey('tenants.id'), nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    active_user_count = Column(Integer, default=0)
    reach_outs_30d = Column(Integer, default=0)
    total_reach_outs = Column(Integer, default=0)
    avg_replies_per_reach_out = Column(Float, default=0.0)
    percent_reach_outs_with_reply = Column(Integer, default=0)
    active_partnerships = Column(Integer, default=0)
    percent_users_reached_out = Column(Integer, default=0)
    avg_response_time_hours = Column(Float, default=0.0)
    check_in_completion_rate = Column(Integer, default=0)
    check_ins_completed = Column(Integer, default=0)
    check_ins_possible = Column(Integer, default=0)
    reach_outs_today = Column(Integer, default=0)
    replies_today = Column(Integer, default=0)
