"""
AnalyticsDocument model — latest computed analytics per tenant.

Replaced wholesale after every successful run; the presentation layer reads
it by tenant id.
"""
from sqlalchemy import Column, Text, DateTime, JSON, ForeignKey

from tenant_analytics.database import Base


class AnalyticsDocument(Base):
    __tablename__ = 'analytics_documents'

    tenant_id = Column(Text, ForeignKey('tenants.id'), primary_key=True)
    stats = Column(JSON, default=dict)
    time_series = Column(JSON, default=dict)
    historical = Column(JSON, default=dict)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def to_dict(self):
        return {
            'tenantId': self.tenant_id,
            'stats': self.stats or {},
            'timeSeries': self.time_series or {},
            'historical': self.historical or {},
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
