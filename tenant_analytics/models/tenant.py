"""
Tenant + TenantUser — the organizations the engine iterates, and their members.

Both are owned by the account subsystem; this engine only reads them.
"""
from sqlalchemy import Column, Text, DateTime, ForeignKey, Index
from sqlalchemy.sql import func

from tenant_analytics.database import Base


class Tenant(Base):
    __tablename__ = 'tenants'

    id = Column(Text, primary_key=True)
    name = Column(Text, default='')
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class DbTenantUser(Base):
    __tablename__ = 'tenant_users'
    __table_args__ = (
        Index('ix_tenant_users_tenant_id', 'tenant_id'),
    )

    id = Column(Text, primary_key=True)
    tenant_id = Column(Text, ForeignKey('tenants.id'), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
