"""
Raw activity tables — reach-outs, replies, partnerships, check-ins, threads.

Rows are written upstream (and only surface here once moderation approved
them). Every table carries tenant_id so the reader can scope each query.
"""
from sqlalchemy import Column, Text, Integer, Date, DateTime, JSON, ForeignKey, Index
from sqlalchemy.sql import func

from tenant_analytics.database import Base


class DbReachOut(Base):
    __tablename__ = 'reach_outs'
    __table_args__ = (
        Index('ix_reach_outs_tenant_status_created', 'tenant_id', 'status', 'created_at'),
    )

    id = Column(Text, primary_key=True)
    tenant_id = Column(Text, ForeignKey('tenants.id'), nullable=False)
    author_id = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default='pending')
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class DbReply(Base):
    __tablename__ = 'replies'
    __table_args__ = (
        Index('ix_replies_tenant_parent', 'tenant_id', 'parent_reach_out_id'),
    )

    id = Column(Text, primary_key=True)
    tenant_id = Column(Text, ForeignKey('tenants.id'), nullable=False)
    parent_reach_out_id = Column(Text, ForeignKey('reach_outs.id'), nullable=False)
    author_id = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default='pending')
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class DbPartnership(Base):
    __tablename__ = 'partnerships'
    __table_args__ = (
        Index('ix_partnerships_tenant_status', 'tenant_id', 'status'),
    )

    id = Column(Text, primary_key=True)
    tenant_id = Column(Text, ForeignKey('tenants.id'), nullable=False)
    mentor_id = Column(Text, nullable=False)
    mentee_id = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default='active')   # 'active' | 'ended'
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    ended_at = Column(DateTime(timezone=True), nullable=True)
    last_check_in_date = Column(Date, nullable=True)


class DbCheckIn(Base):
    __tablename__ = 'check_ins'
    __table_args__ = (
        Index('ix_check_ins_tenant_partnership', 'tenant_id', 'partnership_id'),
    )

    id = Column(Text, primary_key=True)
    tenant_id = Column(Text, ForeignKey('tenants.id'), nullable=False)
    partnership_id = Column(Text, ForeignKey('partnerships.id'), nullable=False)
    date = Column(Date, nullable=False)
    temptation_level = Column(Integer, nullable=False, default=1)   # 1–5
    triggers = Column(JSON, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class DbThread(Base):
    __tablename__ = 'threads'
    __table_args__ = (
        Index('ix_threads_tenant_id', 'tenant_id'),
    )

    id = Column(Text, primary_key=True)
    tenant_id = Column(Text, ForeignKey('tenants.id'), nullable=False)
    user_a = Column(Text, nullable=False)
    user_b = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
