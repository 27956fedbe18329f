"""
Record reader — tenant-scoped queries over the raw activity tables.

Every query is pinned to the context's tenant id. Callers can add equality
filters, a time range, ordering and a limit; load_all() pulls the full
approved record set the calculators need for one run.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select

from tenant_analytics.database import apply_query_timeout
from tenant_analytics.models.tenant import DbTenantUser
from tenant_analytics.models.activity import (
    DbReachOut, DbReply, DbPartnership, DbCheckIn, DbThread,
)
from tenant_analytics.analytics.records import (
    as_utc, TenantRecords, TenantUser, ReachOut, Reply, Partnership, CheckIn,
    ConversationThread,
)

logger = logging.getLogger('services.records')

APPROVED = 'approved'

RECORD_TYPES = {
    'users':        DbTenantUser,
    'reach_outs':   DbReachOut,
    'replies':      DbReply,
    'partnerships': DbPartnership,
    'check_ins':    DbCheckIn,
    'threads':      DbThread,
}


class RecordReader:
    """Reads one tenant's raw records through the context's session."""

    def __init__(self, ctx):
        self.ctx = ctx
        apply_query_timeout(ctx.session, ctx.query_timeout)

    def query(
        self,
        record_type: str,
        where: Optional[Dict[str, Any]] = None,
        since=None,
        until=None,
        time_field: str = 'created_at',
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Any]:
        """
        Run a tenant-scoped query and return ORM rows.

        Args:
            record_type: key of RECORD_TYPES, e.g. 'reach_outs'.
            where:       equality filters, {column: value}.
            since:       inclusive lower bound on time_field.
            until:       exclusive upper bound on time_field.
            order_by:    column name to sort by.
            limit:       max rows.
        """
        model = RECORD_TYPES.get(record_type)
        if model is None:
            raise ValueError(f"Unknown record type '{record_type}'. "
                             f"Available: {sorted(RECORD_TYPES)}")

        stmt = select(model).where(model.tenant_id == self.ctx.tenant_id)

        for column_name, value in (where or {}).items():
            stmt = stmt.where(_column(model, column_name) == value)

        if since is not None or until is not None:
            column = _column(model, time_field)
            if since is not None:
                stmt = stmt.where(column >= since)
            if until is not None:
                stmt = stmt.where(column < until)

        if order_by:
            column = _column(model, order_by)
            stmt = stmt.order_by(column.desc() if descending else column.asc())

        if limit is not None:
            stmt = stmt.limit(limit)

        return list(self.ctx.session.scalars(stmt))

    def load_all(self) -> TenantRecords:
        """Load every collection the calculators need, approved-only where moderated."""
        records = TenantRecords(
            users=[_to_user(row) for row in self.query('users')],
            reach_outs=[_to_reach_out(row) for row in
                        self.query('reach_outs', where={'status': APPROVED}, order_by='created_at')],
            replies=[_to_reply(row) for row in
                     self.query('replies', where={'status': APPROVED}, order_by='created_at')],
            partnerships=[_to_partnership(row) for row in self.query('partnerships')],
            check_ins=[_to_check_in(row) for row in self.query('check_ins')],
            threads=[_to_thread(row) for row in self.query('threads')],
        )
        logger.info(
            "Tenant %s: %d users, %d reach-outs, %d replies, %d partnerships, %d check-ins, %d threads",
            self.ctx.tenant_id, len(records.users), len(records.reach_outs), len(records.replies),
            len(records.partnerships), len(records.check_ins), len(records.threads),
        )
        return records


def _column(model, name):
    column = getattr(model, name, None)
    if column is None or not hasattr(column, 'property'):
        raise ValueError(f"{model.__tablename__} has no column '{name}'")
    return column


# ── Row → record converters ──────────────────────────────────────────────────

def _to_user(row) -> TenantUser:
    return TenantUser(id=row.id, created_at=as_utc(row.created_at))


def _to_reach_out(row) -> ReachOut:
    return ReachOut(
        id=row.id,
        author_id=row.author_id,
        created_at=as_utc(row.created_at),
        status=row.status,
    )


def _to_reply(row) -> Reply:
    return Reply(
        id=row.id,
        parent_reach_out_id=row.parent_reach_out_id,
        author_id=row.author_id,
        created_at=as_utc(row.created_at),
        status=row.status,
    )


def _to_partnership(row) -> Partnership:
    return Partnership(
        id=row.id,
        mentor_id=row.mentor_id,
        mentee_id=row.mentee_id,
        status=row.status,
        created_at=as_utc(row.created_at),
        ended_at=as_utc(row.ended_at),
        last_check_in_date=row.last_check_in_date,
    )


def _to_check_in(row) -> CheckIn:
    return CheckIn(
        id=row.id,
        partnership_id=row.partnership_id,
        date=row.date,
        temptation_level=row.temptation_level or 0,
        triggers=frozenset(row.triggers or []),
        created_at=as_utc(row.created_at),
    )


def _to_thread(row) -> ConversationThread:
    return ConversationThread(
        id=row.id,
        user_a=row.user_a,
        user_b=row.user_b,
        created_at=as_utc(row.created_at),
    )
