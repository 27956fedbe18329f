"""
Plain record types the calculators work on.

The reader turns ORM rows into these so that metrics, funnel and trend code
never touch a session and can be exercised with hand-built fixtures.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import FrozenSet, List, Optional


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on read)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class TenantUser:
    id: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ReachOut:
    id: str
    author_id: str
    created_at: Optional[datetime]
    status: str = 'approved'


@dataclass(frozen=True)
class Reply:
    id: str
    parent_reach_out_id: str
    author_id: str
    created_at: Optional[datetime]
    status: str = 'approved'


@dataclass(frozen=True)
class Partnership:
    id: str
    mentor_id: str
    mentee_id: str
    status: str
    created_at: Optional[datetime]
    ended_at: Optional[datetime] = None
    last_check_in_date: Optional[date] = None


@dataclass(frozen=True)
class CheckIn:
    id: str
    partnership_id: str
    date: date
    temptation_level: int
    triggers: FrozenSet[str] = frozenset()
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ConversationThread:
    id: str
    user_a: str
    user_b: str
    created_at: Optional[datetime] = None


@dataclass
class TenantRecords:
    """Everything the calculators need for one tenant, already approved-only."""
    users: List[TenantUser] = field(default_factory=list)
    reach_outs: List[ReachOut] = field(default_factory=list)
    replies: List[Reply] = field(default_factory=list)
    partnerships: List[Partnership] = field(default_factory=list)
    check_ins: List[CheckIn] = field(default_factory=list)
    threads: List[ConversationThread] = field(default_factory=list)

    def replies_by_reach_out(self):
        """Map reach-out id → its replies, limited to reach-outs in this set."""
        known = {r.id for r in self.reach_outs}
        grouped = {r.id: [] for r in self.reach_outs}
        for reply in self.replies:
            if reply.parent_reach_out_id in known:
                grouped[reply.parent_reach_out_id].append(reply)
        return grouped
