"""
Funnel calculator — 5-step narrowing pipeline over unique users.

Each step is built from the previous step's set, so a user only advances by
satisfying every earlier condition. Percentages are relative to the previous
step (drop-off), not to the whole tenant.
"""
from dataclasses import dataclass
from typing import Dict, List, Set

from tenant_analytics.config import FUNNEL_LABELS
from tenant_analytics.analytics.metrics import percent
from tenant_analytics.analytics.records import TenantRecords


@dataclass
class FunnelStep:
    label: str
    absolute_count: int
    percent_of_previous_step: int

    def to_dict(self) -> Dict:
        return {
            'label': self.label,
            'value': self.absolute_count,
            'percentage': self.percent_of_previous_step,
        }


def funnel_user_sets(records: TenantRecords) -> List[Set[str]]:
    """The five unique-user sets, each a subset of the one before it."""
    active = {u.id for u in records.users}

    reached_out = {r.author_id for r in records.reach_outs if r.author_id in active}

    replies_by_reach_out = records.replies_by_reach_out()
    received_reply = {
        r.author_id for r in records.reach_outs
        if r.author_id in reached_out and replies_by_reach_out.get(r.id)
    }

    chatted = set()
    for thread in records.threads:
        for participant in (thread.user_a, thread.user_b):
            if participant in received_reply:
                chatted.add(participant)

    partnered = set()
    for p in records.partnerships:
        for member in (p.mentor_id, p.mentee_id):
            if member in chatted:
                partnered.add(member)

    return [active, reached_out, received_reply, chatted, partnered]


def compute_funnel(records: TenantRecords) -> List[FunnelStep]:
    """Build the labelled funnel. A tenant with no users reports 0 / 0% throughout."""
    sets = funnel_user_sets(records)
    steps = []
    previous = None
    for label, users in zip(FUNNEL_LABELS, sets):
        if previous is None:
            pct = 100 if users else 0
        else:
            pct = percent(len(users), len(previous))
        steps.append(FunnelStep(label=label, absolute_count=len(users), percent_of_previous_step=pct))
        previous = users
    return steps
