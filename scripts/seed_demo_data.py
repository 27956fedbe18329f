#!/usr/bin/env python3
"""
Seed a demo tenant with raw activity and backfilled snapshot history.

Creates one tenant with users, approved reach-outs and replies, private
threads, partnerships (active + ended) and check-ins, then replays the
analytics pipeline once per day for the backfill window so the historical
series have something to draw.

Usage:
    python scripts/seed_demo_data.py                    # seed + 120 days of history
    python scripts/seed_demo_data.py --days 30
    python scripts/seed_demo_data.py --clear            # wipe the demo tenant first

Requires: DATABASE_URL set (or defaults to sqlite:///local.db).
"""
import sys
import os
import random
import argparse
from datetime import datetime, timezone, timedelta

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tenant_analytics import create_app
from tenant_analytics.database import get_session, engine, Base
from tenant_analytics.models.tenant import Tenant, DbTenantUser
from tenant_analytics.models.activity import (
    DbReachOut, DbReply, DbPartnership, DbCheckIn, DbThread,
)
from tenant_analytics.models.metric_snapshot import MetricSnapshot
from tenant_analytics.models.analytics_document import AnalyticsDocument
from tenant_analytics.analytics.orchestrator import run_tenant

DEMO_TENANT = 'seed-demo-church'
TRIGGERS = ['stress', 'loneliness', 'boredom', 'late night', 'social media', 'conflict', 'fatigue']


def seed_tenant(session, days, rng):
    """Insert the demo tenant and its raw records spread over `days`."""
    now = datetime.now(timezone.utc)
    start = now - timedelta(days=days)

    session.add(Tenant(id=DEMO_TENANT, name='Demo Church', created_at=start))
    users = [f'{DEMO_TENANT}-user-{i:03d}' for i in range(60)]
    for uid in users:
        session.add(DbTenantUser(id=uid, tenant_id=DEMO_TENANT,
                                 created_at=start + timedelta(days=rng.uniform(0, days / 2))))
    session.flush()

    reach_out_count = 0
    reply_count = 0
    for i in range(days * 2):
        created = start + timedelta(hours=rng.uniform(0, days * 24))
        ro_id = f'{DEMO_TENANT}-ro-{i:05d}'
        session.add(DbReachOut(id=ro_id, tenant_id=DEMO_TENANT, author_id=rng.choice(users),
                               status='approved', created_at=created))
        reach_out_count += 1
        for j in range(rng.choice([0, 0, 1, 1, 2, 3])):
            session.add(DbReply(
                id=f'{ro_id}-reply-{j}', tenant_id=DEMO_TENANT, parent_reach_out_id=ro_id,
                author_id=rng.choice(users), status='approved',
                created_at=created + timedelta(hours=rng.uniform(0.2, 30)),
            ))
            reply_count += 1

    for i in range(25):
        a, b = rng.sample(users, 2)
        session.add(DbThread(id=f'{DEMO_TENANT}-thread-{i:03d}', tenant_id=DEMO_TENANT,
                             user_a=a, user_b=b, created_at=start + timedelta(days=rng.uniform(0, days))))

    check_in_count = 0
    for i in range(12):
        mentor, mentee = rng.sample(users, 2)
        created = start + timedelta(days=rng.uniform(0, days * 0.7))
        ended = created + timedelta(days=rng.uniform(10, 40)) if i % 4 == 0 else None
        if ended and ended > now:
            ended = None
        p_id = f'{DEMO_TENANT}-partner-{i:03d}'
        session.add(DbPartnership(id=p_id, tenant_id=DEMO_TENANT, mentor_id=mentor, mentee_id=mentee,
                                  status='ended' if ended else 'active',
                                  created_at=created, ended_at=ended))
        session.flush()
        day = created.date()
        last_day = (ended or now).date()
        while day < last_day:
            if rng.random() < 0.6:
                level = rng.randint(1, 5)
                session.add(DbCheckIn(
                    id=f'{p_id}-{day.isoformat()}', tenant_id=DEMO_TENANT, partnership_id=p_id,
                    date=day, temptation_level=level,
                    triggers=rng.sample(TRIGGERS, rng.randint(0, 3)) if level >= 3 else [],
                ))
                check_in_count += 1
            day += timedelta(days=1)

    session.commit()
    print(f'  Tenant {DEMO_TENANT}: {len(users)} users, {reach_out_count} reach-outs, '
          f'{reply_count} replies, {check_in_count} check-ins')


def backfill_snapshots(days):
    """Replay the pipeline once per day, oldest first."""
    now = datetime.now(timezone.utc)
    for offset in range(days, -1, -1):
        result = run_tenant(DEMO_TENANT, now=now - timedelta(days=offset))
        if result.status != 'completed':
            print(f'  Backfill {offset}d ago: {result.status} — {result.error}')
    print(f'  Backfilled {days + 1} daily snapshots')


def clear_seeded_data(session):
    """Remove the demo tenant and everything hanging off it."""
    for model in (AnalyticsDocument, MetricSnapshot, DbCheckIn, DbPartnership, DbThread,
                  DbReply, DbReachOut, DbTenantUser):
        session.query(model).filter(model.tenant_id == DEMO_TENANT).delete(synchronize_session=False)
    deleted = session.query(Tenant).filter(Tenant.id == DEMO_TENANT).delete(synchronize_session=False)
    session.commit()
    print(f'Cleared demo tenant ({deleted} tenant row).')


def main():
    parser = argparse.ArgumentParser(description='Seed a demo tenant for local analytics runs')
    parser.add_argument('--days', type=int, default=120, help='Days of activity + snapshot history')
    parser.add_argument('--seed', type=int, default=7, help='Random seed')
    parser.add_argument('--clear', action='store_true', help='Clear the demo tenant before seeding')
    parser.add_argument('--clear-only', action='store_true', help='Only clear, do not re-seed')
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        # Ensure tables exist (for SQLite local dev)
        Base.metadata.create_all(engine)

        session = get_session()
        try:
            if args.clear or args.clear_only:
                clear_seeded_data(session)
                if args.clear_only:
                    return

            print('Seeding demo data...')
            seed_tenant(session, args.days, random.Random(args.seed))
        except Exception as e:
            session.rollback()
            print(f'Error: {e}')
            raise
        finally:
            session.close()

        backfill_snapshots(args.days)
        print(f'\nDone! GET /api/analytics/{DEMO_TENANT} to inspect the document.')


if __name__ == '__main__':
    main()
