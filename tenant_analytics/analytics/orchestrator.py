"""
Orchestrator — runs the analytics pipeline for every tenant.

Per tenant, strictly in order:
  READ RECORDS → METRICS → FUNNEL → WRITE SNAPSHOT → READ HISTORY
  → TRENDS + HISTORICAL → WRITE DOCUMENT

Tenants run concurrently on a bounded thread pool, each with its own session
and TenantContext. One tenant failing never stops the batch; its error is
logged with the tenant id and no document is written for it.
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import select

from tenant_analytics.config import (
    ANALYTICS_MAX_WORKERS, STORE_QUERY_TIMEOUT_SECONDS, BATCH_JOB_TIMEOUT,
)
from tenant_analytics.database import get_session
from tenant_analytics.models.tenant import Tenant
from tenant_analytics.analytics.context import TenantContext
from tenant_analytics.analytics.metrics import compute_metrics
from tenant_analytics.analytics.funnel import compute_funnel
from tenant_analytics.analytics.document import build_document, persist_document
from tenant_analytics.services.records import RecordReader
from tenant_analytics.services.snapshots import append_snapshot, load_history
from tenant_analytics.services.notifications import notify_batch_complete

logger = logging.getLogger('analytics.orchestrator')


class TenantNotFoundError(Exception):
    """Manual trigger for a tenant id that does not exist."""


class PartialRunError(Exception):
    """The snapshot was committed but a later stage failed."""

    def __init__(self, tenant_id: str, cause: Exception):
        super().__init__(f"Tenant {tenant_id}: snapshot stored, document not written ({cause})")
        self.tenant_id = tenant_id
        self.cause = cause


@dataclass
class TenantRunResult:
    tenant_id: str
    status: str                 # 'completed' | 'partial' | 'failed'
    error: str = ''
    snapshot_written: bool = False
    duration_seconds: float = 0.0


@dataclass
class BatchSummary:
    started_at: datetime
    finished_at: Optional[datetime] = None
    results: List[TenantRunResult] = field(default_factory=list)

    def _with_status(self, status):
        return [r for r in self.results if r.status == status]

    @property
    def succeeded(self) -> List[TenantRunResult]:
        return self._with_status('completed')

    @property
    def partial(self) -> List[TenantRunResult]:
        return self._with_status('partial')

    @property
    def failed(self) -> List[TenantRunResult]:
        return self._with_status('failed')

    def to_dict(self) -> Dict:
        return {
            'started_at': self.started_at.isoformat(),
            'finished_at': self.finished_at.isoformat() if self.finished_at else None,
            'succeeded': len(self.succeeded),
            'partial': len(self.partial),
            'failed': len(self.failed),
            'results': [asdict(r) for r in self.results],
        }


# ── Lazy RQ queue (avoids import-time Redis connection) ───────────────────

_queue = None


def _get_queue():
    global _queue
    if _queue is None:
        from tenant_analytics.extensions import redis_client
        from rq import Queue
        _queue = Queue('analytics', connection=redis_client)
    return _queue


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Pipeline ─────────────────────────────────────────────────────────────────

def run_tenant_pipeline(ctx: TenantContext) -> Dict:
    """Run every stage for one tenant and return the stored document.

    Raises PartialRunError when a stage after the snapshot write fails; any
    earlier error propagates unchanged.
    """
    records = RecordReader(ctx).load_all()
    metrics = compute_metrics(records, ctx.now)
    funnel = compute_funnel(records)

    append_snapshot(ctx, metrics)

    try:
        history = load_history(ctx)
        document = build_document(metrics, funnel, history, ctx.now)
        persist_document(ctx, document)
    except Exception as e:
        ctx.session.rollback()
        raise PartialRunError(ctx.tenant_id, e) from e

    return document


def run_tenant(tenant_id: str, now: datetime = None, query_timeout: float = None) -> TenantRunResult:
    """Batch entry for one tenant. Never raises; the outcome is in the result."""
    started = time.monotonic()
    session = get_session()
    ctx = TenantContext(
        tenant_id=tenant_id,
        now=now or _utcnow(),
        session=session,
        query_timeout=query_timeout if query_timeout is not None else STORE_QUERY_TIMEOUT_SECONDS,
    )
    try:
        run_tenant_pipeline(ctx)
        result = TenantRunResult(tenant_id=tenant_id, status='completed', snapshot_written=True)
    except PartialRunError as e:
        logger.error("Tenant %s: snapshot recorded but analytics document incomplete: %s",
                     tenant_id, e.cause, exc_info=True, extra={'tenant_id': tenant_id})
        result = TenantRunResult(tenant_id=tenant_id, status='partial',
                                 error=str(e.cause), snapshot_written=True)
    except Exception as e:
        session.rollback()
        logger.error("Tenant %s analytics failed: %s", tenant_id, e,
                     exc_info=True, extra={'tenant_id': tenant_id})
        result = TenantRunResult(tenant_id=tenant_id, status='failed', error=str(e))
    finally:
        session.close()

    result.duration_seconds = round(time.monotonic() - started, 3)
    return result


def list_tenant_ids(session) -> List[str]:
    return list(session.scalars(select(Tenant.id).order_by(Tenant.id)))


def run_all_tenants(max_workers: int = None, now: datetime = None,
                    query_timeout: float = None) -> BatchSummary:
    """
    Scheduled entry point: process every tenant on a bounded worker pool.

    All tenants in one batch share the same reference instant.
    """
    now = now or _utcnow()
    summary = BatchSummary(started_at=now)

    session = get_session()
    try:
        tenant_ids = list_tenant_ids(session)
    finally:
        session.close()

    workers = max(1, max_workers or ANALYTICS_MAX_WORKERS)
    logger.info("Starting analytics batch for %d tenants (workers=%d)", len(tenant_ids), workers)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {
            pool.submit(run_tenant, tenant_id, now, query_timeout): tenant_id
            for tenant_id in tenant_ids
        }
        for future in as_completed(futures):
            tenant_id = futures[future]
            try:
                summary.results.append(future.result())
            except Exception as e:
                logger.error("Tenant %s worker crashed: %s", tenant_id, e,
                             exc_info=True, extra={'tenant_id': tenant_id})
                summary.results.append(TenantRunResult(tenant_id=tenant_id, status='failed', error=str(e)))

    summary.results.sort(key=lambda r: r.tenant_id)
    summary.finished_at = _utcnow()
    logger.info("Analytics batch complete: %d succeeded, %d partial, %d failed",
                len(summary.succeeded), len(summary.partial), len(summary.failed))

    notify_batch_complete(summary)
    return summary


def refresh_tenant(tenant_id: str, now: datetime = None, query_timeout: float = None) -> Dict:
    """
    Manual trigger: run the full pipeline for one tenant synchronously.

    Unlike the batch path, errors propagate to the caller.
    """
    session = get_session()
    try:
        if session.get(Tenant, tenant_id) is None:
            raise TenantNotFoundError(f"Tenant '{tenant_id}' not found")

        logger.info("Manual analytics refresh for tenant %s", tenant_id)
        ctx = TenantContext(
            tenant_id=tenant_id,
            now=now or _utcnow(),
            session=session,
            query_timeout=query_timeout if query_timeout is not None else STORE_QUERY_TIMEOUT_SECONDS,
        )
        try:
            return run_tenant_pipeline(ctx)
        except PartialRunError as e:
            logger.error("Tenant %s: snapshot recorded but analytics document incomplete: %s",
                         tenant_id, e.cause, exc_info=True, extra={'tenant_id': tenant_id})
            raise
    finally:
        session.close()


def enqueue_batch():
    """Queue run_all_tenants as a background RQ job and return the job."""
    job = _get_queue().enqueue(run_all_tenants, job_timeout=BATCH_JOB_TIMEOUT)
    logger.info("Enqueued analytics batch job %s", job.id)
    return job
