"""
Per-tenant run context.

Threaded explicitly through every pipeline stage instead of any process-wide
"current tenant", so several tenants can run on the worker pool at once.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass
class TenantContext:
    tenant_id: str
    now: datetime                          # reference instant for the whole run (UTC)
    session: Any                           # SQLAlchemy session owned by this run
    query_timeout: Optional[float] = None  # seconds; None = store default
