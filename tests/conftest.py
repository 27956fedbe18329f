"""Shared test fixtures."""
import pytest
from datetime import datetime, timezone
from unittest.mock import patch
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tenant_analytics.database import Base


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with schema created."""
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    import tenant_analytics.models.tenant
    import tenant_analytics.models.activity
    import tenant_analytics.models.metric_snapshot
    import tenant_analytics.models.analytics_document
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """SQLAlchemy session bound to in-memory SQLite. Rolls back after each test."""
    Session = sessionmaker(bind=db_engine)
    session = Session()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(autouse=True)
def patch_get_session(db_session):
    """Route every get_session() call to the test session.

    We disable close() so that the orchestrator and route handlers calling
    session.close() in their finally blocks don't invalidate the shared test
    session.
    """
    _real_close = db_session.close
    db_session.close = lambda: None
    with patch('tenant_analytics.analytics.orchestrator.get_session', return_value=db_session), \
            patch('tenant_analytics.routes.analytics.get_session', return_value=db_session):
        yield db_session
    db_session.close = _real_close


@pytest.fixture
def now():
    """Fixed reference instant for a run."""
    return datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_ctx(db_session, now):
    """Factory fixture — builds a TenantContext on the test session."""
    from tenant_analytics.analytics.context import TenantContext

    def _make(tenant_id='tenant-a', at=None):
        return TenantContext(tenant_id=tenant_id, now=at or now, session=db_session)
    return _make


@pytest.fixture
def seed_tenant(db_session):
    """Factory fixture — inserts a tenant with N users and returns the user ids."""
    from tenant_analytics.models.tenant import Tenant, DbTenantUser

    def _seed(tenant_id='tenant-a', users=0):
        db_session.add(Tenant(id=tenant_id, name=tenant_id))
        ids = [f'{tenant_id}-u{i}' for i in range(users)]
        for uid in ids:
            db_session.add(DbTenantUser(id=uid, tenant_id=tenant_id))
        db_session.commit()
        return ids
    return _seed


@pytest.fixture
def app():
    """Flask test app."""
    from tenant_analytics import create_app
    app = create_app()
    app.config['TESTING'] = True
    yield app


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as c:
        yield c
