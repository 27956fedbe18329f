"""
Database engine + session factory.

Always initializes — defaults to SQLite for local dev, Postgres in production.
get_session() always returns a real session.
"""
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from tenant_analytics.config import DATABASE_URL


class Base(DeclarativeBase):
    pass


# Railway injects postgres:// but SQLAlchemy 2.x requires postgresql://
url = DATABASE_URL.replace('postgres://', 'postgresql://', 1)

# SQLite needs different engine kwargs than Postgres
if url.startswith('sqlite'):
    engine = create_engine(url, connect_args={'check_same_thread': False})
else:
    engine = create_engine(url, pool_pre_ping=True, pool_size=5, max_overflow=10)

SessionLocal = sessionmaker(bind=engine)


def get_session():
    """Return a new DB session."""
    return SessionLocal()


def apply_query_timeout(session, seconds):
    """Bound every statement this session runs to `seconds`.

    The timeout is transaction-local (SET LOCAL semantics), so it is set again
    each time the session begins a transaction on a connection, including after
    a commit hands the connection back to the pool. Nothing leaks onto pooled
    connections used by other sessions. Only Postgres supports a server-side
    statement timeout; other dialects are left untouched.
    """
    if not seconds or not _supports_statement_timeout(session):
        return
    ms = int(seconds * 1000)

    def _on_begin(session, transaction, connection):
        _set_local_timeout(connection, ms)

    already_begun = session.in_transaction()
    event.listen(session, 'after_begin', _on_begin)
    if already_begun:
        _set_local_timeout(session.connection(), ms)


def _supports_statement_timeout(session) -> bool:
    return session.get_bind().dialect.name == 'postgresql'


def _set_local_timeout(connection, ms):
    connection.execute(
        text("SELECT set_config('statement_timeout', :ms, true)"),
        {'ms': str(ms)},
    )
