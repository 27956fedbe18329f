"""Tests for tenant_analytics.database — per-transaction statement timeout."""
import pytest
from unittest.mock import patch

from sqlalchemy import text

from tenant_analytics.database import apply_query_timeout


@pytest.fixture
def postgres_timeout():
    """Pretend the bind is Postgres and capture each timeout statement."""
    with patch('tenant_analytics.database._supports_statement_timeout', return_value=True), \
            patch('tenant_analytics.database._set_local_timeout') as mock_set:
        yield mock_set


class TestApplyQueryTimeout:

    def test_set_on_every_transaction(self, db_session, postgres_timeout):
        apply_query_timeout(db_session, 2.5)

        db_session.execute(text('SELECT 1'))
        db_session.commit()
        db_session.execute(text('SELECT 1'))

        assert postgres_timeout.call_count == 2
        assert all(c.args[1] == 2500 for c in postgres_timeout.call_args_list)

    def test_applies_to_open_transaction(self, db_session, postgres_timeout):
        db_session.execute(text('SELECT 1'))
        apply_query_timeout(db_session, 1)

        postgres_timeout.assert_called_once()
        assert postgres_timeout.call_args.args[1] == 1000

    def test_no_timeout_configured(self, db_session, postgres_timeout):
        apply_query_timeout(db_session, None)
        db_session.execute(text('SELECT 1'))
        postgres_timeout.assert_not_called()

    def test_sqlite_left_untouched(self, db_session):
        with patch('tenant_analytics.database._set_local_timeout') as mock_set:
            apply_query_timeout(db_session, 5)
            db_session.execute(text('SELECT 1'))
        mock_set.assert_not_called()
