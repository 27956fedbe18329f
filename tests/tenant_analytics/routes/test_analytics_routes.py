"""Tests for the analytics blueprint — refresh, document read-back, batch enqueue."""
import pytest
from datetime import timedelta
from unittest.mock import patch, MagicMock

from tenant_analytics.analytics.orchestrator import run_tenant
from tenant_analytics.models.activity import DbReachOut


@pytest.fixture
def tenant_with_activity(db_session, seed_tenant, now):
    users = seed_tenant('tenant-a', users=2)
    db_session.add(DbReachOut(id='r0', tenant_id='tenant-a', author_id=users[0],
                              status='approved', created_at=now - timedelta(days=1)))
    db_session.commit()
    return users


class TestHealth:

    def test_returns_ok(self, client):
        resp = client.get('/health')
        assert resp.status_code == 200
        assert resp.get_json() == {'status': 'ok'}


class TestRefresh:
    """POST /api/analytics/<tenant_id>/refresh runs the pipeline synchronously."""

    def test_returns_stats_and_time_series(self, client, tenant_with_activity):
        resp = client.post('/api/analytics/tenant-a/refresh')
        assert resp.status_code == 200
        data = resp.get_json()
        assert data['success'] is True
        assert data['tenantId'] == 'tenant-a'
        assert set(data['data']) == {'stats', 'timeSeries'}
        assert data['data']['stats']['totalActiveUsers'] == 2
        assert data['data']['stats']['totalReachOuts'] == 1
        assert len(data['data']['timeSeries']['funnelSteps']) == 5

    def test_document_is_stored(self, client, tenant_with_activity):
        client.post('/api/analytics/tenant-a/refresh')
        resp = client.get('/api/analytics/tenant-a')
        assert resp.status_code == 200
        assert 'historical' in resp.get_json()

    def test_unknown_tenant_404(self, client):
        resp = client.post('/api/analytics/missing/refresh')
        assert resp.status_code == 404
        assert resp.get_json()['success'] is False

    def test_pipeline_error_500(self, client):
        with patch('tenant_analytics.routes.analytics.refresh_tenant',
                   side_effect=RuntimeError('store timeout')):
            resp = client.post('/api/analytics/tenant-a/refresh')
        assert resp.status_code == 500
        data = resp.get_json()
        assert data['success'] is False
        assert 'store timeout' in data['error']


class TestGetAnalytics:
    """GET /api/analytics/<tenant_id> returns the stored document."""

    def test_returns_document(self, client, tenant_with_activity, now):
        run_tenant('tenant-a', now=now)
        resp = client.get('/api/analytics/tenant-a')
        assert resp.status_code == 200
        data = resp.get_json()
        assert data['tenantId'] == 'tenant-a'
        assert set(data) >= {'stats', 'timeSeries', 'historical', 'updatedAt'}
        assert data['stats']['lastUpdated'] == now.isoformat()
        assert set(data['historical']['totalReachOuts']) == {'7d', '30d', '90d', 'all'}

    def test_missing_document_404(self, client, seed_tenant):
        seed_tenant('tenant-a')
        resp = client.get('/api/analytics/tenant-a')
        assert resp.status_code == 404


class TestRunBatch:
    """POST /api/analytics/run queues the batch on RQ."""

    def test_queued(self, client):
        with patch('tenant_analytics.routes.analytics.enqueue_batch',
                   return_value=MagicMock(id='job-42')):
            resp = client.post('/api/analytics/run')
        assert resp.status_code == 202
        assert resp.get_json() == {'job_id': 'job-42', 'status': 'queued'}

    def test_redis_unavailable(self, client):
        with patch('tenant_analytics.routes.analytics.enqueue_batch',
                   side_effect=ConnectionError('redis down')):
            resp = client.post('/api/analytics/run')
        assert resp.status_code == 500
        assert 'redis down' in resp.get_json()['error']
