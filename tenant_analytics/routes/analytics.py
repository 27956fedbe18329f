"""
Analytics routes — manual trigger, stored document read-back, batch enqueue.
"""
import logging
from flask import Blueprint, jsonify

from tenant_analytics.database import get_session
from tenant_analytics.analytics.document import get_document
from tenant_analytics.analytics.orchestrator import (
    refresh_tenant, enqueue_batch, TenantNotFoundError,
)

logger = logging.getLogger('routes.analytics')

bp = Blueprint('analytics', __name__)


@bp.route('/health')
def health():
    return jsonify({'status': 'ok'})


@bp.route('/api/analytics/run', methods=['POST'])
def run_batch():
    """Queue an analytics batch for every tenant."""
    try:
        job = enqueue_batch()
        return jsonify({'job_id': job.id, 'status': 'queued'}), 202
    except Exception as e:
        logger.error("Failed to enqueue analytics batch: %s", e, exc_info=True)
        return jsonify({'error': str(e)}), 500


@bp.route('/api/analytics/<tenant_id>')
def get_analytics(tenant_id):
    """Latest stored analytics document for a tenant."""
    session = get_session()
    try:
        doc = get_document(session, tenant_id)
        if doc is None:
            return jsonify({'error': f'No analytics for tenant {tenant_id}'}), 404
        return jsonify(doc.to_dict())
    finally:
        session.close()


@bp.route('/api/analytics/<tenant_id>/refresh', methods=['POST'])
def refresh_analytics(tenant_id):
    """Run the pipeline for one tenant now and return stats + timeSeries.

    The historical part is stored but left out of the response (too large).
    """
    try:
        document = refresh_tenant(tenant_id)
    except TenantNotFoundError as e:
        return jsonify({'success': False, 'error': str(e)}), 404
    except Exception as e:
        logger.error("Manual refresh failed for tenant %s: %s", tenant_id, e, exc_info=True)
        return jsonify({'success': False, 'error': str(e)}), 500

    return jsonify({
        'success': True,
        'tenantId': tenant_id,
        'data': {
            'stats': document['stats'],
            'timeSeries': document['timeSeries'],
        },
    })
