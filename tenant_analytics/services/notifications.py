"""
Notifications — Slack webhook integration for analytics batches.

Notification failure never affects the batch.
"""
import logging
import requests

from tenant_analytics.config import SLACK_WEBHOOK_URL

logger = logging.getLogger('services.notifications')

_MAX_LISTED = 10


def notify_batch_complete(summary):
    """Post a batch summary to Slack, listing failed and partial tenants."""
    if not SLACK_WEBHOOK_URL:
        return

    try:
        failed = summary.failed
        partial = summary.partial
        title = "Analytics Batch Completed"
        if failed or partial:
            title = "Analytics Batch Completed With Errors"

        blocks = [
            {
                "type": "header",
                "text": {"type": "plain_text", "text": title},
            },
            {
                "type": "section",
                "fields": [
                    {"type": "mrkdwn", "text": f"*Succeeded:* {len(summary.succeeded)}"},
                    {"type": "mrkdwn", "text": f"*Partial:* {len(partial)}"},
                    {"type": "mrkdwn", "text": f"*Failed:* {len(failed)}"},
                ]
            },
        ]

        problems = [
            f"• `{r.tenant_id}` ({r.status}): {r.error[:200]}"
            for r in (failed + partial)[:_MAX_LISTED]
        ]
        if problems:
            blocks.append({
                "type": "section",
                "text": {"type": "mrkdwn", "text": "\n".join(problems)},
            })

        requests.post(SLACK_WEBHOOK_URL, json={"blocks": blocks}, timeout=10)
        logger.info("Batch notification sent (%d tenants)", len(summary.results))

    except Exception:
        logger.error("Failed to send batch notification", exc_info=True)
