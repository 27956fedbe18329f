"""
Shared client instances — Redis.

The client is created lazily by redis-py on first command, so importing this
module is always safe (even when Redis is not running during tests).
"""
import redis

from tenant_analytics.config import REDIS_URL

# ── Redis ─────────────────────────────────────────────────────────────────────
redis_client = redis.from_url(REDIS_URL, decode_responses=True)
