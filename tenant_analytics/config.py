"""
Centralized configuration — env vars and engine constants.
"""
import os


# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'text')

# ── Redis ─────────────────────────────────────────────────────────────────────
REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')

# ── PostgreSQL ────────────────────────────────────────────────────────────────
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///local.db')

# ── Slack notifications ──────────────────────────────────────────────────────
SLACK_WEBHOOK_URL = os.getenv('SLACK_WEBHOOK_URL')

# ── Batch execution ──────────────────────────────────────────────────────────
ANALYTICS_MAX_WORKERS = int(os.getenv('ANALYTICS_MAX_WORKERS', '4'))
STORE_QUERY_TIMEOUT_SECONDS = float(os.getenv('STORE_QUERY_TIMEOUT_SECONDS', '30'))
BATCH_JOB_TIMEOUT = int(os.getenv('BATCH_JOB_TIMEOUT', '3600'))

# ── Metrics ──────────────────────────────────────────────────────────────────
REACH_OUT_WINDOW_DAYS = 30
HIGH_TEMPTATION_LEVEL = 3
TRIGGER_TOP_N = 10
ACTIVITY_WEEKS = 4

# ── Trends + sparklines ──────────────────────────────────────────────────────
TREND_WINDOW = 7
SPARKLINE_POINTS = 7

# ── Historical resolutions ───────────────────────────────────────────────────
# window_days=None means the full history.
RESOLUTIONS = {
    '7d':  {'window_days': 7,    'bucket_days': 1, 'target': 7},
    '30d': {'window_days': 30,   'bucket_days': 1, 'target': 10},
    '90d': {'window_days': 90,   'bucket_days': 7, 'target': 13},
    'all': {'window_days': None, 'bucket_days': 1, 'target': 15},
}
ALL_TIME_LONG_SPAN_DAYS = 180
ALL_TIME_LONG_SPAN_TARGET = 20

# Activity series: raw days summed into one output point
ACTIVITY_SUM_DAYS = {
    '7d': 1,
    '30d': 3,
    '90d': 7,
    'all': 7,
}

# ── Metric catalog ────────────────────────────────────────────────────────────
# snapshot column → analytics document key
TRACKED_METRICS = [
    ('active_user_count',             'totalActiveUsers'),
    ('reach_outs_30d',                'reachOutsThisMonth'),
    ('total_reach_outs',              'totalReachOuts'),
    ('avg_replies_per_reach_out',     'avgRepliesPerReachOut'),
    ('percent_reach_outs_with_reply', 'percentReachOutsWithReply'),
    ('active_partnerships',           'activePartnerships'),
    ('percent_users_reached_out',     'percentUsersReachedOut'),
    ('avg_response_time_hours',       'avgResponseTimeHours'),
    ('check_in_completion_rate',      'checkInCompletionRate'),
]

# ── Funnel step labels ───────────────────────────────────────────────────────
FUNNEL_LABELS = [
    'Total Active Users',
    'Users Reached Out',
    'Users Received Replies',
    'Users Started Private Chats',
    'Users Formed Partnerships',
]
