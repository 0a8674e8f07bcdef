"""
Performance settings for the InsureApp backend.
Caching, connection reuse and Celery worker tuning.
"""

# Database Performance
DATABASE_PERFORMANCE = {
    'CONN_MAX_AGE': 600,  # 10 minutes connection pooling
    'ATOMIC_REQUESTS': True,
    'CONN_HEALTH_CHECKS': True,
}

# Cache Configuration (Redis-based)
CACHE_PERFORMANCE = {
    'default': {
        'BACKEND': 'django_redis.cache.RedisCache',
        'LOCATION': 'redis://localhost:6379/0',
        'OPTIONS': {
            'CLIENT_CLASS': 'django_redis.client.DefaultClient',
            'CONNECTION_POOL_KWARGS': {
                'max_connections': 50,
                'retry_on_timeout': True,
            },
        },
        'KEY_PREFIX': 'insureapp',
        'TIMEOUT': 300,  # 5 minutes default
        'VERSION': 1,
    },
    'sessions': {
        'BACKEND': 'django_redis.cache.RedisCache',
        'LOCATION': 'redis://localhost:6379/1',
        'TIMEOUT': 28800,  # 8 hours
        'KEY_PREFIX': 'sessions',
    },
}

# Session Performance
SESSION_ENGINE = 'django.contrib.sessions.backends.cached_db'
SESSION_CACHE_ALIAS = 'sessions'

# Dashboard aggregates (summary, trends, distribution) are cached and
# invalidated on every policy write; the TTL only bounds staleness from
# writes made outside the application.
DASHBOARD_CACHE_TIMEOUT = 60

# Static Files Performance
WHITENOISE_USE_FINDERS = True

# Celery Performance
CELERY_PERFORMANCE = {
    'BROKER_CONNECTION_RETRY_ON_STARTUP': True,
    'TASK_ACKS_LATE': True,
    'WORKER_PREFETCH_MULTIPLIER': 1,
    'TASK_ROUTES': {
        'apps.notifications.tasks.send_sms': {'queue': 'notifications'},
        'apps.notifications.tasks.record_expired_policies': {'queue': 'notifications'},
    },
    'TASK_TIME_LIMIT': 1800,  # 30 minutes
    'TASK_SOFT_TIME_LIMIT': 1500,  # 25 minutes
}

# Pagination Performance
PAGINATION_SETTINGS = {
    'DEFAULT_PAGE_SIZE': 25,
    'MAX_PAGE_SIZE': 100,
    'PAGE_SIZE_QUERY_PARAM': 'page_size',
}
