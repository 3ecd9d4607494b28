"""Test settings for HallBook project.

In-memory SQLite, eager Celery and a fixed gateway secret so the test
suite runs without Redis or a payment sandbox.
"""

from .base import *  # noqa: F401,F403

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

PAYMENT_GATEWAY_SECRET = 'test-gateway-secret'
PAYMENT_MAX_FAILED_ATTEMPTS = 3
BOOKING_UNIT_MINUTES = 60
BOOKING_DEFAULT_SLOT_MINUTES = 180
BOOKING_HOLD_MINUTES = 15
BOOKING_HORIZON_DAYS = 30
