"""Development settings for HallBook project.

This module extends the base settings with development specific
configuration, such as enabling debug and allowing all hosts. Do not use
these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Sandbox gateway secret so that the payment flow can be exercised locally
PAYMENT_GATEWAY_SECRET = PAYMENT_GATEWAY_SECRET or 'dev-gateway-secret'  # noqa: F405
