"""
Production settings.

Security-hardened settings for deployed environments.
All secrets are read from environment variables.
"""

from django.core.exceptions import ImproperlyConfigured

from .base import *  # noqa: F403
from .base import DEFAULT_JWT_SECRET, settings

DEBUG = False

if not settings.JWT_SECRET or settings.JWT_SECRET == DEFAULT_JWT_SECRET:
    raise ImproperlyConfigured("JWT_SECRET must be set to a non-default value in production")

# Security settings
SECURE_SSL_REDIRECT = True
SECURE_HSTS_SECONDS = 31536000  # 1 year
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")

# Health checks come from the load balancer over plain HTTP
SECURE_REDIRECT_EXEMPT = [r"^health$"]
