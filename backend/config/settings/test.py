"""
Test settings.

In-memory SQLite, SMS test mode and no background sweeper.
"""

from .base import *  # noqa: F403
from .base import SMSMode

DEBUG = False
ALLOWED_HOSTS = ["testserver", "localhost"]
ENVIRONMENT = "test"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

JWT_SECRET = "test-jwt-secret"
SMS_MODE = SMSMode.TEST
TWILIO_ACCOUNT_SID = ""
TWILIO_AUTH_TOKEN = ""
TWILIO_VERIFY_SERVICE_SID = ""
OTP_RATE_LIMIT_SWEEP_ENABLED = False

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
