import os

# Mock SECRET_KEY for tests BEFORE importing settings to bypass validation
os.environ.setdefault("SECRET_KEY", "django-insecure-test-key-for-unit-tests-only")

from .settings import *  # noqa: F403

# Override Database to use SQLite for tests
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",  # noqa: F405
    }
}

# Disable external services
STRIPE_SECRET_KEY = "sk_test_mock_key"
CLERK_SECRET_KEY = "sk_test_clerk_mock_key"
CLERK_WEBHOOK_SECRET = "whsec_MfKQ9r8GKYqrTwjUPD8ILPZIo2LaLaSw"
FRONTEND_URL = "http://testserver"

PLATFORM_FEE_PERCENT = Decimal("10")  # noqa: F405

# Enable SessionAuthentication for tests to support client.force_login()
REST_FRAMEWORK["DEFAULT_AUTHENTICATION_CLASSES"].append(  # noqa: F405
    "rest_framework.authentication.SessionAuthentication"
)

LOGGING["loggers"]["django"]["level"] = "WARNING"  # noqa: F405

# Let pytest's caplog see application loggers
for _logger in ("authentication", "marketplace", "payment_system", "infrastructure"):
    LOGGING["loggers"][_logger]["propagate"] = True  # noqa: F405
