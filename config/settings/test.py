"""
With these settings, tests run faster.
"""

from .base import *  # noqa: F403
from .base import DATABASES
from .base import REST_FRAMEWORK
from .base import TEMPLATES
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="w3cbE8oK1T0pnXvY2RjfQ7mZ4Hs9LdAaGu6NqPi5CyVeDkWlF",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#test-runner
TEST_RUNNER = "django.test.runner.DiscoverRunner"
ALLOWED_HOSTS = ["testserver", "localhost"]

# PASSWORDS
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#password-hashers
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# EMAIL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#email-backend
EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
EMAIL_HOST = "smtp.testserver"
DEFAULT_FROM_EMAIL = "noel@testserver"

# DEBUGGING FOR TEMPLATES
# ------------------------------------------------------------------------------
TEMPLATES[0]["OPTIONS"]["debug"] = True  # type: ignore[index]

# CACHES
# ------------------------------------------------------------------------------
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "",
    },
}

# Your stuff...
# ------------------------------------------------------------------------------
JWT_ACCESS_SECRET = "test-access-secret"  # noqa: S105
JWT_REFRESH_SECRET = "test-refresh-secret"  # noqa: S105
SIMPLE_JWT["SIGNING_KEY"] = JWT_ACCESS_SECRET  # noqa: F405
JWT_AUTH_COOKIE_SECURE = False
CRON_SECRET = "test-cron-secret"  # noqa: S105
REST_FRAMEWORK["NUM_PROXIES"] = None
CELERY_TASK_ALWAYS_EAGER = True

# Force Postgres test DB to use template0 to avoid collation
# version mismatch in containerized environments
DATABASES["default"].setdefault("TEST", {})
DATABASES["default"]["TEST"]["TEMPLATE"] = "template0"
