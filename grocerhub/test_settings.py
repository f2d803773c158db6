"""
Test settings for GrocerHub.
Fast, isolated testing environment.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-only-secret-key")

from .settings import *  # noqa: E402,F401,F403

DEBUG = False

# In-memory database
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "test-cache",
    }
}

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    "staticfiles": {
        "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
    },
}


# Build every table straight from the models
class DisableMigrations:
    def __contains__(self, item: str) -> bool:
        return True

    def __getitem__(self, item: str) -> None:
        return None


MIGRATION_MODULES = DisableMigrations()

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",  # Fast but insecure (test only)
]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    "DEFAULT_THROTTLE_CLASSES": [],
}

# Every business toggle off unless a test turns it on
BUSINESS_SETTINGS = {
    "wallet_status": False,
    "loyalty_point_status": False,
    "loyalty_point_exchange_rate": "1",
    "loyalty_point_percent_on_item_purchase": "0",
    "loyalty_point_minimum_point": 0,
    "ref_earning_status": False,
    "ref_earning_exchange_rate": "0",
    "order_confirmation_email_status": False,
}

PAYSTACK_SECRET_KEY = "sk_test_secret"
PAYSTACK_WEBHOOK_SECRET = "whsec_test"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "null": {
            "class": "logging.NullHandler",
        },
    },
    "root": {"handlers": ["null"], "level": "WARNING"},
}
