"""Django settings for eventhub.

Everything deployment-specific is read from the environment. There is no
SQL database; records live in MongoDB at MONGODB_URI.
"""

import os

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "eventhub-insecure-dev-key")
DEBUG = os.environ.get("DJANGO_DEBUG", "false").lower() == "true"

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
]

DATABASES = {}

USE_TZ = True
TIME_ZONE = "UTC"
USE_I18N = False
LANGUAGE_CODE = "en-us"

MONGODB_URI = os.environ.get("MONGODB_URI", "")
MONGODB_DB_NAME = os.environ.get("MONGODB_DB_NAME") or None
MONGODB_SERVER_SELECTION_TIMEOUT_MS = int(
    os.environ.get("MONGODB_SERVER_SELECTION_TIMEOUT_MS", "5000")
)

EVENTHUB_SLUG_MAX_ATTEMPTS = int(os.environ.get("EVENTHUB_SLUG_MAX_ATTEMPTS", "3"))

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    },
    "loggers": {
        "eventhub": {
            "handlers": ["console"],
            "level": os.environ.get("EVENTHUB_LOG_LEVEL", "INFO"),
        },
    },
}
