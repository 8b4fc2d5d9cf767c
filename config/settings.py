"""
POS Access – Django Settings (Infrastructure Only)
==================================================
Django serves as the framework container for the access guard.
The guard's own configuration (locations, route patterns) is selected
by POS_ACCESS / POS_ACCESS_FILE below and validated at startup.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get("POS_SECRET_KEY", "pos-dev-key-replace-before-deployment")

DEBUG = os.environ.get("POS_DEBUG", "1") == "1"

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "testserver"]

SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = "strict-origin-when-cross-origin"
X_FRAME_OPTIONS = "DENY"

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "core.bootstrap",
]

# ── Middleware ────────────────────────────────────────────────
# Access guard runs after the common middleware so paths are final.
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "adapters.django_api.middleware.AccessGuardMiddleware",
]

# ── URL & WSGI ────────────────────────────────────────────────
ROOT_URLCONF = "config.urls"

# ── Database ──────────────────────────────────────────────────
# The access guard is stateless; session payloads live client-side.
DATABASES = {}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# ── Access Guard ──────────────────────────────────────────────
POS_ACCESS_FILE = os.environ.get("POS_ACCESS_FILE") or None
POS_ACCESS_SESSION_COOKIE = "user"

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "loggers": {
        "pos": {
            "handlers": ["console"],
            "level": os.environ.get("POS_LOG_LEVEL", "INFO"),
        },
    },
}
