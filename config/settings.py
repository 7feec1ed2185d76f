"""
Crewdesk – Django Settings (Infrastructure Only)
==================================================
Django serves as the HTTP container for the task rules engine.
The engine owns its rules; Django only hosts the adapter views.

Rules are configured through CREWDESK_RULES. Each value can be
overridden by an environment variable for staging runs.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get(
    "CREWDESK_SECRET_KEY", "crewdesk-dev-key-replace-before-deployment"
)

DEBUG = os.environ.get("CREWDESK_DEBUG", "1") == "1"

ALLOWED_HOSTS = [
    h for h in os.environ.get("CREWDESK_ALLOWED_HOSTS", "").split(",") if h
]

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
]

# ── Middleware ────────────────────────────────────────────────
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

# ── URL & WSGI ────────────────────────────────────────────────
ROOT_URLCONF = "config.urls"

# ── Database ──────────────────────────────────────────────────
# Django infrastructure only. Task data lives in the engine Store.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# ── Task rules ────────────────────────────────────────────────
def _env_int(name: str, default: int) -> int:
    return int(os.environ.get(name, default))


def _env_float(name: str, default: float) -> float:
    return float(os.environ.get(name, default))


CREWDESK_RULES = {
    "workload": {
        "task_weight": _env_int("CREWDESK_TASK_WEIGHT", 1),
        "high_priority_weight": _env_int("CREWDESK_HIGH_PRIORITY_WEIGHT", 2),
        "overdue_weight": _env_int("CREWDESK_OVERDUE_WEIGHT", 3),
        "underloaded_below": _env_int("CREWDESK_UNDERLOADED_BELOW", 5),
        "overloaded_above": _env_int("CREWDESK_OVERLOADED_ABOVE", 15),
    },
    "escalation": {
        "manager_roles": os.environ.get(
            "CREWDESK_MANAGER_ROLES", "manager,admin"
        ).split(","),
        "system_actor_id": os.environ.get("CREWDESK_SYSTEM_ACTOR", "system"),
    },
    "budget": {
        "max_items": _env_int("CREWDESK_MAX_ITEMS", 500),
        "max_seconds": _env_float("CREWDESK_MAX_SECONDS", 25.0),
    },
}

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "plain",
        },
    },
    "loggers": {
        "crewdesk": {
            "handlers": ["console"],
            "level": os.environ.get("CREWDESK_LOG_LEVEL", "INFO"),
            "propagate": True,
        },
    },
}
