"""
Django settings for the labstock project.

Environment variables are read from the process (and a local .env file):

- SECRET_KEY, DEBUG, ALLOWED_HOSTS
- DATABASE_URL: primary database (defaults to SQLite)
- INVENTORY_REMOTE_DATABASE_URL: shared backend for cross-device sync.
  When unset the inventory runs in local-only mode.
- INVENTORY_LOCAL_STORAGE_DIR, INVENTORY_LOW_THRESHOLD, INVENTORY_AUTO_STATUS
"""

import os
from pathlib import Path

import dj_database_url

# ============================================
# LOAD ENVIRONMENT VARIABLES
# ============================================
from dotenv import load_dotenv
load_dotenv()

# ============================================
# BASE DIRECTORY
# ============================================
BASE_DIR = Path(__file__).resolve().parent.parent

# ============================================
# SECURITY SETTINGS
# ============================================
DEBUG = os.getenv("DEBUG", "False") == "True"

# Development fallback, set SECRET_KEY in production
SECRET_KEY = os.getenv(
    "SECRET_KEY",
    "django-insecure-labstock-dev-key-change-in-production",
)

ALLOWED_HOSTS = os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")

# ============================================
# INSTALLED APPLICATIONS
# ============================================
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "django.contrib.staticfiles",

    # Third party
    "rest_framework",
    "drf_yasg",

    # Local
    "apps.inventory",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "labstock.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "labstock.wsgi.application"

# ============================================
# DATABASE CONFIGURATION
# ============================================
DATABASES = {
    "default": dj_database_url.config(
        default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
        conn_max_age=600,
    )
}

# Shared sync backend, registered under its own alias
INVENTORY_REMOTE_DATABASE_URL = os.getenv("INVENTORY_REMOTE_DATABASE_URL")
if INVENTORY_REMOTE_DATABASE_URL:
    DATABASES["remote"] = dj_database_url.parse(
        INVENTORY_REMOTE_DATABASE_URL, conn_max_age=600
    )

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ============================================
# INVENTORY SYNC
# ============================================
INVENTORY_SYNC = {
    # Database alias of the shared backend; None selects local-only mode
    "REMOTE_DB_ALIAS": "remote" if INVENTORY_REMOTE_DATABASE_URL else None,
    # Directory holding the local key-value blobs
    "LOCAL_STORAGE_DIR": os.getenv(
        "INVENTORY_LOCAL_STORAGE_DIR", str(BASE_DIR / "var" / "local_storage")
    ),
    "LOW_THRESHOLD": int(os.getenv("INVENTORY_LOW_THRESHOLD", "1")),
    "AUTO_STATUS": os.getenv("INVENTORY_AUTO_STATUS", "True") == "True",
    "DEFAULT_COVER_URL": "/BioMINTech.png",
}

# ============================================
# REST FRAMEWORK CONFIGURATION
# ============================================
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "UNAUTHENTICATED_USER": None,
    # ?format= selects the export file type, not a renderer
    "URL_FORMAT_OVERRIDE": None,
}

SWAGGER_SETTINGS = {
    "USE_SESSION_AUTH": False,
    "SECURITY_DEFINITIONS": {},
}

# ============================================
# INTERNATIONALIZATION
# ============================================
LANGUAGE_CODE = "th"
TIME_ZONE = "Asia/Bangkok"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

# ============================================
# LOGGING CONFIGURATION
# ============================================
LOGS_DIR = Path(os.getenv("LOGS_DIR", BASE_DIR / "logs"))
LOGS_DIR.mkdir(parents=True, exist_ok=True)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,

    "formatters": {
        "verbose": {
            "format": "[{levelname}] {asctime} {name} {process:d} {thread:d} - {message}",
            "style": "{",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "simple": {
            "format": "{asctime} [{levelname}] {message}",
            "style": "{",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },

    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
            "level": "INFO",
        },
        "inventory_file": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": LOGS_DIR / "inventory.log",
            "maxBytes": 1024 * 1024 * 10,
            "backupCount": 5,
            "formatter": "verbose",
            "level": "INFO",
        },
        "error_file": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": LOGS_DIR / "errors.log",
            "maxBytes": 1024 * 1024 * 10,
            "backupCount": 5,
            "formatter": "verbose",
            "level": "ERROR",
        },
    },

    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "django.request": {
            "handlers": ["error_file", "console"],
            "level": "ERROR",
            "propagate": False,
        },
        "apps.inventory": {
            "handlers": ["console", "inventory_file", "error_file"],
            "level": os.getenv("INVENTORY_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },

    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
}
