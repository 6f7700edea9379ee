"""WSGI config for the labstock project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "labstock.settings")

application = get_wsgi_application()
