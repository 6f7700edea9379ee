import logging

from django.conf import settings

from .base import PersistenceBackend, Snapshot
from .local import LocalBackend, LocalStorage
from .remote import RemoteBackend

logger = logging.getLogger(__name__)

__all__ = [
    "PersistenceBackend",
    "Snapshot",
    "LocalBackend",
    "LocalStorage",
    "RemoteBackend",
    "local_backend",
    "select_backend",
]


def sync_config():
    return getattr(settings, "INVENTORY_SYNC", {})


def local_backend(config=None):
    config = config or sync_config()
    return LocalBackend(LocalStorage(config.get("LOCAL_STORAGE_DIR", "local_storage")))


def select_backend(config=None):
    """
    Pick the variant once, from configuration: a configured remote database
    alias selects the remote backend, anything else the local one.
    """
    config = config or sync_config()
    alias = config.get("REMOTE_DB_ALIAS")
    if alias and alias in settings.DATABASES:
        return RemoteBackend(alias)
    if alias:
        logger.warning("Remote alias %r is not a configured database, using local storage", alias)
    return local_backend(config)
