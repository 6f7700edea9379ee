from dataclasses import dataclass, field


@dataclass
class Snapshot:
    records: list = field(default_factory=list)
    checkers: list = field(default_factory=list)
    cover_url: str | None = None


class PersistenceBackend:
    """
    Load/save/subscribe contract shared by the local and remote variants.

    Writes are called after the store has already applied the change
    locally; they either complete or raise WriteFailed.
    """

    kind = None

    def load(self):
        raise NotImplementedError

    def save_record(self, record):
        raise NotImplementedError

    def delete_record(self, record_id):
        raise NotImplementedError

    def replace_records(self, records):
        raise NotImplementedError

    def save_checkers(self, names):
        raise NotImplementedError

    def save_cover(self, cover_url):
        raise NotImplementedError

    def subscribe(self, callback):
        """Register for change events; returns an unsubscribe callable."""
        return lambda: None
