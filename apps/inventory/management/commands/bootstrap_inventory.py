from django.core.management.base import BaseCommand, CommandError

from apps.inventory.exceptions import BackendUnavailable
from apps.inventory.persistence import select_backend, sync_config


class Command(BaseCommand):
    help = "Load the configured inventory backend, writing the seed table when it is empty"

    def handle(self, *args, **options):
        backend = select_backend(sync_config())

        try:
            snapshot = backend.load()
        except BackendUnavailable as exc:
            raise CommandError(exc.message) from exc

        self.stdout.write(
            self.style.SUCCESS(
                f"[OK] {backend.kind}: {len(snapshot.records)} records, "
                f"{len(snapshot.checkers)} checkers"
            )
        )
