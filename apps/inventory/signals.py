from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import Checker, Item
from .realtime import (
    CHECKERS,
    DELETE,
    INSERT,
    ITEMS,
    UPDATE,
    ChangeEvent,
    change_feed,
)


def _publish_on_commit(event, using):
    transaction.on_commit(lambda: change_feed.publish(event, using=using), using=using)


# ============================================
# ITEMS
# ============================================

@receiver(post_save, sender=Item)
def item_saved(sender, instance, created, using, **kwargs):
    operation = INSERT if created else UPDATE
    _publish_on_commit(ChangeEvent(ITEMS, operation, instance.as_row()), using)


@receiver(post_delete, sender=Item)
def item_deleted(sender, instance, using, **kwargs):
    _publish_on_commit(ChangeEvent(ITEMS, DELETE, instance.as_row()), using)


# ============================================
# CHECKERS
# ============================================

@receiver(post_save, sender=Checker)
def checker_saved(sender, instance, created, using, **kwargs):
    operation = INSERT if created else UPDATE
    _publish_on_commit(ChangeEvent(CHECKERS, operation, instance.as_row()), using)


@receiver(post_delete, sender=Checker)
def checker_deleted(sender, instance, using, **kwargs):
    _publish_on_commit(ChangeEvent(CHECKERS, DELETE, instance.as_row()), using)
