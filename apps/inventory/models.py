from django.db import models

from .records import Status


class Item(models.Model):
    """Shared inventory row. Ids are assigned by clients (max + 1)."""

    id = models.IntegerField(primary_key=True)
    category = models.CharField(max_length=255, blank=True, default="")
    name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=0)
    unit = models.CharField(max_length=50, blank=True, default="")
    status = models.CharField(
        max_length=16, choices=Status.choices, default=Status.NORMAL
    )
    location = models.CharField(max_length=255, blank=True, default="")
    checked_by = models.JSONField(default=list, blank=True)  # ordered checker names
    last_updated = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "items"
        ordering = ["id"]

    def __str__(self):
        return f"{self.id} - {self.name}"

    def as_row(self):
        return {
            "id": self.id,
            "category": self.category,
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "status": self.status,
            "location": self.location,
            "checked_by": list(self.checked_by or []),
            "last_updated": self.last_updated,
        }


class Checker(models.Model):
    name = models.CharField(max_length=100, primary_key=True)

    class Meta:
        db_table = "checkers"
        ordering = ["name"]

    def __str__(self):
        return self.name

    def as_row(self):
        return {"name": self.name}


class Setting(models.Model):
    COVER_URL = "coverUrl"

    key = models.CharField(max_length=100, primary_key=True)
    value = models.TextField(blank=True, default="")

    class Meta:
        db_table = "settings"

    def __str__(self):
        return self.key
