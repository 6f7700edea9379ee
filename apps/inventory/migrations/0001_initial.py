from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Item",
            fields=[
                ("id", models.IntegerField(primary_key=True, serialize=False)),
                ("category", models.CharField(blank=True, default="", max_length=255)),
                ("name", models.CharField(max_length=255)),
                ("quantity", models.PositiveIntegerField(default=0)),
                ("unit", models.CharField(blank=True, default="", max_length=50)),
                (
                    "status",
                    models.CharField(
                        choices=[("ปกติ", "Normal"), ("ใกล้หมด", "Low"), ("หมด", "Empty")],
                        default="ปกติ",
                        max_length=16,
                    ),
                ),
                ("location", models.CharField(blank=True, default="", max_length=255)),
                ("checked_by", models.JSONField(blank=True, default=list)),
                ("last_updated", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "db_table": "items",
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="Checker",
            fields=[
                ("name", models.CharField(max_length=100, primary_key=True, serialize=False)),
            ],
            options={
                "db_table": "checkers",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Setting",
            fields=[
                ("key", models.CharField(max_length=100, primary_key=True, serialize=False)),
                ("value", models.TextField(blank=True, default="")),
            ],
            options={
                "db_table": "settings",
            },
        ),
    ]
