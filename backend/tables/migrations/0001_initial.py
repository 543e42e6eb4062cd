from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="TableRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(help_text="Display name, e.g. 'Table 4'.", max_length=100)),
                (
                    "status",
                    models.CharField(
                        choices=[("available", "Available"), ("serving", "Serving"), ("order_ready", "Order Ready")],
                        db_index=True,
                        default="available",
                        max_length=20,
                    ),
                ),
                ("occupied", models.BooleanField(default=False)),
                ("occupied_by", models.CharField(blank=True, max_length=150, null=True)),
                ("staff_id", models.PositiveBigIntegerField(blank=True, null=True)),
                ("order", models.JSONField(blank=True, default=list)),
                (
                    "order_placed_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="Set when the table first enters 'serving'. Orders the kitchen queue.",
                        null=True,
                    ),
                ),
                (
                    "kitchen_status",
                    models.CharField(
                        blank=True,
                        choices=[("pending", "Pending"), ("in_progress", "In Progress")],
                        max_length=20,
                        null=True,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [models.Index(fields=["status", "order_placed_at"], name="table_status_placed_idx")],
            },
        ),
    ]
