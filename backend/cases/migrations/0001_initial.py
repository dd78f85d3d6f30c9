import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("registry", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Case",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("case_id", models.CharField(max_length=10, unique=True, validators=[django.core.validators.RegexValidator(message="Case id must look like YYYY-NNNNN.", regex="^\\d{4}-\\d{5}$")], verbose_name="Case ID")),
                ("internal_roll", models.CharField(blank=True, default="", help_text="Free-form secondary reference.", max_length=100, verbose_name="Internal Roll")),
                ("description", models.TextField(verbose_name="Description")),
                ("status", models.CharField(choices=[("OPEN", "Open"), ("CLOSED", "Closed"), ("ARCHIVED", "Archived")], db_index=True, default="OPEN", max_length=10, verbose_name="Status")),
                ("assigned_officer_id", models.CharField(blank=True, default="", help_text="External identity of the officer who opened the case.", max_length=64, verbose_name="Assigned Officer")),
                ("deleted", models.BooleanField(db_index=True, default=False, verbose_name="In Recycle Bin")),
                ("defendant", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="cases", to="registry.citizen", to_field="national_id", verbose_name="Defendant")),
            ],
            options={
                "verbose_name": "Case",
                "verbose_name_plural": "Cases",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["deleted", "updated_at"], name="case_deleted_updated_idx")],
            },
        ),
    ]
