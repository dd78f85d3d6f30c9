from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Citizen",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("national_id", models.CharField(db_index=True, max_length=20, unique=True, verbose_name="National ID")),
                ("full_name", models.CharField(max_length=255, verbose_name="Full Name")),
                ("birth_date", models.CharField(blank=True, default="", max_length=20, verbose_name="Birth Date")),
                ("background", models.JSONField(blank=True, default=list, verbose_name="Background Entries")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
            ],
            options={
                "verbose_name": "Citizen",
                "verbose_name_plural": "Citizens",
                "ordering": ["full_name"],
            },
        ),
        migrations.CreateModel(
            name="Vehicle",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("plate", models.CharField(db_index=True, max_length=15, unique=True, verbose_name="Licence Plate")),
                ("model", models.CharField(max_length=100, verbose_name="Model")),
                ("color", models.CharField(blank=True, default="", max_length=50, verbose_name="Color")),
                ("owner_national_id", models.CharField(blank=True, db_index=True, default="", max_length=20, verbose_name="Owner National ID")),
            ],
            options={
                "verbose_name": "Vehicle",
                "verbose_name_plural": "Vehicles",
                "ordering": ["plate"],
            },
        ),
    ]
