import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Submission",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=256)),
                ("phone", models.CharField(max_length=50)),
                ("location", models.CharField(max_length=256)),
                ("make", models.CharField(max_length=256)),
                ("model", models.CharField(max_length=256)),
                ("year", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1900)])),
                ("price", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("km_driven", models.PositiveIntegerField(default=0)),
                ("engine_displacement", models.PositiveIntegerField(help_text="cc")),
                ("registration", models.CharField(max_length=256)),
                ("condition", models.CharField(
                    choices=[("Excellent", "Excellent"), ("Good", "Good"), ("Fair", "Fair"), ("Poor", "Poor")],
                    max_length=12,
                )),
                ("description", models.TextField()),
                ("images", models.JSONField(blank=True, null=True)),
                ("submitted_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"ordering": ["-submitted_at", "-id"]},
        ),
    ]
