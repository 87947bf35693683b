import django.core.validators
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Member",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "phone",
                    models.CharField(
                        help_text="Verified phone number in E.164 format, e.g. +919876543210",
                        max_length=20,
                        unique=True,
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                ("email", models.EmailField(blank=True, max_length=254, null=True)),
                ("gender", models.CharField(blank=True, max_length=32, null=True)),
                ("aadhaar", models.CharField(blank=True, max_length=20, null=True)),
                ("father_name", models.CharField(blank=True, max_length=255, null=True)),
                ("mother_name", models.CharField(blank=True, max_length=255, null=True)),
                ("relationship_with_head", models.CharField(blank=True, max_length=64, null=True)),
                ("gothra", models.CharField(blank=True, max_length=128, null=True)),
                ("date_of_birth", models.DateField(blank=True, null=True)),
                ("education", models.CharField(blank=True, max_length=255, null=True)),
                ("upanayana", models.BooleanField(blank=True, null=True)),
                ("marital_status", models.CharField(blank=True, max_length=32, null=True)),
                (
                    "number_of_children",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("occupation", models.CharField(blank=True, max_length=255, null=True)),
                ("occupation_details", models.TextField(blank=True, null=True)),
                ("annual_income", models.CharField(blank=True, max_length=64, null=True)),
                ("tax_payer", models.BooleanField(blank=True, null=True)),
                ("house_type", models.CharField(blank=True, max_length=64, null=True)),
                ("residence_address", models.TextField(blank=True, null=True)),
                ("family_house", models.CharField(blank=True, max_length=255, null=True)),
                ("ration_card_type", models.CharField(blank=True, max_length=32, null=True)),
                ("special_person", models.BooleanField(blank=True, null=True)),
                ("profile_image", models.URLField(blank=True, max_length=500, null=True)),
                ("is_profile_complete", models.BooleanField(default=False)),
                ("joined_date", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
    ]
