"""
Accounts models - community member profiles.
"""

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from apps.core.models import TimestampedModel


class Member(TimestampedModel):
    """
    A registered community member.

    The phone number is the natural key: it is verified by OTP before the
    record is created and can never be changed afterwards. Every other
    attribute is optional descriptive data supplied at registration or
    through profile updates.
    """

    phone = models.CharField(
        max_length=20,
        unique=True,
        help_text="Verified phone number in E.164 format, e.g. +919876543210",
    )
    name = models.CharField(max_length=255)
    email = models.EmailField(null=True, blank=True)

    # Personal details
    gender = models.CharField(max_length=32, null=True, blank=True)
    aadhaar = models.CharField(max_length=20, null=True, blank=True)
    father_name = models.CharField(max_length=255, null=True, blank=True)
    mother_name = models.CharField(max_length=255, null=True, blank=True)
    relationship_with_head = models.CharField(max_length=64, null=True, blank=True)
    gothra = models.CharField(max_length=128, null=True, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)

    # Education & family
    education = models.CharField(max_length=255, null=True, blank=True)
    upanayana = models.BooleanField(null=True, blank=True)
    marital_status = models.CharField(max_length=32, null=True, blank=True)
    number_of_children = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
    )

    # Employment & income
    occupation = models.CharField(max_length=255, null=True, blank=True)
    occupation_details = models.TextField(null=True, blank=True)
    annual_income = models.CharField(max_length=64, null=True, blank=True)
    tax_payer = models.BooleanField(null=True, blank=True)

    # House & contact
    house_type = models.CharField(max_length=64, null=True, blank=True)
    residence_address = models.TextField(null=True, blank=True)
    family_house = models.CharField(max_length=255, null=True, blank=True)
    ration_card_type = models.CharField(max_length=32, null=True, blank=True)
    special_person = models.BooleanField(null=True, blank=True)
    profile_image = models.URLField(max_length=500, null=True, blank=True)

    # System-managed
    is_profile_complete = models.BooleanField(default=False)
    joined_date = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.phone[-4:]})"
