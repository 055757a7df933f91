"""Admissions models: applicants, applications and payments.

Only the fields the admissions dashboard aggregates over are modelled.
"""
from __future__ import annotations

from django.db import models


OTHER_SPECIFY = "Other (Please Specify)"

REFERENCE_SOURCES = [
    "Friend",
    "Facebook",
    "Twitter",
    "Newspaper",
    "University",
    "Startup event",
    OTHER_SPECIFY,
]


class University(models.Model):
    name = models.CharField(max_length=200)
    location = models.CharField(max_length=100)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "universities"

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.name}, {self.location}"


class BatchApplicantQuerySet(models.QuerySet):
    def conversion(self):
        """Applicants who lead at least one paid application."""
        return self.filter(applications__payment__paid_at__isnull=False).distinct()


class BatchApplicant(models.Model):
    name = models.CharField(max_length=200)
    email = models.EmailField(unique=True)
    # One of REFERENCE_SOURCES, or free text when "Other" was chosen
    reference = models.CharField(max_length=200, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = BatchApplicantQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover
        return self.email


class BatchApplicationQuerySet(models.QuerySet):
    def payment_complete(self):
        return self.filter(payment__paid_at__isnull=False)


class BatchApplication(models.Model):
    team_lead = models.ForeignKey(BatchApplicant, on_delete=models.CASCADE, related_name="applications")
    university = models.ForeignKey(University, null=True, blank=True, on_delete=models.SET_NULL, related_name="applications")
    created_at = models.DateTimeField(auto_now_add=True)

    objects = BatchApplicationQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover
        return f"Application {self.pk} by {self.team_lead_id}"


class Payment(models.Model):
    batch_application = models.OneToOneField(BatchApplication, on_delete=models.CASCADE, related_name="payment")
    amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:  # pragma: no cover
        return f"Payment for {self.batch_application_id}"
