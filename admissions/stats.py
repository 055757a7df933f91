"""Aggregates behind the admissions dashboard charts.

Each function returns a mapping of chart label to count; the API
serialises them to JSON.
"""
from __future__ import annotations

from django.db.models import Count
from django.db.models.functions import TruncDate

from .models import OTHER_SPECIFY, REFERENCE_SOURCES, BatchApplicant, BatchApplication


def paid_applicants_by_reference() -> dict[str, int]:
    """Paid applicants per named reference; anything else is grouped as "Other"."""
    named = [r for r in REFERENCE_SOURCES if r != OTHER_SPECIFY]
    paid = BatchApplicant.objects.conversion()
    rows = paid.filter(reference__in=named).values("reference").annotate(count=Count("id", distinct=True)).order_by("reference")
    result = {row["reference"]: row["count"] for row in rows}
    others = paid.exclude(reference__in=named).count()
    if others > 0:
        result["Other"] = others
    return result


def paid_applications_by_location() -> dict[str, int]:
    rows = (
        BatchApplication.objects.payment_complete()
        .filter(university__isnull=False)
        .values("university__location")
        .annotate(count=Count("id"))
        .order_by("university__location")
    )
    return {row["university__location"]: row["count"] for row in rows}


def paid_applications_by_date() -> dict[str, int]:
    """Paid applications per payment day, oldest first, labelled like "Mar 07"."""
    rows = (
        BatchApplication.objects.payment_complete()
        .annotate(day=TruncDate("payment__paid_at"))
        .values("day")
        .annotate(count=Count("id"))
        .order_by("day")
    )
    return {row["day"].strftime("%b %d"): row["count"] for row in rows}


def admissions_dashboard() -> dict[str, dict[str, int]]:
    return {
        "paid_applicants_by_reference": paid_applicants_by_reference(),
        "paid_applications_by_location": paid_applications_by_location(),
        "paid_applications_by_date": paid_applications_by_date(),
    }
