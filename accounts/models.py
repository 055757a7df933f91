"""Accounts models: user profile and roles.

Defines a `UserProfile` associated one-to-one with Django's `User`,
capturing the role (student/coach) used by the target workflow. The
profile is created automatically on user creation.
"""
from __future__ import annotations

from django.conf import settings
from django.db import models


class Role(models.TextChoices):
    """Platform roles used for simple role-based guards.

    Students (founders) submit work on targets; coaches grade it.
    """

    STUDENT = "student", "Student"
    COACH = "coach", "Coach"


class UserProfile(models.Model):
    """Profile linked to a Django auth user.

    - `role`: soft authorisation gate for API endpoints
    - `title`: shown next to a coach's name on feedback
    """

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.STUDENT)

    full_name = models.CharField(max_length=200, blank=True)
    title = models.CharField(max_length=200, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:  # pragma: no cover (string repr convenience)
        return f"Profile<{self.user.username}:{self.role}>"

    @property
    def display_name(self) -> str:
        return self.full_name or self.user.username

    @property
    def is_coach(self) -> bool:
        return self.role == Role.COACH
