"""Custom permissions for REST API v1."""
from __future__ import annotations

from rest_framework.permissions import BasePermission

from accounts.models import Role


class IsCoach(BasePermission):
    def has_permission(self, request, view):
        profile = getattr(request.user, "profile", None)
        return bool(request.user and request.user.is_authenticated and getattr(profile, "role", None) == Role.COACH)
