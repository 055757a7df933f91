"""Signals for automatic profile management.

On user creation, create a default `UserProfile` with the student role.
Coaches are promoted by updating the profile after creation.
"""
from django.contrib.auth.models import User
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import UserProfile, Role


@receiver(post_save, sender=User)
def create_user_profile(sender, instance: User, created: bool, **kwargs):  # noqa: D401
    """Create a profile for new users (default role: student)."""
    if created:
        full_name = f"{instance.first_name} {instance.last_name}".strip()
        UserProfile.objects.create(user=instance, role=Role.STUDENT, full_name=full_name)
