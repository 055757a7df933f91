"""Courses, teams and evaluation criteria.

A `Course` groups targets and evaluation criteria. Students take part in
a course as `Founder` members of a `Team`; the team (or, for individual
targets, the single founder) is the unit against which target status is
tracked. Coaches are attached with `CoachEnrolment`.
"""
from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone


class Course(models.Model):
    """A course; submissions close for every target once `ends_at` passes."""

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    ends_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["title"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.title}"

    def has_ended(self) -> bool:
        return bool(self.ends_at and self.ends_at <= timezone.now())


class EvaluationCriterion(models.Model):
    """A grading axis for a course.

    Grades run from 1 to `max_grade`; a grade at or above `pass_grade`
    passes the criterion.
    """

    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="evaluation_criteria")
    name = models.CharField(max_length=200)
    max_grade = models.PositiveSmallIntegerField(default=3)
    pass_grade = models.PositiveSmallIntegerField(default=2)
    # Optional labels keyed by grade, e.g. {"1": "Bad", "2": "Good", "3": "Great"}
    grade_labels = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ["course_id", "name"]
        constraints = [
            models.CheckConstraint(condition=models.Q(pass_grade__lte=models.F("max_grade")), name="criterion_pass_grade_within_max"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.name} ({self.pass_grade}/{self.max_grade})"

    def passes(self, grade: int) -> bool:
        return grade >= self.pass_grade

    def label_for(self, grade: int) -> str:
        return self.grade_labels.get(str(grade), str(grade))


class Team(models.Model):
    """A learner group ("startup") within a course."""

    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="teams")
    name = models.CharField(max_length=200)
    access_ends_at = models.DateTimeField(null=True, blank=True)
    # Cohort context recorded on every submission made by the team
    iteration = models.PositiveSmallIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["course_id", "name"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.name} ({self.course_id})"

    def access_ended(self) -> bool:
        return bool(self.access_ends_at and self.access_ends_at <= timezone.now())


class Founder(models.Model):
    """Link a student user to a team.

    A user holds at most one founder record per team; lookups by course go
    through the team.
    """

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="founders")
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="founders")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("user", "team")
        ordering = ["team_id", "user_id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.user_id}@{self.team_id}"

    @property
    def course(self) -> Course:
        return self.team.course

    @property
    def name(self) -> str:
        profile = getattr(self.user, "profile", None)
        return profile.display_name if profile else self.user.username


class CoachEnrolment(models.Model):
    """Attach a coach to a course, or to a single team when `team` is set."""

    coach = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="coach_enrolments")
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="coach_enrolments")
    team = models.ForeignKey(Team, on_delete=models.CASCADE, null=True, blank=True, related_name="coach_enrolments")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("coach", "course", "team")

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.coach_id}->{self.course_id}/{self.team_id or '*'}"


def coach_can_review(coach, team: Team) -> bool:
    """Whether `coach` is enrolled on the team's course or on the team itself."""
    return CoachEnrolment.objects.filter(coach=coach, course_id=team.course_id).filter(
        models.Q(team__isnull=True) | models.Q(team=team)
    ).exists()
