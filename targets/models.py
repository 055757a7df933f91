"""Targets, quizzes and submissions.

A `Target` is one learning unit of a course. Founders complete it by
submitting work for coach review, visiting a link, taking a quiz, or
simply marking it complete. Every attempt is stored as a `Submission`;
exactly one submission per (target, learner group) carries `latest=True`
and drives the target's status.
"""
from __future__ import annotations

from pathlib import Path

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from courses.models import Course, EvaluationCriterion, Founder, Team


class TargetRole(models.TextChoices):
    TEAM = "team", "Team"
    INDIVIDUAL = "individual", "Individual"


class CompletionMethod(models.TextChoices):
    EVALUATED = "evaluated", "Submit work for review"
    VISIT_LINK = "visit_link", "Visit link to complete"
    QUIZ = "quiz", "Take quiz"
    MARK_AS_COMPLETE = "mark_as_complete", "Mark as complete"


class TargetIcon(models.TextChoices):
    PERSONAL_TODO = "personal_todo", "Personal todo"
    TEAM_TODO = "team_todo", "Team todo"
    ATTEND_SESSION = "attend_session", "Attend session"


class Target(models.Model):
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="targets")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    role = models.CharField(max_length=16, choices=TargetRole.choices, default=TargetRole.TEAM)
    target_type = models.CharField(max_length=50, blank=True)
    resubmittable = models.BooleanField(default=True)
    days_to_complete = models.PositiveSmallIntegerField(null=True, blank=True)
    session_at = models.DateTimeField(null=True, blank=True)
    link_to_complete = models.URLField(blank=True)
    points_earnable = models.PositiveIntegerField(null=True, blank=True)
    # Weak relation: only consulted to gate access, never to own data
    prerequisite_targets = models.ManyToManyField("self", symmetrical=False, blank=True, related_name="dependent_targets")
    evaluation_criteria = models.ManyToManyField(EvaluationCriterion, blank=True, related_name="targets")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["course_id", "id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.title} ({self.get_role_display()})"

    @property
    def is_individual(self) -> bool:
        return self.role == TargetRole.INDIVIDUAL

    def has_quiz(self) -> bool:
        return bool(self.pk) and Quiz.objects.filter(target_id=self.pk).exists()

    def has_evaluation_criteria(self) -> bool:
        return bool(self.pk) and self.evaluation_criteria.exists()

    @property
    def completion_method(self) -> str:
        if self.has_quiz():
            return CompletionMethod.QUIZ
        if self.link_to_complete:
            return CompletionMethod.VISIT_LINK
        if self.has_evaluation_criteria():
            return CompletionMethod.EVALUATED
        return CompletionMethod.MARK_AS_COMPLETE

    @property
    def icon(self) -> str:
        if self.session_at:
            return TargetIcon.ATTEND_SESSION
        return TargetIcon.PERSONAL_TODO if self.is_individual else TargetIcon.TEAM_TODO

    def clean(self):
        super().clean()
        mechanisms = [self.has_evaluation_criteria(), bool(self.link_to_complete), self.has_quiz()]
        if sum(mechanisms) > 1:
            raise ValidationError("A target can use only one of: evaluation criteria, a link to complete, or a quiz.")
        if self.pk:
            from .validators import validate_prerequisites

            validate_prerequisites(self, self.prerequisite_targets.all())


class Quiz(models.Model):
    target = models.OneToOneField(Target, on_delete=models.CASCADE, related_name="quiz")
    title = models.CharField(max_length=200)

    class Meta:
        verbose_name_plural = "quizzes"

    def __str__(self) -> str:  # pragma: no cover
        return self.title


class QuizQuestion(models.Model):
    quiz = models.ForeignKey(Quiz, on_delete=models.CASCADE, related_name="questions")
    order = models.PositiveSmallIntegerField(default=0)
    question = models.TextField()
    description = models.TextField(blank=True)
    correct_answer = models.ForeignKey(
        "AnswerOption", null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )

    class Meta:
        ordering = ["order", "id"]

    def __str__(self) -> str:
        return f"Q{self.order}: {self.question[:40]}"


class AnswerOption(models.Model):
    quiz_question = models.ForeignKey(QuizQuestion, on_delete=models.CASCADE, related_name="answer_options")
    value = models.CharField(max_length=500)
    hint = models.TextField(blank=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:  # pragma: no cover
        return self.value


class SubmissionQuerySet(models.QuerySet):
    def for_group(self, target: Target, group_key: str):
        return self.filter(target=target, group_key=group_key)

    def latest_for(self, target: Target, group_key: str):
        return self.for_group(target, group_key).filter(latest=True).first()


class Submission(models.Model):
    """A timeline event recording one attempt at a target.

    `group_key` identifies the learner group: `team:<id>` for team targets
    and `founder:<id>` for individual ones. A partial unique constraint
    keeps at most one latest submission per (target, group).
    """

    target = models.ForeignKey(Target, on_delete=models.CASCADE, related_name="submissions")
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="submissions")
    founder = models.ForeignKey(Founder, on_delete=models.CASCADE, null=True, blank=True, related_name="submissions")
    group_key = models.CharField(max_length=64, db_index=True)
    description = models.TextField()
    links = models.JSONField(default=list, blank=True)
    iteration = models.PositiveSmallIntegerField(default=1)
    created_at = models.DateTimeField(default=timezone.now)
    evaluated_at = models.DateTimeField(null=True, blank=True)
    passed_at = models.DateTimeField(null=True, blank=True)
    evaluator = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="evaluated_submissions"
    )
    latest = models.BooleanField(default=False)
    quiz_score = models.CharField(max_length=16, blank=True)
    auto_verified = models.BooleanField(default=False)

    objects = SubmissionQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["target", "group_key"],
                condition=models.Q(latest=True),
                name="one_latest_submission_per_group",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Submission {self.pk} on {self.target_id} by {self.group_key}"

    @property
    def attachment_count(self) -> int:
        return len(self.links or []) + self.files.count()


class SubmissionFile(models.Model):
    submission = models.ForeignKey(Submission, on_delete=models.CASCADE, related_name="files")
    file = models.FileField(upload_to="submission_files/")
    title = models.CharField(max_length=200, blank=True)

    def save(self, *args, **kwargs):
        if not self.title and self.file:
            self.title = Path(self.file.name).name
        super().save(*args, **kwargs)

    def __str__(self) -> str:  # pragma: no cover
        return self.title


class SubmissionGrade(models.Model):
    submission = models.ForeignKey(Submission, on_delete=models.CASCADE, related_name="grades")
    evaluation_criterion = models.ForeignKey(EvaluationCriterion, on_delete=models.CASCADE, related_name="grades")
    grade = models.PositiveSmallIntegerField()

    class Meta:
        unique_together = ("submission", "evaluation_criterion")

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.evaluation_criterion_id}={self.grade}"

    @property
    def passed(self) -> bool:
        return self.evaluation_criterion.passes(self.grade)


class SubmissionFeedback(models.Model):
    submission = models.ForeignKey(Submission, on_delete=models.CASCADE, related_name="feedback")
    coach = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, on_delete=models.SET_NULL, related_name="submission_feedback")
    feedback = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"Feedback on {self.submission_id}"


class QuizAnswer(models.Model):
    submission = models.ForeignKey(Submission, on_delete=models.CASCADE, related_name="quiz_answers")
    quiz_question = models.ForeignKey(QuizQuestion, on_delete=models.CASCADE, related_name="+")
    answer_option = models.ForeignKey(AnswerOption, null=True, blank=True, on_delete=models.SET_NULL, related_name="+")

    class Meta:
        unique_together = ("submission", "quiz_question")
