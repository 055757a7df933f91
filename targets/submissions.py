"""Creating, undoing and grading submissions.

Every write that adds a submission goes through `replace_latest`, which
clears the group's current latest row and inserts the new one inside a
single transaction. The partial unique constraint on `Submission` turns a
lost race into an IntegrityError, which is retried before giving up with
`SubmissionConflictError`.
"""
from __future__ import annotations

import logging
from typing import Callable

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from courses.models import Founder, coach_can_review

from .exceptions import IneligibleError, NotFoundError, SubmissionConflictError
from .groups import LearnerGroup
from .models import CompletionMethod, Submission, SubmissionFeedback, SubmissionFile, SubmissionGrade, Target
from .policy import ensure_can_submit
from .status import TargetStatus, submission_status
from .validators import validate_attachments, validate_description

logger = logging.getLogger(__name__)


def _retries() -> int:
    return max(0, int(getattr(settings, "TARGET_SUBMISSION_RETRIES", 1)))


def _write_latest(target: Target, founder: Founder, group: LearnerGroup, check, fields: dict, on_create) -> Submission:
    with transaction.atomic():
        # Lock the current latest row so eligibility is re-checked against it
        list(Submission.objects.select_for_update().filter(target=target, group_key=group.key, latest=True))
        if check is not None:
            check(target, founder)
        Submission.objects.filter(target=target, group_key=group.key, latest=True).update(latest=False)
        submission = Submission.objects.create(
            target=target,
            team=group.team,
            founder=group.founder,
            group_key=group.key,
            iteration=group.team.iteration,
            latest=True,
            **fields,
        )
        if on_create is not None:
            on_create(submission)
        return submission


def replace_latest(
    target: Target,
    founder: Founder,
    *,
    check: Callable[[Target, Founder], None] | None = ensure_can_submit,
    on_create: Callable[[Submission], None] | None = None,
    **fields,
) -> Submission:
    """Insert a new latest submission for the founder's group on `target`.

    `check` runs inside the transaction after the lock is taken and may
    raise to abort without writing anything. `on_create` receives the new
    row inside the same transaction to attach related records.
    """
    group = LearnerGroup.for_target(target, founder)
    attempts = 1 + _retries()
    for attempt in range(1, attempts + 1):
        try:
            return _write_latest(target, founder, group, check, fields, on_create)
        except IntegrityError as exc:
            logger.warning("Latest submission race on target=%s group=%s (attempt %s/%s): %s", target.pk, group.key, attempt, attempts, exc)
    raise SubmissionConflictError()


def create_submission(target: Target, founder: Founder, description: str, links=None, files=None) -> Submission:
    """Validate and store a founder's work on a target for coach review."""
    LearnerGroup.for_target(target, founder)
    text = validate_description(description)
    cleaned_links = validate_attachments(links, files)
    method = target.completion_method
    if method == CompletionMethod.QUIZ:
        raise IneligibleError(message="This target is completed by taking its quiz.")
    if method != CompletionMethod.EVALUATED:
        # Link and mark-as-complete targets are completed through auto_verify
        raise IneligibleError(message="This target has no evaluation criteria to submit work against.")
    files = list(files or [])

    def attach_files(submission):
        for f in files:
            SubmissionFile.objects.create(submission=submission, file=f)

    submission = replace_latest(target, founder, on_create=attach_files, description=text, links=cleaned_links)
    logger.info("Submission %s created on target=%s group=%s", submission.pk, target.pk, submission.group_key)
    return submission


def undo_submission(submission: Submission, founder: Founder) -> Submission | None:
    """Delete a latest submission that is still awaiting review.

    The group's previous submission, if any, becomes the latest again and
    is returned.
    """
    target = submission.target
    group = LearnerGroup.for_target(target, founder)
    if submission.group_key != group.key:
        raise NotFoundError(f"Submission {submission.pk} does not exist.")
    with transaction.atomic():
        rows = list(Submission.objects.select_for_update().filter(target=target, group_key=group.key))
        locked = next((s for s in rows if s.pk == submission.pk), None)
        if locked is None:
            raise NotFoundError(f"Submission {submission.pk} does not exist.")
        if not locked.latest or submission_status(locked) != TargetStatus.SUBMITTED:
            raise IneligibleError(message="Only a submission awaiting review can be deleted.")
        locked.delete()
        previous = group.submissions(target).order_by("-created_at", "-id").first()
        if previous is not None:
            previous.latest = True
            previous.save(update_fields=["latest"])
    logger.info("Submission %s undone on target=%s group=%s", submission.pk, target.pk, group.key)
    return previous


def _normalise_grades(grades) -> dict[int, int]:
    try:
        return {int(k): int(v) for k, v in dict(grades or {}).items()}
    except (TypeError, ValueError):
        raise ValidationError("Grades must map criterion ids to whole numbers.")


def _ensure_coach(submission: Submission, coach) -> None:
    if not coach_can_review(coach, submission.team):
        raise IneligibleError(message="You are not assigned to review this team.")


def grade_submission(submission: Submission, coach, grades=None, feedback: str | None = None) -> Submission:
    """Record a coach's evaluation of a submission.

    Every evaluation criterion of the target needs a grade; the submission
    passes only when each grade meets its pass grade.
    """
    _ensure_coach(submission, coach)
    criteria = list(submission.target.evaluation_criteria.all())
    if not criteria:
        raise IneligibleError(message="This target is not graded by a coach.")
    values = _normalise_grades(grades)
    if set(values) != {c.pk for c in criteria}:
        raise ValidationError("Grade every evaluation criterion of the target.")
    for c in criteria:
        if not 1 <= values[c.pk] <= c.max_grade:
            raise ValidationError(f"Grade for {c.name} must be between 1 and {c.max_grade}.")
    passed = all(c.passes(values[c.pk]) for c in criteria)

    with transaction.atomic():
        locked = Submission.objects.select_for_update().get(pk=submission.pk)
        if locked.evaluated_at or locked.passed_at or locked.grades.exists():
            raise IneligibleError(message="This submission has already been reviewed.")
        SubmissionGrade.objects.bulk_create(
            [SubmissionGrade(submission=locked, evaluation_criterion=c, grade=values[c.pk]) for c in criteria]
        )
        now = timezone.now()
        locked.evaluated_at = now
        locked.evaluator = coach
        locked.passed_at = now if passed else None
        locked.save(update_fields=["evaluated_at", "evaluator", "passed_at"])
        if feedback and feedback.strip():
            SubmissionFeedback.objects.create(submission=locked, coach=coach, feedback=feedback.strip())
    logger.info("Submission %s graded by %s: %s", locked.pk, coach.pk, "passed" if passed else "failed")
    return locked


def add_feedback(submission: Submission, coach, text: str) -> SubmissionFeedback:
    _ensure_coach(submission, coach)
    body = (text or "").strip()
    if not body:
        raise ValidationError("Feedback cannot be blank.")
    return SubmissionFeedback.objects.create(submission=submission, coach=coach, feedback=body)
