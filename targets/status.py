"""Target status resolution.

Status is never stored. Each call derives it from the current rows: the
course and team access windows, the prerequisite targets, and the latest
submission of the learner group with its grades.
"""
from __future__ import annotations

from django.db import models

from courses.models import Founder

from .groups import LearnerGroup
from .models import Submission, Target


class TargetStatus(models.TextChoices):
    LOCKED = "locked", "Locked"
    PENDING = "pending", "Pending"
    SUBMITTED = "submitted", "Submitted"
    PASSED = "passed", "Passed"
    FAILED = "failed", "Failed"


LOCK_COURSE_ENDED = "course ended"
LOCK_ACCESS_ENDED = "access ended"
LOCK_PREREQUISITES = "incomplete prerequisites"


def submission_status(submission: Submission) -> str:
    """Evaluation state of a single submission: SUBMITTED, PASSED or FAILED.

    Grades decide when present (every graded criterion must meet its pass
    grade). Otherwise a recorded `passed_at` means passed, and an
    `evaluated_at` without it means failed.
    """
    grades = list(submission.grades.select_related("evaluation_criterion"))
    if grades:
        return TargetStatus.PASSED if all(g.passed for g in grades) else TargetStatus.FAILED
    if submission.passed_at:
        return TargetStatus.PASSED
    if submission.evaluated_at:
        return TargetStatus.FAILED
    return TargetStatus.SUBMITTED


def access_lock_reason(target: Target, founder: Founder) -> str | None:
    if target.course.has_ended():
        return LOCK_COURSE_ENDED
    if founder.team.access_ended():
        return LOCK_ACCESS_ENDED
    return None


def _prerequisites_passed(target: Target, founder: Founder, visiting: frozenset, resolved: dict) -> bool:
    visiting = visiting | {target.pk}
    for prerequisite in target.prerequisite_targets.select_related("course"):
        if prerequisite.pk in visiting:
            # Cycle in the prerequisite graph; nothing on it can be unlocked
            return False
        if _resolve(prerequisite, founder, visiting, resolved) != TargetStatus.PASSED:
            return False
    return True


def _resolve(target: Target, founder: Founder, visiting: frozenset, resolved: dict) -> str:
    # Shared prerequisites are resolved once per call; `resolved` maps pk -> status
    if target.pk in resolved:
        return resolved[target.pk]
    group = LearnerGroup.for_target(target, founder)
    if access_lock_reason(target, founder) or not _prerequisites_passed(target, founder, visiting, resolved):
        status = TargetStatus.LOCKED
    else:
        latest = group.latest_submission(target)
        status = TargetStatus.PENDING if latest is None else submission_status(latest)
    resolved[target.pk] = status
    return status


def prerequisites_passed(target: Target, founder: Founder) -> bool:
    return _prerequisites_passed(target, founder, frozenset(), {})


def resolve_status(target: Target, founder: Founder) -> str:
    """Status of `target` for the learner group `founder` belongs to."""
    return _resolve(target, founder, frozenset(), {})


def lock_reason(target: Target, founder: Founder) -> str | None:
    """Why the target is locked for this founder, or None when it is not."""
    LearnerGroup.for_target(target, founder)
    reason = access_lock_reason(target, founder)
    if reason:
        return reason
    if not prerequisites_passed(target, founder):
        return LOCK_PREREQUISITES
    return None


def pending_team_members(target: Target, founder: Founder) -> list[Founder]:
    """Teammates who have not yet passed an individual target."""
    if not target.is_individual:
        return []
    teammates = founder.team.founders.exclude(pk=founder.pk).select_related("user", "user__profile", "team", "team__course")
    return [mate for mate in teammates if resolve_status(target, mate) != TargetStatus.PASSED]
