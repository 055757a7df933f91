"""Submission acceptance policy.

Decides whether a founder's group may add a submission to a target. The
rules are checked in order and the first denial wins.
"""
from __future__ import annotations

from typing import Any

from django.conf import settings

from courses.models import Founder

from .exceptions import AlreadyPassedError, IneligibleError
from .groups import LearnerGroup
from .models import Target
from .status import (
    LOCK_PREREQUISITES,
    TargetStatus,
    access_lock_reason,
    prerequisites_passed,
    submission_status,
)


REASON_ALREADY_PASSED = "non-resubmittable target already passed"
REASON_AWAITING_REVIEW = "submission awaiting review"
REASON_QUIZ_ATTEMPTED = "quiz already attempted"
REASON_FAILED_LOCKED = "resubmission after failure disabled"


def allow_resubmit_after_failure() -> bool:
    return bool(getattr(settings, "TARGET_ALLOW_RESUBMIT_AFTER_FAILURE", True))


def can_submit(target: Target, founder: Founder) -> dict[str, Any]:
    """Return `{'allowed': bool, 'reason': str | None}` for a new submission.

    A failed latest submission never blocks on the resubmittable flag; only
    a passing one does.
    """
    group = LearnerGroup.for_target(target, founder)
    reason = access_lock_reason(target, founder)
    if reason:
        return {"allowed": False, "reason": reason}
    if not prerequisites_passed(target, founder):
        return {"allowed": False, "reason": LOCK_PREREQUISITES}

    latest = group.latest_submission(target)
    if latest is not None:
        status = submission_status(latest)
        if status == TargetStatus.PASSED and not target.resubmittable:
            return {"allowed": False, "reason": REASON_ALREADY_PASSED}
        if status == TargetStatus.SUBMITTED:
            return {"allowed": False, "reason": REASON_AWAITING_REVIEW}
        if latest.quiz_score:
            return {"allowed": False, "reason": REASON_QUIZ_ATTEMPTED}
        if status == TargetStatus.FAILED and not allow_resubmit_after_failure():
            return {"allowed": False, "reason": REASON_FAILED_LOCKED}
    return {"allowed": True, "reason": None}


def ensure_can_submit(target: Target, founder: Founder) -> None:
    verdict = can_submit(target, founder)
    if verdict["allowed"]:
        return
    if verdict["reason"] == REASON_ALREADY_PASSED:
        raise AlreadyPassedError(verdict["reason"])
    raise IneligibleError(verdict["reason"])
