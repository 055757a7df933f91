"""Learner groups and reference lookups.

Team targets are tracked per team; individual targets per founder. The
`LearnerGroup` value hides that difference from the status and policy
code.
"""
from __future__ import annotations

from dataclasses import dataclass

from courses.models import Founder, Team

from .exceptions import NotFoundError
from .models import Submission, Target


@dataclass(frozen=True)
class LearnerGroup:
    team: Team
    founder: Founder | None = None

    @classmethod
    def for_target(cls, target: Target, founder: Founder) -> "LearnerGroup":
        if founder.team.course_id != target.course_id:
            raise NotFoundError("Founder is not part of this target's course.")
        return cls(team=founder.team, founder=founder if target.is_individual else None)

    @property
    def key(self) -> str:
        if self.founder is not None:
            return f"founder:{self.founder.pk}"
        return f"team:{self.team.pk}"

    def submissions(self, target: Target):
        return Submission.objects.for_group(target, self.key)

    def latest_submission(self, target: Target) -> Submission | None:
        return Submission.objects.latest_for(target, self.key)


def load_target(target_id) -> Target:
    try:
        return Target.objects.select_related("course").get(pk=target_id)
    except (Target.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Target {target_id} does not exist.")


def load_founder(user, course_id) -> Founder:
    """Return the founder record of `user` in the given course."""
    founder = (
        Founder.objects.select_related("team", "team__course", "user")
        .filter(user_id=getattr(user, "pk", None), team__course_id=course_id)
        .first()
    )
    if founder is None:
        raise NotFoundError("You are not a founder in this course.")
    return founder


def load_submission(submission_id) -> Submission:
    try:
        return Submission.objects.select_related("target", "team", "founder").get(pk=submission_id)
    except (Submission.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Submission {submission_id} does not exist.")
