from __future__ import annotations

from datetime import timedelta

import pytest
from django.utils import timezone

from targets.exceptions import AlreadyPassedError, IneligibleError
from targets.models import Submission
from targets.status import LOCK_PREREQUISITES, TargetStatus, resolve_status
from targets.verification import auto_verify
from tests.factories import make_criteria, make_quiz, make_target


@pytest.mark.django_db
def test_mark_as_complete_target_is_passed(course, founder):
    target = make_target(course, title="Read the handbook")
    s = auto_verify(target, founder)
    assert s.description == "Target 'Read the handbook' was auto-verified"
    assert s.auto_verified is True
    assert s.passed_at is not None
    assert s.latest is True
    assert resolve_status(target, founder) == TargetStatus.PASSED


@pytest.mark.django_db
def test_visit_link_target_is_passed(course, founder):
    target = make_target(course, title="Watch intro", link_to_complete="https://example.com/intro")
    auto_verify(target, founder)
    assert resolve_status(target, founder) == TargetStatus.PASSED


@pytest.mark.django_db
def test_second_call_on_non_resubmittable_target_raises(course, founder):
    target = make_target(course, resubmittable=False)
    auto_verify(target, founder)
    with pytest.raises(AlreadyPassedError):
        auto_verify(target, founder)
    assert Submission.objects.filter(target=target).count() == 1
    assert Submission.objects.filter(target=target, latest=True).count() == 1


@pytest.mark.django_db
def test_second_call_on_resubmittable_target_keeps_one_latest(course, founder):
    target = make_target(course, resubmittable=True)
    first = auto_verify(target, founder)
    second = auto_verify(target, founder)
    first.refresh_from_db()
    assert first.latest is False
    assert second.latest is True
    assert list(Submission.objects.filter(target=target, latest=True)) == [second]


@pytest.mark.django_db
def test_targets_needing_review_or_quiz_cannot_be_auto_verified(course, founder):
    reviewed = make_target(course, title="Reviewed", criteria=make_criteria(course))
    quizzed = make_target(course, title="Quizzed")
    make_quiz(quizzed)
    for target in (reviewed, quizzed):
        with pytest.raises(IneligibleError):
            auto_verify(target, founder)
    assert not Submission.objects.exists()


@pytest.mark.django_db
def test_locked_target_cannot_be_auto_verified(course, founder):
    prerequisite = make_target(course, title="First")
    target = make_target(course, title="Second")
    target.prerequisite_targets.add(prerequisite)
    with pytest.raises(IneligibleError) as exc:
        auto_verify(target, founder)
    assert exc.value.reason == LOCK_PREREQUISITES


@pytest.mark.django_db
def test_ended_course_refuses_auto_verification(course, founder):
    course.ends_at = timezone.now() - timedelta(days=1)
    course.save(update_fields=["ends_at"])
    target = make_target(course)
    with pytest.raises(IneligibleError):
        auto_verify(target, founder)
