from __future__ import annotations

import pytest
from django.core.exceptions import ValidationError
from django.core.files.uploadedfile import SimpleUploadedFile

from courses.models import Course
from targets.models import CompletionMethod, TargetIcon, TargetRole
from targets.validators import validate_attachments, validate_description, validate_link, validate_upload
from tests.factories import make_criteria, make_quiz, make_target


@pytest.mark.django_db
def test_completion_method_follows_configuration(course):
    assert make_target(course, title="Plain").completion_method == CompletionMethod.MARK_AS_COMPLETE
    assert (
        make_target(course, title="Link", link_to_complete="https://example.com").completion_method
        == CompletionMethod.VISIT_LINK
    )
    assert make_target(course, title="Graded", criteria=make_criteria(course)).completion_method == CompletionMethod.EVALUATED
    quizzed = make_target(course, title="Quiz")
    make_quiz(quizzed)
    assert quizzed.completion_method == CompletionMethod.QUIZ


@pytest.mark.django_db
def test_icon(course):
    from django.utils import timezone

    assert make_target(course, role=TargetRole.TEAM).icon == TargetIcon.TEAM_TODO
    assert make_target(course, role=TargetRole.INDIVIDUAL).icon == TargetIcon.PERSONAL_TODO
    assert make_target(course, session_at=timezone.now()).icon == TargetIcon.ATTEND_SESSION


@pytest.mark.django_db
def test_clean_rejects_two_completion_mechanisms(course):
    target = make_target(course, link_to_complete="https://example.com", criteria=make_criteria(course, count=1))
    with pytest.raises(ValidationError):
        target.clean()


@pytest.mark.django_db
def test_clean_rejects_prerequisite_cycles(course):
    a = make_target(course, title="A")
    b = make_target(course, title="B")
    c = make_target(course, title="C")
    b.prerequisite_targets.add(a)
    c.prerequisite_targets.add(b)
    c.clean()

    a.prerequisite_targets.add(c)
    with pytest.raises(ValidationError):
        a.clean()


@pytest.mark.django_db
def test_clean_rejects_self_and_cross_course_prerequisites(course):
    target = make_target(course)
    target.prerequisite_targets.add(target)
    with pytest.raises(ValidationError):
        target.clean()

    target.prerequisite_targets.clear()
    elsewhere = make_target(Course.objects.create(title="Other"), title="Elsewhere")
    target.prerequisite_targets.add(elsewhere)
    with pytest.raises(ValidationError):
        target.clean()


@pytest.mark.parametrize("value", ["", " ", None])
def test_validate_description_rejects_blank(value):
    with pytest.raises(ValidationError):
        validate_description(value)


@pytest.mark.parametrize("url", ["https://example.com/a?b=1", "http://localhost:8000/demo"])
def test_validate_link_accepts_absolute_http_urls(url):
    assert validate_link(url) == url


@pytest.mark.parametrize("url", ["foobar", "/relative/path", "ftp://example.com", "javascript:alert(1)"])
def test_validate_link_rejects_other_values(url):
    with pytest.raises(ValidationError):
        validate_link(url)


def test_attachment_limit_follows_setting(settings):
    settings.TARGET_MAX_ATTACHMENTS = 1
    with pytest.raises(ValidationError):
        validate_attachments(["https://a.example.com", "https://b.example.com"], [])
    assert validate_attachments([" https://a.example.com "], []) == ["https://a.example.com"]


def test_upload_size_limit(settings):
    settings.TARGET_UPLOAD_MAX_BYTES = 4
    with pytest.raises(ValidationError):
        validate_upload(SimpleUploadedFile("notes.txt", b"too long", content_type="text/plain"))
    validate_upload(SimpleUploadedFile("notes.txt", b"ok", content_type="text/plain"))
