from __future__ import annotations

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import Client

from targets.models import Submission
from tests.factories import make_coach, make_criteria, make_evaluated_target, make_quiz, make_target


def coach_client(course, username="coach"):
    coach = make_coach(username, course=course)
    c = Client()
    c.force_login(coach)
    return coach, c


@pytest.mark.django_db
def test_create_submission(course, founder_client):
    target = make_evaluated_target(course)
    r = founder_client.post(
        f"/api/v1/targets/{target.id}/submissions/",
        {"description": "Our landing page", "links": ["https://example.com/landing"]},
        content_type="application/json",
    )
    assert r.status_code == 201
    data = r.json()
    assert data["status"] == "submitted"
    assert data["latest"] is True
    assert data["links"] == ["https://example.com/landing"]
    assert data["attachment_count"] == 1

    listing = founder_client.get(f"/api/v1/targets/{target.id}/submissions/")
    assert [s["id"] for s in listing.json()] == [data["id"]]


@pytest.mark.django_db
def test_create_submission_with_file_upload(settings, tmp_path, course, founder_client):
    settings.MEDIA_ROOT = tmp_path
    target = make_evaluated_target(course)
    upload = SimpleUploadedFile("deck.pdf", b"%PDF-1.4\n", content_type="application/pdf")
    r = founder_client.post(
        f"/api/v1/targets/{target.id}/submissions/",
        {"description": "Deck", "files": [upload]},
    )
    assert r.status_code == 201
    files = r.json()["files"]
    assert len(files) == 1 and files[0]["title"].startswith("deck")


@pytest.mark.django_db
@pytest.mark.parametrize(
    "payload",
    [
        {"description": "   "},
        {"description": "Links", "links": ["foobar"]},
        {"description": "Links", "links": [f"https://example.com/{i}" for i in range(4)]},
    ],
)
def test_invalid_submission_is_rejected(course, founder_client, payload):
    target = make_evaluated_target(course)
    r = founder_client.post(f"/api/v1/targets/{target.id}/submissions/", payload, content_type="application/json")
    assert r.status_code == 400
    assert r.json()["detail"]
    assert not Submission.objects.exists()


@pytest.mark.django_db
def test_submission_awaiting_review_blocks_another(course, founder_client):
    target = make_evaluated_target(course)
    url = f"/api/v1/targets/{target.id}/submissions/"
    assert founder_client.post(url, {"description": "One"}, content_type="application/json").status_code == 201
    r = founder_client.post(url, {"description": "Two"}, content_type="application/json")
    assert r.status_code == 403
    assert r.json()["reason"] == "submission awaiting review"


@pytest.mark.django_db
def test_auto_verify_then_already_passed(course, founder_client):
    target = make_target(course, title="Handbook", resubmittable=False)
    url = f"/api/v1/targets/{target.id}/auto_verify/"
    r = founder_client.post(url)
    assert r.status_code == 201
    assert r.json()["description"] == "Target 'Handbook' was auto-verified"
    assert r.json()["status"] == "passed"

    again = founder_client.post(url)
    assert again.status_code == 409
    assert again.json()["reason"] == "non-resubmittable target already passed"
    assert Submission.objects.filter(target=target, latest=True).count() == 1


@pytest.mark.django_db
def test_quiz_endpoint_scores_answers(course, founder_client):
    target = make_target(course)
    _, (q1, q1_opts), (q2, q2_opts) = make_quiz(target)
    r = founder_client.post(
        f"/api/v1/targets/{target.id}/quiz/",
        {"answers": {str(q1.id): q1_opts[0].id, str(q2.id): q2_opts[3].id}},
        content_type="application/json",
    )
    assert r.status_code == 201
    data = r.json()
    assert data["quiz_score"] == "1/2"
    assert data["answers"] == {str(q1.id): q1_opts[0].id, str(q2.id): q2_opts[3].id}


@pytest.mark.django_db
def test_undo_submission(course, founder_client):
    target = make_evaluated_target(course)
    created = founder_client.post(
        f"/api/v1/targets/{target.id}/submissions/", {"description": "Oops"}, content_type="application/json"
    ).json()
    r = founder_client.delete(f"/api/v1/submissions/{created['id']}/")
    assert r.status_code == 200
    assert r.json() == {"latest": None}
    assert not Submission.objects.exists()
    detail = founder_client.get(f"/api/v1/targets/{target.id}/").json()
    assert detail["status"] == "pending"


@pytest.mark.django_db
def test_coach_grades_submission(course, founder_client):
    criteria = make_criteria(course)
    target = make_target(course, criteria=criteria)
    created = founder_client.post(
        f"/api/v1/targets/{target.id}/submissions/", {"description": "Review me"}, content_type="application/json"
    ).json()

    _, client = coach_client(course)
    r = client.post(
        f"/api/v1/submissions/{created['id']}/grade/",
        {"grades": {str(criteria[0].id): 2, str(criteria[1].id): 1}, "feedback": "Tighten the numbers"},
        content_type="application/json",
    )
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "failed"
    assert {g["grade"] for g in data["grades"]} == {1, 2}
    assert {g["label"] for g in data["grades"]} == {"Bad", "Good"}
    assert data["feedback"][0]["coach_title"] == "Coach"

    detail = founder_client.get(f"/api/v1/targets/{target.id}/").json()
    assert detail["status"] == "failed"
    assert detail["eligibility"]["allowed"] is True


@pytest.mark.django_db
def test_invalid_grade_is_rejected(course, founder_client):
    criteria = make_criteria(course)
    target = make_target(course, criteria=criteria)
    created = founder_client.post(
        f"/api/v1/targets/{target.id}/submissions/", {"description": "Review me"}, content_type="application/json"
    ).json()
    _, client = coach_client(course)
    r = client.post(
        f"/api/v1/submissions/{created['id']}/grade/",
        {"grades": {str(criteria[0].id): 5, str(criteria[1].id): 2}},
        content_type="application/json",
    )
    assert r.status_code == 400


@pytest.mark.django_db
def test_founder_cannot_grade(course, founder_client):
    target = make_evaluated_target(course)
    created = founder_client.post(
        f"/api/v1/targets/{target.id}/submissions/", {"description": "Self review"}, content_type="application/json"
    ).json()
    r = founder_client.post(f"/api/v1/submissions/{created['id']}/grade/", {"grades": {}}, content_type="application/json")
    assert r.status_code == 403


@pytest.mark.django_db
def test_coach_of_another_course_sees_nothing(course, founder_client):
    from courses.models import Course

    target = make_evaluated_target(course)
    created = founder_client.post(
        f"/api/v1/targets/{target.id}/submissions/", {"description": "Private"}, content_type="application/json"
    ).json()
    _, client = coach_client(Course.objects.create(title="Other"), username="elsewhere")
    assert client.get(f"/api/v1/submissions/{created['id']}/").status_code == 404
    r = client.post(f"/api/v1/submissions/{created['id']}/feedback/", {"feedback": "Hi"}, content_type="application/json")
    assert r.status_code == 404


@pytest.mark.django_db
def test_coach_adds_feedback(course, founder_client):
    target = make_evaluated_target(course)
    created = founder_client.post(
        f"/api/v1/targets/{target.id}/submissions/", {"description": "Thoughts?"}, content_type="application/json"
    ).json()
    _, client = coach_client(course)
    r = client.post(f"/api/v1/submissions/{created['id']}/feedback/", {"feedback": "Looks promising"}, content_type="application/json")
    assert r.status_code == 201
    assert r.json()["feedback"] == "Looks promising"

    detail = founder_client.get(f"/api/v1/submissions/{created['id']}/").json()
    assert detail["feedback"][0]["feedback"] == "Looks promising"


@pytest.mark.django_db
def test_link_target_refuses_work_submission(course, founder_client):
    target = make_target(course, link_to_complete="https://example.com/read")
    r = founder_client.post(
        f"/api/v1/targets/{target.id}/submissions/", {"description": "My work"}, content_type="application/json"
    )
    assert r.status_code == 403
    assert not Submission.objects.exists()
    assert founder_client.post(f"/api/v1/targets/{target.id}/auto_verify/").status_code == 201
