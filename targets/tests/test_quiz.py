from __future__ import annotations

import pytest
from django.core.exceptions import ValidationError

from targets.exceptions import IneligibleError
from targets.models import AnswerOption, Quiz, QuizAnswer, QuizQuestion, Submission
from targets.policy import REASON_ALREADY_PASSED, can_submit
from targets.quiz import quiz_readiness, score_quiz, submit_quiz, tally
from targets.status import TargetStatus, resolve_status
from tests.factories import make_quiz, make_target


@pytest.fixture
def quiz_target(course):
    target = make_target(course, title="Market sizing")
    quiz, first, second = make_quiz(target)
    return target, quiz, first, second


@pytest.mark.django_db
def test_one_wrong_one_right_scores_one_of_two(quiz_target):
    _, quiz, (q1, q1_opts), (q2, q2_opts) = quiz_target
    assert score_quiz(quiz, {q1: q1_opts[0], q2: q2_opts[3]}) == "1/2"


@pytest.mark.django_db
def test_all_correct_scores_full_marks(quiz_target):
    _, quiz, (q1, q1_opts), (q2, q2_opts) = quiz_target
    assert score_quiz(quiz, {q1.id: q1_opts[1].id, q2.id: q2_opts[3].id}) == "2/2"


@pytest.mark.django_db
def test_answers_accept_pairs_and_string_ids(quiz_target):
    _, quiz, (q1, q1_opts), (q2, q2_opts) = quiz_target
    pairs = [(str(q1.id), str(q1_opts[1].id)), (str(q2.id), str(q2_opts[0].id))]
    assert score_quiz(quiz, pairs) == "1/2"


@pytest.mark.django_db
def test_unanswered_question_counts_as_incorrect(quiz_target):
    _, quiz, (q1, q1_opts), _ = quiz_target
    assert score_quiz(quiz, {q1.id: q1_opts[1].id}) == "1/2"
    assert score_quiz(quiz, {}) == "0/2"


@pytest.mark.django_db
def test_scoring_is_deterministic(quiz_target):
    _, quiz, (q1, q1_opts), (q2, q2_opts) = quiz_target
    answers = {q2.id: q2_opts[3].id, q1.id: q1_opts[0].id}
    results = {score_quiz(quiz, answers) for _ in range(5)}
    assert results == {"1/2"}
    correct, total, chosen = tally(quiz, answers)
    assert (correct, total) == (1, 2)
    assert chosen == {q1.id: q1_opts[0].id, q2.id: q2_opts[3].id}


@pytest.mark.django_db
def test_garbage_reference_is_a_validation_error(quiz_target):
    _, quiz, (q1, _), _ = quiz_target
    with pytest.raises(ValidationError):
        score_quiz(quiz, {q1.id: "not-a-number"})


@pytest.mark.django_db
def test_submit_records_score_and_answers(quiz_target, founder):
    target, quiz, (q1, q1_opts), (q2, q2_opts) = quiz_target
    s = submit_quiz(target, founder, {q1.id: q1_opts[0].id, q2.id: q2_opts[3].id})

    assert s.quiz_score == "1/2"
    assert s.latest is True
    assert s.description == "Target 'Market sizing' was completed by answering a quiz"
    assert s.passed_at is not None
    assert resolve_status(target, founder) == TargetStatus.PASSED
    stored = dict(QuizAnswer.objects.filter(submission=s).values_list("quiz_question_id", "answer_option_id"))
    assert stored == {q1.id: q1_opts[0].id, q2.id: q2_opts[3].id}


@pytest.mark.django_db
def test_partly_wrong_attempt_still_completes_the_target(course, founder):
    target = make_target(course, title="Hard quiz", resubmittable=False)
    _, (q1, q1_opts), (q2, q2_opts) = make_quiz(target)
    s = submit_quiz(target, founder, {q1.id: q1_opts[0].id, q2.id: q2_opts[0].id})
    assert s.quiz_score == "0/2"
    assert s.passed_at is not None
    assert resolve_status(target, founder) == TargetStatus.PASSED
    assert can_submit(target, founder) == {"allowed": False, "reason": REASON_ALREADY_PASSED}


@pytest.mark.django_db
def test_second_attempt_is_refused(quiz_target, founder):
    target, _, (q1, q1_opts), (q2, q2_opts) = quiz_target
    submit_quiz(target, founder, {q1.id: q1_opts[1].id, q2.id: q2_opts[3].id})
    with pytest.raises(IneligibleError):
        submit_quiz(target, founder, {q1.id: q1_opts[1].id, q2.id: q2_opts[3].id})
    assert Submission.objects.filter(target=target).count() == 1


@pytest.mark.django_db
def test_option_from_another_question_is_rejected(quiz_target, founder):
    target, _, (q1, _), (_, q2_opts) = quiz_target
    with pytest.raises(ValidationError):
        submit_quiz(target, founder, {q1.id: q2_opts[0].id})
    assert not Submission.objects.exists()


@pytest.mark.django_db
def test_target_without_quiz_is_ineligible(course, founder):
    target = make_target(course)
    with pytest.raises(IneligibleError):
        submit_quiz(target, founder, {})


@pytest.mark.django_db
def test_readiness_reports_incomplete_questions(quiz_target):
    _, quiz, _, _ = quiz_target
    assert quiz_readiness(quiz) == {"ready": True, "issues": []}

    QuizQuestion.objects.create(quiz=quiz, order=3, question="Unfinished")
    report = quiz_readiness(quiz)
    assert report["ready"] is False
    assert any("Question 3" in issue for issue in report["issues"])


@pytest.mark.django_db
def test_quiz_without_questions_is_refused(course, founder):
    target = make_target(course, title="Empty quiz")
    Quiz.objects.create(target=target, title="Empty")
    with pytest.raises(IneligibleError) as exc:
        submit_quiz(target, founder, {})
    assert "no questions" in str(exc.value)
    assert not Submission.objects.exists()


@pytest.mark.django_db
def test_question_without_correct_answer_is_refused(course, founder):
    target = make_target(course, title="Draft quiz")
    quiz = Quiz.objects.create(target=target, title="Draft")
    question = QuizQuestion.objects.create(quiz=quiz, order=1, question="Pick one")
    for value in ("A", "B"):
        AnswerOption.objects.create(quiz_question=question, value=value)
    with pytest.raises(IneligibleError):
        submit_quiz(target, founder, {})
    assert not Submission.objects.exists()
