from __future__ import annotations

import logging
from typing import Any

from django.core.exceptions import ValidationError
from django.utils import timezone

from courses.models import Founder

from .exceptions import IneligibleError
from .models import AnswerOption, Quiz, QuizAnswer, Submission, Target
from .submissions import replace_latest

logger = logging.getLogger(__name__)


def _ref(value):
    """Accept a model instance or a raw id and return an int id (or None)."""
    if value is None or value == "":
        return None
    try:
        return int(getattr(value, "pk", value))
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid quiz reference: {value!r}")


def _chosen(answers) -> dict[int, int | None]:
    pairs = answers.items() if hasattr(answers, "items") else (answers or [])
    chosen: dict[int, int | None] = {}
    for question, option in pairs:
        chosen[_ref(question)] = _ref(option)
    return chosen


def tally(quiz: Quiz, answers) -> tuple[int, int, dict[int, int | None]]:
    """Count correct answers in quiz order.

    - answers: mapping of question -> chosen option, or a sequence of
      (question, option) pairs; instances or ids are both accepted

    A question without an answer counts as incorrect. Returns
    `(correct, total, chosen)` where `chosen` maps question id to option id.
    """
    chosen = _chosen(answers)
    questions = list(quiz.questions.all())
    correct = 0
    for q in questions:
        picked = chosen.get(q.pk)
        if picked is not None and q.correct_answer_id is not None and picked == q.correct_answer_id:
            correct += 1
    return correct, len(questions), chosen


def score_quiz(quiz: Quiz, answers) -> str:
    """Grade a completed attempt and format it as "correct/total"."""
    correct, total, _ = tally(quiz, answers)
    return f"{correct}/{total}"


def quiz_readiness(quiz: Quiz) -> dict[str, Any]:
    """Evaluate whether a quiz can be taken.

    Conditions:
    - At least one question
    - Each question has at least two options and a designated correct one
    Returns: { 'ready': bool, 'issues': [str] }
    """
    issues: list[str] = []
    questions = list(quiz.questions.prefetch_related("answer_options"))
    if not questions:
        issues.append("Quiz has no questions.")
    for q in questions:
        options = list(q.answer_options.all())
        if len(options) < 2:
            issues.append(f"Question {q.order or q.id}: must have at least two answer options.")
        if q.correct_answer_id is None or q.correct_answer_id not in {o.pk for o in options}:
            issues.append(f"Question {q.order or q.id}: must have a correct answer.")
    return {"ready": len(issues) == 0, "issues": issues}


def submit_quiz(target: Target, founder: Founder, answers) -> Submission:
    """Score a founder's single attempt at the target's quiz and record it.

    Any scored attempt completes the target; the score is kept for review.
    Quizzes that fail `quiz_readiness` are refused.
    """
    quiz = Quiz.objects.filter(target=target).first()
    if quiz is None:
        raise IneligibleError(message="This target has no quiz.")
    readiness = quiz_readiness(quiz)
    if not readiness["ready"]:
        raise IneligibleError(message="This quiz is not ready: " + " ".join(readiness["issues"]))
    correct, total, chosen = tally(quiz, answers)

    question_ids = set(quiz.questions.values_list("id", flat=True))
    option_question = dict(
        AnswerOption.objects.filter(quiz_question__quiz=quiz).values_list("id", "quiz_question_id")
    )
    for qid, oid in chosen.items():
        if qid not in question_ids:
            raise ValidationError(f"Question {qid} is not part of this quiz.")
        if oid is not None and option_question.get(oid) != qid:
            raise ValidationError(f"Answer {oid} does not belong to question {qid}.")

    def record_answers(submission):
        QuizAnswer.objects.bulk_create(
            [QuizAnswer(submission=submission, quiz_question_id=qid, answer_option_id=chosen.get(qid)) for qid in sorted(question_ids)]
        )

    now = timezone.now()
    submission = replace_latest(
        target,
        founder,
        on_create=record_answers,
        description=f"Target '{target.title}' was completed by answering a quiz",
        quiz_score=f"{correct}/{total}",
        evaluated_at=now,
        passed_at=now,
    )
    logger.info("Quiz on target=%s scored %s/%s for group=%s", target.pk, correct, total, submission.group_key)
    return submission
