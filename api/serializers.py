"""Serializers for REST API v1.

Target payloads are founder-aware: status, lock reason and eligibility
are computed for the requesting founder on every read. Quiz payloads
never include the correct answers.
"""
from __future__ import annotations

from rest_framework import serializers

from courses.models import CoachEnrolment
from targets.models import AnswerOption, QuizQuestion, Submission, SubmissionFeedback, SubmissionGrade, Target
from targets.policy import can_submit
from targets.status import lock_reason, resolve_status, submission_status


class AnswerOptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = AnswerOption
        fields = ("id", "value", "hint")


class QuizQuestionSerializer(serializers.ModelSerializer):
    answer_options = AnswerOptionSerializer(many=True, read_only=True)

    class Meta:
        model = QuizQuestion
        fields = ("id", "order", "question", "description", "answer_options")


class TargetSerializer(serializers.ModelSerializer):
    completion_method = serializers.CharField(read_only=True)
    icon = serializers.CharField(read_only=True)
    status = serializers.SerializerMethodField()
    lock_reason = serializers.SerializerMethodField()
    eligibility = serializers.SerializerMethodField()
    quiz_questions = serializers.SerializerMethodField()

    class Meta:
        model = Target
        fields = (
            "id",
            "course",
            "title",
            "description",
            "role",
            "target_type",
            "resubmittable",
            "days_to_complete",
            "session_at",
            "link_to_complete",
            "points_earnable",
            "prerequisite_targets",
            "completion_method",
            "icon",
            "status",
            "lock_reason",
            "eligibility",
            "quiz_questions",
        )
        read_only_fields = fields

    def _founder(self, obj):
        founders = self.context.get("founders") or {}
        return founders.get(obj.course_id)

    def get_status(self, obj) -> str | None:
        founder = self._founder(obj)
        return resolve_status(obj, founder) if founder else None

    def get_lock_reason(self, obj) -> str | None:
        founder = self._founder(obj)
        return lock_reason(obj, founder) if founder else None

    def get_eligibility(self, obj) -> dict | None:
        founder = self._founder(obj)
        return can_submit(obj, founder) if founder else None

    def get_quiz_questions(self, obj) -> list:
        if not obj.has_quiz():
            return []
        questions = obj.quiz.questions.prefetch_related("answer_options")
        return QuizQuestionSerializer(questions, many=True).data


class SubmissionGradeSerializer(serializers.ModelSerializer):
    criterion = serializers.IntegerField(source="evaluation_criterion_id", read_only=True)
    criterion_name = serializers.CharField(source="evaluation_criterion.name", read_only=True)
    label = serializers.SerializerMethodField()
    passed = serializers.BooleanField(read_only=True)

    class Meta:
        model = SubmissionGrade
        fields = ("criterion", "criterion_name", "grade", "label", "passed")

    def get_label(self, obj) -> str:
        return obj.evaluation_criterion.label_for(obj.grade)


class SubmissionFeedbackSerializer(serializers.ModelSerializer):
    coach_name = serializers.SerializerMethodField()
    coach_title = serializers.SerializerMethodField()

    class Meta:
        model = SubmissionFeedback
        fields = ("id", "coach_name", "coach_title", "feedback", "created_at")

    def _known_coach(self, obj) -> bool:
        # Coaches no longer enrolled on the course are shown anonymously
        if obj.coach_id is None:
            return False
        return CoachEnrolment.objects.filter(coach_id=obj.coach_id, course_id=obj.submission.target.course_id).exists()

    def get_coach_name(self, obj) -> str:
        if not self._known_coach(obj):
            return "Unknown Coach"
        return obj.coach.profile.display_name

    def get_coach_title(self, obj) -> str:
        if not self._known_coach(obj):
            return ""
        return obj.coach.profile.title


class SubmissionSerializer(serializers.ModelSerializer):
    status = serializers.SerializerMethodField()
    files = serializers.SerializerMethodField()
    attachment_count = serializers.IntegerField(read_only=True)
    grades = SubmissionGradeSerializer(many=True, read_only=True)
    feedback = SubmissionFeedbackSerializer(many=True, read_only=True)
    answers = serializers.SerializerMethodField()

    class Meta:
        model = Submission
        fields = (
            "id",
            "target",
            "description",
            "links",
            "files",
            "attachment_count",
            "iteration",
            "created_at",
            "evaluated_at",
            "passed_at",
            "latest",
            "quiz_score",
            "auto_verified",
            "status",
            "grades",
            "feedback",
            "answers",
        )
        read_only_fields = fields

    def get_status(self, obj) -> str:
        return submission_status(obj)

    def get_files(self, obj) -> list:
        request = self.context.get("request")
        result = []
        for f in obj.files.all():
            try:
                url = request.build_absolute_uri(f.file.url) if request else f.file.url
            except ValueError:
                url = ""
            result.append({"id": f.id, "title": f.title, "url": url})
        return result

    def get_answers(self, obj) -> dict:
        return {str(a.quiz_question_id): a.answer_option_id for a in obj.quiz_answers.all()}


class SubmissionCreateSerializer(serializers.Serializer):
    # Content rules live in targets.validators so every caller shares them
    description = serializers.CharField(allow_blank=True, trim_whitespace=False)
    links = serializers.ListField(child=serializers.CharField(allow_blank=True), required=False, default=list)
    files = serializers.ListField(child=serializers.FileField(), required=False, default=list)


class QuizSubmitSerializer(serializers.Serializer):
    answers = serializers.DictField(child=serializers.IntegerField(allow_null=True))


class GradeSerializer(serializers.Serializer):
    grades = serializers.DictField(child=serializers.IntegerField(), required=False, default=dict)
    feedback = serializers.CharField(required=False, allow_blank=True, default="")


class FeedbackSerializer(serializers.Serializer):
    feedback = serializers.CharField(allow_blank=True)
