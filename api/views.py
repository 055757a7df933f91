"""REST API v1 viewsets and endpoints."""
from __future__ import annotations

from django.db.models import Q
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response

from admissions.stats import admissions_dashboard
from courses.models import Founder
from targets.exceptions import NotFoundError
from targets.groups import LearnerGroup, load_founder, load_submission, load_target
from targets.models import Submission, Target
from targets.quiz import submit_quiz
from targets.status import pending_team_members
from targets.submissions import add_feedback, create_submission, grade_submission, undo_submission
from targets.verification import auto_verify
from .permissions import IsCoach
from .serializers import (
    FeedbackSerializer,
    GradeSerializer,
    QuizSubmitSerializer,
    SubmissionCreateSerializer,
    SubmissionFeedbackSerializer,
    SubmissionSerializer,
    TargetSerializer,
)


def _founders_by_course(user) -> dict:
    founders = Founder.objects.filter(user=user).select_related("team", "team__course", "user")
    return {f.team.course_id: f for f in founders}


class TargetViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    serializer_class = TargetSerializer
    filterset_fields = ["course", "role"]
    ordering_fields = ["id", "title"]

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Target.objects.none()
        # Founders see the targets of the courses they take part in
        user = self.request.user
        return (
            Target.objects.filter(course__teams__founders__user=user)
            .select_related("course")
            .prefetch_related("prerequisite_targets")
            .distinct()
            .order_by("course_id", "id")
        )

    def get_serializer_context(self):
        context = super().get_serializer_context()
        if self.request.user.is_authenticated:
            context["founders"] = _founders_by_course(self.request.user)
        return context

    def get_object(self):
        target = load_target(self.kwargs["pk"])
        self.founder = load_founder(self.request.user, target.course_id)
        return target

    @action(detail=True, methods=["get", "post"])
    def submissions(self, request, pk=None):
        target = self.get_object()
        if request.method == "GET":
            qs = (
                LearnerGroup.for_target(target, self.founder)
                .submissions(target)
                .prefetch_related("files", "grades__evaluation_criterion", "feedback__coach__profile", "quiz_answers")
            )
            return Response(SubmissionSerializer(qs, many=True, context={"request": request}).data)
        serializer = SubmissionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        submission = create_submission(target, self.founder, data["description"], links=data["links"], files=data["files"])
        return Response(SubmissionSerializer(submission, context={"request": request}).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def auto_verify(self, request, pk=None):
        target = self.get_object()
        submission = auto_verify(target, self.founder)
        return Response(SubmissionSerializer(submission, context={"request": request}).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def quiz(self, request, pk=None):
        target = self.get_object()
        serializer = QuizSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        submission = submit_quiz(target, self.founder, serializer.validated_data["answers"])
        return Response(SubmissionSerializer(submission, context={"request": request}).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"])
    def team_pending(self, request, pk=None):
        target = self.get_object()
        pending = pending_team_members(target, self.founder)
        data = [{"id": f.id, "name": f.name} for f in pending]
        return Response({"count": len(data), "results": data})


class SubmissionViewSet(mixins.RetrieveModelMixin, mixins.DestroyModelMixin, viewsets.GenericViewSet):
    serializer_class = SubmissionSerializer

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Submission.objects.none()
        # Founders: their teams' submissions; coaches: submissions they may review
        user = self.request.user
        return (
            Submission.objects.filter(
                Q(team__founders__user=user)
                | Q(team__course__coach_enrolments__coach=user, team__course__coach_enrolments__team__isnull=True)
                | Q(team__coach_enrolments__coach=user)
            )
            .select_related("target", "team")
            .prefetch_related("files", "grades__evaluation_criterion", "feedback__coach__profile", "quiz_answers")
            .distinct()
        )

    def get_object(self):
        submission = load_submission(self.kwargs["pk"])
        if not self.get_queryset().filter(pk=submission.pk).exists():
            raise NotFoundError(f"Submission {submission.pk} does not exist.")
        return submission

    def destroy(self, request, *args, **kwargs):
        submission = self.get_object()
        founder = load_founder(request.user, submission.target.course_id)
        previous = undo_submission(submission, founder)
        return Response({"latest": previous.id if previous else None}, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], permission_classes=[IsCoach])
    def grade(self, request, pk=None):
        submission = self.get_object()
        serializer = GradeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        graded = grade_submission(submission, request.user, grades=data["grades"], feedback=data["feedback"])
        return Response(SubmissionSerializer(graded, context={"request": request}).data)

    @action(detail=True, methods=["post"], permission_classes=[IsCoach])
    def feedback(self, request, pk=None):
        submission = self.get_object()
        serializer = FeedbackSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        fb = add_feedback(submission, request.user, serializer.validated_data["feedback"])
        return Response(SubmissionFeedbackSerializer(fb).data, status=status.HTTP_201_CREATED)


@api_view(["GET"])
@permission_classes([IsAdminUser])
def admissions_stats(request):
    """Staff-only admissions dashboard aggregates (label -> count)."""
    return Response(admissions_dashboard())
