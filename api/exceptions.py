"""Map target workflow errors onto HTTP responses."""
from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from targets.exceptions import AlreadyPassedError, IneligibleError, NotFoundError, SubmissionConflictError


def target_exception_handler(exc, context):
    """DRF exception handler that understands the domain errors.

    - ValidationError (Django) -> 400
    - NotFoundError -> 404
    - AlreadyPassedError, SubmissionConflictError -> 409
    - IneligibleError -> 403
    Anything else falls through to DRF's default handler.
    """
    if isinstance(exc, DjangoValidationError):
        return Response({"detail": " ".join(exc.messages)}, status=status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, NotFoundError):
        return Response({"detail": exc.message}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, AlreadyPassedError):
        return Response({"detail": exc.message, "reason": exc.reason}, status=status.HTTP_409_CONFLICT)
    if isinstance(exc, IneligibleError):
        return Response({"detail": exc.message, "reason": exc.reason}, status=status.HTTP_403_FORBIDDEN)
    if isinstance(exc, SubmissionConflictError):
        return Response({"detail": exc.message}, status=status.HTTP_409_CONFLICT)
    return exception_handler(exc, context)
