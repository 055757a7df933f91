"""Domain errors raised by the target workflow.

Input problems are reported with Django's `ValidationError`; the classes
below cover unknown references and policy denials. None of them leave
partial writes behind.
"""
from __future__ import annotations


class TargetError(Exception):
    """Base class for target workflow errors."""

    default_message = "Target workflow error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(TargetError):
    default_message = "Not found."


class IneligibleError(TargetError):
    """A submission or completion was refused by the acceptance policy."""

    default_message = "This target does not accept submissions right now."

    def __init__(self, reason: str | None = None, message: str | None = None):
        self.reason = reason
        super().__init__(message or (f"Submission not allowed: {reason}." if reason else None))


class AlreadyPassedError(IneligibleError):
    default_message = "This target has already been passed."


class SubmissionConflictError(TargetError):
    default_message = "Another submission was recorded at the same time. Please try again."
