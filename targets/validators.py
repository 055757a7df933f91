"""Input validators for submissions and target configuration.

Raise Django's `ValidationError` with a human readable message; callers
surface it unchanged and nothing is written.
"""
from __future__ import annotations

import mimetypes
from pathlib import Path

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import URLValidator


ALLOWED_MIME = {
    "application/pdf",
    "application/zip",
    "image/jpeg",
    "image/png",
    "image/webp",
    "text/plain",
}
ALLOWED_EXT = {".pdf", ".zip", ".jpg", ".jpeg", ".png", ".webp", ".txt"}

_url_validator = URLValidator(schemes=["http", "https"])


def max_attachments() -> int:
    return int(getattr(settings, "TARGET_MAX_ATTACHMENTS", 3))


def validate_description(description) -> str:
    text = (description or "").strip()
    if not text:
        raise ValidationError("Description cannot be blank.")
    return text


def validate_link(url) -> str:
    value = (url or "").strip()
    try:
        _url_validator(value)
    except ValidationError:
        raise ValidationError(f"{value or 'Link'} does not look like a valid URL.")
    return value


def validate_upload(file) -> None:
    """Validate size and a conservative type check for an attached file."""
    limit = int(getattr(settings, "TARGET_UPLOAD_MAX_BYTES", 25 * 1024 * 1024))
    size = getattr(file, "size", None)
    if size is not None and size > limit:
        raise ValidationError(f"File too large (max {limit // (1024 * 1024)} MB)")
    name = getattr(file, "name", "") or ""
    if Path(name).suffix.lower() not in ALLOWED_EXT:
        raise ValidationError("Unsupported file type")
    guessed, _ = mimetypes.guess_type(name)
    if guessed and guessed not in ALLOWED_MIME:
        raise ValidationError("Unsupported MIME type")


def validate_attachments(links, files) -> list[str]:
    """Check the combined attachment count, then each link and file.

    Returns the cleaned list of links.
    """
    links = list(links or [])
    files = list(files or [])
    limit = max_attachments()
    if len(links) + len(files) > limit:
        raise ValidationError(f"A submission can have at most {limit} links and files combined.")
    cleaned = [validate_link(url) for url in links]
    for f in files:
        validate_upload(f)
    return cleaned


def validate_prerequisites(target, prerequisites) -> None:
    """Reject self references, cross-course prerequisites and cycles."""
    for prerequisite in prerequisites:
        if prerequisite.pk == target.pk:
            raise ValidationError("A target cannot be its own prerequisite.")
        if prerequisite.course_id != target.course_id:
            raise ValidationError(f"Prerequisite '{prerequisite.title}' belongs to another course.")
        # Walk everything reachable from this prerequisite; reaching the
        # target again means the graph has a cycle.
        seen = set()
        stack = [prerequisite]
        while stack:
            node = stack.pop()
            if node.pk in seen:
                continue
            seen.add(node.pk)
            for upstream in node.prerequisite_targets.all():
                if upstream.pk == target.pk:
                    raise ValidationError(f"Prerequisite '{prerequisite.title}' creates a cycle.")
                stack.append(upstream)
