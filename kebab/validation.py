from __future__ import annotations

import uuid
from typing import Any

from .db import TITLE_MAX_LENGTH
from .errors import Issue, ValidationError


def validate_title(value: Any, field: str = "title") -> list[Issue]:
    """Return the problems with ``value`` as a title, empty when it is valid.

    Titles are checked as given; surrounding whitespace is neither trimmed
    nor rejected.
    """
    if value is None:
        return [Issue(field, "is required")]
    if not isinstance(value, str):
        return [Issue(field, "must be a string")]
    if len(value) < 1:
        return [Issue(field, "must be at least 1 character")]
    if len(value) > TITLE_MAX_LENGTH:
        return [Issue(field, f"must be at most {TITLE_MAX_LENGTH} characters")]
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return [Issue(field, "must be valid UTF-8")]
    return []


def require_title(value: Any, field: str = "title") -> str:
    issues = validate_title(value, field)
    if issues:
        raise ValidationError(issues)
    return value


def parse_identifier(value: str, field: str = "id") -> str:
    """Return ``value`` as a canonical lowercase UUID string.

    Only the hyphenated 36 character form is accepted.
    """
    try:
        parsed = uuid.UUID(value)
    except (TypeError, ValueError, AttributeError):
        raise ValidationError([Issue(field, "must be a valid UUID")]) from None
    canonical = str(parsed)
    if canonical != value.lower():
        raise ValidationError([Issue(field, "must be a valid UUID")])
    return canonical
