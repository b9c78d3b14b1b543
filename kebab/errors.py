"""Error taxonomy shared by the store and the HTTP layer."""
from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Issue:
    field: str
    issue: str

    def as_dict(self) -> dict:
        return asdict(self)


class KebabError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(KebabError):
    """Input failed validation. Carries every issue found, not just the first."""

    status_code = 400

    def __init__(self, issues: list[Issue]) -> None:
        super().__init__("; ".join(f"{i.field}: {i.issue}" for i in issues))
        self.issues = list(issues)


class NotFoundError(KebabError):
    status_code = 404

    def __init__(self, kind: str) -> None:
        super().__init__(f"{kind} not found")
        self.kind = kind


class StoreError(KebabError):
    """The store failed. ``message`` is safe to return to a client."""

    status_code = 500
