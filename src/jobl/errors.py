"""Path-qualified validation errors and the parse result type."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jobl.schema import JoblDocument


@dataclass(frozen=True)
class ValidationError:
    """A single validation problem located by a dot/bracket path."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


def format_errors(
    errors: Iterable[ValidationError], *, header: str = "Document validation failed:"
) -> str:
    lines = [header]
    for error in errors:
        lines.append(f"- {error}")
    return "\n".join(lines)


class DocumentValidationError(ValueError):
    """Raised when a failed result is unwrapped."""

    def __init__(self, errors: Iterable[ValidationError]) -> None:
        self.errors = tuple(errors)
        super().__init__(format_errors(self.errors))


@dataclass(frozen=True)
class ValidationResult:
    """Either a validated document or a non-empty tuple of errors.

    Errors keep discovery order; nothing is sorted or deduplicated.
    """

    document: JoblDocument | None = None
    errors: tuple[ValidationError, ...] = ()

    def __post_init__(self) -> None:
        if (self.document is None) == (not self.errors):
            raise ValueError("ValidationResult needs exactly one of document or errors")

    @classmethod
    def success(cls, document: JoblDocument) -> ValidationResult:
        return cls(document=document)

    @classmethod
    def failure(cls, errors: Iterable[ValidationError]) -> ValidationResult:
        return cls(errors=tuple(errors))

    @property
    def ok(self) -> bool:
        return self.document is not None

    def unwrap(self) -> JoblDocument:
        """Return the document or raise ``DocumentValidationError``."""

        if self.document is None:
            raise DocumentValidationError(self.errors)
        return self.document
