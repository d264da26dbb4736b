"""Exceptions raised by pkgshape.

Non-conforming documents are reported as ``ShapeViolation`` lists, not
exceptions. These errors cover input that cannot be validated at all, and
the typed accessor refusing a document that does not conform.
"""

from .models import ShapeViolation


class PkgShapeError(Exception):
    """Base class for pkgshape errors."""


class ManifestSyntaxError(PkgShapeError):
    """Manifest text is not valid JSON."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


class InvalidManifestError(PkgShapeError):
    """Document does not conform to the manifest shape."""

    def __init__(self, violations: list[ShapeViolation]):
        self.violations = violations
        count = len(violations)
        noun = "violation" if count == 1 else "violations"
        summary = "; ".join(v.message for v in violations[:3])
        if count > 3:
            summary += "; ..."
        super().__init__(f"Manifest does not conform ({count} {noun}): {summary}")
