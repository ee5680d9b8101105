# -*- coding: utf-8 -*-
"""Error handling for survey computations.

``ValidationError`` is raised for malformed or out-of-range input and is
always surfaced to the caller.  ``GeometryEngineError`` is raised by
geometry engines when a predicate cannot be answered; the topology
validator catches it and falls back to a local engine.
"""

from __future__ import annotations

from typing import Any


class ValidationError(ValueError):
    """Exception raised for invalid survey input.

    Attributes:
        message: Error message
        field: Name of the offending field (e.g. ``"latitude"``)
        value: String form of the offending value
        context: Extra details (operation name, inputs)
    """

    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        context: dict[str, Any] | None = None,
    ):
        self.message = message
        self.field = field
        self.value = str(value) if value is not None else None
        self.context = context or {}
        super().__init__(str(self))

    def __str__(self) -> str:
        """Format as human-readable exception string."""
        if self.field is None:
            return self.message
        if self.value is None:
            return f"{self.message} (field: {self.field})"
        return f"{self.message} (field: {self.field}, value: {self.value})"

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for API responses and logs."""
        return {
            "code": self.code,
            "message": self.message,
            "field": self.field,
            "value": self.value,
            "context": self.context,
        }


class GeometryEngineError(Exception):
    """Raised when a geometry engine call fails.

    Attributes:
        operation: Engine operation that failed (``overlaps``, ``contains``,
            ``find_gaps`` or ``is_valid``)
        message: Error message
    """

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"{operation}: {message}")
