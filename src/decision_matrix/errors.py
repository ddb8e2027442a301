"""Exception types raised by the decision matrix package."""

from __future__ import annotations


class InvalidInput(ValueError):
    """Scoring inputs were rejected before any computation ran."""


class TemplateError(ValueError):
    """A weight template operation was refused."""


class MatrixNotFound(KeyError):
    """No saved matrix exists with the requested id."""
