"""Fraud engine exceptions."""

from typing import Any


class FraudEngineError(Exception):
    """Base exception for the fraud engine."""


class InvalidTransactionError(FraudEngineError, ValueError):
    """Transaction data is malformed; raised before any heuristic runs."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class CollaboratorUnavailableError(FraudEngineError):
    """A history lookup or network registry call failed."""

    def __init__(self, collaborator: str, message: str = "") -> None:
        super().__init__(f"{collaborator} unavailable" + (f": {message}" if message else ""))
        self.collaborator = collaborator


class InternalInconsistencyError(FraudEngineError):
    """A structure invariant no longer holds. Indicates a programming error."""
