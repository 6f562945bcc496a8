"""Two-severity error taxonomy shared by the reconciler and both handlers."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError


class Severity(str, Enum):
    WARNING = "Warning"
    ERROR = "Error"


class OperationError(Exception):
    """Failure raised by the retention engine.

    ``WARNING`` marks expected noise (malformed events, a log group deleted
    before it could be described) which handlers report as a successful
    invocation. ``ERROR`` marks backend failures which must fail the invocation.
    """

    def __init__(self, message: str, severity: Severity = Severity.ERROR, resource: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.resource = resource

    @classmethod
    def from_boto(cls, exc: Exception, resource: Optional[str] = None) -> "OperationError":
        """Wrap a transport failure, keeping its message unchanged."""
        return cls(str(exc), Severity.ERROR, resource=resource)

    @classmethod
    def warning(cls, message: str, resource: Optional[str] = None) -> "OperationError":
        return cls(message, Severity.WARNING, resource=resource)

    @property
    def is_warning(self) -> bool:
        return self.severity is Severity.WARNING

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"message": self.message, "severity": self.severity.value}
        if self.resource:
            payload["resource"] = self.resource
        return payload

    def __str__(self) -> str:
        if self.resource:
            return f"{self.resource}: {self.message}"
        return self.message

    def __repr__(self) -> str:
        return f"OperationError(message={self.message!r}, severity={self.severity.value}, resource={self.resource!r})"


TRANSPORT_ERRORS = (ClientError, BotoCoreError)
