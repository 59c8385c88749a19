"""Exceptions shared by the entity clients, resources and tools."""

from typing import Optional

from kubernetes.client.exceptions import ApiException


class GiantSwarmAPIError(Exception):
    """A Kubernetes API call failed.

    Carries the operation and the identity of the object it was made for,
    plus the HTTP status of the underlying ``ApiException`` when there is one.
    """

    def __init__(self, operation: str, identity: str, cause: Exception):
        self.operation = operation
        self.identity = identity
        self.cause = cause
        self.status: Optional[int] = getattr(cause, "status", None)
        super().__init__(f"failed to {operation} {identity}: {_describe(cause)}")


class ResourceNotFoundError(LookupError):
    """An in-process lookup over a listing matched nothing."""


def _describe(cause: Exception) -> str:
    if isinstance(cause, ApiException):
        reason = cause.reason or "API error"
        return f"({cause.status}) {reason}" if cause.status else reason
    return str(cause)


def is_not_found(error: Exception) -> bool:
    status = getattr(error, "status", None)
    if status == 404 or isinstance(error, ResourceNotFoundError):
        return True
    message = str(error)
    return "404" in message or "not found" in message.lower()
