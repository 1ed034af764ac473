"""
Exceptions raised by the service layer.

Routers translate each of these into the matching HTTP status code.
"""

from typing import Optional


class ServiceError(Exception):
    pass


class ValidationError(ServiceError):
    """Payload failed validation; ``errors`` maps field names to messages."""

    def __init__(self, errors: dict[str, list[str]], message: str = "The given data was invalid."):
        super().__init__(message)
        self.message = message
        self.errors = errors


class Unauthenticated(ServiceError):
    def __init__(self, message: str = "Unauthenticated."):
        super().__init__(message)


class Forbidden(ServiceError):
    def __init__(self, message: str = "This action is unauthorized."):
        super().__init__(message)


class NotFoundError(ServiceError):
    def __init__(self, resource: str, identifier: Optional[int] = None):
        message = f"{resource} not found" if identifier is None else f"{resource} {identifier} not found"
        super().__init__(message)
        self.resource = resource
        self.identifier = identifier


class TooManyRequests(ServiceError):
    def __init__(self, retry_after: int, message: str = "Too Many Attempts."):
        super().__init__(message)
        self.retry_after = retry_after
