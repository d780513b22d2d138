"""
Domain exceptions.

Raised by domain predicates and use cases; translated to HTTP
responses by the handlers registered in the application factory.
"""


class DomainError(Exception):
    """Base class for errors raised by the access-control core."""


class ValidationError(DomainError):
    """
    A domain invariant was violated.

    Attributes:
        invariant: Short machine-readable code naming the invariant.
    """

    def __init__(self, message: str, invariant: str = "invalid"):
        super().__init__(message)
        self.message = message
        self.invariant = invariant


class PreconditionError(DomainError):
    """An operation was invoked without a required selection or input."""


class EntityNotFoundError(DomainError):
    """A referenced entity does not exist in its repository."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id
