"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Field-level input problems (a bad quantity or price typed into a cart line)
are *not* raised: they live on the cart line as error state until the
operator fixes them.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class PaymentRejectedError(DomainException):
    """The payment store refused or failed to persist a payment."""
