"""SOS error taxonomy.

Routes translate these into HTTP responses; services raise them and never
swallow them.
"""

from __future__ import annotations


class SosError(Exception):
    """Base class for SOS domain errors."""


class PreconditionError(SosError):
    """The request cannot proceed; nothing is searched or sent."""


class LocationUnavailableError(PreconditionError):
    """Requester has no stored location."""


class InvalidCoordinateError(PreconditionError):
    """A coordinate is non-finite or outside the valid lat/lng range."""


class RequesterNotFoundError(SosError):
    """No user with the given id."""


class StorageError(SosError):
    """A storage collaborator failed; the whole workflow is aborted."""


class ContactNotFoundError(SosError):
    """No SOS contact with the given id on this user."""


class ContactValidationError(SosError):
    """SOS contact data violates a contact rule."""
