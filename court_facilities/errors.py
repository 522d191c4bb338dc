"""
Domain errors shared by services and routes.
"""


class CourtFacilitiesError(Exception):
    """Base class for errors raised by the services."""

    code = "error"


class NotFoundError(CourtFacilitiesError):
    code = "not_found"


class ImportValidationError(CourtFacilitiesError, ValueError):
    """Raised when an uploaded document or parsed term data is unusable."""

    code = "invalid_import"


class InvalidStatusTransition(CourtFacilitiesError, ValueError):
    code = "invalid_status_transition"
