from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class ValidationError(DomainError):
    """Request parameters are out of range or missing."""


class NotFoundError(DomainError):
    """Requested token, pool or dataset does not exist upstream."""


class UpstreamQueryError(DomainError):
    """An external data source failed or answered with an error payload."""


class ServiceUnavailableError(DomainError):
    """An optional collaborator is not configured."""
