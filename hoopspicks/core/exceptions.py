"""Custom exception types for domain and API layers."""


class AppError(Exception):
    """Base app exception."""


class ValidationError(AppError):
    """Missing or malformed caller input. Not retryable."""


class DependencyError(AppError):
    """External collaborator call failed or returned an unusable payload."""


class DataIntegrityError(AppError):
    """Upstream data is misconfigured and needs a manual fix."""


class PersistenceError(AppError):
    """Database write failed or the target row does not exist."""
