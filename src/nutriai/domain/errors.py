"""Error taxonomy shared by services, adapters and the API."""


class NutriAIError(Exception):
    """Base class for application errors."""

    code = "error"


class ValidationError(NutriAIError):
    """Input is missing or malformed; raised before any remote call."""

    code = "validation_error"


class InvalidCredentialsError(NutriAIError):
    """Email/password mismatch or an unusable session token."""

    code = "invalid_credentials"


class AlreadyExistsError(NutriAIError):
    """The resource (e.g. an account email) already exists."""

    code = "already_exists"


class NotFoundError(NutriAIError):
    """The requested resource does not exist."""

    code = "not_found"


class PermissionDeniedError(NutriAIError):
    """The caller does not own the resource."""

    code = "permission_denied"


class QuotaExceededError(NutriAIError):
    """An external AI or music API rejected the call for rate limiting."""

    code = "quota_exceeded"


class StorageError(NutriAIError):
    """A write to the storage backend failed."""

    code = "storage_error"


class ServiceError(NutriAIError):
    """An external dependency failed for a reason other than quota."""

    code = "service_error"
