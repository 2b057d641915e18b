"""Custom exceptions for the pipeline core.

Validation errors are raised before any mutation is attempted. Not-found errors
are kept in a separate branch so adapters can map them to a different response.
"""


class PipelineError(Exception):
    """Base exception for the pipeline core."""

    error_code = "pipeline_error"

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationError(PipelineError):
    """Raised when a command is rejected by validation."""

    error_code = "validation_error"


class NotFoundError(PipelineError):
    """Raised when a referenced record does not exist."""

    error_code = "not_found"


class DatabaseError(PipelineError):
    """Raised when a database operation fails."""

    error_code = "database_error"


class ConfigurationError(PipelineError):
    """Raised when configuration is invalid."""

    error_code = "configuration_error"


class DuplicateSlugError(ValidationError):
    error_code = "duplicate_slug"


class ImmutableSlugError(ValidationError):
    error_code = "immutable_slug"


class IndexOutOfRangeError(ValidationError):
    error_code = "index_out_of_range"


class InvalidTransitionError(ValidationError):
    """Raised when a disallowed state transition is attempted."""

    error_code = "invalid_transition"


class TerminalStateError(ValidationError):
    """Raised when a record in a terminal state receives a status write."""

    error_code = "terminal_state"


class InvalidCommissionRateError(ValidationError):
    error_code = "invalid_commission_rate"


class DuplicateAffiliateCodeError(ValidationError):
    error_code = "duplicate_affiliate_code"


class UnknownRegistryError(NotFoundError):
    error_code = "unknown_registry"


class UnknownStageError(NotFoundError):
    error_code = "unknown_stage"


class UnknownLeadError(NotFoundError):
    error_code = "unknown_lead"


class UnknownOrderError(NotFoundError):
    error_code = "unknown_order"


class UnknownAffiliateError(NotFoundError):
    error_code = "unknown_affiliate"


class DuplicatePurchaseError(ValidationError):
    error_code = "duplicate_purchase"
