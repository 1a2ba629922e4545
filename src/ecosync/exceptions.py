"""Custom exceptions for the EcoSync energy library."""

class EcoSyncError(Exception):
    """Base exception for EcoSync errors."""
    pass

class InvalidInputError(EcoSyncError, ValueError):
    """Exception raised when a caller passes input the core cannot use."""
    pass

class PrepaidCalculationError(InvalidInputError, ZeroDivisionError):
    """Exception raised when days remaining cannot be derived."""
    pass

class ValidationError(InvalidInputError):
    """Base exception for validation errors."""
    pass

class ValidationTypeError(ValidationError):
    """Exception raised for type validation errors."""
    pass

class ValidationRangeError(ValidationError):
    """Exception raised for range validation errors."""
    pass

class ConfigurationError(EcoSyncError, ValueError):
    """Exception raised for configuration errors."""
    pass

class AnalysisError(EcoSyncError):
    """Exception raised when no analysis path produced a result."""
    pass

class ExternalServiceError(EcoSyncError):
    """Exception raised when the language model service fails."""
    pass

class ServiceNotConfiguredError(ExternalServiceError):
    """Exception raised when the service has no usable API key."""
    pass

class ResponseParseError(ExternalServiceError):
    """Exception raised when a model reply is not the expected JSON."""
    pass
