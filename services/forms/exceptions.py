"""
Form Service Exceptions

Custom exceptions for form configuration and JotForm API errors.
"""


class FormError(Exception):
    """Base exception for all form service errors."""
    pass


class ValidationError(FormError):
    """
    Raised when a request is rejected before contacting JotForm.

    Covers missing credentials, missing form IDs, missing
    update payloads and unknown update types.
    """
    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message)


class ProviderAPIError(FormError):
    """
    Raised when a JotForm API call fails.

    status_code is None when no response was received (network fault).
    response_body carries the raw provider body, uninterpreted.
    """
    def __init__(self, message: str, status_code: int = None, response_body: str = None):
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)


class ConfigurationError(FormError):
    """
    Raised when a configuration file cannot be read.

    This includes missing files, YAML/JSON syntax errors and
    files whose top level is not a mapping.
    """
    pass
