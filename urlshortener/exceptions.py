class UrlShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:urlshortener_error'


class ConfigurationError(UrlShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class ServiceError(UrlShortenerError):
    """Base exception for errors raised by the shorten/resolve workflows."""

    error_code = 'service:service_error'


class InvalidInputError(ServiceError):
    """Raised when the client supplied a malformed request."""

    error_code = 'service:invalid_input_error'


class InvalidURLError(InvalidInputError):
    """Raised when the target URL is not a syntactically valid URL."""

    error_code = 'service:invalid_url_error'


class InvalidShortcodeError(InvalidInputError):
    """Raised when a custom shortcode contains disallowed characters."""

    error_code = 'service:invalid_shortcode_error'


class InvalidExpiryError(InvalidInputError):
    """Raised when the requested expiry is not a positive number of hours."""

    error_code = 'service:invalid_expiry_error'


class DomainRejectedError(InvalidInputError):
    """Raised when the target URL points back at this service's own domain."""

    error_code = 'service:domain_rejected_error'


class IdentifierInUseError(ServiceError):
    """Raised when a shortcode is already mapped to an unexpired URL.

    Attributes:
        shortcode (str):
            The shortcode that is taken, custom or generated.
    """

    error_code = 'service:identifier_in_use_error'

    def __init__(self, shortcode: str, message: str | None = None):
        super().__init__(message or f"Shortcode '{shortcode}' is already in use.")
        self.shortcode = shortcode


class QuotaExceededError(ServiceError):
    """Raised when a client ran out of shorten requests for the current window.

    Attributes:
        reset_in (int):
            Seconds until the client's quota window resets.
    """

    error_code = 'service:quota_exceeded_error'

    def __init__(self, message: str | None = None, reset_in: int = 0):
        super().__init__(message or f'Quota exceeded. Try again in {reset_in} seconds.')
        self.reset_in = reset_in


class UnknownShortcodeError(ServiceError):
    """Raised when a shortcode doesn't exist (or has already expired)."""

    error_code = 'service:unknown_shortcode_error'


class ResolutionFailedError(ServiceError):
    """Raised when a shortcode lookup fails for reasons other than absence."""

    error_code = 'service:resolution_failed_error'
