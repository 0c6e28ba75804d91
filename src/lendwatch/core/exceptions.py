"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    status_code = 500

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when request input validation fails, before any I/O."""

    status_code = 400

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        super().__init__(message, code=code)


class InvalidAddressError(ValidationError):
    """Raised when a user or vault address is not a valid EVM address."""

    def __init__(self, address: str):
        super().__init__(f"Invalid user address: {address}", code="INVALID_ADDRESS")


class UnsupportedChainError(ValidationError):
    """Raised when the chain identifier is not one of the supported chains."""

    def __init__(self, chain: str):
        super().__init__(f"Unsupported chain: {chain}", code="UNSUPPORTED_CHAIN")


class ConfigurationError(AppError):
    """Raised when a required external endpoint is not configured."""

    status_code = 500

    def __init__(self, setting: str):
        super().__init__(f"{setting} is not set", code="CONFIGURATION_ERROR")


class UpstreamFetchError(AppError):
    """Raised when an event, valuation or catalog source fails."""

    status_code = 502

    def __init__(self, source: str, detail: str):
        self.source = source
        super().__init__(f"{source} failed: {detail}", code="UPSTREAM_FETCH_ERROR")


class ComputeError(AppError):
    """Raised when reconciliation input or output violates an internal invariant."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message, code="COMPUTE_ERROR")
