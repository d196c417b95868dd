"""Exceptions raised by SafeShield clients and orchestration units."""


class SafeShieldError(Exception):
    """Base exception for SafeShield errors."""

    pass


class ConfigurationError(SafeShieldError):
    """A required credential or identifier is missing."""

    pass


class APIError(SafeShieldError):
    """A remote analysis service returned an error."""

    def __init__(self, status_code: int, message: str, response_body: str = ""):
        self.status_code = status_code
        self.message = message
        self.response_body = response_body
        super().__init__(f"API error {status_code}: {message}")


class AssessmentNotFoundError(SafeShieldError):
    """A requested transaction hash has no assessment in a batch response."""

    def __init__(self, safe_tx_hash: str = "", message: str = "Assessment result not found"):
        self.safe_tx_hash = safe_tx_hash
        self.message = message
        super().__init__(message)
