"""
Exception classes for the domain grid system.

All exceptions inherit from DomainGridError and provide structured
error information with codes, messages, and optional details.
"""

from typing import Optional


class DomainGridError(Exception):
    """Base exception for all domain grid errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainGridError):
    """Raised when a submission is rejected before any work starts."""

    pass


class NetworkError(DomainGridError):
    """Raised when a resolver endpoint cannot be used (e.g. non-HTTPS URL)."""

    pass


class ProtocolError(DomainGridError):
    """Raised when a resolver answers with a body that is not DoH JSON."""

    pass


class ConfigError(DomainGridError):
    """Raised when configuration cannot be loaded or is inconsistent."""

    pass
