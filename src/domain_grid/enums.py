"""
Enumeration types for the domain grid system.

These enums provide type-safe constants for cell statuses, DNS record types,
error codes, and logging levels throughout the system.
"""

from enum import Enum


class DomainStatus(Enum):
    """Status of a single (base name, TLD) cell in the grid."""

    IDLE = "Idle"
    CHECKING = "Checking"
    AVAILABLE = "Available"
    TAKEN = "Taken"
    INVALID = "Invalid"

    @property
    def display_rank(self) -> int:
        """Rank used only for sort tie-breaking (lower sorts first)."""
        return _DISPLAY_RANK[self]

    @property
    def is_terminal(self) -> bool:
        """True once a check has produced a verdict for the cell."""
        return self in (DomainStatus.AVAILABLE, DomainStatus.TAKEN, DomainStatus.INVALID)


_DISPLAY_RANK = {
    DomainStatus.AVAILABLE: 0,
    DomainStatus.CHECKING: 1,
    DomainStatus.IDLE: 2,
    DomainStatus.INVALID: 3,
    DomainStatus.TAKEN: 4,
}


class RecordType(Enum):
    """DNS record types queried for registration evidence."""

    A = "A"
    NS = "NS"


class DNSResponseCode:
    """DNS RCODE values carried in the DoH JSON ``Status`` field."""

    NOERROR = 0
    SERVFAIL = 2
    NXDOMAIN = 3
    REFUSED = 5


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {
    LogLevel.DEBUG: 10,
    LogLevel.INFO: 20,
    LogLevel.WARN: 30,
    LogLevel.ERROR: 40,
}


class DomainValidationErrorCode(Enum):
    """Error codes for full-domain validation failures."""

    EMPTY_INPUT = "empty_input"
    INVALID_LENGTH = "invalid_length"
    MISSING_DOT = "missing_dot"
    FORBIDDEN_CHARS = "forbidden_chars"
    CONSECUTIVE_DOTS = "consecutive_dots"
    INVALID_LABEL_LENGTH = "invalid_label_length"
    HYPHEN_EDGE = "hyphen_edge"
    NUMERIC_TLD = "numeric_tld"
    SHORT_TLD = "short_tld"


class SubmissionErrorCode(Enum):
    """Error codes for rejected submissions (raised before any network call)."""

    EMPTY_BASE_NAMES = "empty_base_names"
    EMPTY_TLDS = "empty_tlds"
    INVALID_BASE_NAMES = "invalid_base_names"
    INVALID_TLDS = "invalid_tlds"
    TOO_MANY_COMBINATIONS = "too_many_combinations"
    NO_COMBINATIONS = "no_combinations"


class DoHErrorCode(Enum):
    """Error codes for DNS-over-HTTPS client operations."""

    NETWORK_ERROR = "network_error"
    TLS_ERROR = "tls_error"
    TIMEOUT = "timeout"
    PARSE_ERROR = "parse_error"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"


class SortDirection(Enum):
    """Direction of a grid sort."""

    ASCENDING = "ascending"
    DESCENDING = "descending"
