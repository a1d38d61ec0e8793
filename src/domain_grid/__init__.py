"""
Domain Grid - bulk domain availability checking over DNS-over-HTTPS.

This package checks every combination of a set of base names and a set of
TLDs against redundant DoH resolvers, classifies each domain conservatively
as Available, Taken or Invalid, and delivers results to consumers in
periodic batched grid updates.
"""

__version__ = "0.1.0"

from domain_grid.exceptions import (
    DomainGridError,
    ValidationError,
    NetworkError,
    ProtocolError,
    ConfigError,
)
from domain_grid.enums import (
    DomainStatus,
    RecordType,
    DNSResponseCode,
    LogLevel,
    SortDirection,
    DomainValidationErrorCode,
    SubmissionErrorCode,
    DoHErrorCode,
)
from domain_grid.models import (
    Combination,
    CheckOutcome,
    GridCell,
    GridRow,
    PendingUpdate,
    ProgressCounters,
    RunSummary,
)
from domain_grid.config import (
    ResolverProviderConfig,
    LoggingConfig,
    SystemConfig,
    create_default_config,
    load_config_from_file,
    save_config_to_file,
    apply_env_overrides,
    validate_config,
)
from domain_grid.domain_validator import (
    DomainValidator,
    DomainValidationResult,
    DomainValidationError,
    validate_base_name,
    validate_tld,
    validate_full_domain,
    parse_base_names,
    parse_tlds,
)
from domain_grid.doh_client import (
    DoHClient,
    DoHResponse,
    DoHError,
)
from domain_grid.decision_engine import DecisionEngine
from domain_grid.classifier import StatusClassifier
from domain_grid.dispatch_limiter import DispatchLimiter
from domain_grid.grid import ResultGrid
from domain_grid.batcher import UpdateBatcher
from domain_grid.view import (
    FilterOptions,
    SortConfig,
    filter_rows,
    is_brandable,
    next_sort_config,
    sort_rows,
    summarize,
    format_summary,
)
from domain_grid.audit_logger import (
    AuditLogger,
    LogEntry,
    create_logger,
)
from domain_grid.i18n import (
    get_message,
    SUPPORTED_LANGUAGES,
    DEFAULT_LANGUAGE,
)
from domain_grid.orchestrator import (
    CheckOrchestrator,
    RunContext,
)
from domain_grid.self_test import (
    SelfTest,
    SelfTestResult,
    ProviderTestResult,
    run_self_test,
)

__all__ = [
    # Exceptions
    "DomainGridError",
    "ValidationError",
    "NetworkError",
    "ProtocolError",
    "ConfigError",
    # Enums
    "DomainStatus",
    "RecordType",
    "DNSResponseCode",
    "LogLevel",
    "SortDirection",
    "DomainValidationErrorCode",
    "SubmissionErrorCode",
    "DoHErrorCode",
    # Models
    "Combination",
    "CheckOutcome",
    "GridCell",
    "GridRow",
    "PendingUpdate",
    "ProgressCounters",
    "RunSummary",
    # Configuration
    "ResolverProviderConfig",
    "LoggingConfig",
    "SystemConfig",
    "create_default_config",
    "load_config_from_file",
    "save_config_to_file",
    "apply_env_overrides",
    "validate_config",
    # Domain Validator
    "DomainValidator",
    "DomainValidationResult",
    "DomainValidationError",
    "validate_base_name",
    "validate_tld",
    "validate_full_domain",
    "parse_base_names",
    "parse_tlds",
    # DoH Client
    "DoHClient",
    "DoHResponse",
    "DoHError",
    # Classification
    "DecisionEngine",
    "StatusClassifier",
    # Dispatch and batching
    "DispatchLimiter",
    "ResultGrid",
    "UpdateBatcher",
    # View
    "FilterOptions",
    "SortConfig",
    "filter_rows",
    "is_brandable",
    "next_sort_config",
    "sort_rows",
    "summarize",
    "format_summary",
    # Audit Logger
    "AuditLogger",
    "LogEntry",
    "create_logger",
    # I18n
    "get_message",
    "SUPPORTED_LANGUAGES",
    "DEFAULT_LANGUAGE",
    # Orchestrator
    "CheckOrchestrator",
    "RunContext",
    # Self-Test
    "SelfTest",
    "SelfTestResult",
    "ProviderTestResult",
    "run_self_test",
]
