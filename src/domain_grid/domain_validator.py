"""
Domain validation and input preparation module.

Provides the base-name and TLD checks applied to a submission, the full
domain format check applied before any resolver query, and the parsing of
free-text input into normalized, deduplicated lists.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

import idna

from domain_grid.enums import DomainValidationErrorCode, SubmissionErrorCode
from domain_grid.exceptions import ValidationError
from domain_grid.i18n import get_message
from domain_grid.models import Combination


BASE_NAME_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$", re.IGNORECASE | re.ASCII)
TLD_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9.-]{0,61}[a-z0-9])?$", re.IGNORECASE | re.ASCII)
ALLOWED_DOMAIN_CHARS = re.compile(r"[^a-z0-9.-]", re.IGNORECASE | re.ASCII)
NUMERIC_PATTERN = re.compile(r"^[0-9]+$")

# Base names may be separated by newlines, spaces, tabs or commas
BASE_NAME_SEPARATORS = re.compile(r"[,\s]+")

MIN_DOMAIN_LENGTH = 3
MAX_DOMAIN_LENGTH = 253
MAX_LABEL_LENGTH = 63
MIN_TLD_LENGTH = 2

# Hard ceiling on a submission's cross product; configuration can only lower it
MAX_COMBINATIONS = 50_000


@dataclass
class DomainValidationError:
    """Structured error information for domain validation failures."""

    code: DomainValidationErrorCode
    message: str
    details: dict = field(default_factory=dict)


@dataclass
class DomainValidationResult:
    """Result of domain validation operation."""

    valid: bool
    canonical_domain: Optional[str]
    error: Optional[DomainValidationError]


def _invalid(
    code: DomainValidationErrorCode,
    message: str,
    domain: str,
) -> DomainValidationResult:
    return DomainValidationResult(
        valid=False,
        canonical_domain=None,
        error=DomainValidationError(code=code, message=message, details={"domain": domain}),
    )


def validate_base_name(name: str) -> bool:
    """
    Check that a base name is a single valid DNS label.

    Args:
        name: Candidate base name (e.g., 'foo')

    Returns:
        True if the name has no dot, no edge hyphen and matches the label pattern
    """
    if "." in name:
        return False
    if name.startswith("-") or name.endswith("-"):
        return False
    return BASE_NAME_PATTERN.fullmatch(name) is not None


def validate_tld(tld: str) -> bool:
    """
    Check that a TLD is usable; multi-label suffixes such as 'co.uk' are accepted.

    The last dot-separated segment must not be all digits.
    """
    if tld.startswith(".") or tld.endswith("."):
        return False
    if ".." in tld:
        return False
    if len(tld) < MIN_TLD_LENGTH:
        return False
    if TLD_PATTERN.fullmatch(tld) is None:
        return False
    return NUMERIC_PATTERN.fullmatch(tld.rsplit(".", 1)[-1]) is None


def validate_full_domain(domain: str) -> DomainValidationResult:
    """
    Validate the format of a fully qualified domain before it is resolved.

    The domain is trimmed and lower-cased first. Checks run in a fixed order
    and the first failure is reported; this function never raises.

    Args:
        domain: Full domain name (e.g., 'foo.com')

    Returns:
        DomainValidationResult with the canonical domain or the first error
    """
    if not isinstance(domain, str) or not domain.strip():
        return _invalid(
            DomainValidationErrorCode.EMPTY_INPUT,
            "Domain must be a string.",
            str(domain),
        )

    normalized = domain.strip().lower()

    if not MIN_DOMAIN_LENGTH <= len(normalized) <= MAX_DOMAIN_LENGTH:
        return _invalid(
            DomainValidationErrorCode.INVALID_LENGTH,
            "Domain length must be between 3 and 253 characters.",
            normalized,
        )

    if "." not in normalized or normalized.startswith(".") or normalized.endswith("."):
        return _invalid(
            DomainValidationErrorCode.MISSING_DOT,
            "Domain must contain at least one dot, not at the start or end.",
            normalized,
        )

    if ALLOWED_DOMAIN_CHARS.search(normalized):
        return _invalid(
            DomainValidationErrorCode.FORBIDDEN_CHARS,
            "Domain contains invalid characters. Only alphanumeric, dots, and hyphens allowed.",
            normalized,
        )

    if ".." in normalized:
        return _invalid(
            DomainValidationErrorCode.CONSECUTIVE_DOTS,
            "Domain cannot contain consecutive dots.",
            normalized,
        )

    labels = normalized.split(".")
    if any(len(label) == 0 or len(label) > MAX_LABEL_LENGTH for label in labels):
        return _invalid(
            DomainValidationErrorCode.INVALID_LABEL_LENGTH,
            "Each part of the domain (label) must be between 1 and 63 characters.",
            normalized,
        )

    if any(label.startswith("-") or label.endswith("-") for label in labels):
        return _invalid(
            DomainValidationErrorCode.HYPHEN_EDGE,
            "Labels cannot start or end with a hyphen.",
            normalized,
        )

    tld = labels[-1]
    if NUMERIC_PATTERN.fullmatch(tld):
        return _invalid(
            DomainValidationErrorCode.NUMERIC_TLD,
            "Top-level domain (TLD) appears invalid (e.g., all numeric).",
            normalized,
        )

    if len(tld) < MIN_TLD_LENGTH:
        return _invalid(
            DomainValidationErrorCode.SHORT_TLD,
            "Top-level domain (TLD) must be at least 2 characters long.",
            normalized,
        )

    return DomainValidationResult(valid=True, canonical_domain=normalized, error=None)


def normalize_input_token(token: str) -> str:
    """
    Trim and lower-case a token, IDNA-encoding it if it holds non-ASCII text.

    Tokens the IDNA codec rejects are returned lower-cased so that the
    submission checks report them as invalid.
    """
    token = token.strip().lower()
    if token.isascii():
        return token
    try:
        return idna.encode(token, uts46=True).decode("ascii")
    except idna.IDNAError:
        return token


def normalize_tokens(tokens: Iterable[str]) -> list[str]:
    """Normalize tokens, dropping empties and duplicates (first occurrence wins)."""
    seen: set[str] = set()
    unique: list[str] = []
    for raw in tokens:
        token = normalize_input_token(raw)
        if token and token not in seen:
            seen.add(token)
            unique.append(token)
    return unique


def parse_base_names(blob: str) -> list[str]:
    """
    Split a free-text blob into unique, normalized base names.

    Newlines, spaces, tabs and commas all separate names. Order of first
    occurrence is preserved.
    """
    return normalize_tokens(BASE_NAME_SEPARATORS.split(blob or ""))


def parse_tlds(text: str) -> list[str]:
    """Split a comma-separated TLD string into unique, normalized TLDs."""
    return normalize_tokens((text or "").split(","))


class DomainValidator:
    """
    Validates a submission and expands it into domain combinations.

    Handles:
    - Rejection of empty base-name or TLD lists
    - Rejection of invalid base names and TLDs (all offenders are listed)
    - The combination ceiling, checked before any work is scheduled
    """

    def __init__(self, language: str = "en") -> None:
        self._language = language

    def validate_submission(
        self,
        base_names: list[str],
        tlds: list[str],
        max_combinations: int = MAX_COMBINATIONS,
    ) -> list[Combination]:
        """
        Validate prepared input and build the cross product.

        Args:
            base_names: Deduplicated, normalized base names
            tlds: Deduplicated, normalized TLDs
            max_combinations: Largest accepted number of combinations,
                capped at MAX_COMBINATIONS

        Returns:
            Combinations with base names outer and TLDs inner

        Raises:
            ValidationError: With a SubmissionErrorCode value as its code
        """
        if not base_names:
            raise self._error(SubmissionErrorCode.EMPTY_BASE_NAMES, "submission.empty_base_names")

        if not tlds:
            raise self._error(SubmissionErrorCode.EMPTY_TLDS, "submission.empty_tlds")

        invalid_names = [name for name in base_names if not validate_base_name(name)]
        if invalid_names:
            raise self._error(
                SubmissionErrorCode.INVALID_BASE_NAMES,
                "submission.invalid_base_names",
                details={"invalid": invalid_names},
                names=", ".join(invalid_names),
            )

        invalid_tlds = [tld for tld in tlds if not validate_tld(tld)]
        if invalid_tlds:
            raise self._error(
                SubmissionErrorCode.INVALID_TLDS,
                "submission.invalid_tlds",
                details={"invalid": invalid_tlds},
                tlds=", ".join(invalid_tlds),
            )

        limit = min(max_combinations, MAX_COMBINATIONS)
        count = len(base_names) * len(tlds)
        if count > limit:
            raise self._error(
                SubmissionErrorCode.TOO_MANY_COMBINATIONS,
                "submission.too_many_combinations",
                details={"combinations": count, "limit": limit},
                limit=limit,
            )

        combinations = [Combination(base, tld) for base in base_names for tld in tlds]
        if not combinations:
            raise self._error(SubmissionErrorCode.NO_COMBINATIONS, "submission.no_combinations")

        return combinations

    def _error(
        self,
        code: SubmissionErrorCode,
        message_key: str,
        details: Optional[dict] = None,
        **kwargs,
    ) -> ValidationError:
        return ValidationError(
            code=code.value,
            message=get_message(message_key, self._language, **kwargs),
            details=details,
        )
