"""
Status Classifier for single domains.

Validates the domain format, fans out one DoH query per configured
(provider, record type) pair, waits for all of them to settle and hands the
answers to the decision engine.
"""

import asyncio
from typing import Optional

from .audit_logger import AuditLogger
from .config import ResolverProviderConfig
from .decision_engine import DecisionEngine
from .doh_client import DoHClient, DoHResponse
from .domain_validator import validate_full_domain
from .enums import DomainStatus, LogLevel, RecordType
from .models import CheckOutcome


class StatusClassifier:
    """
    Classifies one domain as Available, Taken or Invalid.

    Invalid domains never reach the network. Unexpected exceptions are not
    caught here; the orchestrator owns that policy.
    """

    def __init__(
        self,
        client: DoHClient,
        providers: list[ResolverProviderConfig],
        record_types: Optional[list[RecordType]] = None,
        decision_engine: Optional[DecisionEngine] = None,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the classifier.

        Args:
            client: Shared DoH client
            providers: Resolvers to ask, in reporting order
            record_types: Record types to ask each resolver for (default A, NS)
            decision_engine: Verdict policy (default DecisionEngine())
            logger: Optional audit logger
        """
        self._client = client
        self._providers = list(providers)
        self._record_types = list(record_types or [RecordType.A, RecordType.NS])
        self._decision_engine = decision_engine or DecisionEngine()
        self._logger = logger

    @property
    def client(self) -> DoHClient:
        return self._client

    @property
    def queries_per_domain(self) -> int:
        return len(self._providers) * len(self._record_types)

    async def classify(self, domain: str) -> CheckOutcome:
        """
        Determine the registration status of a domain.

        Args:
            domain: Full domain name (e.g., 'foo.com')

        Returns:
            CheckOutcome with status and audit-trail reason
        """
        validation = validate_full_domain(domain)
        if not validation.valid:
            self._log_debug(
                "classifier",
                "Domain failed format validation",
                {"domain": domain, "code": validation.error.code.value},
            )
            return CheckOutcome(status=DomainStatus.INVALID, reason=validation.error.message)

        responses = await self.query_all(validation.canonical_domain)
        return self._decision_engine.decide(responses)

    async def query_all(self, domain: str) -> list[DoHResponse]:
        """Issue every (provider, record type) query concurrently, preserving order."""
        queries = [
            self._client.query(provider, domain, record_type)
            for provider in self._providers
            for record_type in self._record_types
        ]
        return list(await asyncio.gather(*queries))

    def _log_debug(self, component: str, message: str, data: dict) -> None:
        """Log a debug message if logger is available."""
        if self._logger:
            self._logger.log(LogLevel.DEBUG, component, message, data)
