"""
Decision Engine for domain availability determination.

This module reduces the DoH answers gathered for one domain into a single
status and an audit trail explaining it. The policy is conservative: a
domain is AVAILABLE only when every query answered NXDOMAIN, TAKEN as soon
as any query answered NOERROR, and TAKEN whenever the evidence is mixed or
incomplete.
"""

from typing import Sequence

from .enums import DNSResponseCode, DomainStatus
from .models import CheckOutcome
from .doh_client import DoHResponse


class DecisionEngine:
    """
    Conservative decision engine for domain availability.

    This engine follows the principle "when in doubt, mark as taken".
    A domain is only marked as AVAILABLE when all queries for it report
    NXDOMAIN; errors, timeouts and unexpected RCODEs result in TAKEN.
    """

    def evaluate(self, responses: Sequence[DoHResponse]) -> DomainStatus:
        """
        Evaluate domain availability from all DoH responses.

        Args:
            responses: One response per (provider, record type) query

        Returns:
            DomainStatus.TAKEN or DomainStatus.AVAILABLE
        """
        if any(r.dns_status == DNSResponseCode.NOERROR for r in responses):
            return DomainStatus.TAKEN

        # An empty response set proves nothing
        if responses and all(r.dns_status == DNSResponseCode.NXDOMAIN for r in responses):
            return DomainStatus.AVAILABLE

        return DomainStatus.TAKEN

    def describe(self, response: DoHResponse) -> str:
        """Render one response as '<provider> <type>-query: <outcome>'."""
        prefix = f"{response.provider} {response.record_type.value}-query"

        if response.dns_status == DNSResponseCode.NOERROR:
            if response.answer_count > 0:
                return f"{prefix}: NOERROR (has records)"
            return f"{prefix}: NOERROR (no specific records, e.g., parked)"

        if response.dns_status == DNSResponseCode.NXDOMAIN:
            return f"{prefix}: NXDOMAIN"

        if response.error is not None:
            return f"{prefix}: Error ({response.error.message})"

        status = "Unknown" if response.dns_status is None else response.dns_status
        return f"{prefix}: Status {status}"

    def build_reason(self, status: DomainStatus, responses: Sequence[DoHResponse]) -> str:
        """
        Build the semicolon-joined audit trail for a verdict.

        Every query is named once, with its provider, record type and status
        or error.
        """
        taken_details = [
            self.describe(r) for r in responses if r.dns_status == DNSResponseCode.NOERROR
        ]
        other_details = [
            self.describe(r) for r in responses if r.dns_status != DNSResponseCode.NOERROR
        ]

        if taken_details:
            return (
                f"Taken because: {'; '.join(taken_details)}. "
                f"Other details: {'; '.join(other_details)}"
            )

        if status == DomainStatus.AVAILABLE:
            return (
                "All providers reported NXDOMAIN for A & NS records. "
                f"Details: {'; '.join(other_details)}"
            )

        return f"Availability ambiguous, assuming taken. Details: {'; '.join(other_details)}"

    def decide(self, responses: Sequence[DoHResponse]) -> CheckOutcome:
        """Evaluate responses and attach the audit trail."""
        status = self.evaluate(responses)
        return CheckOutcome(status=status, reason=self.build_reason(status, responses))
