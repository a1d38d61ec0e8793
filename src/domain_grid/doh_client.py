"""
DNS-over-HTTPS client for registration evidence.

This module provides an async client for the JSON flavour of DoH spoken by
Cloudflare and Google: one HTTPS GET per (provider, record type) with the
query name and type as parameters, answered by a JSON body carrying the DNS
RCODE in an integer ``Status`` field and an optional ``Answer`` array.

Failures are returned as values on the response, never raised, so a single
bad provider cannot abort a domain check.
"""

from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlparse
import time

import httpx

from .config import ResolverProviderConfig
from .enums import DNSResponseCode, DoHErrorCode, RecordType
from .exceptions import NetworkError, ProtocolError


DOH_HEADERS = {
    "Accept": "application/dns-json",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


@dataclass
class DoHError:
    """Error information from a DoH query."""

    code: DoHErrorCode
    message: str
    http_status_code: Optional[int] = None


@dataclass
class DoHResponse:
    """Result of a single (provider, record type) query."""

    provider: str
    record_type: RecordType
    dns_status: Optional[int]
    data: Optional[dict[str, Any]]
    error: Optional[DoHError]
    http_status_code: int = 0
    response_time_ms: float = 0.0

    @property
    def answer_count(self) -> int:
        """Number of records in the ``Answer`` section, 0 if absent."""
        if not self.data:
            return 0
        answer = self.data.get("Answer")
        return len(answer) if isinstance(answer, list) else 0


class DoHClient:
    """
    Async DNS-over-HTTPS client with TLS enforcement.

    A single httpx.AsyncClient is shared by every query. The client is
    created lazily, or on entry when used as an async context manager.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        simulation_mode: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the DoH client.

        Args:
            timeout: Per-request timeout in seconds
            simulation_mode: If True, no real network requests are made
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
        """
        self._timeout = timeout
        self._simulation_mode = simulation_mode
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def simulation_mode(self) -> bool:
        return self._simulation_mode

    async def __aenter__(self) -> "DoHClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                verify=True,
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    def _validate_endpoint_url(self, url: str) -> None:
        """
        Validate that the provider endpoint uses HTTPS.

        Raises:
            NetworkError: If the endpoint does not use HTTPS
        """
        parsed = urlparse(url)
        if parsed.scheme.lower() != "https":
            raise NetworkError(
                code=DoHErrorCode.TLS_ERROR.value,
                message=f"DoH endpoint must use HTTPS: {url}",
                details={"endpoint": url, "scheme": parsed.scheme},
            )

    def _parse_body(self, response: httpx.Response) -> tuple[dict, int]:
        """
        Decode a DoH JSON body.

        Returns:
            The decoded object and its DNS status code

        Raises:
            ProtocolError: If the body is not a JSON object with an integer Status
        """
        try:
            body = response.json()
        except ValueError as e:
            raise ProtocolError(
                code=DoHErrorCode.PARSE_ERROR.value,
                message=f"Invalid JSON in DoH response: {e}",
            ) from e

        if not isinstance(body, dict):
            raise ProtocolError(
                code=DoHErrorCode.PARSE_ERROR.value,
                message="DoH response is not a JSON object",
            )

        status = body.get("Status")
        # bool is an int subclass but never a valid RCODE
        if not isinstance(status, int) or isinstance(status, bool):
            raise ProtocolError(
                code=DoHErrorCode.PARSE_ERROR.value,
                message="DoH response has no integer Status field",
                details={"status": status},
            )
        return body, status

    async def query(
        self,
        provider: ResolverProviderConfig,
        domain: str,
        record_type: RecordType,
    ) -> DoHResponse:
        """
        Ask one provider for one record type of a domain.

        Args:
            provider: The resolver to query
            domain: Fully qualified, validated domain name
            record_type: RecordType.A or RecordType.NS

        Returns:
            DoHResponse; errors are carried in ``error``, never raised
        """
        start_time = time.perf_counter()

        def failure(
            code: DoHErrorCode,
            message: str,
            http_status_code: int = 0,
            dns_status: Optional[int] = None,
            data: Optional[dict] = None,
        ) -> DoHResponse:
            return DoHResponse(
                provider=provider.name,
                record_type=record_type,
                dns_status=dns_status,
                data=data,
                error=DoHError(
                    code=code,
                    message=message,
                    http_status_code=http_status_code or None,
                ),
                http_status_code=http_status_code,
                response_time_ms=self._elapsed_ms(start_time),
            )

        try:
            self._validate_endpoint_url(provider.url)
        except NetworkError as e:
            return failure(DoHErrorCode.TLS_ERROR, e.message)

        if self._simulation_mode:
            return self._create_simulation_response(provider, domain, record_type, start_time)

        client = self._ensure_client()

        try:
            response = await client.get(
                provider.url,
                params={"name": domain, "type": record_type.value},
                headers=DOH_HEADERS,
            )
        except httpx.TimeoutException:
            return failure(
                DoHErrorCode.TIMEOUT,
                f"DoH request timed out after {self._timeout}s",
            )
        except httpx.ConnectError as e:
            error_msg = str(e)
            if "ssl" in error_msg.lower() or "certificate" in error_msg.lower():
                return failure(DoHErrorCode.TLS_ERROR, f"TLS connection error: {error_msg}")
            return failure(DoHErrorCode.NETWORK_ERROR, f"Connection error: {error_msg}")
        except httpx.HTTPError as e:
            return failure(DoHErrorCode.NETWORK_ERROR, f"HTTP transport error: {e}")

        status_code = response.status_code

        if not response.is_success:
            code = (
                DoHErrorCode.RATE_LIMITED if status_code == 429 else DoHErrorCode.SERVER_ERROR
            )
            # Keep the RCODE when the error body still parses
            try:
                body, dns_status = self._parse_body(response)
            except ProtocolError:
                body, dns_status = None, None
            return failure(
                code,
                f"HTTP error {status_code} {response.reason_phrase}".rstrip(),
                http_status_code=status_code,
                dns_status=dns_status,
                data=body,
            )

        try:
            body, dns_status = self._parse_body(response)
        except ProtocolError as e:
            return failure(DoHErrorCode.PARSE_ERROR, e.message, http_status_code=status_code)

        return DoHResponse(
            provider=provider.name,
            record_type=record_type,
            dns_status=dns_status,
            data=body,
            error=None,
            http_status_code=status_code,
            response_time_ms=self._elapsed_ms(start_time),
        )

    def _elapsed_ms(self, start_time: float) -> float:
        """Calculate elapsed time in milliseconds."""
        return (time.perf_counter() - start_time) * 1000

    def _create_simulation_response(
        self,
        provider: ResolverProviderConfig,
        domain: str,
        record_type: RecordType,
        start_time: float,
    ) -> DoHResponse:
        """Create a simulated NOERROR answer without network access."""
        return DoHResponse(
            provider=provider.name,
            record_type=record_type,
            dns_status=DNSResponseCode.NOERROR,
            data={
                "Status": DNSResponseCode.NOERROR,
                "Question": [{"name": domain, "type": record_type.value}],
            },
            error=None,
            http_status_code=200,
            response_time_ms=self._elapsed_ms(start_time),
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
