"""
Resolver self-test for the domain grid system.

Validates the configuration and sends one A query for a well-known name
through every configured DoH provider, so a broken resolver setup is
reported before a long run starts.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Optional

import httpx

from .config import ResolverProviderConfig, SystemConfig, validate_config
from .doh_client import DoHClient
from .enums import RecordType
from .i18n import get_message


PROBE_DOMAIN = "example.com"


@dataclass
class ProviderTestResult:
    """Result of probing a single provider."""

    provider: str
    url: str
    success: bool
    response_time_ms: float
    dns_status: Optional[int] = None
    error: Optional[str] = None
    http_status_code: Optional[int] = None


@dataclass
class SelfTestResult:
    """Complete self-test result."""

    success: bool
    config_errors: list[str] = field(default_factory=list)
    provider_results: list[ProviderTestResult] = field(default_factory=list)
    total_duration_ms: float = 0.0

    @property
    def failed_providers(self) -> list[ProviderTestResult]:
        return [r for r in self.provider_results if not r.success]


class SelfTest:
    """
    Startup self-test for the configured resolvers.

    Performs:
    1. Configuration validation
    2. One probe query per provider, run concurrently
    """

    # Timeout for probes (shorter than normal operations)
    PROBE_TIMEOUT = 5.0

    def __init__(
        self,
        config: SystemConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the self-test.

        Args:
            config: System configuration to validate and test
            transport: Optional httpx transport for the probe client
        """
        self._config = config
        self._transport = transport

    async def run(self) -> SelfTestResult:
        """
        Run the complete self-test.

        Returns:
            SelfTestResult; providers are not probed when the config is invalid
        """
        start_time = time.perf_counter()

        config_errors = validate_config(self._config)
        if config_errors:
            return SelfTestResult(
                success=False,
                config_errors=config_errors,
                total_duration_ms=self._elapsed_ms(start_time),
            )

        async with DoHClient(
            timeout=min(self.PROBE_TIMEOUT, self._config.request_timeout_seconds),
            simulation_mode=self._config.simulation_mode,
            transport=self._transport,
        ) as client:
            provider_results = await asyncio.gather(
                *(self._probe(client, provider) for provider in self._config.providers)
            )

        return SelfTestResult(
            success=all(r.success for r in provider_results),
            provider_results=list(provider_results),
            total_duration_ms=self._elapsed_ms(start_time),
        )

    async def _probe(
        self,
        client: DoHClient,
        provider: ResolverProviderConfig,
    ) -> ProviderTestResult:
        response = await client.query(provider, PROBE_DOMAIN, RecordType.A)
        return ProviderTestResult(
            provider=provider.name,
            url=provider.url,
            success=response.error is None,
            response_time_ms=response.response_time_ms,
            dns_status=response.dns_status,
            error=response.error.message if response.error else None,
            http_status_code=response.http_status_code or None,
        )

    def _elapsed_ms(self, start_time: float) -> float:
        """Calculate elapsed time in milliseconds."""
        return (time.perf_counter() - start_time) * 1000

    def print_results(self, result: SelfTestResult, language: str = "en") -> None:
        """
        Print self-test results to stdout.

        Args:
            result: Self-test result to print
            language: Output language ('en' or 'de')
        """
        print(get_message("selftest.header", language))
        print("=" * 60)

        if result.config_errors:
            print(get_message("selftest.config_invalid", language))
            for error in result.config_errors:
                print(f"  - {error}")

        for provider_result in result.provider_results:
            if provider_result.success:
                print(
                    get_message(
                        "selftest.provider_ok",
                        language,
                        provider=provider_result.provider,
                        status=provider_result.dns_status,
                        ms=provider_result.response_time_ms,
                    )
                )
            else:
                print(
                    get_message(
                        "selftest.provider_failed",
                        language,
                        provider=provider_result.provider,
                        error=provider_result.error,
                    )
                )

        print("-" * 60)
        if result.success:
            print(get_message("selftest.passed", language))
        else:
            print(get_message("selftest.failed", language))
        print(get_message("selftest.duration", language, ms=result.total_duration_ms))


async def run_self_test(
    config: SystemConfig,
    print_output: bool = True,
    language: str = "en",
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> SelfTestResult:
    """
    Convenience function to run self-test.

    Args:
        config: System configuration to test
        print_output: Whether to print results to stdout
        language: Output language
        transport: Optional httpx transport for the probe client

    Returns:
        SelfTestResult with test outcomes
    """
    self_test = SelfTest(config, transport=transport)
    result = await self_test.run()

    if print_output:
        self_test.print_results(result, language)

    return result
