"""
Tests for the resolver self-test.
"""

import asyncio
from dataclasses import replace

import httpx

from domain_grid.config import ResolverProviderConfig, create_default_config
from domain_grid.self_test import PROBE_DOMAIN, SelfTest, run_self_test


class TestSelfTest:
    """Tests for configuration checks and provider probes."""

    def test_all_providers_answer(self, capsys) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"Status": 0})

        result = asyncio.run(run_self_test(
            create_default_config(),
            print_output=True,
            transport=httpx.MockTransport(handler),
        ))

        assert result.success
        assert [r.provider for r in result.provider_results] == ["Cloudflare", "Google"]
        assert all(r.dns_status == 0 for r in result.provider_results)
        assert all(r.http_status_code == 200 for r in result.provider_results)
        assert {r.url.params["name"] for r in requests} == {PROBE_DOMAIN}
        out = capsys.readouterr().out
        assert "Resolver self-test:" in out
        assert "Self-test passed." in out

    def test_failing_provider_is_reported(self, capsys) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "dns.google":
                return httpx.Response(503)
            return httpx.Response(200, json={"Status": 0})

        result = asyncio.run(run_self_test(
            create_default_config(),
            language="de",
            transport=httpx.MockTransport(handler),
        ))

        assert not result.success
        (failed,) = result.failed_providers
        assert failed.provider == "Google"
        assert failed.http_status_code == 503
        assert failed.error.startswith("HTTP error 503")
        out = capsys.readouterr().out
        assert "FEHLER Google" in out
        assert "Selbsttest fehlgeschlagen." in out

    def test_invalid_config_skips_probes(self) -> None:
        requests: list[httpx.Request] = []
        config = replace(
            create_default_config(),
            providers=[ResolverProviderConfig("Plain", "http://dns.example/resolve")],
        )

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"Status": 0})

        result = asyncio.run(SelfTest(config, transport=httpx.MockTransport(handler)).run())

        assert not result.success
        assert result.provider_results == []
        assert any("must use HTTPS" in e for e in result.config_errors)
        assert requests == []

    def test_simulation_mode_makes_no_requests(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(500)

        result = asyncio.run(run_self_test(
            create_default_config(simulation_mode=True),
            print_output=False,
            transport=httpx.MockTransport(handler),
        ))

        assert result.success
        assert requests == []
        assert result.total_duration_ms >= 0
