"""
Property-based tests for the DNS-over-HTTPS client.

HTTP traffic is served by httpx.MockTransport; no real network is used.
"""

import asyncio
import json

import httpx
from hypothesis import given, settings
from hypothesis import strategies as st

from domain_grid.config import ResolverProviderConfig
from domain_grid.doh_client import DoHClient, DoHResponse
from domain_grid.enums import DoHErrorCode, RecordType


CLOUDFLARE = ResolverProviderConfig(name="Cloudflare", url="https://cloudflare-dns.com/dns-query")
GOOGLE = ResolverProviderConfig(name="Google", url="https://dns.google/resolve")


class RecordingHandler:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, responder) -> None:
        self.requests: list[httpx.Request] = []
        self._responder = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)


def run_query(
    responder,
    provider: ResolverProviderConfig = CLOUDFLARE,
    domain: str = "foo.com",
    record_type: RecordType = RecordType.A,
    simulation_mode: bool = False,
) -> tuple[DoHResponse, RecordingHandler]:
    handler = RecordingHandler(responder)

    async def go() -> DoHResponse:
        async with DoHClient(
            timeout=2.0,
            simulation_mode=simulation_mode,
            transport=httpx.MockTransport(handler),
        ) as client:
            return await client.query(provider, domain, record_type)

    return asyncio.run(go()), handler


def json_response(status_code: int, body) -> callable:
    return lambda request: httpx.Response(status_code, json=body)


class TestRequestShapeProperty:
    """Tests for the outgoing DoH request."""

    @given(
        provider=st.sampled_from([CLOUDFLARE, GOOGLE]),
        record_type=st.sampled_from(list(RecordType)),
        label=st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789", min_size=1, max_size=20),
    )
    @settings(max_examples=50, deadline=None)
    def test_one_get_with_name_and_type(
        self,
        provider: ResolverProviderConfig,
        record_type: RecordType,
        label: str,
    ) -> None:
        """
        *For any* provider, record type and domain, the client SHALL issue
        exactly one GET carrying name/type parameters and no-cache headers.
        """
        domain = f"{label}.com"
        _, handler = run_query(
            json_response(200, {"Status": 3}),
            provider=provider,
            domain=domain,
            record_type=record_type,
        )

        assert len(handler.requests) == 1
        request = handler.requests[0]
        assert request.method == "GET"
        assert request.url.scheme == "https"
        assert request.url.host == httpx.URL(provider.url).host
        assert request.url.params["name"] == domain
        assert request.url.params["type"] == record_type.value
        assert request.headers["accept"] == "application/dns-json"
        assert request.headers["cache-control"] == "no-cache"
        assert request.headers["pragma"] == "no-cache"


class TestResponseParsingProperty:
    """Tests for successful and malformed responses."""

    @given(status=st.integers(min_value=0, max_value=23))
    @settings(max_examples=50, deadline=None)
    def test_status_is_preserved(self, status: int) -> None:
        """
        *For any* integer Status in a 200 response, dns_status SHALL equal it
        and no error SHALL be reported.
        """
        response, _ = run_query(json_response(200, {"Status": status}))

        assert response.dns_status == status
        assert response.error is None
        assert response.http_status_code == 200

    def test_noerror_with_answer(self) -> None:
        body = {
            "Status": 0,
            "Answer": [{"name": "foo.com.", "type": 1, "TTL": 300, "data": "93.184.216.34"}],
        }
        response, _ = run_query(json_response(200, body))

        assert response.dns_status == 0
        assert response.data == body
        assert response.answer_count == 1
        assert response.provider == "Cloudflare"
        assert response.record_type == RecordType.A

    def test_nxdomain_without_answer(self) -> None:
        response, _ = run_query(json_response(200, {"Status": 3}))

        assert response.dns_status == 3
        assert response.answer_count == 0

    def test_malformed_json_is_parse_error(self) -> None:
        response, _ = run_query(lambda request: httpx.Response(200, content=b"<html>nope</html>"))

        assert response.dns_status is None
        assert response.error.code == DoHErrorCode.PARSE_ERROR

    @given(body=st.one_of(
        st.just({}),
        st.just({"Answer": []}),
        st.builds(lambda v: {"Status": v}, st.one_of(st.text(max_size=3), st.none(), st.booleans(),
                                                     st.floats(allow_nan=False))),
        st.lists(st.integers(), max_size=3),
    ))
    @settings(max_examples=50, deadline=None)
    def test_missing_integer_status_is_parse_error(self, body) -> None:
        """
        *For any* body without an integer Status, the client SHALL report
        PARSE_ERROR and no dns_status.
        """
        response, _ = run_query(
            lambda request: httpx.Response(200, content=json.dumps(body).encode())
        )

        assert response.dns_status is None
        assert response.error.code == DoHErrorCode.PARSE_ERROR


class TestErrorMappingProperty:
    """Tests for HTTP and transport failures."""

    @given(status_code=st.sampled_from([400, 403, 404, 500, 502, 503]))
    @settings(max_examples=20, deadline=None)
    def test_http_errors_keep_parsed_status(self, status_code: int) -> None:
        """
        *For any* non-2xx response whose body still parses, the client SHALL
        report SERVER_ERROR and keep the DNS status.
        """
        response, _ = run_query(json_response(status_code, {"Status": 2}))

        assert response.error.code == DoHErrorCode.SERVER_ERROR
        assert response.error.message.startswith(f"HTTP error {status_code}")
        assert response.error.http_status_code == status_code
        assert response.http_status_code == status_code
        assert response.dns_status == 2

    def test_http_error_message_includes_reason(self) -> None:
        response, _ = run_query(json_response(503, {"Status": 2}))
        assert response.error.message == "HTTP error 503 Service Unavailable"

    def test_http_error_without_body(self) -> None:
        response, _ = run_query(lambda request: httpx.Response(502, content=b""))

        assert response.error.code == DoHErrorCode.SERVER_ERROR
        assert response.dns_status is None

    def test_rate_limited(self) -> None:
        response, _ = run_query(json_response(429, {"Status": 5}))

        assert response.error.code == DoHErrorCode.RATE_LIMITED
        assert response.dns_status == 5

    def test_timeout(self) -> None:
        def responder(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        response, _ = run_query(responder)

        assert response.error.code == DoHErrorCode.TIMEOUT
        assert response.dns_status is None

    def test_connection_error(self) -> None:
        def responder(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        response, _ = run_query(responder)

        assert response.error.code == DoHErrorCode.NETWORK_ERROR
        assert "connection refused" in response.error.message

    def test_tls_connect_error(self) -> None:
        def responder(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("[SSL: CERTIFICATE_VERIFY_FAILED]", request=request)

        response, _ = run_query(responder)

        assert response.error.code == DoHErrorCode.TLS_ERROR

    def test_other_transport_error(self) -> None:
        def responder(request: httpx.Request) -> httpx.Response:
            raise httpx.RemoteProtocolError("peer closed connection", request=request)

        response, _ = run_query(responder)

        assert response.error.code == DoHErrorCode.NETWORK_ERROR

    def test_plain_http_provider_is_rejected_without_request(self) -> None:
        insecure = ResolverProviderConfig(name="Plain", url="http://dns.example/resolve")

        response, handler = run_query(json_response(200, {"Status": 0}), provider=insecure)

        assert handler.requests == []
        assert response.error.code == DoHErrorCode.TLS_ERROR
        assert response.provider == "Plain"


class TestSimulationModeProperty:
    """Tests for simulation (dry-run) mode."""

    @given(record_type=st.sampled_from(list(RecordType)))
    @settings(max_examples=10, deadline=None)
    def test_simulation_makes_no_requests(self, record_type: RecordType) -> None:
        """
        *For any* query in simulation mode, no HTTP request SHALL be made and
        the answer SHALL be NOERROR.
        """
        response, handler = run_query(
            json_response(200, {"Status": 3}),
            record_type=record_type,
            simulation_mode=True,
        )

        assert handler.requests == []
        assert response.dns_status == 0
        assert response.error is None
        assert response.record_type == record_type


class TestClientLifecycle:
    """Tests for client creation and closing."""

    def test_lazy_client_and_close(self) -> None:
        handler = RecordingHandler(json_response(200, {"Status": 3}))

        async def go() -> DoHResponse:
            client = DoHClient(transport=httpx.MockTransport(handler))
            response = await client.query(GOOGLE, "foo.com", RecordType.NS)
            await client.close()
            await client.close()
            return response

        response = asyncio.run(go())

        assert response.dns_status == 3
        assert response.provider == "Google"
        assert len(handler.requests) == 1
