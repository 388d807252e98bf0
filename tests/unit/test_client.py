from datetime import datetime, timezone

import pytest
import requests

from mws_client.client import CONTENT_TYPE, MwsClient, generate_user_agent
from mws_client.config import MwsConfig
from mws_client.errors import ConfigurationError
from mws_client.signing.canonical import canonicalize
from mws_client.transport import RequestsTransport, TransportResponse


class DummyTransport:
    def __init__(self, body=b"<Ok><Status>GREEN</Status></Ok>", status_code=200):
        self.body = body
        self.status_code = status_code
        self.calls = []

    def post(self, url, *, headers, body):
        self.calls.append({"url": url, "headers": dict(headers), "body": body})
        return TransportResponse(status_code=self.status_code, content=self.body)


class FailingTransport:
    def post(self, url, *, headers, body):
        raise requests.ConnectionError("boom")


def _config(base_url="https://mws.amazonservices.com", **kwargs):
    return MwsConfig.create("foo", "bar", "baz", ["mkt-place-id"], "fake-token", base_url, **kwargs)


def test_base_url_needs_to_be_a_valid_mws_endpoint():
    with pytest.raises(ConfigurationError) as exc:
        MwsClient(_config("https://weengs.com"), transport=DummyTransport())
    assert 'received "https://weengs.com"' in str(exc.value)


@pytest.mark.parametrize("url", ["https://mws.amazonservices.com", "https://mws-eu.amazonservices.com"])
def test_it_accepts_valid_mws_endpoints(url):
    client = MwsClient(_config(url), transport=DummyTransport())
    assert isinstance(client, MwsClient)


def test_send_posts_signed_body_to_path():
    transport = DummyTransport()
    client = MwsClient(_config(), transport=transport)

    resp = client.send("ListOrders", "/Orders/2013-09-01", {"CreatedAfter": "2020-01-01T00:00:00Z"})

    assert resp.is_document
    assert resp.parsed["Status"] == "GREEN"

    call = transport.calls[0]
    assert call["url"] == "https://mws.amazonservices.com/Orders/2013-09-01"
    assert call["headers"]["Content-Type"] == CONTENT_TYPE
    assert call["headers"]["User-Agent"] == client.user_agent

    params = dict(pair.split("=", 1) for pair in call["body"].split("&"))
    assert params["Action"] == "ListOrders"
    assert params["Version"] == "2013-09-01"
    assert params["MarketplaceId.Id.1"] == "mkt-place-id"
    assert "Signature" in params
    assert call["body"] == client.last_request.body
    assert call["body"] == canonicalize(client.last_request.params)


def test_send_returns_raw_text_for_non_xml():
    transport = DummyTransport(body=b"col1\tcol2\n1\t2\n")
    client = MwsClient(_config(), transport=transport)

    resp = client.send("GetReport", "/", {"ReportId": "123"})

    assert not resp.is_document
    assert resp.parsed == "col1\tcol2\n1\t2\n"
    assert client.last_response.content == b"col1\tcol2\n1\t2\n"


def test_transport_errors_propagate_unchanged():
    client = MwsClient(_config(), transport=FailingTransport())
    with pytest.raises(requests.ConnectionError):
        client.send("ListOrders", "/Orders/2013-09-01")


def test_build_request_is_deterministic_for_fixed_time():
    client = MwsClient(_config(), transport=DummyTransport())
    now = datetime(2020, 1, 1, 0, 2, 0, tzinfo=timezone.utc)

    signed = client.build_request("ListOrders", "/Orders/2013-09-01", now=now)

    assert signed.signature == "rUIOLmNAhEURuW8d4sTDx567AByF/ebX4Cj5TKeFn70="


def test_time_expression_is_forwarded():
    client = MwsClient(_config(), transport=DummyTransport())
    client.send("ListOrders", "/Orders/2013-09-01", time_expression="2020-01-01T00:02:00+00:00")
    assert client.last_request.params["Timestamp"] == "2020-01-01T00:00:00+00:00"


def test_user_agent_format():
    ua = generate_user_agent("MyApp", "2.1")
    assert ua.startswith("MyApp/2.1(Language=Python/")
    assert "; Platform=" in ua
    assert ua.endswith(")")


def test_default_transport_is_per_instance():
    a = MwsClient(_config(timeout_s=5))
    b = MwsClient(_config())
    assert isinstance(a.transport, RequestsTransport)
    assert a.transport is not b.transport
    assert a.transport.timeout_s == 5


def test_from_env(monkeypatch):
    monkeypatch.setenv("MWS_ACCESS_KEY_ID", "foo")
    monkeypatch.setenv("MWS_SECRET_ACCESS_KEY", "bar")
    monkeypatch.setenv("MWS_SELLER_ID", "baz")
    monkeypatch.setenv("MWS_AUTH_TOKEN", "fake-token")
    monkeypatch.setenv("MWS_MARKETPLACE_IDS", "A,B,C")
    monkeypatch.delenv("MWS_BASE_URL", raising=False)

    client = MwsClient.from_env(transport=DummyTransport())
    signed = client.build_request("ListOrders", "/Orders/2013-09-01")

    assert signed.params["MarketplaceId.Id.1"] == "A"
    assert signed.params["MarketplaceId.Id.2"] == "B"
    assert signed.params["MarketplaceId.Id.3"] == "C"


def test_utf8_xml_body_is_decoded_correctly():
    transport = DummyTransport(body="<R><Title>Größe</Title></R>".encode("utf-8"))
    client = MwsClient(_config(), transport=transport)

    resp = client.send("GetMatchingProduct", "/Products/2011-10-01")

    assert resp.parsed["Title"] == "Größe"


class ClosableTransport(DummyTransport):
    def __init__(self):
        super().__init__()
        self.closed = False

    def close(self):
        self.closed = True


def test_close_leaves_injected_transport_open():
    transport = ClosableTransport()
    with MwsClient(_config(), transport=transport) as client:
        client.send("ListOrders", "/Orders/2013-09-01")
    assert not transport.closed


def test_close_closes_own_transport(monkeypatch):
    closed = []
    monkeypatch.setattr(RequestsTransport, "close", lambda self: closed.append(self))

    with MwsClient(_config()) as client:
        own = client.transport

    assert closed == [own]


def test_close_without_context_manager(monkeypatch):
    closed = []
    monkeypatch.setattr(RequestsTransport, "close", lambda self: closed.append(self))

    client = MwsClient(_config())
    client.close()

    assert closed == [client.transport]
