from __future__ import annotations

import pytest
import requests

from braviactl.core.errors import (
    AuthRejectedError,
    BadRequestError,
    DeviceBusyError,
    HttpStatusError,
    NotFoundError,
    UnreachableError,
)
from braviactl.transports.http_transport import SOAP_ACTION, HTTPTransport


class FakeResponse:
    def __init__(self, status_code: int, text: str = "") -> None:
        self.status_code = status_code
        self.text = text


class Recorder:
    def __init__(self, response: FakeResponse | Exception) -> None:
        self.response = response
        self.calls: list[dict] = []

    def __call__(self, url, data=None, headers=None, timeout=None):
        self.calls.append({"url": url, "data": data, "headers": headers, "timeout": timeout})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def test_post_attaches_fixed_headers(monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = Recorder(FakeResponse(200, '{"result":[]}'))
    monkeypatch.setattr(requests, "post", recorder)

    text = HTTPTransport().post("http://10.0.0.2/sony/system", "{}", psk="1234")

    assert text == '{"result":[]}'
    call = recorder.calls[0]
    assert call["headers"]["X-Auth-PSK"] == "1234"
    assert call["headers"]["SOAPACTION"] == SOAP_ACTION
    assert call["headers"]["Content-Type"] == "text/xml; charset=UTF-8"
    assert call["timeout"] == 1.0
    assert call["data"] == b"{}"


@pytest.mark.parametrize(
    ("status", "error_cls"),
    [
        (400, BadRequestError),
        (403, AuthRejectedError),
        (404, NotFoundError),
        (500, DeviceBusyError),
    ],
)
def test_recognized_statuses_map_to_distinct_errors(
    monkeypatch: pytest.MonkeyPatch, status: int, error_cls: type[HttpStatusError]
) -> None:
    monkeypatch.setattr(requests, "post", Recorder(FakeResponse(status)))

    with pytest.raises(error_cls) as exc:
        HTTPTransport().post("http://10.0.0.2/sony/system", "{}", psk="1234")
    assert exc.value.status_code == status


def test_other_status_is_generic_http_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(requests, "post", Recorder(FakeResponse(503)))

    with pytest.raises(HttpStatusError) as exc:
        HTTPTransport().post("http://10.0.0.2/sony/system", "{}", psk="1234")
    assert type(exc.value) is HttpStatusError
    assert exc.value.status_code == 503


def test_403_message_points_at_psk(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(requests, "post", Recorder(FakeResponse(403)))

    with pytest.raises(AuthRejectedError) as exc:
        HTTPTransport().post("http://10.0.0.2/sony/system", "{}", psk="bad")
    assert "Pre-Shared Key" in str(exc.value)


@pytest.mark.parametrize(
    "error",
    [
        requests.ConnectionError("No route to host"),
        requests.Timeout("timed out"),
    ],
)
def test_network_failures_are_unreachable(monkeypatch: pytest.MonkeyPatch, error: Exception) -> None:
    monkeypatch.setattr(requests, "post", Recorder(error))

    with pytest.raises(UnreachableError):
        HTTPTransport().post("http://10.0.0.2/sony/system", "{}", psk="1234", timeout_s=0.5)


def test_explicit_session_is_used() -> None:
    class FakeSession:
        def __init__(self) -> None:
            self.post = Recorder(FakeResponse(200, "ok"))

    session = FakeSession()
    assert HTTPTransport(session=session).post("http://10.0.0.2/sony/ircc", "<x/>", psk="1") == "ok"
    assert session.post.calls[0]["url"] == "http://10.0.0.2/sony/ircc"
