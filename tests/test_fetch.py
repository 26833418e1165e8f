import pytest
import requests
import responses

from clipfetch import fetch

URL = "https://media.example.com/page"


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def test_get_sends_browser_headers_and_referer(mocked):
    mocked.add(responses.GET, URL, body="héllo")
    text = fetch.get(URL, "https://ref.example.com/", None)
    assert text == "héllo"
    sent = mocked.calls[0].request.headers
    assert sent["User-Agent"] == fetch.FAKE_HEADERS["User-Agent"]
    assert sent["Referer"] == "https://ref.example.com/"


def test_get_extra_headers_override_defaults(mocked):
    mocked.add(responses.GET, URL, body="ok")
    text = fetch.get(URL, None, {"Accept-Language": "zh-TW"})
    assert text == "ok"
    sent = mocked.calls[0].request.headers
    assert sent["Accept-Language"] == "zh-TW"
    assert "Referer" not in sent


def test_get_bytes_returns_raw_body(mocked):
    mocked.add(responses.GET, URL, body=b"\x00\x01\xff")
    assert fetch.get_bytes(URL, URL, None) == b"\x00\x01\xff"


def test_content_size_reads_header(mocked):
    mocked.add(
        responses.GET, URL, body=b"x" * 1234, headers={"Content-Length": "1234"}
    )
    assert fetch.content_size(URL, URL) == 1234


def test_error_status_raises(mocked):
    mocked.add(responses.GET, URL, status=404)
    with pytest.raises(requests.HTTPError):
        fetch.get(URL, None, None)


def test_request_posts_body(mocked):
    mocked.add(responses.POST, URL, json={"ok": True})
    response = fetch.request(
        "POST", URL, '{"id": "1"}', {"Content-Type": "application/json"}
    )
    assert response.json() == {"ok": True}
    body = mocked.calls[0].request.body
    if isinstance(body, bytes):
        body = body.decode()
    assert body == '{"id": "1"}'