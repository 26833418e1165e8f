"""HTTP helpers that present themselves as a desktop browser."""

from __future__ import annotations

from collections.abc import Mapping

import requests

FAKE_HEADERS: dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Charset": "UTF-8,*;q=0.5",
    "Accept-Encoding": "gzip,deflate,sdch",
    "Accept-Language": "en-US,en;q=0.8",
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_13_6) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/69.0.3497.81 Safari/537.36"
    ),
}

TIMEOUT = 30


def request(
    method: str,
    url: str,
    data: bytes | str | None = None,
    headers: Mapping[str, str] | None = None,
) -> requests.Response:
    """Send a request with browser headers; the body is streamed.

    Raises requests.HTTPError for 4xx and 5xx answers.
    """
    merged = dict(FAKE_HEADERS)
    if headers:
        merged.update(headers)
    response = requests.request(
        method, url, data=data, headers=merged, stream=True, timeout=TIMEOUT
    )
    if response.status_code >= 400:
        response.close()
        response.raise_for_status()
    return response


def _with_referer(refer: str | None, headers: Mapping[str, str] | None) -> dict[str, str]:
    merged = dict(headers or {})
    if refer and "Referer" not in merged:
        merged["Referer"] = refer
    return merged


def get_bytes(
    url: str, refer: str | None = None, headers: Mapping[str, str] | None = None
) -> bytes:
    """Fetch a URL and return the raw body."""
    with request("GET", url, None, _with_referer(refer, headers)) as response:
        return response.content


def get(url: str, refer: str | None = None, headers: Mapping[str, str] | None = None) -> str:
    """Fetch a URL and return the body decoded as UTF-8."""
    return get_bytes(url, refer, headers).decode("utf-8", errors="replace")


def content_size(url: str, refer: str | None = None) -> int:
    """Return the Content-Length a URL announces, without reading the body."""
    with request("GET", url, None, _with_referer(refer, None)) as response:
        value = response.headers.get("Content-Length", "")
    if not value:
        raise ValueError("Content-Length is not present")
    return int(value)