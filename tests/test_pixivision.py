import pytest
import responses

from clipfetch.media import DataType
from clipfetch.sites.pixivision import PixivisionExtractor

PAGE_URL = "https://www.pixivision.net/zh/a/3271"
TITLE = "Don't ask me to choose! Tiny Breasts VS Huge Breasts"
PAGE = (
    f"<html><head><title>{TITLE}</title></head><body>"
    '<img class="am__work__illust  " src="https://i.example.com/img/1.jpg">'
    '<img class="am__work__illust  " src="https://i.example.com/img/2.png">'
    '<img class="avatar" src="https://i.example.com/img/avatar.jpg">'
    "</body></html>"
)


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def _register(rsps):
    rsps.add(responses.GET, PAGE_URL, body=PAGE)
    rsps.add(
        responses.GET, "https://i.example.com/img/1.jpg", body="", headers={"Content-Length": "1000"}
    )
    rsps.add(
        responses.GET, "https://i.example.com/img/2.png", body="", headers={"Content-Length": "2000"}
    )


def test_extract_normal(mocked):
    _register(mocked)
    data = PixivisionExtractor().extract(PAGE_URL)
    item = data[0]
    assert item.title == TITLE
    assert item.type is DataType.IMAGE
    parts = item.streams["default"].parts
    assert [p.url for p in parts] == [
        "https://i.example.com/img/1.jpg",
        "https://i.example.com/img/2.png",
    ]
    assert [p.ext for p in parts] == ["jpg", "png"]
    assert [p.size for p in parts] == [1000, 2000]


def test_stream_size_filled_up_later(mocked):
    _register(mocked)
    item = PixivisionExtractor().extract(PAGE_URL)[0]
    stream = item.streams["default"]
    assert stream.size == 0
    item.fill_up_streams()
    assert stream.size == sum(p.size for p in stream.parts)
    assert stream.id == "default"
    assert stream.ext == "jpg"


def test_extract_page_without_images(mocked):
    mocked.add(responses.GET, PAGE_URL, body=f"<title>{TITLE}</title>")
    item = PixivisionExtractor().extract(PAGE_URL)[0]
    assert item.streams["default"].parts == []
    assert item.title == TITLE