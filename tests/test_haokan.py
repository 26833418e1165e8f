import pytest
import responses

from clipfetch.media import URLParseError, sorted_streams
from clipfetch.sites.haokan import HaokanExtractor

PAGE_URL = "https://haokan.baidu.com/v?vid=10057409468467026969"
TITLE = "听歌学英语小学篇（6）：my new pen pal"
VIDEO_URL = "https://vd.example.com/video/clip.mp4"


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def test_video_tag(mocked):
    html = (
        f'<meta property="og:title" content="{TITLE}">'
        f'<video class="video" src="{VIDEO_URL}">'
    )
    mocked.add(responses.GET, PAGE_URL, body=html)
    mocked.add(responses.GET, VIDEO_URL, body=b"", headers={"Content-Length": "2027354"})

    data = HaokanExtractor().extract(PAGE_URL)[0]

    assert data.title == TITLE
    assert sorted_streams(data.streams)[0].size == 2027354
    part = data.streams["default"].parts[0]
    assert (part.url, part.ext) == (VIDEO_URL, "mp4")


def test_json_fallback_unescapes(mocked):
    escaped = VIDEO_URL.replace("/", "\\/")
    html = f'<meta property="og:title" content="{TITLE}"><script>{{"playurl":"{escaped}"}}</script>'
    mocked.add(responses.GET, PAGE_URL, body=html)
    mocked.add(responses.GET, VIDEO_URL, body=b"", headers={"Content-Length": "77"})

    data = HaokanExtractor().extract(PAGE_URL)[0]

    assert data.streams["default"].parts[0].url == VIDEO_URL
    assert data.streams["default"].size == 77


def test_no_video(mocked):
    mocked.add(responses.GET, PAGE_URL, body=f'<meta property="og:title" content="{TITLE}">')
    with pytest.raises(URLParseError):
        HaokanExtractor().extract(PAGE_URL)