import pytest
import responses

from clipfetch.media import DataType, URLParseError, sorted_streams
from clipfetch.sites.facebook import FacebookExtractor

PAGE_URL = "https://www.facebook.com/groups/314070194112/permalink/10155168902769113/"
TITLE = "Ukrainian Scientists Worldwide Public Group | Facebook"
SD_URL = "https://video.example.com/sd.mp4"
HD_URL = "https://video.example.com/hd.mp4"


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def _sized(mocked, url, size):
    mocked.add(responses.GET, url, body=b"", headers={"Content-Length": str(size)})


def test_normal(mocked):
    html = (
        f'<html><title id="pageTitle">{TITLE}</title>'
        f'<script>sd_src_no_ratelimit:"{SD_URL}",hd_src_no_ratelimit:"{HD_URL}"</script></html>'
    )
    mocked.add(responses.GET, PAGE_URL, body=html)
    _sized(mocked, SD_URL, 100000)
    _sized(mocked, HD_URL, 336975453)

    data = FacebookExtractor().extract(PAGE_URL)[0]

    assert data.title == TITLE
    assert data.type == DataType.VIDEO
    best = sorted_streams(data.streams)[0]
    assert best.size == 336975453
    assert best.quality == "hd"
    assert set(data.streams) == {"sd", "hd"}


def test_only_sd(mocked):
    html = f'<title id="pageTitle">{TITLE}</title> sd_src_no_ratelimit:"{SD_URL}"'
    mocked.add(responses.GET, PAGE_URL, body=html)
    _sized(mocked, SD_URL, 4242)

    data = FacebookExtractor().extract(PAGE_URL)[0]

    assert list(data.streams) == ["sd"]
    assert data.streams["sd"].parts[0].url == SD_URL
    assert data.streams["sd"].parts[0].ext == "mp4"


def test_missing_title(mocked):
    mocked.add(responses.GET, PAGE_URL, body="<html><title>x</title></html>")
    with pytest.raises(URLParseError):
        FacebookExtractor().extract(PAGE_URL)