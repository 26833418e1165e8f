import pytest
import responses

from clipfetch.registry import EXTRACTORS, extract, resolve
from clipfetch.sites.iqiyi import SiteType


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def test_resolve_bilibili_av_short_link():
    assert resolve("av20203945") == ("bilibili", "https://www.bilibili.com/video/av20203945")


def test_resolve_bilibili_ep_short_link():
    assert resolve("ep167000") == ("bilibili", "https://www.bilibili.com/bangumi/play/ep167000")


def test_resolve_haokan_host_and_strip():
    url = "https://haokan.baidu.com/v?vid=10057409468467026969"
    assert resolve("  " + url + "\n") == ("haokan", url)


def test_resolve_domain_of_host():
    url = "https://www.douyin.com/video/6967223681286278436"
    key, resolved = resolve(url)
    assert key == "douyin"
    assert resolved == url
    assert key in EXTRACTORS


def test_resolve_rejects_non_url():
    with pytest.raises(ValueError):
        resolve("not a url")


def test_extractor_table_shares_and_distinguishes():
    douyin_key, _ = resolve("https://www.douyin.com/video/1")
    iesdouyin_key, _ = resolve("https://www.iesdouyin.com/share/video/1")
    iq_key, _ = resolve("https://www.iq.com/play/abc")
    iqiyi_key, _ = resolve("https://www.iqiyi.com/v_abc.html")
    assert EXTRACTORS[douyin_key] is EXTRACTORS[iesdouyin_key]
    assert EXTRACTORS[iq_key].site_type is SiteType.IQ
    assert EXTRACTORS[iqiyi_key].site_type is SiteType.IQIYI


def test_extract_unsupported_site():
    with pytest.raises(ValueError, match="unsupported site"):
        extract("https://www.unknown-site.example.com/watch/1")


def test_extract_fills_up_streams(mocked):
    page = "https://bbs.hupu.com/47401018.html"
    mocked.add(
        responses.GET,
        page,
        body=(
            '<span class="post-user-comp-info-bottom-title">结局引起舒适</span>'
            '<video src="https://v.example.com/a.mp4" controls="" poster=x></video>'
        ),
    )
    mocked.add(
        responses.GET, "https://v.example.com/a.mp4", body="", headers={"Content-Length": "500"}
    )
    data = extract(page)
    stream = data[0].streams["normal"]
    assert data[0].title == "结局引起舒适"
    assert stream.id == "normal"
    assert stream.ext == "mp4"
    assert stream.size == 500