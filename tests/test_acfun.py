import json

import pytest
import responses

from clipfetch.media import ExtractOptions, URLParseError, sorted_streams
from clipfetch.sites.acfun import (
    AcfunExtractor,
    Episode,
    episode_url,
    parse_bangumi_data,
    parse_episodes,
)

PAGE_URL = "https://www.acfun.cn/bangumi/aa6000686_36188_1704167"
TITLE = "瑞克和莫蒂 第四季 ：第2话 注释版"
M3U8_URL = "https://cdn.example.com/hls/720.m3u8"
BACK_URL = "https://backup.example.com/hls/720.m3u8"
PLAYLIST = "#EXTM3U\n#EXTINF:10,\nseg0.ts\n#EXTINF:10,\nseg1.ts\n#EXT-X-ENDLIST\n"

EPISODES = [
    {"itemId": 1704166, "episodeName": "第1话", "bangumiId": 6000686, "videoId": 11},
    {"itemId": 1704167, "episodeName": "第2话", "bangumiId": 6000686, "videoId": 12},
]


def _page(title, item_id, representations):
    ks = json.dumps({"adaptationSet": [{"representation": representations}]})
    info = {
        "itemId": item_id,
        "episodeName": "第2话",
        "bangumiId": 6000686,
        "videoId": 12,
        "bangumiTitle": "瑞克和莫蒂",
        "currentVideoInfo": {"ksPlayJson": ks},
    }
    return (
        f"<html><head><title>{title}</title></head><body><script>\n"
        f"window.pageInfo = window.bangumiData = {json.dumps(info, ensure_ascii=False)};\n"
        f"window.bangumiList = {json.dumps({'items': EPISODES}, ensure_ascii=False)};\n"
        "</script></body></html>"
    )


REPRESENTATION = {
    "id": 1,
    "url": M3U8_URL,
    "backUrl": BACK_URL,
    "codecs": "avc1",
    "avgBitrate": 1000,
    "qualityType": "720p",
    "qualityLabel": "高清 720P",
}


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def _summary(data):
    default = sorted_streams(data.streams)[0]
    return data.title, default.quality, default.size


def test_extract_single_episode(mocked):
    mocked.add(responses.GET, PAGE_URL, body=_page(TITLE, 1704167, [REPRESENTATION]))
    mocked.add(responses.GET, M3U8_URL, body=PLAYLIST)
    result = AcfunExtractor().extract(PAGE_URL, ExtractOptions())
    assert len(result) == 1
    data = result[0]
    assert data.site == "AcFun acfun.cn"
    assert data.url == PAGE_URL
    assert _summary(data) == (TITLE, "720p", 0)
    stream = data.streams["高清 720P"]
    assert stream.id == "720p"
    assert [part.url for part in stream.parts] == [
        "https://cdn.example.com/hls/seg0.ts",
        "https://cdn.example.com/hls/seg1.ts",
    ]
    assert all(part.ext == "ts" for part in stream.parts)


def test_extract_falls_back_to_backup_url(mocked):
    mocked.add(responses.GET, PAGE_URL, body=_page(TITLE, 1704167, [REPRESENTATION]))
    mocked.add(responses.GET, M3U8_URL, status=404)
    mocked.add(responses.GET, BACK_URL, body=PLAYLIST)
    data = AcfunExtractor().extract(PAGE_URL)[0]
    assert data.error is None
    assert [part.url for part in data.streams["高清 720P"].parts] == [
        "https://backup.example.com/hls/seg0.ts",
        "https://backup.example.com/hls/seg1.ts",
    ]


def test_extract_playlist_selects_items(mocked):
    second = "https://www.acfun.cn/bangumi/aa6000686_36188_1704167"
    mocked.add(responses.GET, PAGE_URL, body=_page(TITLE, 1704167, [REPRESENTATION]))
    mocked.add(responses.GET, second, body=_page(TITLE, 1704167, [REPRESENTATION]))
    mocked.add(responses.GET, M3U8_URL, body=PLAYLIST)
    options = ExtractOptions(playlist=True, items="2", thread_number=9)
    result = AcfunExtractor().extract(PAGE_URL, options)
    assert [data.url for data in result] == [second]


def test_broken_episode_page_gives_error_data(mocked):
    first = "https://www.acfun.cn/bangumi/aa6000686_36188_1704166"
    mocked.add(responses.GET, PAGE_URL, body=_page(TITLE, 1704167, [REPRESENTATION]))
    mocked.add(responses.GET, first, body="<html><title>nothing</title></html>")
    options = ExtractOptions(playlist=True, items="1")
    result = AcfunExtractor().extract(PAGE_URL, options)
    assert len(result) == 1
    assert result[0].url == first
    assert isinstance(result[0].error, URLParseError)
    assert result[0].streams == {}


def test_parse_bangumi_data():
    episode, representations = parse_bangumi_data(_page(TITLE, 1704167, [REPRESENTATION]))
    assert episode == Episode(item_id=1704167, episode_name="第2话", bangumi_id=6000686, video_id=12)
    assert [(r.url, r.back_url, r.quality_type, r.quality_label) for r in representations] == [
        (M3U8_URL, BACK_URL, "720p", "高清 720P")
    ]


def test_parse_bangumi_data_without_data_raises():
    with pytest.raises(URLParseError):
        parse_bangumi_data("<html></html>")


def test_parse_episodes():
    episodes = parse_episodes(_page(TITLE, 1704167, []))
    assert [(e.bangumi_id, e.item_id) for e in episodes] == [(6000686, 1704166), (6000686, 1704167)]


def test_episode_url():
    assert episode_url(Episode(item_id=1704167, bangumi_id=6000686)) == PAGE_URL