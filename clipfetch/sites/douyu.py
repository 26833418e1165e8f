"""Extractor for recorded videos on v.douyu.com."""

from __future__ import annotations

import json

from clipfetch import fetch, siteutil
from clipfetch.media import Data, DataType, ExtractOptions, Part, Stream, URLParseError

SITE = "斗鱼 douyu.com"
INFO_URL = "http://vmobile.douyu.com/video/getInfo?vid="


def _m3u8_parts(url: str) -> list[Part]:
    return [
        Part(url=segment, size=fetch.content_size(segment, url), ext="ts")
        for segment in siteutil.m3u8_urls(url)
    ]


class DouyuExtractor:
    """Extracts a recorded douyu video; live rooms are not supported."""

    def extract(self, url: str, options: ExtractOptions | None = None) -> list[Data]:
        if siteutil.match_one_of(url, r"https?://www.douyu.com/(\S+)") is not None:
            raise ValueError("暂不支持斗鱼直播")

        html = fetch.get(url, url, None)
        titles = siteutil.match_one_of(html, r"<title>(.*?)</title>")
        if not titles or len(titles) < 2:
            raise URLParseError()
        title = titles[1]

        vids = siteutil.match_one_of(url, r"https?://v.douyu.com/show/(\S+)")
        if not vids or len(vids) < 2:
            raise URLParseError()

        info = json.loads(fetch.get(INFO_URL + vids[1], url, None))
        video_url = ((info.get("data") or {}).get("video_url")) or ""
        parts = _m3u8_parts(video_url)
        streams = {"default": Stream(parts=parts, size=sum(part.size for part in parts))}
        return [Data(site=SITE, title=title, type=DataType.VIDEO, streams=streams, url=url)]