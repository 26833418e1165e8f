"""Extractor for music videos on music.163.com."""

from __future__ import annotations

from urllib.parse import unquote_plus

from clipfetch import fetch, siteutil
from clipfetch.media import Data, DataType, ExtractOptions, Part, Stream, URLParseError

SITE = "网易云音乐 music.163.com"


class NeteaseExtractor:
    """Extracts a netease music MV or video."""

    def extract(self, url: str, options: ExtractOptions | None = None) -> list[Data]:
        url = url.replace("/#/", "/", 1)
        if siteutil.match_one_of(url, r"/(mv|video)\?id=(\w+)") is None:
            raise ValueError("invalid url for netease music")

        html = fetch.get(url, url, None)
        if "u-errlg-404" in html:
            raise ValueError("404 music not found")

        titles = siteutil.match_one_of(html, r'<meta property="og:title" content="(.+?)" />')
        if not titles or len(titles) < 2:
            raise URLParseError()
        title = titles[1]

        videos = siteutil.match_one_of(html, r'<meta property="og:video" content="(.+?)" />')
        if not videos or len(videos) < 2:
            raise URLParseError()
        video_url = unquote_plus(videos[1])

        size = fetch.content_size(video_url, url)
        streams = {
            "default": Stream(parts=[Part(url=video_url, size=size, ext="mp4")], size=size)
        }
        return [Data(site=SITE, title=title, type=DataType.VIDEO, streams=streams, url=url)]