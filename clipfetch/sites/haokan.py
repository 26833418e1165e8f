"""Extractor for haokan.baidu.com videos."""

from __future__ import annotations

from clipfetch import fetch, siteutil
from clipfetch.media import Data, DataType, ExtractOptions, Part, Stream, URLParseError

SITE = "好看视频 haokan.baidu.com"


class HaokanExtractor:
    """Extracts a haokan video from either page layout."""

    def extract(self, url: str, options: ExtractOptions | None = None) -> list[Data]:
        html = fetch.get(url, url, None)
        titles = siteutil.match_one_of(html, r'property="og:title"\s+content="(.+?)"')
        if not titles or len(titles) < 2:
            raise URLParseError()
        title = titles[1]

        # Older pages carry the address in a <video> tag, newer ones in JSON.
        urls = siteutil.match_one_of(html, r'<video\s*class="video"\s*src="?(.+?)"?\s*>')
        if not urls or len(urls) < 2:
            urls = siteutil.match_one_of(html, r'"playurl":"(http.+?)"')
        if not urls or len(urls) < 2:
            raise URLParseError()

        play_url = urls[1].replace("\\/", "/")
        size = fetch.content_size(play_url, url)
        _, ext = siteutil.get_name_and_ext(play_url)
        streams = {"default": Stream(parts=[Part(url=play_url, size=size, ext=ext)], size=size)}
        return [Data(site=SITE, title=title, type=DataType.VIDEO, streams=streams, url=url)]