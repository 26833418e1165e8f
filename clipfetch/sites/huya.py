"""Extractor for huya.com video clips."""

from __future__ import annotations

from clipfetch import fetch, siteutil
from clipfetch.media import Data, DataType, ExtractOptions, Part, Stream, URLParseError

SITE = "虎牙 huya.com"
VIDEO_HOST = "https://videotx-platform.cdn.huya.com/"
DEFAULT_TITLE = "huya video"
QUALITY = "normal"


class HuyaExtractor:
    """Extracts a huya video clip."""

    def extract(self, url: str, options: ExtractOptions | None = None) -> list[Data]:
        html = fetch.get(url, url, None)
        titles = siteutil.match_one_of(html, r"<h1>(.+?)</h1>")
        title = titles[1] if titles and len(titles) > 1 else DEFAULT_TITLE

        found = siteutil.match_one_of(html, r'//videotx-platform.cdn.huya.com/(.*)" poster=(.+?)')
        if not found or len(found) < 2:
            raise URLParseError()
        video_url = VIDEO_HOST + found[1]

        size = fetch.content_size(video_url, url)
        streams = {
            QUALITY: Stream(
                parts=[Part(url=video_url, size=size, ext="mp4")], size=size, quality=QUALITY
            )
        }
        return [Data(site=SITE, title=title, type=DataType.VIDEO, streams=streams, url=url)]