"""Extractor for videos in hupu.com posts."""

from __future__ import annotations

from clipfetch import fetch, siteutil
from clipfetch.media import Data, DataType, ExtractOptions, Part, Stream, URLParseError

SITE = "虎扑 hupu.com"
DEFAULT_TITLE = "hupu video"
QUALITY = "normal"


class HupuExtractor:
    """Extracts the video embedded in a hupu post."""

    def extract(self, url: str, options: ExtractOptions | None = None) -> list[Data]:
        html = fetch.get(url, url, None)
        titles = siteutil.match_one_of(
            html, r'<span class="post-user-comp-info-bottom-title">(.+?)</span>'
        )
        title = titles[1] if titles and len(titles) > 1 else DEFAULT_TITLE

        found = siteutil.match_one_of(html, r'<video src="(.+?)" controls="" poster=(.+?)></video>')
        if not found or len(found) < 2:
            raise URLParseError()
        video_url = found[1]

        size = fetch.content_size(video_url, url)
        streams = {
            QUALITY: Stream(
                parts=[Part(url=video_url, size=size, ext="mp4")], size=size, quality=QUALITY
            )
        }
        return [Data(site=SITE, title=title, type=DataType.VIDEO, streams=streams, url=url)]