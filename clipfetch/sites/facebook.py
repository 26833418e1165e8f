"""Extractor for facebook.com videos."""

from __future__ import annotations

from clipfetch import fetch, siteutil
from clipfetch.media import Data, DataType, ExtractOptions, Part, Stream, URLParseError

SITE = "Facebook facebook.com"
QUALITIES = ("sd", "hd")


class FacebookExtractor:
    """Extracts the SD and HD variants of a facebook video."""

    def extract(self, url: str, options: ExtractOptions | None = None) -> list[Data]:
        html = fetch.get(url, url, None)
        titles = siteutil.match_one_of(html, r'<title id="pageTitle">(.+)</title>')
        if not titles or len(titles) < 2:
            raise URLParseError()
        title = titles[1]

        streams: dict[str, Stream] = {}
        for quality in QUALITIES:
            found = siteutil.match_one_of(html, f'{quality}_src_no_ratelimit:"(.+?)"')
            if not found or len(found) < 2:
                continue
            video_url = found[1]
            size = fetch.content_size(video_url, url)
            streams[quality] = Stream(
                parts=[Part(url=video_url, size=size, ext="mp4")],
                size=size,
                quality=quality,
            )
        return [Data(site=SITE, title=title, type=DataType.VIDEO, streams=streams, url=url)]