"""Extractor for illustrations on pixivision.net articles."""

from __future__ import annotations

from clipfetch import fetch, siteutil
from clipfetch.media import Data, DataType, ExtractOptions, Part, Stream

SITE = "pixivision pixivision.net"
IMAGE_CLASS = "am__work__illust  "


class PixivisionExtractor:
    """Extracts the illustrations of a pixivision article."""

    def extract(self, url: str, options: ExtractOptions | None = None) -> list[Data]:
        html = fetch.get(url, url, None)
        title, image_urls = siteutil.find_images(html, IMAGE_CLASS)
        parts = []
        for image_url in image_urls:
            _, ext = siteutil.get_name_and_ext(image_url)
            size = fetch.content_size(image_url, url)
            parts.append(Part(url=image_url, size=size, ext=ext))
        streams = {"default": Stream(parts=parts)}
        return [Data(site=SITE, title=title, type=DataType.IMAGE, streams=streams, url=url)]