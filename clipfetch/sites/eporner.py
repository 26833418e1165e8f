"""Extractor for eporner.com videos."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlparse

from bs4 import BeautifulSoup, NavigableString, Tag

from clipfetch import fetch, siteutil
from clipfetch.media import Data, DataType, ExtractOptions, Part, Stream

SITE = "EPORNER eporner.com"
DOWNLOAD_CLASS = ".dloaddivcol"
_UNITS = {"KB": 1024, "MB": 1024 * 1024, "GB": 1024 * 1024 * 1024}


@dataclass
class Source:
    """A download link with the quality and size its label announces."""

    url: str = ""
    quality: str = ""
    size_text: str = ""
    size: int = 0


def parse_src_meta(text: str) -> Source:
    """Read quality and size from a label such as ``Download MP4 (1080p, 1.2 GB)``."""
    start = text.find("(")
    end = text.find(")")
    inner = text[start + 1 : end] if end >= 0 else text[start + 1 :]
    source = Source()
    fields = inner.split(",")
    if len(fields) == 2:
        source.quality = fields[0].strip(" ")
        source.size_text = fields[1].strip(" ")
    if not source.size_text:
        return source
    value_unit = source.size_text.split(" ")
    try:
        value = float(value_unit[0])
    except ValueError:
        return source
    unit = value_unit[1] if len(value_unit) > 1 else ""
    source.size = int(value * _UNITS.get(unit, 1))
    return source


def find_sources(html: str) -> list[Source]:
    """Return the download links listed on a video page."""
    soup = BeautifulSoup(html, "html.parser")
    sources = []
    for block in soup.select(DOWNLOAD_CLASS):
        for child in block.children:
            if not isinstance(child, Tag) or child.name != "a":
                continue
            first = next(iter(child.children), None)
            if first is None:
                source = Source()
            else:
                label = str(first) if isinstance(first, NavigableString) else first.name
                source = parse_src_meta(label)
            href = child.get("href")
            if href is not None:
                source.url = href
            sources.append(source)
    return sources


class EpornerExtractor:
    """Extracts the download qualities of an eporner video."""

    def extract(self, url: str, options: ExtractOptions | None = None) -> list[Data]:
        html = fetch.get(url, url, None)
        titles = siteutil.match_one_of(html, r"<title>(.+?)</title>")
        title = titles[1] if titles and len(titles) > 1 else "eporner"
        parsed = urlparse(url)
        streams = {}
        for source in find_sources(html):
            part = Part(url=f"{parsed.scheme}://{parsed.netloc}{source.url}", size=source.size, ext="mp4")
            streams[source.quality] = Stream(parts=[part], size=source.size, quality=source.quality)
        return [Data(site=SITE, title=title, type=DataType.VIDEO, streams=streams, url=url)]