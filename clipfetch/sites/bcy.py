"""Extractor for image posts on bcy.net."""

from __future__ import annotations

import json
import re

from clipfetch import fetch, siteutil
from clipfetch.media import Data, DataType, ExtractOptions, Part, Stream, URLParseError

SITE = "半次元 bcy.net"
_TITLE_SUFFIX = " - 半次元 banciyuan - ACG爱好者社区"
_ESCAPED = re.compile(r'\\(["\\])')


class BcyExtractor:
    """Extracts the full-size images of a bcy.net post."""

    def extract(self, url: str, options: ExtractOptions | None = None) -> list[Data]:
        html = fetch.get(url, url, None)
        found = siteutil.match_one_of(html, r'JSON.parse\("(.+?)"\);')
        if not found or len(found) < 2:
            raise URLParseError()
        json_text = _ESCAPED.sub(r"\1", found[1])
        try:
            payload = json.loads(json_text)
        except ValueError as exc:
            raise ValueError(f"json unmarshal failed, err: {exc}") from exc

        title = siteutil.page_title(html).replace(_TITLE_SUFFIX, "")
        post = ((payload.get("detail") or {}).get("post_data")) or {}
        parts = []
        for image in post.get("multi") or []:
            image_url = image.get("original_path") or ""
            size = fetch.content_size(image_url, url)
            _, ext = siteutil.get_name_and_ext(image_url)
            parts.append(Part(url=image_url, size=size, ext=ext))
        streams = {"default": Stream(parts=parts, size=sum(part.size for part in parts))}
        return [Data(site=SITE, title=title, type=DataType.IMAGE, streams=streams, url=url)]