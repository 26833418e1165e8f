"""Extractor for miaopai.com videos."""

from __future__ import annotations

import json
import random

from clipfetch import fetch, siteutil
from clipfetch.media import Data, DataType, ExtractOptions, Part, Stream, URLParseError

SITE = "秒拍 miaopai.com"
INFO_URL = "https://n.miaopai.com/api/aj_media/info.json?smid={id}&appid=530&_cb=_jsonp{cb}"
_CHARS = "abcdefghijklnmopqrstuvwxyz0123456789"
# The last character of the table is never drawn.
_DRAWN = _CHARS[:-1]


def random_string(length: int) -> str:
    """Return a random string of lower-case letters and digits."""
    return "".join(random.choice(_DRAWN) for _ in range(length))


class MiaopaiExtractor:
    """Extracts a miaopai video through the JSONP info API."""

    def extract(self, url: str, options: ExtractOptions | None = None) -> list[Data]:
        ids = siteutil.match_one_of(url, r"/media/([^\./]+)", r"/show(?:/channel)?/([^\./]+)")
        if not ids or len(ids) < 2:
            raise URLParseError()
        media_id = ids[1]

        callback = random_string(10)
        text = fetch.get(INFO_URL.format(id=media_id, cb=callback), url, None)
        found = siteutil.match_one_of(text, callback + r"\((.*)\);$")
        if not found or len(found) < 2:
            raise ValueError("获取视频信息失败。")

        payload = (json.loads(found[1]) or {}).get("data") or {}
        meta = payload.get("meta_data") or []
        if not meta:
            raise URLParseError()
        video_url = (meta[0].get("play_urls") or {}).get("m") or ""
        size = fetch.content_size(video_url, url)
        streams = {
            "default": Stream(parts=[Part(url=video_url, size=size, ext="mp4")], size=size)
        }
        return [
            Data(
                site=SITE,
                title=payload.get("description") or "",
                type=DataType.VIDEO,
                streams=streams,
                url=url,
            )
        ]