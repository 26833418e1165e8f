"""Extractor for douyin.com videos and image posts."""

from __future__ import annotations

import json

import requests

from clipfetch import fetch, siteutil
from clipfetch.media import Data, DataType, ExtractOptions, Part, Stream, URLParseError

SITE = "抖音 douyin.com"
ITEM_INFO_URL = "https://www.iesdouyin.com/web/api/v2/aweme/iteminfo/?item_ids="
PLAY_URL = "https://aweme.snssdk.com/aweme/v1/play/?video_id={uri}&ratio=720p&line=0"
_IMAGE_POST = 2


def _follow_short_link(url: str) -> str:
    with requests.get(url, allow_redirects=False, timeout=fetch.TIMEOUT) as response:
        return response.headers.get("Location", "")


class DouyinExtractor:
    """Extracts a douyin video, or the images of an image post."""

    def extract(self, url: str, options: ExtractOptions | None = None) -> list[Data]:
        if "v.douyin.com" in url:
            url = _follow_short_link(url)

        ids = siteutil.match_one_of(url, r"/video/(\d+)")
        if not ids:
            raise ValueError("unable to get video ID")
        if len(ids) < 2:
            raise URLParseError()
        item_id = ids[-1]

        payload = json.loads(fetch.get(ITEM_INFO_URL + item_id, url, None))
        items = payload.get("item_list") or []
        if not items:
            raise URLParseError()
        item = items[0]

        parts: list[Part] = []
        if item.get("aweme_type") == _IMAGE_POST:
            media_type = DataType.IMAGE
            for image in item.get("images") or []:
                image_url = image["url_list"][-1]
                size = fetch.content_size(image_url, url)
                _, ext = siteutil.get_name_and_ext(image_url)
                parts.append(Part(url=image_url, size=size, ext=ext))
            total = sum(part.size for part in parts)
        else:
            media_type = DataType.VIDEO
            uri = ((item.get("video") or {}).get("play_addr") or {}).get("uri") or ""
            video_url = PLAY_URL.format(uri=uri)
            total = fetch.content_size(video_url, url)
            parts.append(Part(url=video_url, size=total, ext="mp4"))

        streams = {"default": Stream(parts=parts, size=total)}
        return [
            Data(
                site=SITE,
                title=item.get("desc") or "",
                type=media_type,
                streams=streams,
                url=url,
            )
        ]