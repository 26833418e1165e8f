"""Extractor for instagram.com posts, read through the embed page."""

from __future__ import annotations

import json
import posixpath
from urllib.parse import urlparse

from clipfetch import fetch, siteutil
from clipfetch.media import Data, DataType, ExtractOptions, Part, Stream, URLParseError

SITE = "Instagram instagram.com"
EMBED_IMAGE_CLASS = "EmbeddedMediaImage"


def _images_from_page(html: str, url: str) -> dict[str, Stream]:
    _, image_urls = siteutil.find_images(html, EMBED_IMAGE_CLASS)
    parts = [
        Part(url=image_url, size=fetch.content_size(image_url, url), ext="jpg")
        for image_url in image_urls
    ]
    return {"default": Stream(parts=parts, size=sum(part.size for part in parts))}


def _media_from_data(data_text: str, url: str) -> dict[str, Stream]:
    payload = json.loads(data_text) or {}
    media = payload.get("shortcode_media") or {}
    edges = (media.get("edge_sidecar_to_children") or {}).get("edges") or []
    parts = []
    for edge in edges:
        node = edge.get("node") or {}
        if node.get("is_video"):
            media_url, ext = node.get("video_url") or "", "mp4"
        else:
            media_url, ext = node.get("display_url") or "", "jpg"
        parts.append(Part(url=media_url, size=fetch.content_size(media_url, url), ext=ext))
    return {"default": Stream(parts=parts, size=sum(part.size for part in parts))}


class InstagramExtractor:
    """Extracts the images and videos of an instagram post."""

    def extract(self, url: str, options: ExtractOptions | None = None) -> list[Data]:
        # The post page asks for a login; the embed page does not.
        parsed = urlparse(url)
        post_id = parsed.path[parsed.path.rfind("/") + 1 :]
        embed_path = posixpath.normpath(posixpath.join(parsed.path or "/", "embed"))
        embed_url = parsed._replace(path=embed_path).geturl()

        html = fetch.get(embed_url, url, None)
        found = siteutil.match_one_of(html, r"window\.__additionalDataLoaded\('graphql',(.*)\);")
        if not found or len(found) < 2:
            raise URLParseError()
        data_text = found[1]

        if data_text in ("", "null"):
            streams = _images_from_page(html, url)
        else:
            streams = _media_from_data(data_text, url)

        return [
            Data(
                site=SITE,
                title="Instagram " + post_id,
                type=DataType.IMAGE,
                streams=streams,
                url=url,
            )
        ]