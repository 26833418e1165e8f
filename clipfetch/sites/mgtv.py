"""Extractor for mgtv.com videos."""

from __future__ import annotations

import base64
import json
import time

from clipfetch import fetch, siteutil
from clipfetch.media import Data, DataType, ExtractOptions, Part, Stream, URLParseError

SITE = "芒果TV mgtv.com"
VIDEO_URL = "https://pcweb.api.mgtv.com/player/video?video_id={vid}&tk2={tk2}"
SOURCE_URL = "https://pcweb.api.mgtv.com/player/getSource?video_id={vid}&tk2={tk2}&pm2={pm2}"
CLIENT_INFO = "did=f11dee65-4e0d-4d25-bfce-719ad9dc991d|pno=1030|ver=5.5.1|"
HEADERS = {"Cookie": "PM_CHKID=1"}
_SIZE_PATTERN = r"#EXT-MGTV-File-SIZE:(\d+)"


def encode_tk2(text: str) -> str:
    """Return the tk2 token: the base64 of ``text``, reversed."""
    encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
    return siteutil.reverse(encoded)


def _m3u8_parts(url: str) -> list[Part]:
    segments = siteutil.m3u8_urls(url)
    playlist = fetch.get(url, url, None)
    sizes = siteutil.match_all(playlist, _SIZE_PATTERN)
    if len(sizes) < len(segments):
        raise URLParseError("segment sizes are missing from the playlist")
    return [
        Part(url=segment, size=int(size[1]), ext="ts")
        for segment, size in zip(segments, sizes)
    ]


class MgtvExtractor:
    """Extracts the qualities of an mgtv video."""

    def extract(self, url: str, options: ExtractOptions | None = None) -> list[Data]:
        html = fetch.get(url, url, None)
        vid = siteutil.match_one_of(
            url,
            r"https?://www.mgtv.com/(?:b|l)/\d+/(\d+).html",
            r"https?://www.mgtv.com/hz/bdpz/\d+/(\d+).html",
        )
        if vid is None:
            vid = siteutil.match_one_of(html, r"vid: (\d+),")
        if not vid or len(vid) < 2:
            raise URLParseError()
        video_id = vid[1]

        clit = f"clit={int(time.time()) // 1000}"
        pm2_payload = json.loads(
            fetch.get(
                VIDEO_URL.format(vid=video_id, tk2=encode_tk2(CLIENT_INFO + clit)),
                url,
                HEADERS,
            )
        ) or {}
        pm2_data = pm2_payload.get("data") or {}
        pm2 = (pm2_data.get("atc") or {}).get("pm2") or ""
        info = pm2_data.get("info") or {}

        source = json.loads(
            fetch.get(
                SOURCE_URL.format(vid=video_id, tk2=encode_tk2(clit), pm2=pm2),
                url,
                HEADERS,
            )
        ) or {}
        source_data = source.get("data") or {}

        title = f"{info.get('title') or ''} {info.get('desc') or ''}".strip()
        domains = source_data.get("stream_domain") or []
        streams: dict[str, Stream] = {}
        for entry in source_data.get("stream") or []:
            path = entry.get("url") or ""
            if not path:
                continue
            if not domains:
                raise URLParseError()
            address = json.loads(fetch.get_bytes(domains[0] + path, url, HEADERS)) or {}
            parts = _m3u8_parts(address.get("info") or "")
            streams[entry.get("def") or ""] = Stream(
                parts=parts,
                size=sum(part.size for part in parts),
                quality=entry.get("name") or "",
            )

        return [Data(site=SITE, title=title, type=DataType.VIDEO, streams=streams, url=url)]