"""Extractor for iqiyi.com and iq.com videos."""

from __future__ import annotations

import json
import random
import string
import time
from enum import Enum

from bs4 import BeautifulSoup

from clipfetch import fetch, siteutil
from clipfetch.media import Data, DataType, ExtractOptions, Part, Stream, URLParseError

IQ_REFERER = "https://www.iq.com"
IQIYI_REFERER = "https://www.iqiyi.com"
VPS_HOST = "http://cache.video.qiyi.com"
_MAC_CHARS = "abcdefghijklnmopqrstuvwxyz" + string.digits
_VF_SUFFIX = "".join(
    chr(value + 88 if value >= 10 else value + 49)
    for j in range(8)
    for k in range(4)
    for value in [13 * (66 * k + 27 * j) % 35]
)


class SiteType(Enum):
    """Which of the two iqiyi sites a URL belongs to."""

    IQ = 0
    IQIYI = 1


def get_mac_id() -> str:
    """Return a random 32-character client id."""
    return "".join(random.choice(_MAC_CHARS) for _ in range(32))


def get_vf(params: str) -> str:
    """Return the signature the vps API expects for a query string."""
    return siteutil.md5_hex(params + _VF_SUFFIX)


def _get_vps(tvid: str, vid: str, refer: str) -> dict:
    stamp = int(time.time()) * 1000
    params = (
        f"/vps?tvid={tvid}&vid={vid}&v=0&qypid={tvid}_12&src=01012001010000000000"
        f"&t={stamp}&k_tag=1&k_uid={get_mac_id()}&rs=1"
    )
    api_url = f"{VPS_HOST}{params}&vf={get_vf(params)}"
    return json.loads(fetch.get(api_url, refer, None)) or {}


def _first_text(soup: BeautifulSoup, selector: str) -> str:
    found = soup.select_one(selector)
    return found.get_text().strip() if found else ""


class IqiyiExtractor:
    """Extracts the qualities of an iqiyi or iq.com video."""

    def __init__(self, site_type: SiteType = SiteType.IQIYI) -> None:
        self.site_type = site_type

    def _title(self, html: str) -> str:
        soup = BeautifulSoup(html, "html.parser")
        if self.site_type is SiteType.IQIYI:
            title = _first_text(soup, "h1>a")
            sub = ""
            for tag in ("span", "em"):
                if sub:
                    break
                sub = _first_text(soup, "h1>" + tag)
            title += sub
        else:
            title = _first_text(soup, "span#pageMetaTitle")
            sub = siteutil.match_one_of(html, r'"subTitle":"([^"]+)","isoDuration":')
            if sub and len(sub) > 1:
                title += f" {sub[1]}"
        if not title:
            title = "".join(tag.get_text() for tag in soup.find_all("title"))
        return title

    def extract(self, url: str, options: ExtractOptions | None = None) -> list[Data]:
        refer = IQIYI_REFERER
        headers: dict[str, str] = {}
        if self.site_type is SiteType.IQ:
            headers = {"Accept-Language": "zh-TW"}
            refer = IQ_REFERER
        html = fetch.get(url, refer, headers)

        tvid = siteutil.match_one_of(url, r"#curid=(.+)_", r"tvid=([^&]+)")
        if tvid is None:
            tvid = siteutil.match_one_of(
                html,
                r'data-player-tvid="([^"]+)"',
                r"param\['tvid'\]\s*=\s*\"(.+?)\"",
                r'"tvid":"(\d+)"',
                r'"tvId":(\d+)',
            )
        if not tvid or len(tvid) < 2:
            raise URLParseError()

        vid = siteutil.match_one_of(url, r"#curid=.+_(.*)$", r"vid=([^&]+)")
        if vid is None:
            vid = siteutil.match_one_of(
                html,
                r'data-player-videoid="([^"]+)"',
                r"param\['vid'\]\s*=\s*\"(.+?)\"",
                r'"vid":"(\w+)"',
            )
        if not vid or len(vid) < 2:
            raise URLParseError()

        title = self._title(html)
        vps = _get_vps(tvid[1], vid[1], refer)
        if vps.get("code") != "A00000":
            raise ValueError(f"can't play this video: {vps.get('msg') or ''}")

        vp = (vps.get("data") or {}).get("vp") or {}
        tracks = vp.get("tkl") or []
        if not tracks:
            raise URLParseError()
        url_prefix = vp.get("du") or ""

        streams: dict[str, Stream] = {}
        for video in tracks[0].get("vs") or []:
            parts = []
            for piece in video.get("fs") or []:
                location = json.loads(fetch.get(url_prefix + (piece.get("l") or ""), refer, None))
                real_url = (location or {}).get("l") or ""
                _, ext = siteutil.get_name_and_ext(real_url)
                parts.append(Part(url=real_url, size=int(piece.get("b") or 0), ext=ext))
            streams[str(video.get("bid") or 0)] = Stream(
                parts=parts,
                size=int(video.get("vsize") or 0),
                quality=video.get("scrsz") or "",
            )

        site = "爱奇艺 iq.com" if self.site_type is SiteType.IQ else "爱奇艺 iqiyi.com"
        return [Data(site=site, title=title, type=DataType.VIDEO, streams=streams, url=url)]