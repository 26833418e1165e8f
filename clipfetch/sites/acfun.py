"""Extractor for AcFun bangumi episodes."""

from __future__ import annotations

import json
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import requests

from clipfetch import fetch, siteutil
from clipfetch.media import (
    Data,
    DataType,
    ExtractOptions,
    Part,
    Stream,
    URLParseError,
    empty_data,
)

BANGUMI_DATA_PATTERN = re.compile(r"window.pageInfo = window.bangumiData = (.*);")
BANGUMI_LIST_PATTERN = re.compile(r"window.bangumiList = (.*);")
BANGUMI_HTML_URL = "https://www.acfun.cn/bangumi/aa{bangumi_id}_36188_{item_id}"
REFERER = "https://www.acfun.cn"
SITE = "AcFun acfun.cn"

_FETCH_ERRORS = (requests.RequestException, OSError, ValueError)


@dataclass
class Episode:
    """One episode of a bangumi as the page describes it."""

    item_id: int = 0
    episode_name: str = ""
    bangumi_id: int = 0
    video_id: int = 0

    @classmethod
    def from_json(cls, obj: dict) -> Episode:
        return cls(
            item_id=int(obj.get("itemId") or 0),
            episode_name=obj.get("episodeName") or "",
            bangumi_id=int(obj.get("bangumiId") or 0),
            video_id=int(obj.get("videoId") or 0),
        )


@dataclass
class Representation:
    """One quality of an episode, served as an m3u8 playlist."""

    url: str = ""
    back_url: str = ""
    quality_type: str = ""
    quality_label: str = ""

    @classmethod
    def from_json(cls, obj: dict) -> Representation:
        return cls(
            url=obj.get("url") or "",
            back_url=obj.get("backUrl") or "",
            quality_type=obj.get("qualityType") or "",
            quality_label=obj.get("qualityLabel") or "",
        )


def _json_after(pattern: re.Pattern[str], html: str):
    found = pattern.search(html)
    if not found:
        raise URLParseError()
    return json.loads(found.group(1))


def parse_bangumi_data(html: str) -> tuple[Episode, list[Representation]]:
    """Read the current episode and its qualities from an episode page."""
    data = _json_after(BANGUMI_DATA_PATTERN, html) or {}
    video_info = data.get("currentVideoInfo") or {}
    play = json.loads(video_info.get("ksPlayJson") or "") or {}
    adaptation = play.get("adaptationSet") or []
    representations = (adaptation[0] or {}).get("representation") or [] if adaptation else []
    return Episode.from_json(data), [Representation.from_json(r) for r in representations]


def parse_episodes(html: str) -> list[Episode]:
    """Read the list of all episodes from an episode page."""
    data = _json_after(BANGUMI_LIST_PATTERN, html) or {}
    return [Episode.from_json(item or {}) for item in data.get("items") or []]


def episode_url(episode: Episode) -> str:
    """Return the page URL of an episode."""
    return BANGUMI_HTML_URL.format(bangumi_id=episode.bangumi_id, item_id=episode.item_id)


def _segments(representation: Representation) -> list[str]:
    try:
        return siteutil.m3u8_urls(representation.url)
    except _FETCH_ERRORS:
        return siteutil.m3u8_urls(representation.back_url)


def _extract_bangumi(url: str) -> Data:
    try:
        html = fetch.get(url, REFERER, None)
        _, representations = parse_bangumi_data(html)
        streams: dict[str, Stream] = {}
        for representation in representations:
            # Segment sizes are not listed and probing each one takes too long.
            parts = [Part(url=segment, ext="ts") for segment in _segments(representation)]
            streams[representation.quality_label] = Stream(
                id=representation.quality_type,
                parts=parts,
                quality=representation.quality_type,
                need_mux=False,
            )
    except _FETCH_ERRORS as exc:
        return empty_data(url, exc)
    return Data(
        site=SITE,
        title=siteutil.page_title(html),
        type=DataType.VIDEO,
        streams=streams,
        url=url,
    )


class AcfunExtractor:
    """Extracts AcFun bangumi episodes, singly or as a playlist."""

    def extract(self, url: str, options: ExtractOptions | None = None) -> list[Data]:
        options = options or ExtractOptions()
        html = fetch.get(url, REFERER, None)
        if options.playlist:
            episodes = parse_episodes(html)
            positions = siteutil.need_download_list(
                options.items, options.item_start, options.item_end, len(episodes)
            )
            chosen = [episodes[position - 1] for position in positions]
        else:
            episode, _ = parse_bangumi_data(html)
            chosen = [episode]
        with ThreadPoolExecutor(max_workers=max(options.thread_number, 1)) as pool:
            return list(pool.map(_extract_bangumi, map(episode_url, chosen)))