"""Extractor for course videos on time.geekbang.org."""

from __future__ import annotations

import json
from collections.abc import Mapping

from clipfetch import fetch, siteutil
from clipfetch.media import Data, DataType, ExtractOptions, Part, Stream, URLParseError

SITE = "极客时间 geekbang.org"
ARTICLE_URL = "https://time.geekbang.org/serv/v1/article"
PLAY_AUTH_URL = "https://time.geekbang.org/serv/v3/source_auth/video_play_auth"
PLAY_INFO_URL = "http://ali.mantv.top/play/info?playAuth="


def _call_json(method: str, url: str, body: bytes | None, headers: Mapping[str, str]) -> dict:
    with fetch.request(method, url, body, headers) as response:
        return response.json() or {}


def _raise_on_error(payload: dict) -> None:
    if int(payload.get("code") or 0) < 0:
        raise ValueError(json.dumps(payload.get("error"), ensure_ascii=False))


class GeekbangExtractor:
    """Extracts the qualities of a geekbang course video; needs a bought course."""

    def extract(self, url: str, options: ExtractOptions | None = None) -> list[Data]:
        matches = siteutil.match_one_of(
            url, r"https?://time.geekbang.org/course/detail/(\d+)-(\d+)"
        )
        if not matches or len(matches) < 3:
            raise URLParseError()
        article_id = matches[2]

        headers = {
            "Origin": "https://time.geekbang.org",
            "Content-Type": "application/json",
            "Referer": url,
        }
        article = _call_json(
            "POST", ARTICLE_URL, json.dumps({"id": article_id}).encode(), headers
        )
        _raise_on_error(article)
        info = article.get("data") or {}
        video_id = info.get("video_id") or ""
        if not video_id and not info.get("column_had_sub"):
            raise ValueError("请先购买课程，或使用Cookie登录。")

        auth_body = f'{{"source_type":1,"aid":{article_id},"video_id":"{video_id}"}}'
        auth = _call_json("POST", PLAY_AUTH_URL, auth_body.encode(), headers)
        _raise_on_error(auth)
        play_auth = (auth.get("data") or {}).get("play_auth") or ""

        play_info = _call_json(
            "GET", PLAY_INFO_URL + play_auth, None, {"Accept-Encoding": ""}
        )
        medias = (play_info.get("PlayInfoList") or {}).get("PlayInfo") or []

        streams: dict[str, Stream] = {}
        for media in medias:
            parts = [
                Part(url=segment, size=0, ext="ts")
                for segment in siteutil.m3u8_urls(media.get("PlayURL") or "")
            ]
            streams[media.get("Definition") or ""] = Stream(
                parts=parts, size=int(media.get("Size") or 0)
            )

        return [
            Data(
                site=SITE,
                title=info.get("article_sharetitle") or "",
                type=DataType.VIDEO,
                streams=streams,
                url=url,
            )
        ]