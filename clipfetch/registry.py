"""Choosing the extractor for a URL and running it."""

from __future__ import annotations

import re
from urllib.parse import urlparse

from clipfetch import siteutil
from clipfetch.media import Data, ExtractOptions
from clipfetch.sites.acfun import AcfunExtractor
from clipfetch.sites.bcy import BcyExtractor
from clipfetch.sites.douyin import DouyinExtractor
from clipfetch.sites.douyu import DouyuExtractor
from clipfetch.sites.eporner import EpornerExtractor
from clipfetch.sites.facebook import FacebookExtractor
from clipfetch.sites.geekbang import GeekbangExtractor
from clipfetch.sites.haokan import HaokanExtractor
from clipfetch.sites.hupu import HupuExtractor
from clipfetch.sites.huya import HuyaExtractor
from clipfetch.sites.instagram import InstagramExtractor
from clipfetch.sites.iqiyi import IqiyiExtractor, SiteType
from clipfetch.sites.mgtv import MgtvExtractor
from clipfetch.sites.miaopai import MiaopaiExtractor
from clipfetch.sites.netease import NeteaseExtractor
from clipfetch.sites.pixivision import PixivisionExtractor

_BILIBILI_SHORT_LINK = re.compile(r"^(av|BV|ep)\w+")
_BILIBILI_URLS = {
    "av": "https://www.bilibili.com/video/",
    "BV": "https://www.bilibili.com/video/",
    "ep": "https://www.bilibili.com/bangumi/play/",
}

_douyin = DouyinExtractor()

EXTRACTORS = {
    "douyin": _douyin,
    "iesdouyin": _douyin,
    "bcy": BcyExtractor(),
    "pixivision": PixivisionExtractor(),
    "iqiyi": IqiyiExtractor(SiteType.IQIYI),
    "iq": IqiyiExtractor(SiteType.IQ),
    "mgtv": MgtvExtractor(),
    "facebook": FacebookExtractor(),
    "douyu": DouyuExtractor(),
    "miaopai": MiaopaiExtractor(),
    "163": NeteaseExtractor(),
    "instagram": InstagramExtractor(),
    "geekbang": GeekbangExtractor(),
    "eporner": EpornerExtractor(),
    "haokan": HaokanExtractor(),
    "acfun": AcfunExtractor(),
    "hupu": HupuExtractor(),
    "huya": HuyaExtractor(),
}


def resolve(url: str) -> tuple[str, str]:
    """Return the site key of a URL and the URL to extract from.

    Bilibili short links such as ``av170001`` are expanded to full URLs.
    """
    url = url.strip()
    short = _BILIBILI_SHORT_LINK.match(url)
    if short:
        return "bilibili", _BILIBILI_URLS[short.group(1)] + url

    if not url or any(ch.isspace() for ch in url):
        raise ValueError(f"invalid URI for request: {url!r}")
    parsed = urlparse(url)
    if not parsed.scheme and not url.startswith("/"):
        raise ValueError(f"invalid URI for request: {url!r}")
    host = parsed.netloc.rpartition("@")[2]
    if host == "haokan.baidu.com":
        return "haokan", url
    return siteutil.domain(host), url


def extract(url: str, options: ExtractOptions | None = None) -> list[Data]:
    """Extract the media behind a URL with the extractor of its site."""
    key, url = resolve(url)
    extractor = EXTRACTORS.get(key)
    if extractor is None:
        raise ValueError(f"unsupported site: {key or url}")
    videos = extractor.extract(url, options or ExtractOptions())
    for video in videos:
        video.fill_up_streams()
    return videos