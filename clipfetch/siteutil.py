"""Text, URL and file-name helpers used by the site extractors."""

from __future__ import annotations

import hashlib
import ipaddress
import os
import re
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from clipfetch import fetch

_COMPOUND_SUFFIXES = {"com.cn", "com.hk", "net.cn", "org.cn", "gov.cn", "edu.cn", "co.uk", "co.jp"}


def match_one_of(text: str, *patterns: str) -> list[str] | None:
    """Return the full match and groups of the first pattern that matches."""
    for pattern in patterns:
        found = re.search(pattern, text)
        if found:
            return [found.group(0), *(g if g is not None else "" for g in found.groups())]
    return None


def match_all(text: str, pattern: str) -> list[list[str]]:
    """Return the full match and groups of every match of a pattern."""
    return [
        [m.group(0), *(g if g is not None else "" for g in m.groups())]
        for m in re.finditer(pattern, text)
    ]


def domain(host: str) -> str:
    """Return the registrable name of a host, e.g. 'bilibili' for www.bilibili.com."""
    host = host.strip().lower()
    if host.startswith("["):
        return ""
    host = host.rsplit(":", 1)[0] if host.count(":") == 1 else host
    try:
        ipaddress.ip_address(host)
        return ""
    except ValueError:
        pass
    labels = [label for label in host.split(".") if label]
    if len(labels) < 2:
        return ""
    if len(labels) >= 3 and ".".join(labels[-2:]) in _COMPOUND_SUFFIXES:
        return labels[-3]
    return labels[-2]


def _content_type(url: str) -> str:
    with fetch.request("GET", url, None, {"Referer": url}) as response:
        return response.headers.get("Content-Type", "")


def get_name_and_ext(url: str) -> tuple[str, str]:
    """Split the file name of a URL into name and extension.

    URLs without an extension get one from the Content-Type the server sends.
    """
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"invalid URL: {url!r}")
    pieces = parsed.path.rsplit("/", 1)[-1].split(".")
    if len(pieces) > 1:
        return pieces[0], pieces[1]
    mime = _content_type(url).split(";", 1)[0].strip()
    if "/" not in mime:
        raise ValueError(f"no extension for {url!r}")
    return pieces[0], mime.split("/", 1)[1]


def m3u8_urls(url: str) -> list[str]:
    """Return the segment URLs listed in an m3u8 playlist."""
    playlist = fetch.get(url, None, None)
    urls = []
    for line in playlist.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        urls.append(line if line.startswith("http") else urljoin(url, line))
    return urls


def need_download_list(items: str, start: int, end: int, length: int) -> list[int]:
    """Return the 1-based playlist positions to download.

    ``items`` is a comma separated list of positions and ranges such as
    ``"1,3-5"``; when empty, ``start`` to ``end`` is used, ``end`` 0 meaning the last.
    """
    if items:
        chosen: set[int] = set()
        for piece in items.split(","):
            piece = piece.strip()
            if not piece:
                continue
            if "-" in piece:
                low_text, high_text = piece.split("-", 1)
                low, high = sorted((int(low_text), int(high_text)))
                chosen.update(range(low, high + 1))
            else:
                chosen.add(int(piece))
        return sorted(chosen)
    start = max(start, 1)
    if end == 0 or end > length:
        end = length
    if end < start:
        start, end = end, start
    return list(range(start, end + 1))


def md5_hex(text: str) -> str:
    """Return the hexadecimal MD5 digest of a string."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def reverse(text: str) -> str:
    """Return the characters of a string in reverse order."""
    return text[::-1]


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser", multi_valued_attributes=None)


def page_title(html: str) -> str:
    """Return the text of the page's <title>, or an empty string."""
    title = _soup(html).title
    return title.get_text().strip() if title else ""


def find_images(html: str, img_class: str) -> tuple[str, list[str]]:
    """Return the page title and the sources of <img> tags with exactly this class."""
    soup = _soup(html)
    title = soup.title.get_text().strip() if soup.title else ""
    urls = [img["src"] for img in soup.find_all("img", attrs={"class": img_class}) if img.get("src")]
    return title, urls


def _limit_length(text: str, length: int) -> str:
    ellipsis = "..."
    if length and len(text) > length:
        return text[: length - len(ellipsis)] + ellipsis
    return text


def file_name(name: str, ext: str, length: int) -> str:
    """Make a safe file name, truncated to ``length`` characters (0: no limit)."""
    for old, new in (("\n", " "), ("/", " "), ("|", "-"), (": ", "："), (":", "："), ("'", "’")):
        name = name.replace(old, new)
    if os.name == "nt":
        for old in ('"', "?", "*", "\\", "<", ">"):
            name = name.replace(old, " ")
    limited = _limit_length(name, length)
    return f"{limited}.{ext}" if ext else limited


def file_path(name: str, ext: str, length: int, output_path: str, escape: bool) -> str:
    """Return the path to save a file under; the output directory must exist."""
    if output_path and not os.path.exists(output_path):
        raise FileNotFoundError(output_path)
    filename = file_name(name, ext, length) if escape else f"{name}.{ext}"
    return os.path.join(output_path, filename)