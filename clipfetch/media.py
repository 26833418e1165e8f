"""Media descriptions shared by extractors and the downloader."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from termcolor import cprint


class DataType(str, Enum):
    """What kind of media an extraction result holds."""

    VIDEO = "video"
    IMAGE = "image"

    def __str__(self) -> str:
        return self.value


class URLParseError(ValueError):
    """Raised when a page does not hold the data an extractor expects."""

    def __init__(self, message: str = "url parse failed") -> None:
        super().__init__(message)


@dataclass
class Part:
    """One downloadable file of a stream."""

    url: str
    size: int = 0
    ext: str = ""


@dataclass
class Stream:
    """One quality variant of a media item."""

    id: str = ""
    parts: list[Part] = field(default_factory=list)
    size: int = 0
    quality: str = ""
    ext: str = ""
    need_mux: bool = False


@dataclass
class Caption:
    """A subtitle or danmaku file, optionally converted after download."""

    url: str
    ext: str
    transform: Callable[[bytes], bytes] | None = None


@dataclass
class Data:
    """The result of extracting one media item."""

    site: str = ""
    title: str = ""
    type: DataType = DataType.VIDEO
    streams: dict[str, Stream] = field(default_factory=dict)
    captions: dict[str, Caption] = field(default_factory=dict)
    url: str = ""
    error: Exception | None = None

    def fill_up_streams(self) -> None:
        """Fill in stream ids, sizes and extensions left empty by extractors."""
        for key, stream in self.streams.items():
            if not stream.id:
                stream.id = key
            if not stream.size:
                stream.size = sum(part.size for part in stream.parts)
            if not stream.ext and stream.parts:
                stream.ext = stream.parts[0].ext


@dataclass
class ExtractOptions:
    """Options that steer extraction."""

    playlist: bool = False
    items: str = ""
    item_start: int = 1
    item_end: int = 0
    thread_number: int = 10
    cookie: str = ""


def empty_data(url: str, error: Exception) -> Data:
    """Return a result that only records a failure for a URL."""
    return Data(url=url, error=error)


def sorted_streams(streams: Mapping[str, Stream]) -> list[Stream]:
    """Return the streams, largest first."""
    return sorted(streams.values(), key=lambda stream: stream.size, reverse=True)


def _label(text: str) -> None:
    cprint(text, "cyan", end="")


def _print_header(data: Data) -> None:
    print()
    _label(" Site:      ")
    print(data.site)
    _label(" Title:     ")
    print(data.title)
    _label(" Type:      ")
    print(data.type)


def _print_stream(stream: Stream) -> None:
    cprint(f"     [{stream.id}]  -------------------", "blue")
    if stream.quality:
        _label("     Quality:         ")
        print(stream.quality)
    _label("     Size:            ")
    print(f"{stream.size / (1024 * 1024):.2f} MiB ({stream.size} Bytes)")
    _label("     # download with: ")
    print(f"clipfetch -f {stream.id} ...\n")


def print_info(data: Data, streams: Iterable[Stream]) -> None:
    """Print a media item with all of its streams."""
    _print_header(data)
    _label(" Streams:   ")
    print("# All available quality")
    for stream in streams:
        _print_stream(stream)


def print_stream_info(data: Data, stream: Stream) -> None:
    """Print a media item with the stream chosen for download."""
    _print_header(data)
    _label(" Stream:   ")
    print()
    _print_stream(stream)