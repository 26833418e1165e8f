"""Part-file metadata and aria2 request bodies."""

from __future__ import annotations

import struct
from dataclasses import dataclass

_META = struct.Struct("<fqqq")
META_SIZE = _META.size


def _to_float32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


@dataclass
class FilePartMeta:
    """Byte range of one piece of a multi-threaded download.

    The fixed-size header written at the start of every part file.
    """

    index: float
    start: int
    end: int
    cur: int

    def __post_init__(self) -> None:
        self.index = _to_float32(self.index)

    def to_bytes(self) -> bytes:
        """Encode as the little-endian header of a part file."""
        return _META.pack(self.index, self.start, self.end, self.cur)

    @classmethod
    def from_bytes(cls, data: bytes) -> FilePartMeta:
        """Decode the header at the start of ``data``."""
        if len(data) < META_SIZE:
            raise ValueError(
                "the file has been broken, please delete all part files and re-download"
            )
        return cls(*_META.unpack_from(data))


def part_path(file_path: str, part: FilePartMeta) -> str:
    """Return the path of the part file that holds ``part``."""
    return f"{file_path}.part{part.index:f}"


def aria2_payload(token: str, url: str, out: str, referer: str) -> dict:
    """Build the JSON-RPC body that adds one URL to an aria2 server."""
    return {
        "jsonrpc": "2.0",
        "id": "clipfetch",
        "method": "aria2.addUri",
        "params": [
            "token:" + token,
            [url],
            {"out": out, "header": ["Referer: " + referer]},
        ],
    }