"""Saving extracted media to disk, with resuming, chunking and multi-threading."""

from __future__ import annotations

import os
import re
import shutil
import threading
import time
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import BinaryIO

import requests
from tqdm import tqdm

from clipfetch import fetch, siteutil
from clipfetch.media import (
    Data,
    DataType,
    Part,
    Stream,
    print_info,
    print_stream_info,
    sorted_streams,
)
from clipfetch.parts import META_SIZE, FilePartMeta, aria2_payload, part_path

MIB = 1024 * 1024
_COPY_CHUNK = 32 * 1024
_TRANSFER_ERRORS = (requests.RequestException, OSError)


class _CopyError(OSError):
    """A transfer that broke off after ``written`` bytes had been saved."""

    def __init__(self, message: str, written: int) -> None:
        super().__init__(message)
        self.written = written


@dataclass
class DownloadOptions:
    """Options that steer downloading."""

    info_only: bool = False
    silent: bool = False
    stream: str = ""
    refer: str = ""
    output_path: str = ""
    output_name: str = ""
    file_name_length: int = 0
    caption: bool = False
    multi_thread: bool = False
    thread_number: int = 10
    retry_times: int = 10
    chunk_size_mb: int = 0
    use_aria2_rpc: bool = False
    aria2_token: str = ""
    aria2_method: str = "http"
    aria2_addr: str = "localhost:6800"


def compute_end(start: int, chunk_size: int, maximum: int) -> int:
    """Return the last byte of a chunk beginning at ``start``, capped at ``maximum``."""
    return min(start + chunk_size - 1, maximum)


def _byte_range(start: int, end: int | None) -> str:
    return f"bytes={start}-" if end is None else f"bytes={start}-{end}"


def _file_size(path: str) -> tuple[int, bool]:
    try:
        return os.stat(path).st_size, True
    except FileNotFoundError:
        return 0, False


def parse_part_file(path: str, file_size: int) -> FilePartMeta:
    """Read the header of a part file and work out how far it got."""
    with open(path, "rb") as file:
        header = file.read(META_SIZE)
    meta = FilePartMeta.from_bytes(header)
    meta.cur = meta.start + file_size - META_SIZE
    return meta


def read_part_files(file_path: str, file_name: str, ext: str) -> list[FilePartMeta]:
    """Find the part files of a download next to ``file_path``, ordered by index."""
    directory = os.path.dirname(file_path) or "."
    pattern = re.compile(f"{re.escape(file_name)}.{ext}.part.+")
    metas = []
    with os.scandir(directory) as entries:
        for entry in entries:
            if pattern.search(entry.name):
                metas.append(parse_part_file(entry.path, entry.stat().st_size))
    metas.sort(key=lambda meta: meta.index)
    return metas


def merge_parts(file_path: str, parts: Iterable[FilePartMeta]) -> None:
    """Join part files, without their headers, into ``file_path`` and delete them."""
    temp_path = file_path + ".download"
    opened: list[str] = []
    try:
        with open(temp_path, "ab") as target:
            for part in parts:
                source_path = part_path(file_path, part)
                with open(source_path, "rb") as source:
                    opened.append(source_path)
                    source.seek(META_SIZE)
                    shutil.copyfileobj(source, target)
    finally:
        for path in opened:
            os.remove(path)
    os.replace(temp_path, file_path)


def merge_files(paths: Sequence[str], target: str) -> None:
    """Concatenate files into ``target`` and delete the sources."""
    with open(target, "wb") as merged:
        for path in paths:
            with open(path, "rb") as source:
                shutil.copyfileobj(source, merged)
    for path in paths:
        os.remove(path)


@dataclass
class Downloader:
    """Downloads the streams that extractors describe."""

    options: DownloadOptions = field(default_factory=DownloadOptions)

    def __post_init__(self) -> None:
        self._lock = threading.Lock()
        self._bar: tqdm | None = None

    def _advance(self, amount: int) -> None:
        if self._bar is not None and amount:
            with self._lock:
                self._bar.update(amount)

    def _path(self, name: str, ext: str, escape: bool = False) -> str:
        opts = self.options
        return siteutil.file_path(name, ext, opts.file_name_length, opts.output_path, escape)

    def _caption(self, url: str, name: str, caption_ext: str, transform) -> None:
        body = fetch.get_bytes(url, self.options.refer or url, None)
        if transform is not None:
            body = transform(body)
        with open(self._path(name, caption_ext, escape=True), "wb") as file:
            file.write(body)

    def _write_file(self, url: str, file: BinaryIO, headers: dict[str, str]) -> int:
        response = fetch.request("GET", url, None, headers)
        written = 0
        with response:
            try:
                for chunk in response.iter_content(_COPY_CHUNK):
                    file.write(chunk)
                    written += len(chunk)
                    self._advance(len(chunk))
            except _TRANSFER_ERRORS as exc:
                raise _CopyError(f"file copy error: {exc}", written) from exc
        return written

    def _transfer(
        self,
        url: str,
        file: BinaryIO,
        headers: dict[str, str],
        offset: int,
        end: int | None,
        pause: bool,
    ) -> None:
        """Fetch into ``file``, resuming from where a failed attempt stopped."""
        attempt = 0
        while True:
            try:
                self._write_file(url, file, headers)
                return
            except _TRANSFER_ERRORS as exc:
                attempt += 1
                if attempt >= self.options.retry_times:
                    raise
                offset += getattr(exc, "written", 0)
                headers["Range"] = _byte_range(offset, end)
                if pause:
                    time.sleep(1)

    def _save(self, part: Part, refer: str, name: str) -> None:
        path = self._path(name, part.ext)
        size, exists = _file_size(path)
        if exists and size == part.size:
            self._advance(size)
            return
        temp_path = path + ".download"
        temp_size, _ = _file_size(temp_path)
        headers = {"Referer": refer}
        if temp_size > 0:
            headers["Range"] = _byte_range(temp_size, None)
            mode = "ab"
            self._advance(temp_size)
        else:
            mode = "wb"

        with open(temp_path, mode) as file:
            if self.options.chunk_size_mb > 0:
                chunk_size = self.options.chunk_size_mb * MIB
                start = temp_size
                remaining = part.size - temp_size
                chunks = max(0, -(-remaining // chunk_size))
                for _ in range(chunks):
                    end = start + chunk_size - 1
                    headers["Range"] = _byte_range(start, end)
                    self._transfer(part.url, file, headers, start, end, pause=True)
                    start = end + 1
            else:
                self._transfer(part.url, file, headers, temp_size, None, pause=True)
        os.replace(temp_path, path)

    def _plan_pieces(self, size: int) -> list[FilePartMeta]:
        threads = max(self.options.thread_number, 1)
        piece_size = max(size // threads, 1)
        pieces = []
        start = 0
        index = 0
        while start < size:
            end = start + piece_size - 1
            if end >= size or index + 1 == threads:
                end = size - 1
            pieces.append(FilePartMeta(float(index), start, end, start))
            start = end + 1
            index += 1
        return pieces

    def _download_piece(self, url: str, refer: str, file_path: str, piece: FilePartMeta) -> None:
        if self.options.chunk_size_mb <= 0:
            chunk_size = piece.end - piece.start + 1
        else:
            chunk_size = self.options.chunk_size_mb * MIB
        with open(part_path(file_path, piece), "ab") as file:
            if piece.cur == piece.start:
                file.write(piece.to_bytes())
            while piece.cur <= piece.end:
                end = compute_end(piece.cur, chunk_size, piece.end)
                headers = {"Referer": refer, "Range": _byte_range(piece.cur, end)}
                self._transfer(url, file, headers, piece.cur, end, pause=False)
                piece.cur = end + 1

    def _multi_thread_save(self, part: Part, refer: str, name: str) -> None:
        path = self._path(name, part.ext)
        size, exists = _file_size(path)
        if exists and size == part.size:
            self._advance(size)
            return
        temp_path = path + ".download"
        temp_size, temp_exists = _file_size(temp_path)
        if temp_exists:
            if temp_size == part.size:
                self._advance(part.size)
                os.replace(temp_path, path)
                return
            os.remove(temp_path)

        found = read_part_files(path, name, part.ext)
        unfinished: list[FilePartMeta] = []
        saved = 0
        if found:
            pieces: list[FilePartMeta] = []
            last_end = -1
            for piece in found:
                if piece.start - last_end != 1:
                    gap = FilePartMeta(piece.index - 0.000001, last_end + 1, piece.start - 1, last_end + 1)
                    pieces.append(gap)
                    unfinished.append(gap)
                if piece.cur <= piece.end + 1:
                    saved += piece.cur - piece.start
                    if piece.cur < piece.end + 1:
                        unfinished.append(piece)
                else:
                    # More was saved than the piece holds: start it again.
                    os.remove(part_path(path, piece))
                    piece.cur = piece.start
                    unfinished.append(piece)
                pieces.append(piece)
                last_end = piece.end
            if last_end != part.size - 1:
                tail = FilePartMeta(pieces[-1].index + 1, last_end + 1, part.size - 1, last_end + 1)
                pieces.append(tail)
                unfinished.append(tail)
        else:
            pieces = self._plan_pieces(part.size)
            unfinished = list(pieces)

        if saved > 0:
            self._advance(saved)
            if saved == part.size:
                merge_parts(path, pieces)
                return

        with ThreadPoolExecutor(max_workers=max(self.options.thread_number, 1)) as pool:
            futures = [
                pool.submit(self._download_piece, part.url, refer, path, piece)
                for piece in unfinished
            ]
        for future in futures:
            error = future.exception()
            if error is not None:
                raise error
        merge_parts(path, pieces)

    def _aria2(self, title: str, stream: Stream) -> None:
        opts = self.options
        endpoint = f"{opts.aria2_method}://{opts.aria2_addr}/jsonrpc"
        ext = stream.parts[0].ext if stream.parts else ""
        for index, part in enumerate(stream.parts):
            payload = aria2_payload(opts.aria2_token, part.url, f"{title}[{index}].{ext}", opts.refer)
            response = requests.post(
                endpoint,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=30,
            )
            response.close()

    def _save_collecting(self, part: Part, refer: str, name: str, errors: list[Exception]) -> None:
        try:
            self._save(part, refer, name)
        except Exception as exc:  # gathered and re-raised by the caller
            with self._lock:
                errors.append(exc)

    def download(self, data: Data) -> None:
        """Download the chosen stream of ``data`` (the largest by default)."""
        opts = self.options
        if not data.streams:
            raise ValueError(f"no streams in title {data.title}")

        ordered = sorted_streams(data.streams)
        if opts.info_only:
            print_info(data, ordered)
            return

        title = siteutil.file_name(opts.output_name or data.title, "", opts.file_name_length)
        stream_name = opts.stream or ordered[0].id
        stream = data.streams.get(stream_name)
        if stream is None:
            raise ValueError(f"no stream named {stream_name}")

        if not opts.silent:
            print_stream_info(data, stream)

        if opts.caption and data.captions:
            print("\nDownloading captions...")
            for key, caption in data.captions.items():
                if caption is None:
                    continue
                print(f"Downloading {key} ...")
                try:
                    self._caption(caption.url, title, caption.ext, caption.transform)
                except (*_TRANSFER_ERRORS, ValueError):
                    continue

        if opts.use_aria2_rpc:
            self._aria2(title, stream)
            return

        merged_path = self._path(title, stream.ext)
        _, merged_exists = _file_size(merged_path)
        if merged_exists:
            print(f"{merged_path}: file already exists, skipping")
            return

        self._bar = tqdm(
            total=stream.size,
            unit="B",
            unit_scale=True,
            unit_divisor=1024,
            disable=opts.silent,
        )
        try:
            if len(stream.parts) == 1:
                if opts.multi_thread:
                    self._multi_thread_save(stream.parts[0], data.url, title)
                else:
                    self._save(stream.parts[0], data.url, title)
                return

            errors: list[Exception] = []
            paths: list[str] = []
            with ThreadPoolExecutor(max_workers=max(opts.thread_number, 1)) as pool:
                for index, part in enumerate(stream.parts):
                    if errors:
                        break
                    name = f"{title}[{index}]"
                    paths.append(self._path(name, part.ext))
                    pool.submit(self._save_collecting, part, data.url, name, errors)
            if errors:
                raise errors[0]
        finally:
            self._bar.close()
            self._bar = None

        if data.type != DataType.VIDEO:
            return
        if not opts.silent:
            print(f"Merging video parts into {merged_path}")
        merge_files(paths, merged_path)