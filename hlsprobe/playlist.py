"""Model and parser for HLS (M3U8) master and variant playlists."""

from __future__ import annotations

import enum
import math
import posixpath
import re
from dataclasses import dataclass, field
from urllib.parse import quote, urlsplit, urlunsplit

import requests

_UINT64_LIMIT = 1 << 64
_UINT_PATTERN = re.compile(r"[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|[+-]?(?:inf|infinity|nan)",
    re.IGNORECASE,
)
_PATH_SAFE = "/:@!$&'()*+,;=%~"


class PlaylistType(enum.Enum):
    """Whether a playlist lists other playlists or media segments."""

    VARIANT = 0
    MASTER = 1


@dataclass
class Entry:
    """One URI line of a playlist together with the tag that preceded it."""

    bandwidth_bps: int = 0
    codecs: str = ""
    media_sequence: int = 0
    duration_sec: float = 0.0
    extra_info: str = ""
    url: str = ""


@dataclass
class Playlist:
    """A parsed playlist."""

    type: PlaylistType = PlaylistType.VARIANT
    entries: list[Entry] = field(default_factory=list)
    current_media_sequence: int = 0


class PlaylistError(Exception):
    """Raised when a playlist cannot be fetched or parsed."""


def _parse_uint(text: str) -> int:
    if not _UINT_PATTERN.fullmatch(text):
        raise ValueError(f"invalid unsigned integer: {text!r}")
    value = int(text)
    if value >= _UINT64_LIMIT:
        raise ValueError(f"unsigned integer out of range: {text!r}")
    return value


def _parse_float(text: str) -> float:
    if not _FLOAT_PATTERN.fullmatch(text):
        raise ValueError(f"invalid number: {text!r}")
    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        raise ValueError(f"number out of range: {text!r}")
    return value


def _cut_prefix(text: str, prefix: str) -> str | None:
    return text[len(prefix):] if text.startswith(prefix) else None


def _clean_path(path: str) -> str:
    cleaned = posixpath.normpath(path) if path else "."
    return re.sub(r"^/+", "/", cleaned)


def _parse_stream_inf(tag: str) -> Entry:
    attributes = _cut_prefix(tag, "EXT-X-STREAM-INF:")
    if attributes is None:
        raise PlaylistError("malformed EXT-X-STREAM-INF tag")

    entry = Entry()
    bandwidth_present = False
    for attribute in attributes.split(","):
        name, separator, value = attribute.partition("=")
        if not separator:
            raise PlaylistError("malformed attribute in EXT-X-STREAM-INF tag")
        if name == "BANDWIDTH":
            bandwidth_present = True
            try:
                entry.bandwidth_bps = _parse_uint(value)
            except ValueError:
                raise PlaylistError(
                    "unable to parse bandwidth attribute in EXT-X-STREAM-INF tag"
                ) from None
        elif name == "CODECS":
            entry.codecs = value.strip('" ')

    if not bandwidth_present:
        raise PlaylistError("missing bandwidth attribute in EXT-X-STREAM-INF tag")
    return entry


def _parse_inf(tag: str) -> Entry:
    attributes = _cut_prefix(tag, "EXTINF:")
    if attributes is None:
        raise PlaylistError("malformed EXTINF tag")

    duration, *extra = attributes.split(",")
    try:
        duration_sec = _parse_float(duration)
    except ValueError:
        raise PlaylistError("unable to parse segment duration from EXTINF tag") from None
    return Entry(duration_sec=duration_sec, extra_info=",".join(extra))


def _parse_media_sequence(tag: str) -> int:
    value = _cut_prefix(tag, "EXT-X-MEDIA-SEQUENCE:")
    if value is None:
        raise PlaylistError("malformed EXT-X-MEDIA-SEQUENCE tag")
    try:
        return _parse_uint(value)
    except ValueError:
        raise PlaylistError(
            "unable to parse media sequence from EXT-X-MEDIA-SEQUENCE tag"
        ) from None


def _base_url(url: str) -> tuple[str, str, str, str, str]:
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise PlaylistError(f"failed to parse playlist url: {exc}") from exc
    directory = _clean_path(posixpath.dirname(parts.path))
    if parts.netloc and not directory.startswith("/"):
        directory = "/" + directory
    return parts.scheme, parts.netloc, directory, parts.query, parts.fragment


def _join_url(base: tuple[str, str, str, str, str], reference: str) -> str:
    scheme, netloc, directory, query, fragment = base
    if directory.startswith("/"):
        joined = _clean_path(f"{directory}/{reference}")
    else:
        joined = _clean_path(f"/{directory}/{reference}")[1:]
    if reference.endswith("/") and not joined.endswith("/"):
        joined += "/"
    return urlunsplit((scheme, netloc, quote(joined, safe=_PATH_SAFE), query, fragment))


def parse(url: str, text: str) -> Playlist:
    """Parse playlist text fetched from ``url``; relative entries resolve against it."""
    base = _base_url(url)
    playlist = Playlist()
    is_ext_m3u = False
    current = Entry()

    for index, line in enumerate(text.split("\n")):
        if line.startswith("#"):
            if not line.startswith("#EXT"):
                continue
            tag = line[1:]
            try:
                if tag.startswith("EXTM3U"):
                    is_ext_m3u = True
                elif tag.startswith("EXT-X-STREAM-INF"):
                    playlist.type = PlaylistType.MASTER
                    current = _parse_stream_inf(tag)
                elif tag.startswith("EXTINF"):
                    playlist.type = PlaylistType.VARIANT
                    current = _parse_inf(tag)
                elif tag.startswith("EXT-X-MEDIA-SEQUENCE"):
                    playlist.current_media_sequence = _parse_media_sequence(tag)
            except PlaylistError as exc:
                raise PlaylistError(f"line {index}: {exc}") from None
            continue

        if not line:
            continue

        current.url = line if line.startswith("http") else _join_url(base, line)
        current.media_sequence = playlist.current_media_sequence
        playlist.current_media_sequence = (playlist.current_media_sequence + 1) % _UINT64_LIMIT
        playlist.entries.append(current)
        current = Entry()

    if not is_ext_m3u:
        raise PlaylistError("playlist is not in extended m3u format")
    return playlist


def fetch_and_parse(url: str, session: requests.Session | None = None) -> Playlist:
    """Fetch a playlist over HTTP and parse it."""
    http = session if session is not None else requests
    try:
        with http.get(url) as response:
            body = response.content
    except requests.RequestException as exc:
        raise PlaylistError(f"fetching playlist failed: {exc}") from exc
    return parse(url, body.decode("utf-8", errors="replace"))