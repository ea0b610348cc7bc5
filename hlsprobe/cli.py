"""Command line entry point: watch every variant of an HLS stream."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading

import requests

from .checker import Checker
from .playlist import PlaylistError, PlaylistType, fetch_and_parse

logger = logging.getLogger(__name__)

_LOG_FORMAT = "time=%(asctime)s level=%(levelname)s msg=%(message)s"


def setup_logfile(path: str) -> logging.Handler:
    """Send all log output to ``path`` (appending); raises OSError if it cannot be opened."""
    handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.INFO)
    return handler


def start_playlist_checkers(
    url: str, session: requests.Session | None = None
) -> list[Checker]:
    """Fetch ``url`` and start a checker per variant (or for ``url`` itself)."""
    playlist = fetch_and_parse(url, session)
    if playlist.type is PlaylistType.MASTER:
        urls = [entry.url for entry in playlist.entries]
    else:
        urls = [url]
    return [Checker(variant_url, session).start() for variant_url in urls]


def _wait_for_signal() -> None:
    stop = threading.Event()

    def handle(signum, frame):
        stop.set()

    signals = (signal.SIGINT, signal.SIGTERM)
    previous = {sig: signal.signal(sig, handle) for sig in signals}
    try:
        while not stop.wait(0.5):
            pass
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="hlsprobe", description="Continuously check the segments of an HLS stream."
    )
    parser.add_argument(
        "-url", "--url", default="", help="URL of the stream to check (to the master playlist)"
    )
    parser.add_argument(
        "-logfile", "--logfile", default="",
        help="Log file to redirect the output of the program to",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format=_LOG_FORMAT)

    if not args.url:
        logger.error("Missing stream URL!")
        return 1
    if args.logfile:
        try:
            setup_logfile(args.logfile)
        except OSError as exc:
            logger.error("Unable to open log file err=%s", exc)
            return 1

    try:
        checkers = start_playlist_checkers(args.url)
    except PlaylistError as exc:
        logger.error("Fetching playlist failed err=%s", exc)
        return 1

    _wait_for_signal()
    for checker in checkers:
        checker.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())