"""Periodic checker that downloads every new segment of a variant playlist."""

from __future__ import annotations

import enum
import logging
import threading
import time

import requests

from .playlist import Entry, PlaylistError, fetch_and_parse

logger = logging.getLogger(__name__)


class CheckResult(enum.Enum):
    """Outcome of fetching a single segment."""

    OK = 0
    CLIENT_ERROR = 1
    SERVER_ERROR = 2
    PROTOCOL_ERROR = 3
    EMPTY_SEGMENT_ERROR = 4


_FAILURE_MESSAGES = {
    CheckResult.CLIENT_ERROR: "Client (4xx) error while fetching segment",
    CheckResult.SERVER_ERROR: "Server (5xx) error while fetching segment",
    CheckResult.PROTOCOL_ERROR: "HTTP Protocol error while fetching segment",
    CheckResult.EMPTY_SEGMENT_ERROR: "Received empty segment",
}


class Checker:
    """Polls one variant playlist and checks each segment it has not yet seen."""

    def __init__(
        self,
        url: str,
        session: requests.Session | None = None,
        *,
        interval: float = 1.0,
        retries: int = 3,
        retry_delay: float = 0.25,
    ) -> None:
        self.url = url
        self.session = session if session is not None else requests.Session()
        self.interval = interval
        self.retries = retries
        self.retry_delay = retry_delay
        self.current_media_sequence = 0
        self.client_error_count = 0
        self.server_error_count = 0
        self.protocol_error_count = 0
        self.empty_segment_error_count = 0
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def check_segment(self, entry: Entry) -> CheckResult:
        """Fetch one segment and classify the outcome."""
        try:
            with self.session.get(entry.url) as response:
                if response.status_code > 500:
                    return CheckResult.SERVER_ERROR
                if response.status_code > 400:
                    return CheckResult.CLIENT_ERROR
                body = response.content
        except requests.RequestException:
            return CheckResult.PROTOCOL_ERROR
        return CheckResult.OK if body else CheckResult.EMPTY_SEGMENT_ERROR

    def retry_check_segment(self, entry: Entry) -> CheckResult:
        """Check a segment up to ``retries`` times and record a final failure."""
        result = CheckResult.OK
        for _ in range(self.retries):
            result = self.check_segment(entry)
            if result is CheckResult.OK:
                break
            time.sleep(self.retry_delay)

        if result is CheckResult.CLIENT_ERROR:
            self.client_error_count += 1
        elif result is CheckResult.SERVER_ERROR:
            self.server_error_count += 1
        elif result is CheckResult.PROTOCOL_ERROR:
            self.protocol_error_count += 1
        elif result is CheckResult.EMPTY_SEGMENT_ERROR:
            self.empty_segment_error_count += 1
        if result is not CheckResult.OK:
            logger.error("%s url=%s", _FAILURE_MESSAGES[result], entry.url)
        return result

    def poll(self) -> None:
        """Fetch the playlist once and check all segments newer than the last one seen."""
        try:
            playlist = fetch_and_parse(self.url, self.session)
        except PlaylistError:
            logger.error("Fetching variant playlist failed url=%s", self.url)
            return

        for entry in playlist.entries:
            if entry.media_sequence <= self.current_media_sequence:
                continue
            self.retry_check_segment(entry)
            self.current_media_sequence = entry.media_sequence

    def run(self, stop_event: threading.Event) -> None:
        """Poll every ``interval`` seconds until ``stop_event`` is set."""
        while not stop_event.wait(self.interval):
            self.poll()

    def start(self) -> Checker:
        """Run the checker in a background thread."""
        logger.info("Starting HLS checker url=%s", self.url)
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run, args=(self._stop_event,), name=f"checker {self.url}", daemon=True
        )
        self._thread.start()
        return self

    def stop(self) -> None:
        """Stop the background thread and wait for it to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None