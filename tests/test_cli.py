import logging

import pytest
import responses

from hlsprobe.cli import main, setup_logfile, start_playlist_checkers
from hlsprobe.playlist import PlaylistError

MASTER_URL = "http://example.com/live/master.m3u8"
MASTER = (
    "#EXTM3U\n"
    "#EXT-X-STREAM-INF:BANDWIDTH=1280000\n"
    "low/index.m3u8\n"
    "#EXT-X-STREAM-INF:BANDWIDTH=2560000\n"
    "high/index.m3u8\n"
)
VARIANT_URL = "http://example.com/live/index.m3u8"
VARIANT = "#EXTM3U\n#EXTINF:4.0,\nseg.ts\n"


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_main_without_url_fails():
    assert main([]) == 1


def test_main_with_unreachable_url_fails(mocked):
    assert main(["-url", MASTER_URL]) == 1


def test_main_with_bad_logfile_fails(tmp_path, restore_logging):
    assert main(["-url", MASTER_URL, "-logfile", str(tmp_path)]) == 1


def test_setup_logfile_writes_messages(tmp_path, restore_logging):
    path = tmp_path / "probe.log"
    path.write_text("earlier\n")
    handler = setup_logfile(str(path))
    logging.getLogger("hlsprobe.test").info("segment checked")
    handler.flush()
    content = path.read_text()
    assert content.startswith("earlier\n")
    assert "msg=segment checked" in content
    assert "level=INFO" in content


def test_setup_logfile_rejects_directory(tmp_path, restore_logging):
    with pytest.raises(OSError):
        setup_logfile(str(tmp_path))


def test_master_playlist_starts_checker_per_variant(mocked):
    mocked.add(responses.GET, MASTER_URL, body=MASTER)
    checkers = start_playlist_checkers(MASTER_URL)
    for checker in checkers:
        checker.stop()
    assert [checker.url for checker in checkers] == [
        "http://example.com/live/low/index.m3u8",
        "http://example.com/live/high/index.m3u8",
    ]


def test_variant_playlist_starts_single_checker(mocked):
    mocked.add(responses.GET, VARIANT_URL, body=VARIANT)
    checkers = start_playlist_checkers(VARIANT_URL)
    for checker in checkers:
        checker.stop()
    assert [checker.url for checker in checkers] == [VARIANT_URL]


def test_invalid_playlist_raises(mocked):
    mocked.add(responses.GET, VARIANT_URL, body="not a playlist\n")
    with pytest.raises(PlaylistError, match="extended m3u"):
        start_playlist_checkers(VARIANT_URL)