# hlsprobe

`hlsprobe` watches a live HLS stream and reports segments that cannot be
fetched. You give it the URL of a master playlist or of a variant playlist.

For a master playlist, it starts one checker for each variant the playlist
lists. For a variant playlist, it starts one checker for that playlist.

Each checker reloads its variant playlist once a second. The first reload
happens one second after the checker starts. On each reload it fetches every
segment whose media sequence number is higher than the last one it checked.
The counter starts at 0, so a segment with sequence number 0 is never
fetched.

A segment fetch is tried up to three times, with a 250 ms pause after each
failed try. If the last try still fails, the failure is logged and counted
under one of these kinds:

- client error: the HTTP status is above 400 and at most 500
- server error: the HTTP status is above 500
- protocol error: the connection failed or the response body could not be read
- empty segment: the response body is empty

## Installation

```
pip install .
```

## Command line

```
hlsprobe --url https://cdn.example.com/live/master.m3u8
```

Log output goes to standard error by default. To append it to a file
instead:

```
hlsprobe --url https://cdn.example.com/live/master.m3u8 --logfile hlsprobe.log
```

The options can also be written with a single dash, as `-url` and
`-logfile`.

The program runs until it receives SIGINT (Ctrl-C) or SIGTERM. It then stops
its checkers and exits with status 0. It exits with status 1 in these cases:

- no URL is given
- the log file cannot be opened
- the first playlist cannot be fetched or parsed

## Library use

```python
import requests

from hlsprobe.playlist import PlaylistType, fetch_and_parse, parse
from hlsprobe.checker import Checker

with requests.Session() as session:
    playlist = fetch_and_parse("https://cdn.example.com/live/master.m3u8", session)
    if playlist.type is PlaylistType.MASTER:
        for entry in playlist.entries:
            print(entry.url, entry.bandwidth_bps, entry.codecs)
```

### Parsing playlists

`parse(url, text)` parses playlist text that you already have. Relative URIs
are resolved against the directory of `url`. Lines that begin with `http`
are kept as they are.

`fetch_and_parse(url, session=None)` downloads the playlist and parses it.
It does not look at the HTTP status.

Both functions return a `Playlist` that holds these fields:

- `type`: `PlaylistType.MASTER` or `PlaylistType.VARIANT`
- `entries`: a list of `Entry` objects
- `current_media_sequence`

Each `Entry` holds these fields:

- `url`
- `media_sequence`
- `bandwidth_bps` and `codecs`, for master playlists
- `duration_sec` and `extra_info`, for variant playlists

Both functions raise `PlaylistError` in these cases:

- the text has no `#EXTM3U` tag
- a tag is malformed
- the request fails

### Checking a playlist

A `Checker(url, session=None, *, interval=1.0, retries=3, retry_delay=0.25)`
polls one variant playlist. You can run it in three ways:

- `poll()` runs a single round.
- `run(stop_event)` polls in the current thread until the event is set.
- `start()` runs it in a background daemon thread and returns the checker.
  `stop()` ends that thread.

`check_segment(entry)` makes a single fetch and returns a `CheckResult`.
`retry_check_segment(entry)` fetches with retries, records a final failure
and returns the result.

The counters on a checker are:

- `client_error_count`
- `server_error_count`
- `protocol_error_count`
- `empty_segment_error_count`

`hlsprobe.cli.start_playlist_checkers(url, session=None)` fetches a playlist
and returns the list of checkers it started.

## What it does not do

`hlsprobe` only logs and counts failures. It does not:

- print a summary or statistics when it exits
- check segment durations or content
- follow nested master playlists
- handle alternative renditions declared with `#EXT-X-MEDIA`

## Running the tests

```
pip install .[test]
pytest
```