"""Monitor an HLS stream by fetching every new segment of its playlists."""

__version__ = "0.1.0"