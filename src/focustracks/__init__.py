"""FocusTracks - curated focus music catalog with user playlists."""

__version__ = "0.4.0"
