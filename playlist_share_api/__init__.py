"""
Top-level package for the Playlist Share API.

All functionality lives in submodules under ``app``; this marker makes
fully qualified imports such as ``playlist_share_api.app.main`` work
from the project root and from the test suite.
"""

__all__ = []
