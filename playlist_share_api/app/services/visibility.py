"""
Visibility rules for playlists.

``is_exposable`` is the only place that decides whether a playlist may
be shown to a viewer; listings and the detail view all go through it.
``is_owner`` is the stricter rule for anything that changes a playlist.
"""

import logging
from typing import Iterable, Iterator, Optional, Tuple

from .entity_store import PlaylistRecord, UserRecord

logger = logging.getLogger(__name__)


def is_exposable(playlist: PlaylistRecord, owner: Optional[UserRecord], viewer_account: str) -> bool:
    """Return True if ``viewer_account`` may see ``playlist``.

    The owner must exist and not be banned, and the playlist must be
    public unless the viewer is the owner.
    """
    if owner is None or owner.is_ban:
        return False
    if owner.account != playlist.user_account:
        return False
    return playlist.is_public or viewer_account == owner.account


def is_owner(playlist: PlaylistRecord, actor_account: str) -> bool:
    return playlist.user_account == actor_account


def filter_exposable(
    candidates: Iterable[Tuple[PlaylistRecord, Optional[UserRecord]]],
    viewer_account: str,
) -> Iterator[Tuple[PlaylistRecord, UserRecord]]:
    """Yield the (playlist, owner) pairs the viewer may see, in order."""
    for playlist, owner in candidates:
        if not is_exposable(playlist, owner, viewer_account):
            logger.debug("Playlist %s hidden from %s", playlist.ulid, viewer_account)
            continue
        yield playlist, owner
