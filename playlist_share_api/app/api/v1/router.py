"""
Top-level router for version 1 of the API.

Aggregates the domain routers.  Paths are kept flat (``/recent_playlists``,
``/playlist/{ulid}``...) because existing clients address them that way.
The reset hook is not part of this router: it lives at the site root.
"""

from fastapi import APIRouter

from .endpoints import admin, playlists, users

router = APIRouter()

router.include_router(users.router, tags=["users"])
router.include_router(playlists.router, tags=["playlists"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
