"""
Administrative endpoints for API v1.

Only accounts listed in ``settings.admin_accounts`` may call these.
"""

import sqlite3

from fastapi import APIRouter, Depends

from playlist_share_api.app.core.db import get_db
from playlist_share_api.app.core.security import require_admin
from playlist_share_api.app.schemas.user import AdminUserBanRequest, AdminUserBanResponse
from playlist_share_api.app.services.entity_store import UserRecord
from playlist_share_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/user/ban", response_model=AdminUserBanResponse)
async def ban_user(
    payload: AdminUserBanRequest,
    admin: UserRecord = Depends(require_admin),
    conn: sqlite3.Connection = Depends(get_db),
) -> AdminUserBanResponse:
    """Set or clear the ban flag of a user.

    A banned user's playlists disappear from every listing and detail
    view, and the user can no longer log in.
    """
    user = await UserService.set_ban(conn, payload.user_account, payload.is_ban)
    return AdminUserBanResponse(**user.model_dump())
