"""
Account endpoints for API v1: signup and login.

Both return a bearer token whose subject is the account.  There is no
logout route: tokens are stateless and simply dropped by the client.
"""

import sqlite3

from fastapi import APIRouter, Depends

from playlist_share_api.app.core.db import get_db
from playlist_share_api.app.core.security import create_access_token
from playlist_share_api.app.schemas.user import TokenResponse, UserLogin, UserSignup
from playlist_share_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/signup", response_model=TokenResponse)
async def signup(payload: UserSignup, conn: sqlite3.Connection = Depends(get_db)) -> TokenResponse:
    user = await UserService.signup(conn, payload.user_account, payload.password, payload.display_name)
    return TokenResponse(access_token=create_access_token({"sub": user.user_account}))


@router.post("/login", response_model=TokenResponse)
async def login(payload: UserLogin, conn: sqlite3.Connection = Depends(get_db)) -> TokenResponse:
    user = await UserService.authenticate(conn, payload.user_account, payload.password)
    return TokenResponse(access_token=create_access_token({"sub": user.user_account}))
