"""
Pydantic models for user accounts.

Signup and login bodies carry the input-shape rules (length and
charset) so malformed credentials are rejected before any service code
runs.  Passwords are never part of a response.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .playlist import BasicResponse

ACCOUNT_PATTERN = r"^[a-zA-Z0-9_-]+$"


class UserLogin(BaseModel):
    user_account: str = Field(..., min_length=4, max_length=191, pattern=ACCOUNT_PATTERN, examples=["road_tripper"])
    password: str = Field(..., min_length=8, max_length=64, pattern=ACCOUNT_PATTERN)


class UserSignup(UserLogin):
    display_name: str = Field(..., min_length=2, max_length=24, examples=["Road Tripper"])


class UserRead(BaseModel):
    user_account: str
    display_name: str
    is_ban: bool
    created_at: datetime


class TokenResponse(BasicResponse):
    access_token: str
    token_type: str = "bearer"


class AdminUserBanRequest(BaseModel):
    user_account: str = Field(..., examples=["road_tripper"])
    is_ban: bool = Field(..., examples=[True])


class AdminUserBanResponse(BasicResponse, UserRead):
    """Ban toggle result: the user as stored after the update."""
