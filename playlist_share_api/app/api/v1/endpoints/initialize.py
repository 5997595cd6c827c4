"""
Datastore reset endpoint, used by the benchmark harness before a run.
"""

import sqlite3

from fastapi import APIRouter, Depends

from playlist_share_api.app.core.db import get_db
from playlist_share_api.app.schemas.playlist import BasicResponse
from playlist_share_api.app.services.initialize_service import InitializeService


router = APIRouter()


@router.post("/initialize", response_model=BasicResponse)
async def initialize(conn: sqlite3.Connection = Depends(get_db)) -> BasicResponse:
    await InitializeService.reset(conn)
    return BasicResponse()
