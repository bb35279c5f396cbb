"""
Session endpoints: issue and clear the `token` cookie.
"""

from __future__ import annotations

from fastapi import APIRouter, Response

from . import schemas, service

router = APIRouter()


@router.post("/jwt")
async def create_session(payload: schemas.SessionRequest, response: Response) -> dict:
    return service.issue_session(payload, response).model_dump()


@router.post("/logout")
async def logout(response: Response) -> dict:
    return service.end_session(response).model_dump()
