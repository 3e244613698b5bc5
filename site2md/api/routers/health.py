"""Liveness endpoint.

Routes
------
GET /health    → {"ok": true, "ts": "<ISO-8601>"}
"""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from site2md.pipeline import iso_now

router = APIRouter()


class HealthResponse(BaseModel):
    ok: bool
    ts: str


@router.get("", response_model=HealthResponse)
def health() -> dict[str, object]:
    return {"ok": True, "ts": iso_now()}
