"""Service-level routes."""

from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health check")
async def health(request: Request) -> dict[str, str]:
    return {"status": "ok", "version": request.app.version}
