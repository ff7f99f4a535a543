"""
HTTP lookup endpoints for the emoji catalogue.
"""
from __future__ import annotations

import logging
from typing import Callable, List, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from emojilist.core.dependencies import get_emoji_service
from emojilist.domain.errors import EmojiListError, InvalidStateError
from emojilist.services.emoji_service import EmojiService

logger = logging.getLogger(__name__)
router = APIRouter()

T = TypeVar("T")


def _lookup(call: Callable[[], T]) -> T:
    """Run a lookup, reporting missing data as 503."""
    try:
        return call()
    except InvalidStateError as e:
        raise HTTPException(status_code=503, detail=str(e))


def _dump(value) -> dict:
    return value.model_dump(mode="json", by_alias=True)


@router.get("/lookup")
async def lookup_emoji(
    glyph: str = Query(..., min_length=1, description="Emoji to look up."),
    service: EmojiService = Depends(get_emoji_service),
) -> JSONResponse:
    info = _lookup(lambda: service.get_emoji(glyph))
    if info is None:
        raise HTTPException(status_code=404, detail="Not a known emoji")
    return JSONResponse(_dump(info))


@router.get("/check")
async def check_emoji(
    glyph: str = Query(..., description="String to check."),
    service: EmojiService = Depends(get_emoji_service),
) -> dict:
    return {"glyph": glyph, "is_emoji": _lookup(lambda: service.is_emoji(glyph))}


@router.get("/list")
async def list_emoji(service: EmojiService = Depends(get_emoji_service)) -> List[str]:
    return _lookup(service.get_all_emoji)


@router.get("/groups")
async def list_groups(service: EmojiService = Depends(get_emoji_service)) -> JSONResponse:
    groups = _lookup(service.get_all_groups)
    return JSONResponse([_dump(g) for g in groups])


@router.get("/status")
async def get_status(service: EmojiService = Depends(get_emoji_service)) -> dict:
    status = service.status()
    last_update = status["last_update"]
    status["last_update"] = last_update.isoformat() if last_update else None
    return status


@router.post("/refresh")
async def refresh_emoji(service: EmojiService = Depends(get_emoji_service)) -> dict:
    """
    Force a download of the emoji list and save it to the cache.
    """
    try:
        await service.refresh()
    except (EmojiListError, ValueError) as e:
        logger.error(f"Emoji list refresh failed: {e}")
        raise HTTPException(status_code=502, detail=f"Refresh failed: {e}")

    try:
        await service.save_to_cache()
    except OSError as e:
        logger.warning(f"Failed to save emoji cache: {e}")

    return {"updated": True, "emoji": service.status()["emoji"]}
