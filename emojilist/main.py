import logging

from fastapi import FastAPI

from emojilist.api.emoji import router as emoji_router
from emojilist.core.dependencies import get_emoji_service

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Emoji List",
    version="0.1.0",
    description="Emoji lookups backed by the Unicode emoji test list, independent of platform emoji support.",
)


@app.on_event("startup")
async def startup_event() -> None:
    """
    Load the emoji cache, refreshing it from the internet when it is stale.
    """
    await get_emoji_service().auto_initialize()


@app.get("/health")
async def health() -> dict:
    """
    Lightweight health check endpoint.
    """
    return {"status": "ok"}


app.include_router(emoji_router, prefix="/emoji", tags=["emoji"])


if __name__ == "__main__":
    """
    Allow running `python -m emojilist.main` to start the Uvicorn development server.
    """
    import uvicorn

    uvicorn.run(
        "emojilist.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
