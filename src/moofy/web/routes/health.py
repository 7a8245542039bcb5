from fastapi import APIRouter, Request

router = APIRouter(tags=["misc"])


@router.get("/health")
async def health(request: Request) -> dict[str, object]:
    """Light-weight health probe used by deployment environments."""

    bot = request.app.state.bot
    return {"status": "ok", "discord_ready": bot.is_ready()}
