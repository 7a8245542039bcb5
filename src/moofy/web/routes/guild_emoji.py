from fastapi import APIRouter, Query, Request

from .auth_utils import require_guild
from .schemas import EmojiStats, EmojiUsage

router = APIRouter(tags=["guilds"])


@router.get("/guilds/{guild_id}/emoji", response_model=EmojiStats)
async def guild_emoji(guild_id: int, request: Request, limit: int = Query(10, ge=1, le=100)) -> EmojiStats:
    """Return the guild's most used custom emoji."""

    require_guild(guild_id, request)
    bot = request.app.state.bot

    async with bot.emoji_store.access(guild_id) as data:
        return EmojiStats(
            guild_id=str(guild_id),
            total=sum(data.emoji.values()),
            top=[EmojiUsage(emoji_id=emoji_id, uses=uses) for emoji_id, uses in data.top(limit)],
        )
