from fastapi import APIRouter, Request

from .auth_utils import require_guild
from .schemas import GuildSummary, WebtoonEntry

router = APIRouter(tags=["guilds"])


@router.get("/guilds/{guild_id}", response_model=GuildSummary)
async def guild_summary(guild_id: int, request: Request) -> GuildSummary:
    """Return the guild's count, whois directory size and tracked Webtoons."""

    guild = require_guild(guild_id, request)
    bot = request.app.state.bot

    async with bot.guild_store.access(guild_id) as data:
        return GuildSummary(
            id=str(guild_id),
            name=guild.name,
            count=data.count,
            whois_url=data.whois_url,
            whois_columns=list(data.whois_headers),
            whois_rows=len(data.whois_data),
            webtoons=[WebtoonEntry(id=key, url=url) for key, url in sorted(data.webtoons.items())],
        )
