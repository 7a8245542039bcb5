from __future__ import annotations

import secrets

import discord
from fastapi import HTTPException, Request, status

from moofy.config import get_settings

__all__ = [
    "require_token",
    "require_guild",
]


def require_token(request: Request) -> None:
    """Validate the ``Authorization: Bearer`` header when ``API_TOKEN`` is configured.

    Without a configured token the API is open, which is fine for a bot that
    only listens on localhost.
    """

    expected = get_settings().api_token
    if not expected:
        return

    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not secrets.compare_digest(token.strip(), expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required.")


def require_guild(guild_id: int, request: Request) -> discord.Guild:
    """Check the token and return the guild, raising 404 if the bot is not in it."""

    require_token(request)

    bot = request.app.state.bot
    guild = bot.get_guild(guild_id)
    if guild is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Guild not found or bot not in guild.")
    return guild
