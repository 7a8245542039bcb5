from __future__ import annotations

import re

import discord

# Embed colour used across the bot
THEME = discord.Colour.magenta()

MESSAGE_LIMIT = 2000

# <:name:id> and <a:name:id>
_CUSTOM_EMOJI = re.compile(r"<a?:[A-Za-z0-9_~]{2,32}:(\d{15,25})>")


def custom_emoji_ids(content: str) -> list[str]:
    """Ids of every custom emoji in *content*, repeated once per occurrence."""

    return _CUSTOM_EMOJI.findall(content)


def truncate(text: str, limit: int, suffix: str = "\n[...]") -> str:
    if len(text) <= limit:
        return text
    return text[: limit - len(suffix)] + suffix


def defuse_links(content: str) -> str:
    """Break ``[text](url)`` markdown so quoted messages can't hide links."""

    return content.replace("](", "]\u200b(")


def join_lines_within(lines: list[str], limit: int = MESSAGE_LIMIT) -> str:
    """Join *lines* with newlines, stopping before the result exceeds *limit*."""

    out: list[str] = []
    length = 0
    for line in lines:
        extra = len(line) + (1 if out else 0)
        if length + extra > limit:
            break
        out.append(line)
        length += extra
    return "\n".join(out)
