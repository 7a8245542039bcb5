from typing import Optional

from pydantic import BaseModel

__all__ = [
    "ConfigResponse",
    "WebtoonEntry",
    "GuildSummary",
    "EmojiUsage",
    "EmojiStats",
]


class ConfigResponse(BaseModel):
    prefix: str


class WebtoonEntry(BaseModel):
    id: str
    url: str


class GuildSummary(BaseModel):
    id: str
    name: str
    count: int
    whois_url: Optional[str] = None
    whois_columns: list[str] = []
    whois_rows: int = 0
    webtoons: list[WebtoonEntry] = []


class EmojiUsage(BaseModel):
    emoji_id: str
    uses: int


class EmojiStats(BaseModel):
    guild_id: str
    total: int
    top: list[EmojiUsage] = []
