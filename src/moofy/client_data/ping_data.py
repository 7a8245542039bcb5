from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, ClassVar, Optional

from . import ClientData
from .conversions import as_count, as_str, map_of

EVERYONE_KEY = "everyone"


def role_key(role_id: int) -> str:
    return f"role:{role_id}"


def user_key(user_id: int) -> str:
    return f"user:{user_id}"


@dataclass
class PingEntry:
    content: str
    author_id: int
    channel_id: int
    message_id: int

    @classmethod
    def from_json(cls, raw: Any) -> Optional["PingEntry"]:
        if not isinstance(raw, dict):
            return None
        content = as_str(raw.get("content"))
        if content is None:
            return None
        return cls(
            content=content,
            author_id=as_count(raw.get("author_id")) or 0,
            channel_id=as_count(raw.get("channel_id")) or 0,
            message_id=as_count(raw.get("message_id")) or 0,
        )

    def jump_url(self, guild_id: int) -> str:
        return f"https://discord.com/channels/{guild_id}/{self.channel_id}/{self.message_id}"


@dataclass
class PingData(ClientData):
    """The most recent @everyone, role and user ping seen in a guild.

    Keys are ``"everyone"``, ``"role:<id>"`` and ``"user:<id>"``; a newer ping
    replaces the older one under the same key.
    """

    category: ClassVar[str] = "pings"

    id: int
    data_dir: Path = field(repr=False, compare=False)
    pings: dict[str, PingEntry] = field(default_factory=dict)

    def record(self, key: str, entry: PingEntry) -> None:
        self.pings[key] = entry

    def get(self, key: str) -> Optional[PingEntry]:
        return self.pings.get(key)

    @classmethod
    def from_json(cls, record_id: int, data_dir: Path, raw: Any) -> "PingData":
        pings = map_of(raw, PingEntry.from_json)
        return cls(id=record_id, data_dir=data_dir, pings=pings if pings is not None else {})

    def to_json(self) -> dict[str, Any]:
        return {key: asdict(entry) for key, entry in self.pings.items()}
