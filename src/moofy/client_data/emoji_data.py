from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar

from . import ClientData
from .conversions import as_count, map_of


@dataclass
class EmojiData(ClientData):
    """How often each custom emoji has been used in a guild."""

    category: ClassVar[str] = "emoji"

    id: int
    data_dir: Path = field(repr=False, compare=False)
    emoji: dict[str, int] = field(default_factory=dict)

    def increment(self, emoji_id: str, amount: int = 1) -> int:
        self.emoji[emoji_id] = self.emoji.get(emoji_id, 0) + amount
        return self.emoji[emoji_id]

    def top(self, limit: int = 10) -> list[tuple[str, int]]:
        """Most used emoji first; ties are ordered by emoji id."""

        ranked = sorted(self.emoji.items(), key=lambda item: (-item[1], item[0]))
        return ranked[:limit]

    @classmethod
    def from_json(cls, record_id: int, data_dir: Path, raw: Any) -> "EmojiData":
        emoji = map_of(raw, as_count) or {}
        # Keys are Discord snowflakes
        emoji = {key: uses for key, uses in emoji.items() if key.isdigit()}
        return cls(id=record_id, data_dir=data_dir, emoji=emoji)

    def to_json(self) -> dict[str, int]:
        return dict(self.emoji)
