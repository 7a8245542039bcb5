from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar, Optional

from . import ClientData
from .conversions import as_count, as_str, list_of, map_of


@dataclass
class GuildData(ClientData):
    """Counter, whois directory and tracked Webtoons of one guild."""

    category: ClassVar[str] = "guilds"

    id: int
    data_dir: Path = field(repr=False, compare=False)
    count: int = 0
    whois_url: Optional[str] = None
    whois_headers: list[str] = field(default_factory=list)
    whois_data: list[list[str]] = field(default_factory=list)
    webtoons: dict[str, str] = field(default_factory=dict)

    # ------------------------------------------------------------------
    # Counter
    # ------------------------------------------------------------------

    def increment_count(self, amount: int = 1) -> int:
        if amount < 0:
            raise ValueError("amount must be non-negative")
        self.count += amount
        return self.count

    # ------------------------------------------------------------------
    # Whois directory
    # ------------------------------------------------------------------

    def set_whois(self, url: str, headers: list[str], rows: list[list[str]]) -> None:
        self.whois_url = url
        self.whois_headers = list(headers)
        self.whois_data = [list(row) for row in rows]

    def id_column(self) -> Optional[int]:
        """Index of the first header containing "id" (case-insensitive), if any."""

        for index, header in enumerate(self.whois_headers):
            if "id" in header.lower():
                return index
        return None

    def get_whois_entry_by_id(self, user_id: str) -> Optional[list[str]]:
        id_index = self.id_column()
        if id_index is None:
            return None
        for row in self.whois_data:
            # Short rows simply don't have the cell
            if id_index < len(row) and row[id_index] == user_id:
                return row
        return None

    # ------------------------------------------------------------------
    # Webtoons
    # ------------------------------------------------------------------

    def add_webtoon(self, webtoon_id: str, url: str) -> None:
        self.webtoons[webtoon_id] = url

    def remove_webtoon(self, webtoon_id: str) -> bool:
        return self.webtoons.pop(webtoon_id, None) is not None

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    @classmethod
    def from_json(cls, record_id: int, data_dir: Path, raw: Any) -> "GuildData":
        if not isinstance(raw, dict):
            return cls(id=record_id, data_dir=data_dir)

        count = as_count(raw.get("count"))
        headers = list_of(raw.get("whois_headers"), as_str)
        rows = list_of(raw.get("whois_data"), lambda row: list_of(row, as_str))
        webtoons = map_of(raw.get("webtoons"), as_str)

        return cls(
            id=record_id,
            data_dir=data_dir,
            count=count if count is not None else 0,
            whois_url=as_str(raw.get("whois_url")),
            whois_headers=headers if headers is not None else [],
            whois_data=rows if rows is not None else [],
            webtoons=webtoons if webtoons is not None else {},
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "whois_url": self.whois_url,
            "whois_headers": list(self.whois_headers),
            "whois_data": [list(row) for row in self.whois_data],
            "webtoons": dict(self.webtoons),
        }
