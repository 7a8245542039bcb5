"""Per-guild records persisted as one JSON file each, and the cache that owns them.

Every record type implements :class:`ClientData`: it can be built from its
file (falling back to defaults when the file is missing or unusable) and it
can write itself back. A :class:`DataStore` keeps the loaded records for the
lifetime of the process. All stores of one bot share a single lock which is
held only while a record is looked up, mutated and saved::

    async with bot.guild_store.access(guild.id) as data:
        total = data.increment_count()
        data.save()
    await ctx.send(f"The count is now {total}.")
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, ClassVar, Generic, TypeVar

from moofy.utils.storage import category_dir, read_record, record_file, write_record

__all__ = [
    "ClientData",
    "DataStore",
]

_log = logging.getLogger(__name__)

T = TypeVar("T", bound="ClientData")


class ClientData(ABC):
    """A record keyed by a guild id and stored at ``<data_dir>/<category>/<id>.json``."""

    category: ClassVar[str]

    id: int
    data_dir: Path

    @classmethod
    def path_for(cls, data_dir: str | Path, record_id: int) -> Path:
        return record_file(data_dir, cls.category, record_id)

    @property
    def path(self) -> Path:
        return self.path_for(self.data_dir, self.id)

    @classmethod
    def load(cls: type[T], record_id: int, data_dir: str | Path) -> T:
        """Build the record from disk. Never raises; unusable files yield defaults."""

        raw = read_record(cls.path_for(data_dir, record_id))
        return cls.from_json(record_id, Path(data_dir), raw)

    def save(self) -> None:
        """Overwrite the record's file. Raises :class:`moofy.errors.StorageError`."""

        write_record(self.path, self.to_json())

    @classmethod
    @abstractmethod
    def from_json(cls: type[T], record_id: int, data_dir: Path, raw: Any) -> T:
        """Build a record from a decoded document; *raw* may be ``None`` or malformed."""

    @abstractmethod
    def to_json(self) -> Any:
        """Return the full JSON-serialisable document for this record."""


class DataStore(Generic[T]):
    """Lazily loaded cache of records of one type, keyed by guild id."""

    def __init__(self, record_type: type[T], data_dir: str | Path, lock: asyncio.Lock | None = None):
        self.record_type = record_type
        self.data_dir = Path(data_dir)
        self.lock = lock if lock is not None else asyncio.Lock()
        self._records: dict[int, T] = {}

        category_dir(self.data_dir, record_type.category).mkdir(parents=True, exist_ok=True)

    def get_or_load(self, record_id: int) -> T:
        """Return the cached record, loading it on first use.

        The caller must hold :attr:`lock` when the record is going to be mutated.
        """

        record = self._records.get(record_id)
        if record is None:
            record = self.record_type.load(record_id, self.data_dir)
            self._records[record_id] = record
            _log.debug("Loaded %s record for guild %s", self.record_type.category, record_id)
        return record

    @asynccontextmanager
    async def access(self, record_id: int) -> AsyncIterator[T]:
        """Hold the shared lock and yield the record for *record_id*."""

        async with self.lock:
            yield self.get_or_load(record_id)

    def cached_ids(self) -> list[int]:
        return sorted(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __len__(self) -> int:
        return len(self._records)
