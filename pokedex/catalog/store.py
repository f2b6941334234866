"""
In-memory entry store for the Pokédex.

``EntryCache`` maps catalogue ids to ``CatalogEntry`` instances for the
lifetime of the process.  Keys are written once: an entry that is already
cached is never replaced and never fetched again.  Failed lookups are not
stored, so a later call can try again.

Lookups go through ``get_or_fetch()``, which also keeps a table of pending
fetches keyed by id.  Two coroutines asking for the same missing id share
one fetch instead of issuing two requests.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional

from .schemas import CatalogEntry


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


Fetcher = Callable[[int], Awaitable[CatalogEntry]]


class EntryCache:
    """Read-through, write-once cache of catalogue entries."""

    def __init__(self) -> None:
        self._entries: Dict[int, CatalogEntry] = {}
        self._pending: Dict[int, asyncio.Future] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._entries

    def get(self, entry_id: int) -> Optional[CatalogEntry]:
        return self._entries.get(entry_id)

    def put(self, entry: CatalogEntry) -> CatalogEntry:
        """Store ``entry`` unless its id is already cached.

        Returns the entry that ends up in the cache, which is the earlier
        one when the id was already present.
        """
        existing = self._entries.get(entry.id)
        if existing is not None:
            return existing
        self._entries[entry.id] = entry
        return entry

    def in_flight(self, entry_id: int) -> bool:
        return entry_id in self._pending

    async def get_or_fetch(self, entry_id: int, fetch: Fetcher) -> CatalogEntry:
        """Return the cached entry for ``entry_id``, fetching it on a miss.

        When a fetch for the same id is already running, this waits for
        that one instead of starting another.  Errors raised by ``fetch``
        propagate to every waiter and leave the cache untouched.
        Cancelling one waiter does not cancel the shared fetch.
        """
        entry = self._entries.get(entry_id)
        if entry is not None:
            return entry
        pending = self._pending.get(entry_id)
        if pending is None:
            pending = asyncio.ensure_future(fetch(entry_id))
            self._pending[entry_id] = pending
            pending.add_done_callback(lambda fut: self._settle(entry_id, fut))
        else:
            logger.debug("Joining in-flight fetch for id %s", entry_id)
        return await asyncio.shield(pending)

    def _settle(self, entry_id: int, fut: asyncio.Future) -> None:
        self._pending.pop(entry_id, None)
        if fut.cancelled() or fut.exception() is not None:
            return
        self.put(fut.result())

    def clear(self) -> None:
        self._entries.clear()
