"""
Page and search state for the Pokédex.

``PokedexController`` is the single source of truth for what the front-end
shows.  It reacts to three triggers: loading the page at the current offset,
moving to the next or previous page, and submitting a search.  Each trigger
resolves entries through a ``CatalogClient`` and then replaces the display
state in one step.

Failures are handled differently on the two paths.  A page load that fails
is logged and the previous entries stay on screen; a search that fails
empties the display and raises ``not_found``.  Neither path lets an error
escape to the caller.

Triggers may overlap (a second ``next_page()`` before the first load has
finished).  Every trigger takes a sequence number when it starts and only
the most recently started trigger may write the display state; results that
arrive late are dropped.
"""

from __future__ import annotations

import logging
import math
from typing import List

from .errors import CatalogError
from .pokeapi_service import CatalogClient
from .schemas import CatalogEntry, PageView
from .store import EntryCache


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


PAGE_SIZE = 9
TOTAL_COUNT = 1025


class PokedexController:
    """Display state for one browsing session.

    Holds the offset, the submitted query, the entries on display and the
    ``not_found`` flag.  Entries are resolved through ``client``, whose
    cache is shared by every trigger.
    """

    def __init__(
        self,
        client: CatalogClient,
        page_size: int = PAGE_SIZE,
        total_count: int = TOTAL_COUNT,
    ) -> None:
        if page_size < 1 or total_count < 1:
            raise ValueError("page_size and total_count must be positive")
        self.client = client
        self.page_size = page_size
        self.total_count = total_count
        self.offset = 0
        self.query = ""
        self.entries: List[CatalogEntry] = []
        self.not_found = False
        self.loaded = False
        self._issued = 0

    @property
    def cache(self) -> EntryCache:
        return self.client.cache

    @property
    def current_page(self) -> int:
        return self.offset // self.page_size + 1

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_prev(self) -> bool:
        return self.offset > 0

    @property
    def has_next(self) -> bool:
        return self.offset + self.page_size < self.total_count

    def _begin(self) -> int:
        self._issued += 1
        return self._issued

    def _is_current(self, seq: int) -> bool:
        if seq != self._issued:
            logger.debug("Discarding stale result of trigger %s (latest is %s)", seq, self._issued)
            return False
        return True

    async def load_page(self) -> bool:
        """Show the entries of the page at the current offset.

        Returns ``True`` when the display was updated.  On failure the
        error is logged and the previous entries are kept.
        """
        seq = self._begin()
        offset = self.offset
        count = min(offset + self.page_size, self.total_count) - offset
        try:
            entries = await self.client.resolve_range(offset + 1, count)
        except CatalogError as exc:
            logger.error("Error loading page at offset %s: %s", offset, exc)
            return False
        if not self._is_current(seq):
            return False
        self.entries = entries
        self.not_found = False
        self.loaded = True
        return True

    async def next_page(self) -> bool:
        """Advance one page and load it; a no-op on the last page."""
        if not self.has_next:
            return False
        self.offset += self.page_size
        return await self.load_page()

    async def prev_page(self) -> bool:
        """Go back one page and load it; a no-op on the first page."""
        if not self.has_prev:
            return False
        self.offset -= self.page_size
        return await self.load_page()

    async def search(self, term: str) -> bool:
        """Show the single entry named ``term``.

        An empty or blank term returns to the page at the current offset.
        Returns ``True`` when an entry was found.
        """
        self.query = term or ""
        if not self.query.strip():
            return await self.load_page()
        seq = self._begin()
        try:
            entry = await self.client.resolve_by_name(self.query)
        except CatalogError as exc:
            logger.info("Search for %r failed: %s", self.query, exc)
            if self._is_current(seq):
                self.entries = []
                self.not_found = True
            return False
        entry = self.cache.put(entry)
        if not self._is_current(seq):
            return False
        self.entries = [entry]
        self.not_found = False
        return True

    def snapshot(self) -> PageView:
        """Return the current display state as a ``PageView``."""
        return PageView(
            page=self.current_page,
            page_size=self.page_size,
            total=self.total_count,
            total_pages=self.total_pages,
            offset=self.offset,
            query=self.query,
            not_found=self.not_found,
            has_prev=self.has_prev,
            has_next=self.has_next,
            items=list(self.entries),
        )
