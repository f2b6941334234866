"""
PokeAPI integration for the Pokédex.  The public service splits one
creature over two resources: ``/pokemon/{id}`` holds the base attributes
(name, sprite, types) and ``/pokemon-species/{id}`` holds the flavour texts
and the list of varieties.  ``CatalogClient`` hides that split and returns
one ``CatalogEntry`` per creature:

* ``resolve_by_id()``: base attributes and species text for a numeric id.

* ``resolve_by_name()``: species lookup by name, then the attributes of
  the species' default variety.

* ``resolve_range()``: an ordered, all-or-nothing batch of ids, used to
  fill a page.

Every resolution reads through an ``EntryCache`` so that an id is fetched
at most once per session.  Requests are anonymous ``GET``s issued with
``httpx``'s async client; a 404 becomes ``NotFoundError`` and any other
failure becomes ``TransientError``.  There is no retry.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from .errors import NotFoundError, TransientError
from .schemas import DESCRIPTION_SENTINEL, CatalogEntry
from .store import EntryCache


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


POKEAPI_BASE_URL = "https://pokeapi.co/api/v2"
# No timeout: a hung request blocks only the trigger that issued it.
REQUEST_TIMEOUT: Optional[float] = None
DEFAULT_HEADERS = {
    'User-Agent': 'pokedex-lookup/0.1 (+https://pokeapi.co)',
    'Accept': 'application/json',
}
DESCRIPTION_LANGUAGE = 'en'

_POKEMON_URL_ID = re.compile(r'/pokemon/(\d+)/?$')


def _pick_description(species: Dict[str, Any]) -> str:
    """Return the first English flavour text, or the sentinel.

    The service embeds form feeds in its flavour texts; they are replaced
    by spaces.  An empty text counts as missing.
    """
    entries = species.get('flavor_text_entries')
    if not isinstance(entries, list):
        raise TransientError("Species resource has no flavor_text_entries list")
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        language = entry.get('language') or {}
        if isinstance(language, dict) and language.get('name') == DESCRIPTION_LANGUAGE:
            text = entry.get('flavor_text')
            if isinstance(text, str) and text:
                return text.replace('\f', ' ')
            return DESCRIPTION_SENTINEL
    return DESCRIPTION_SENTINEL


def _extract_categories(data: Dict[str, Any]) -> List[str]:
    types = data.get('types')
    if not isinstance(types, list):
        raise TransientError("Pokemon resource has no types list")
    categories: List[str] = []
    for slot in types:
        info = slot.get('type') if isinstance(slot, dict) else None
        name = info.get('name') if isinstance(info, dict) else None
        if not isinstance(name, str) or not name:
            raise TransientError(f"Malformed type slot: {slot!r}")
        categories.append(name)
    return categories


def _build_entry(data: Dict[str, Any], species: Dict[str, Any]) -> CatalogEntry:
    """Merge a pokemon resource and its species resource into an entry."""
    sprites = data.get('sprites') or {}
    image_url = sprites.get('front_default') if isinstance(sprites, dict) else None
    try:
        return CatalogEntry(
            id=data.get('id'),
            name=data.get('name'),
            image_url=image_url or '',
            categories=_extract_categories(data),
            description=_pick_description(species),
        )
    except ValidationError as exc:
        raise TransientError(f"Unexpected pokemon resource shape: {exc}") from exc


def _default_variety_url(species: Dict[str, Any], name: str) -> str:
    varieties = species.get('varieties')
    if not isinstance(varieties, list):
        raise TransientError("Species resource has no varieties list")
    for variety in varieties:
        if isinstance(variety, dict) and variety.get('is_default'):
            pokemon = variety.get('pokemon')
            if not isinstance(pokemon, dict):
                raise TransientError(f"Malformed variety of {name!r}: {variety!r}")
            url = pokemon.get('url')
            if isinstance(url, str) and url:
                return url
            break
    raise NotFoundError(name, f"Species {name!r} has no default variety")


def _id_from_pokemon_url(url: str) -> Optional[int]:
    match = _POKEMON_URL_ID.search(url)
    return int(match.group(1)) if match else None


class CatalogClient:
    """Async client for the PokeAPI creature catalogue.

    Pass ``http_client`` to share an ``httpx.AsyncClient`` (or to plug in a
    mock transport); otherwise one is created and closed by ``aclose()``.
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        base_url: str = POKEAPI_BASE_URL,
        cache: Optional[EntryCache] = None,
    ) -> None:
        self.base_url = base_url.rstrip('/')
        self.cache = cache if cache is not None else EntryCache()
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            headers=DEFAULT_HEADERS,
            timeout=REQUEST_TIMEOUT,
            follow_redirects=True,
        )

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def _http_get_json(self, url: str) -> Dict[str, Any]:
        """GET ``url`` and return the decoded JSON object.

        404 raises ``NotFoundError``; connection errors, other error
        statuses and bodies that are not a JSON object raise
        ``TransientError``.
        """
        try:
            response = await self._http.get(url)
        except httpx.HTTPError as exc:
            logger.error("Error fetching %s: %s", url, exc)
            raise TransientError(f"Request to {url} failed: {exc}", url=url) from exc
        if response.status_code == 404:
            raise NotFoundError(url)
        if response.status_code != 200:
            logger.warning("PokeAPI request to %s returned status %s", url, response.status_code)
            raise TransientError(
                f"Request to {url} returned status {response.status_code}", url=url
            )
        try:
            data = response.json()
        except ValueError as exc:
            logger.error("Invalid JSON from %s: %s", url, exc)
            raise TransientError(f"Invalid JSON from {url}", url=url) from exc
        if not isinstance(data, dict):
            raise TransientError(f"Expected a JSON object from {url}", url=url)
        return data

    async def _fetch_by_id(self, entry_id: int) -> CatalogEntry:
        try:
            data = await self._http_get_json(f"{self.base_url}/pokemon/{entry_id}")
            species = await self._http_get_json(f"{self.base_url}/pokemon-species/{entry_id}")
        except NotFoundError as exc:
            raise NotFoundError(entry_id) from exc
        return _build_entry(data, species)

    async def resolve_by_id(self, entry_id: int) -> CatalogEntry:
        """Return the entry for a numeric id, from the cache when possible."""
        if isinstance(entry_id, bool) or not isinstance(entry_id, int) or entry_id < 1:
            raise NotFoundError(entry_id, f"Invalid catalogue id {entry_id!r}")
        return await self.cache.get_or_fetch(entry_id, self._fetch_by_id)

    async def resolve_by_name(self, name: str) -> CatalogEntry:
        """Return the default variety of the species called ``name``.

        The lookup is case-insensitive.  The variety's resource URL is
        fetched as given by the service; if the id it points to is already
        cached, the cached entry is returned instead.
        """
        key = (name or '').strip().lower()
        if not key:
            raise NotFoundError(name, "Empty name")
        try:
            species = await self._http_get_json(f"{self.base_url}/pokemon-species/{key}")
        except NotFoundError as exc:
            raise NotFoundError(name) from exc
        url = _default_variety_url(species, key)

        async def fetch_variety(_entry_id=None) -> CatalogEntry:
            try:
                data = await self._http_get_json(url)
            except NotFoundError as exc:
                raise NotFoundError(name, f"Default variety of {name!r} not found") from exc
            return _build_entry(data, species)

        variety_id = _id_from_pokemon_url(url)
        if variety_id is None:
            return self.cache.put(await fetch_variety())
        return await self.cache.get_or_fetch(variety_id, fetch_variety)

    async def resolve_range(self, start_id: int, count: int) -> List[CatalogEntry]:
        """Resolve ``count`` consecutive ids starting at ``start_id``.

        The result is in id order.  If any id fails, the whole range fails
        with that error; no partial list is returned.
        """
        if count < 0:
            raise ValueError("count must not be negative")
        ids = range(start_id, start_id + count)
        return list(await asyncio.gather(*(self.resolve_by_id(i) for i in ids)))
