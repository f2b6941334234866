"""
Shared test fixtures for the Pokédex tests.

``FakePokeAPI`` answers ``/pokemon/{id}`` and ``/pokemon-species/{id|name}``
for a generated 1025-entry catalogue and counts every request, so tests can
assert how often the network was hit.
"""
from collections import Counter

import httpx
import pytest
import pytest_asyncio

from pokedex.catalog.controller import PokedexController
from pokedex.catalog.pokeapi_service import CatalogClient


BASE_URL = "https://pokeapi.test/api/v2"
TOTAL = 1025

KNOWN = {
    1: ("bulbasaur", ["grass", "poison"]),
    4: ("charmander", ["fire"]),
    25: ("pikachu", ["electric"]),
}


def _name(entry_id):
    return KNOWN[entry_id][0] if entry_id in KNOWN else f"mon{entry_id}"


def _types(entry_id):
    return KNOWN[entry_id][1] if entry_id in KNOWN else ["normal"]


class FakePokeAPI:
    def __init__(self, total=TOTAL):
        self.total = total
        self.calls = Counter()
        self.failing = set()       # paths answered with 500
        self.no_english = set()    # ids whose species has no "en" flavour text
        self.empty_english = set()  # ids whose first "en" flavour text is ""
        self.no_default = set()    # species names without a default variety
        self.malformed_variety = set()  # species names whose default variety is not an object
        self.missing_variety = set()  # ids whose pokemon resource 404s via URL
        self.gates = {}            # path -> asyncio.Event awaited before answering

    def pokemon(self, entry_id):
        return {
            "id": entry_id,
            "name": _name(entry_id),
            "sprites": {"front_default": f"https://img.test/{entry_id}.png"},
            "types": [
                {"slot": i + 1, "type": {"name": t, "url": "https://x.test"}}
                for i, t in enumerate(_types(entry_id))
            ],
        }

    def species(self, entry_id):
        flavor = [
            {"flavor_text": "Une description.", "language": {"name": "fr"}},
        ]
        if entry_id not in self.no_english:
            text = f"A strange seed\fwas planted {entry_id}."
            if entry_id in self.empty_english:
                text = ""
            flavor.append(
                {
                    "flavor_text": text,
                    "language": {"name": "en"},
                }
            )
            flavor.append({"flavor_text": "Second english text.", "language": {"name": "en"}})
        name = _name(entry_id)
        return {
            "id": entry_id,
            "name": name,
            "varieties": [
                {
                    "is_default": False,
                    "pokemon": {"name": f"{name}-alt", "url": f"{BASE_URL}/pokemon/{10000 + entry_id}/"},
                },
                {
                    "is_default": name not in self.no_default,
                    "pokemon": (
                        "oops" if name in self.malformed_variety
                        else {"name": name, "url": f"{BASE_URL}/pokemon/{entry_id}/"}
                    ),
                },
            ],
            "flavor_text_entries": flavor,
        }

    def _lookup(self, key):
        if key.isdigit():
            entry_id = int(key)
            return entry_id if 1 <= entry_id <= self.total else None
        for entry_id in range(1, self.total + 1):
            if _name(entry_id) == key:
                return entry_id
        return None

    async def handler(self, request):
        path = request.url.path.replace("/api/v2", "").rstrip("/")
        self.calls[path] += 1
        gate = self.gates.get(path)
        if gate is not None:
            await gate.wait()
        if path in self.failing:
            return httpx.Response(500, text="boom")
        parts = path.strip("/").split("/")
        if len(parts) != 2:
            return httpx.Response(404, text="Not Found")
        resource, key = parts
        entry_id = self._lookup(key)
        if entry_id is None:
            return httpx.Response(404, text="Not Found")
        if resource == "pokemon":
            if entry_id in self.missing_variety:
                return httpx.Response(404, text="Not Found")
            return httpx.Response(200, json=self.pokemon(entry_id))
        if resource == "pokemon-species":
            return httpx.Response(200, json=self.species(entry_id))
        return httpx.Response(404, text="Not Found")

    def base_calls(self, entry_id):
        return self.calls[f"/pokemon/{entry_id}"]


@pytest.fixture
def fake_api():
    return FakePokeAPI()


@pytest_asyncio.fixture
async def http_client(fake_api):
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler))
    yield client
    await client.aclose()


@pytest.fixture
def client(http_client):
    return CatalogClient(http_client=http_client, base_url=BASE_URL)


@pytest.fixture
def controller(client):
    return PokedexController(client)
