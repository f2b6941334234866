"""
Catalog package for the Pokédex lookup service.

This package wraps the public PokeAPI creature catalogue: a client that
normalises its resources into one entry type, a write-once cache, and a
controller that owns pagination and search state.  The router exposes that
state as a small JSON API so that a browser front-end can page through the
1025 entries nine at a time or look one up by name.
"""

from .router import router as catalog_router  # noqa: F401
