"""
Route definitions for the Pokédex API.

Endpoints under /api/pokedex:
- GET  /page                : current page view (first call loads page 1)
- POST /page/next           : advance one page
- POST /page/prev           : go back one page
- GET  /search?q=           : show one entry by name; empty q returns to the page
- GET  /entries/{entry_id}  : one entry by id
- GET  /categories          : category colour table
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from .categories import CATEGORY_COLORS, DEFAULT_CATEGORY_COLOR
from .controller import PokedexController
from .errors import NotFoundError, TransientError
from .pokeapi_service import CatalogClient
from .schemas import CatalogEntry, CategoryColor, PageView


router = APIRouter(prefix="/api/pokedex", tags=["pokedex"])

# One controller per process: the cache and display state live for the
# whole session.
_controller: Optional[PokedexController] = None


def get_controller() -> PokedexController:
    global _controller
    if _controller is None:
        _controller = PokedexController(CatalogClient())
    return _controller


async def close_controller() -> None:
    global _controller
    if _controller is not None:
        await _controller.client.aclose()
        _controller = None


@router.get("/page", response_model=PageView)
async def current_page(controller: PokedexController = Depends(get_controller)) -> PageView:
    """
    Returns the entries on display.

    The first request performs the initial load.  A failed load is not
    reported as an error: the response simply carries the previous (possibly
    empty) item list.
    """
    if not controller.loaded:
        await controller.load_page()
    return controller.snapshot()


@router.post("/page/next", response_model=PageView)
async def next_page(controller: PokedexController = Depends(get_controller)) -> PageView:
    await controller.next_page()
    return controller.snapshot()


@router.post("/page/prev", response_model=PageView)
async def prev_page(controller: PokedexController = Depends(get_controller)) -> PageView:
    await controller.prev_page()
    return controller.snapshot()


@router.get("/search", response_model=PageView)
async def search(
    q: str = Query(default="", description="Creature name (case-insensitive)"),
    controller: PokedexController = Depends(get_controller),
) -> PageView:
    await controller.search(q)
    return controller.snapshot()


@router.get("/entries/{entry_id}", response_model=CatalogEntry)
async def get_entry(
    entry_id: int,
    controller: PokedexController = Depends(get_controller),
) -> CatalogEntry:
    try:
        return await controller.client.resolve_by_id(entry_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Entry not found")
    except TransientError as exc:
        raise HTTPException(status_code=502, detail=exc.message)


@router.get("/categories", response_model=List[CategoryColor])
def list_categories() -> List[CategoryColor]:
    colors = [
        CategoryColor(category=category.value, color=color)
        for category, color in CATEGORY_COLORS.items()
    ]
    colors.append(CategoryColor(category="default", color=DEFAULT_CATEGORY_COLOR))
    return colors
