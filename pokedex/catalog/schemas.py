"""
Pydantic schema definitions for the Pokédex catalogue.

The ``CatalogEntry`` model is the single normalised shape for a creature,
whatever mix of PokeAPI resources it was assembled from. The ``PageView``
model bundles the entries currently on display with pagination and search
metadata so that clients know which controls to enable.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .categories import category_color


DESCRIPTION_SENTINEL = "No description available."


class CatalogEntry(BaseModel):
    """A single catalogue entry.

    Entries are immutable once built: the cache hands out the same
    instance for the rest of the session.  ``categories`` holds one or two
    category names in the order the service lists them; the first one is
    the primary accent.  ``image_url`` is an empty string when the service
    has no sprite.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(gt=0)
    name: str
    image_url: str = ""
    categories: List[str] = Field(min_length=1, max_length=2)
    description: str = DESCRIPTION_SENTINEL

    @computed_field
    @property
    def display_name(self) -> str:
        return self.name.title()

    @computed_field
    @property
    def accent_colors(self) -> List[str]:
        # Two colours for the card border; single-category entries repeat
        # the first one.
        primary = category_color(self.categories[0])
        if len(self.categories) > 1:
            return [primary, category_color(self.categories[1])]
        return [primary, primary]


class CategoryColor(BaseModel):
    category: str
    color: str


class PageView(BaseModel):
    """A snapshot of the controller's display state."""

    page: int
    page_size: int
    total: int
    total_pages: int
    offset: int
    query: str = ""
    not_found: bool = False
    has_prev: bool
    has_next: bool
    items: List[CatalogEntry]
