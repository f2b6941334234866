"""
Category names and their display colours.

The remote catalogue tags each entry with one or two of eighteen fixed
categories ("types").  The front-end colours badges and card borders from
this table; anything outside the closed set falls back to a neutral grey.
"""

from enum import Enum
from typing import Dict


DEFAULT_CATEGORY_COLOR = "#777"


class Category(str, Enum):
    NORMAL = "normal"
    FIRE = "fire"
    WATER = "water"
    ELECTRIC = "electric"
    GRASS = "grass"
    ICE = "ice"
    FIGHTING = "fighting"
    POISON = "poison"
    GROUND = "ground"
    FLYING = "flying"
    PSYCHIC = "psychic"
    BUG = "bug"
    ROCK = "rock"
    GHOST = "ghost"
    DRAGON = "dragon"
    DARK = "dark"
    STEEL = "steel"
    FAIRY = "fairy"


CATEGORY_COLORS: Dict[Category, str] = {
    Category.NORMAL: "#A8A77A",
    Category.FIRE: "#EE8130",
    Category.WATER: "#6390F0",
    Category.ELECTRIC: "#F7D02C",
    Category.GRASS: "#7AC74C",
    Category.ICE: "#96D9D6",
    Category.FIGHTING: "#C22E28",
    Category.POISON: "#A33EA1",
    Category.GROUND: "#E2BF65",
    Category.FLYING: "#A98FF3",
    Category.PSYCHIC: "#F95587",
    Category.BUG: "#A6B91A",
    Category.ROCK: "#B6A136",
    Category.GHOST: "#735797",
    Category.DRAGON: "#6F35FC",
    Category.DARK: "#705746",
    Category.STEEL: "#B7B7CE",
    Category.FAIRY: "#D685AD",
}


def category_color(name: str) -> str:
    """Return the display colour for a category name (case-insensitive)."""
    try:
        return CATEGORY_COLORS[Category((name or "").strip().lower())]
    except ValueError:
        return DEFAULT_CATEGORY_COLOR
