"""
CensoRaca - Shared Domain Types.
"""
from typing import Union, Literal

# Represents a State (UF) Identifier input
# Can be:
# - int/str IBGE code: 35 or "35"
# - Abbreviation: "SP"
# - Full name: "São Paulo" (accents and case ignored)
StateInput = Union[int, str]

# Canonical race/color keys, in IBGE's publication order, plus the total
CategoryKey = Literal["branca", "preta", "amarela", "parda", "indigena", "total"]

RACE_KEYS = ("branca", "preta", "amarela", "parda", "indigena")
TOTAL_KEY = "total"

RACE_LABELS = {
    "branca": "Branca",
    "preta": "Preta",
    "amarela": "Amarela",
    "parda": "Parda",
    "indigena": "Indígena",
    "total": "Total",
}

# English aliases accepted wherever a category is requested
RACE_ALIASES = {
    "white": "branca",
    "black": "preta",
    "yellow": "amarela",
    "mixed": "parda",
    "indigenous": "indigena",
}
