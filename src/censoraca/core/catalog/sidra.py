"""
CensoRaca - Core Catalog for SIDRA Tables.

Defines the "contract" for every SIDRA table the report knows how to read:
which table/variable/classification to query and how SIDRA's category names
map to the canonical race/color keys.
"""

from typing import Dict, List, Optional, Iterable
from pydantic import BaseModel, Field, ConfigDict

# ---------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------

# Territorial level codes used by SIDRA
LEVEL_MUNICIPALITY = "n6"
LEVEL_STATE = "n3"

# Dimension names as they appear in the SIDRA header row
DIM_MUNICIPALITY = "Município"
DIM_RACE = "Cor ou raça"

CENSUS_2022_RACE_MAP: Dict[str, str] = {
    "Total": "total",
    "Branca": "branca",
    "Preta": "preta",
    "Amarela": "amarela",
    "Parda": "parda",
    "Indígena": "indigena",
}

# ---------------------------------------------------------------------
# Data Models
# ---------------------------------------------------------------------


class SidraTableSpec(BaseModel):
    """
    Defines the configuration contract for a SIDRA race/color table.
    """
    model_config = ConfigDict(frozen=True)

    year: int
    table_id: int
    variable_id: int
    classification_id: int
    territorial_level: str = LEVEL_MUNICIPALITY
    description: str = ""

    # SIDRA category name -> canonical key
    category_map: Dict[str, str] = Field(default_factory=dict)
    # Categories published by SIDRA but left out of the composition
    ignored_categories: List[str] = Field(default_factory=list)

    def build_path(self, uf_codes: Optional[Iterable[int]] = None) -> str:
        """
        Builds the SIDRA `/values` path for this table.

        Without `uf_codes` every municipality is requested; otherwise only
        those inside the given states (`in n3 35,33`).
        """
        if uf_codes:
            codes = ",".join(str(int(c)) for c in sorted(set(uf_codes)))
            territory = f"in {LEVEL_STATE} {codes}"
        else:
            territory = "all"

        return (
            f"/values/t/{self.table_id}"
            f"/{self.territorial_level}/{territory}"
            f"/v/{self.variable_id}"
            f"/p/{self.year}"
            f"/c{self.classification_id}/all"
            "/h/y"
        )


# ---------------------------------------------------------------------
# Catalog Registry
# ---------------------------------------------------------------------

SIDRA_CATALOG: List[SidraTableSpec] = [
    # Censo 2022 - População residente, por cor ou raça
    SidraTableSpec(
        year=2022,
        table_id=9605,
        variable_id=93,
        classification_id=86,
        description="População residente, por cor ou raça (Censo 2022)",
        category_map=CENSUS_2022_RACE_MAP,
    ),
]


def get_sidra_spec(year: int) -> SidraTableSpec:
    """Returns the catalog entry for the requested census year."""
    for spec in SIDRA_CATALOG:
        if spec.year == year:
            return spec

    available = sorted(s.year for s in SIDRA_CATALOG)
    raise ValueError(
        f"No SIDRA race/color table registered for year {year}. "
        f"Available years: {available}"
    )
