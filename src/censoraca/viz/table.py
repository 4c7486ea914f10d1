"""
CensoRaca - Interactive Data Table (DataTables via itables).
"""
from typing import Optional

import pandas as pd

from censoraca.core.types import RACE_LABELS

DISPLAY_COLUMNS = {
    "id_municipio": "Código",
    "nome_municipio": "Município",
    "sigla_uf": "UF",
    "cor_raca": "Cor ou raça",
    "populacao": "População",
    "populacao_total": "População total",
    "percentual": "Percentual (%)",
}

LENGTH_MENU = [10, 25, 50, 100]


def format_table(percentages: pd.DataFrame) -> pd.DataFrame:
    """Renames columns and categories to their display labels."""
    df = percentages[[c for c in DISPLAY_COLUMNS if c in percentages.columns]].copy()
    if "cor_raca" in df.columns:
        df["cor_raca"] = df["cor_raca"].map(RACE_LABELS).fillna(df["cor_raca"])
    for col in ("populacao", "populacao_total"):
        if col in df.columns:
            df[col] = df[col].round().astype("Int64")
    return df.rename(columns=DISPLAY_COLUMNS)


def build_interactive_table(
    percentages: pd.DataFrame,
    page_length: int = 10,
    caption: Optional[str] = None,
) -> str:
    """
    Returns a standalone HTML DataTable: sortable, paginated, horizontally
    scrollable, with one filter box per column.
    """
    if page_length < 1:
        raise ValueError(f"page_length must be positive, got {page_length}")

    from itables import to_html_datatable

    length_menu = sorted(set(LENGTH_MENU + [page_length]))
    return to_html_datatable(
        format_table(percentages),
        caption=caption,
        connected=True,
        showIndex=False,
        pageLength=page_length,
        lengthMenu=length_menu,
        scrollX=True,
        column_filters="header",
        classes="display nowrap compact",
        # Do not downsample: every municipality must be in the table
        maxBytes=0,
    )
