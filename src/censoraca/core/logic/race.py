"""
CensoRaca - Core Logic for Race/Color Composition.

This module contains pure functions to harmonize raw SIDRA rows and derive
per-municipality percentages. Nothing here touches the network or the disk.
"""

import pandas as pd
import numpy as np
from typing import Any, Dict, List

from unidecode import unidecode

from censoraca.core.catalog.sidra import (
    SidraTableSpec,
    DIM_MUNICIPALITY,
    DIM_RACE,
)
from censoraca.core.types import CategoryKey, RACE_KEYS, TOTAL_KEY, RACE_ALIASES
from censoraca.settings import logger

# --- Constants ---

OBSERVATION_COLUMNS = [
    "id_municipio",
    "nome_municipio",
    "sigla_uf",
    "cor_raca",
    "populacao",
]

PERCENTAGE_COLUMNS = OBSERVATION_COLUMNS + ["populacao_total", "percentual"]

# SIDRA special values. "-" is an absolute zero; the others mean the value
# is suppressed, not applicable or not available.
SIDRA_ZERO = "-"
SIDRA_MISSING = ("X", "..", "...")

_CATEGORY_ORDER = {key: i for i, key in enumerate(RACE_KEYS + (TOTAL_KEY,))}

# --- Helpers ---


def _find_dimension(header: Dict[str, Any], name: str) -> str:
    """
    Returns the SIDRA dimension prefix (e.g. 'D1') whose name column matches.
    SIDRA orders dimensions by the request path, so positions are not fixed.
    """
    for key, value in header.items():
        if key.startswith("D") and key.endswith("N") and value == name:
            return key[:-1]
    raise ValueError(
        f"SIDRA header has no '{name}' dimension. "
        f"Header received: {header}"
    )


def _parse_values(values: pd.Series) -> pd.Series:
    """Converts SIDRA value strings to floats (markers become NaN)."""
    text = values.astype(str).str.strip()
    text = text.mask(text == SIDRA_ZERO, "0")
    text = text.mask(text.isin(SIDRA_MISSING))
    return pd.to_numeric(text, errors="coerce")


def _sort_categories(df: pd.DataFrame) -> pd.DataFrame:
    order = df["cor_raca"].map(_CATEGORY_ORDER)
    return (
        df.assign(_ordem=order)
        .sort_values(["id_municipio", "_ordem"], kind="stable")
        .drop(columns="_ordem")
        .reset_index(drop=True)
    )


def normalize_category(category: str) -> CategoryKey:
    """
    Maps any accepted category label to its canonical key.

    Accepts canonical keys ('parda'), display labels ('Indígena') and
    English aliases ('Mixed').
    """
    key = unidecode(str(category)).strip().lower()
    if key in _CATEGORY_ORDER:
        return key
    if key in RACE_ALIASES:
        return RACE_ALIASES[key]
    valid = list(RACE_KEYS) + [TOTAL_KEY] + list(RACE_ALIASES)
    raise ValueError(
        f"Unknown race/color category: '{category}'. Use one of {valid}."
    )

# --- Parsing ---


def parse_sidra_rows(
    rows: List[Dict[str, Any]],
    spec: SidraTableSpec,
) -> pd.DataFrame:
    """
    Converts raw SIDRA JSON rows into a long table of observations.

    The first row is SIDRA's header (requested with `/h/y`) and is used to
    locate the municipality and race/color dimensions.

    Returns:
        pd.DataFrame with columns id_municipio, nome_municipio, sigla_uf,
        cor_raca and populacao. One row per (municipality, category).
    """
    if not rows:
        raise ValueError("SIDRA payload is empty (no header row).")

    header, body = rows[0], rows[1:]
    muni_dim = _find_dimension(header, DIM_MUNICIPALITY)
    race_dim = _find_dimension(header, DIM_RACE)

    if not body:
        logger.warning("    ⚠️ SIDRA returned a header without data rows.")
        return pd.DataFrame(columns=OBSERVATION_COLUMNS)

    raw = pd.DataFrame(body)

    # 1. Municipality identifiers ("Abadia de Goiás - GO")
    df = pd.DataFrame({
        "id_municipio": (
            raw[f"{muni_dim}C"]
            .astype(str)
            .str.replace(r'\.0$', '', regex=True)
            .str.zfill(7)
        ),
    })
    names = raw[f"{muni_dim}N"].astype(str).str.rsplit(" - ", n=1, expand=True)
    df["nome_municipio"] = names[0].str.strip()
    df["sigla_uf"] = names[1].str.strip() if names.shape[1] > 1 else np.nan

    # 2. Categories
    raw_categories = raw[f"{race_dim}N"].astype(str).str.strip()
    df["cor_raca"] = raw_categories.map(spec.category_map)

    unknown = set(raw_categories[df["cor_raca"].isna()]) - set(
        spec.ignored_categories
    )
    if unknown:
        logger.warning(
            f"    ⚠️ Dropping unexpected SIDRA categories: {sorted(unknown)}"
        )

    # 3. Values
    df["populacao"] = _parse_values(raw["V"])

    df = df.dropna(subset=["cor_raca"])
    return _sort_categories(df[OBSERVATION_COLUMNS])

# --- Derivations ---


def compute_percentages(
    observations: pd.DataFrame,
    decimals: int = 2,
) -> pd.DataFrame:
    """
    Percentage of each race/color category within its municipality.

    percentual = 100 * populacao / sum(populacao of the five categories)

    Missing counts are dropped before aggregation and the SIDRA 'total' row
    is never used as denominator. Municipalities whose categories sum to zero
    get NaN.
    """
    if not isinstance(decimals, (int, np.integer)) or decimals < 0:
        raise ValueError(f"decimals must be a non-negative int, got {decimals!r}")

    df = observations.dropna(subset=["populacao"])
    df = df[df["cor_raca"] != TOTAL_KEY]

    negative = df["populacao"] < 0
    if negative.any():
        logger.warning(
            f"    ⚠️ Ignoring {int(negative.sum())} negative counts."
        )
        df = df[~negative]

    df = df.copy()
    df["populacao_total"] = df.groupby("id_municipio")["populacao"].transform("sum")

    with np.errstate(divide='ignore', invalid='ignore'):
        share = df["populacao"] / df["populacao_total"].where(
            df["populacao_total"] > 0
        )

    df["percentual"] = (share * 100).round(decimals)
    return _sort_categories(df[PERCENTAGE_COLUMNS])


def filter_category(df: pd.DataFrame, category: str) -> pd.DataFrame:
    """Returns only the rows of one race/color category."""
    key = normalize_category(category)
    return df[df["cor_raca"] == key].copy()


def pivot_percentages(percentages: pd.DataFrame) -> pd.DataFrame:
    """
    Wide table: one row per municipality, one `pct_<categoria>` column per
    race/color category plus the population used as denominator.
    """
    index_cols = ["id_municipio", "nome_municipio", "sigla_uf"]
    keys = percentages[index_cols].drop_duplicates("id_municipio")

    wide = percentages.pivot(
        index="id_municipio", columns="cor_raca", values="percentual"
    ).reindex(columns=list(RACE_KEYS))
    wide.columns = [f"pct_{c}" for c in wide.columns]

    totals = percentages.groupby("id_municipio")["populacao_total"].first()

    out = keys.set_index("id_municipio").join(totals).join(wide)
    return out.reset_index().sort_values("id_municipio").reset_index(drop=True)


def check_total_consistency(
    observations: pd.DataFrame,
    tolerance: float = 0.0,
) -> pd.DataFrame:
    """
    Lists municipalities whose published 'total' differs from the sum of the
    five categories by more than `tolerance` people.
    """
    empty = pd.DataFrame(
        columns=["id_municipio", "total_informado", "soma_categorias", "diferenca"]
    )
    if observations.empty:
        return empty

    counts = observations.pivot_table(
        index="id_municipio",
        columns="cor_raca",
        values="populacao",
        aggfunc="sum",
    )
    if TOTAL_KEY not in counts.columns:
        return empty

    race_cols = [c for c in RACE_KEYS if c in counts.columns]
    report = pd.DataFrame({
        "total_informado": counts[TOTAL_KEY],
        "soma_categorias": counts[race_cols].sum(axis=1, min_count=1),
    })
    report["diferenca"] = report["total_informado"] - report["soma_categorias"]

    mismatched = report[report["diferenca"].abs() > tolerance]
    return mismatched.reset_index()


def summarize_composition(
    observations: pd.DataFrame,
    decimals: int = 2,
) -> pd.DataFrame:
    """
    Composition of the whole requested area (all municipalities pooled).
    """
    df = observations.dropna(subset=["populacao"])
    df = df[df["cor_raca"] != TOTAL_KEY]

    totals = (
        df.groupby("cor_raca")["populacao"].sum()
        .reindex(list(RACE_KEYS), fill_value=0)
    )
    grand_total = totals.sum()
    if grand_total > 0:
        pct = (100 * totals / grand_total).round(decimals)
    else:
        pct = pd.Series(np.nan, index=totals.index)

    return pd.DataFrame({
        "cor_raca": totals.index,
        "populacao": totals.values,
        "percentual": pct.values,
    })

