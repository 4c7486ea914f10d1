"""
CensoRaca - Core Geo Operations (Preparation & Joins).
"""
import geopandas as gpd
import pandas as pd

from censoraca.core.geo.utils import (
    DEFAULT_CRS,
    clean_geometries,
    fix_encoding,
    standardize_muni_code,
)
from censoraca.core.logic.race import filter_category, normalize_category
from censoraca.settings import logger

GEOMETRY_COLUMNS = ["id_municipio", "nome_municipio", "sigla_uf", "geometry"]


def prepare_municipalities(raw: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """
    Standardizes raw geobr municipalities:
    1. Standardizes ID column (code_muni -> 7-char id_municipio).
    2. Repairs encoding artifacts in names.
    3. Cleans invalid geometries.
    """
    gdf = raw.copy()

    if "code_muni" in gdf.columns:
        gdf["id_municipio"] = standardize_muni_code(gdf["code_muni"])
    elif "id_municipio" in gdf.columns:
        gdf["id_municipio"] = standardize_muni_code(gdf["id_municipio"])
    else:
        raise ValueError(
            "Municipal boundaries have no 'code_muni' or 'id_municipio' column."
        )

    gdf = gdf.rename(columns={"name_muni": "nome_municipio", "abbrev_state": "sigla_uf"})
    for col in ("nome_municipio", "sigla_uf"):
        if col in gdf.columns:
            gdf[col] = gdf[col].apply(fix_encoding)
        else:
            gdf[col] = pd.NA

    if gdf.crs is None:
        gdf = gdf.set_crs(DEFAULT_CRS)

    gdf = clean_geometries(gdf)

    duplicated = gdf["id_municipio"].duplicated()
    if duplicated.any():
        logger.warning(
            f"    ⚠️ Dropping {int(duplicated.sum())} duplicated municipality geometries."
        )
        gdf = gdf[~duplicated]

    return gdf[GEOMETRY_COLUMNS].reset_index(drop=True)


def join_observations(
    geometries: gpd.GeoDataFrame,
    table: pd.DataFrame,
) -> gpd.GeoDataFrame:
    """
    Left-joins a municipality-keyed table onto the geometries.

    Every geometry is preserved; geometries without a match keep null
    attribute fields. Names from the geometry side take precedence.
    """
    attrs = table.drop(
        columns=[c for c in ("nome_municipio", "sigla_uf", "geometry") if c in table.columns]
    )

    if attrs["id_municipio"].duplicated().any():
        raise ValueError(
            "Join table has repeated municipality codes. "
            "Filter a single category before joining."
        )

    joined = geometries.merge(attrs, on="id_municipio", how="left")

    unmatched = joined[attrs.columns.drop("id_municipio")].isna().all(axis=1)
    if unmatched.any():
        logger.warning(
            f"    ⚠️ {int(unmatched.sum())} municipalities have no data "
            "and will be drawn in the neutral color."
        )

    missing_geo = ~attrs["id_municipio"].isin(geometries["id_municipio"])
    if missing_geo.any():
        logger.warning(
            f"    ⚠️ {int(missing_geo.sum())} data rows have no matching "
            "geometry and are left out of the map."
        )

    return joined


def join_category(
    geometries: gpd.GeoDataFrame,
    percentages: pd.DataFrame,
    category: str,
) -> gpd.GeoDataFrame:
    """Joins one race/color category's percentages onto all geometries."""
    subset = filter_category(percentages, category)
    joined = join_observations(geometries, subset)
    # Unmatched rows still belong to this category's map
    joined["cor_raca"] = normalize_category(category)
    return joined
