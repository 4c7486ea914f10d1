"""
CensoRaca - Core Geo Utilities.
"""
import geopandas as gpd
import pandas as pd

# SIRGAS 2000 geographic, as published by geobr
DEFAULT_CRS = "EPSG:4674"


def standardize_muni_code(codes: pd.Series) -> pd.Series:
    """
    Normalizes municipality codes (int, float or str) to 7-char strings.
    Removes .0 suffix (common in int->float->str conversions).
    """
    return (
        codes
        .astype(str)
        .str.replace(r'\.0$', '', regex=True)
        .str.zfill(7)
    )


def fix_encoding(text):
    """
    Repairs common mojibake (UTF-8 bytes interpreted as Windows-1252).
    Example: 'SÃ£o Paulo' -> 'São Paulo'
    """
    if not isinstance(text, str):
        return text
    try:
        return text.encode("cp1252").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        return text


def clean_geometries(gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """
    Fixes invalid geometries using buffer(0).
    Only applies fix to geometries marked as invalid to save time.
    """
    if gdf.empty:
        return gdf

    # Missing geometries are neither valid nor fixable
    invalid_mask = ~gdf.is_valid & gdf.geometry.notna()

    if invalid_mask.any():
        gdf = gdf.copy()
        gdf.loc[invalid_mask, "geometry"] = gdf.loc[invalid_mask, "geometry"].buffer(0)

    return gdf
