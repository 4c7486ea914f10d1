"""
CensoRaca - Infrastructure Geo Adapter (Municipal Boundaries).
"""
import pandas as pd
import geopandas as gpd
from typing import Iterable, List, Optional
from censoraca.settings import logger


def fetch_municipalities_raw(
    year: int = 2022,
    uf_codes: Optional[Iterable[int]] = None,
    simplified: bool = True,
) -> gpd.GeoDataFrame:
    """
    Fetches raw municipal boundaries from geobr.

    Without `uf_codes` the whole country is loaded in one call; otherwise
    one call per state.
    """
    try:
        import geobr
    except ImportError:
        raise ImportError(
            "The 'geobr' library is required to fetch municipal boundaries. "
            "Please install it via `pip install geobr`."
        )

    if not uf_codes:
        logger.info(f"    🗺️  Fetching municipal boundaries for Brasil ({year})...")
        # verbose=False suppresses geobr's own print statements
        gdf = geobr.read_municipality(
            code_muni="all", year=year, simplified=simplified, verbose=False
        )
        if gdf is None or gdf.empty:
            raise RuntimeError(f"geobr returned no municipalities for {year}.")
        return gdf

    codes = sorted({int(c) for c in uf_codes})
    logger.info(
        f"    🗺️  Fetching municipal boundaries for {len(codes)} "
        f"state(s) ({year})..."
    )

    dfs: List[gpd.GeoDataFrame] = []
    for code in codes:
        df = geobr.read_municipality(
            code_muni=code, year=year, simplified=simplified, verbose=False
        )
        if df is None or df.empty:
            raise RuntimeError(
                f"geobr returned no municipalities for state {code} ({year})."
            )
        dfs.append(df)

    return gpd.GeoDataFrame(pd.concat(dfs, ignore_index=True), crs=dfs[0].crs)
