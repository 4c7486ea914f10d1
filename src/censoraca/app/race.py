"""
CensoRaca - Application Layer for Race/Color Composition.

Orchestrates the loading of tabular data (SIDRA) and municipal geometries
(geobr) to produce ready-to-plot tables and GeoDataFrames.
"""
import pandas as pd
import geopandas as gpd
from typing import Dict, Iterable, List, Optional, Tuple

from censoraca.core.catalog.sidra import get_sidra_spec
from censoraca.core.geo import ops
from censoraca.core.logic import race as race_logic
from censoraca.core.types import RACE_KEYS, StateInput
from censoraca.infra.geo import resolver, municipalities
from censoraca.settings import logger


def load_race_observations(
    year: int = 2022,
    states: Optional[Iterable[StateInput]] = None,
    force: bool = False,
) -> pd.DataFrame:
    """
    Loads raw race/color counts per municipality from SIDRA.

    Args:
        year: Census year (must be registered in the SIDRA catalog).
        states: Optional states to restrict the query (codes, 'SP', names).
                Whole country when None.
        force: Ignore the download cache.

    Returns:
        Long DataFrame: id_municipio, nome_municipio, sigla_uf, cor_raca,
        populacao.
    """
    spec = get_sidra_spec(year)
    uf_codes = resolver.resolve_states(states)

    from censoraca.infra.adapters import sidra_api
    rows = sidra_api.fetch_sidra_rows(spec, uf_codes=uf_codes, force=force)

    observations = race_logic.parse_sidra_rows(rows, spec)
    if observations.empty:
        raise RuntimeError("No race/color data found for requested criteria.")

    mismatched = race_logic.check_total_consistency(observations)
    if not mismatched.empty:
        logger.warning(
            f"    ⚠️ {len(mismatched)} municipalities have a published total "
            "different from the sum of the five categories."
        )

    n_munis = observations["id_municipio"].nunique()
    logger.info(f"    📊 Loaded counts for {n_munis} municipalities.")
    return observations


def load_geometries(
    year: int = 2022,
    states: Optional[Iterable[StateInput]] = None,
    simplified: bool = True,
) -> gpd.GeoDataFrame:
    """Loads and standardizes municipal boundaries."""
    uf_codes = resolver.resolve_states(states)
    raw = municipalities.fetch_municipalities_raw(
        year=year, uf_codes=uf_codes, simplified=simplified
    )
    return ops.prepare_municipalities(raw)


def load_race_composition(
    year: int = 2022,
    states: Optional[Iterable[StateInput]] = None,
    decimals: int = 2,
    force: bool = False,
) -> Tuple[pd.DataFrame, gpd.GeoDataFrame]:
    """
    Loads counts and boundaries and derives per-municipality percentages.

    Returns:
        (percentages, geometries). `percentages` is long (one row per
        municipality and category); `geometries` has one row per
        municipality.
    """
    observations = load_race_observations(year=year, states=states, force=force)
    percentages = race_logic.compute_percentages(observations, decimals=decimals)

    logger.info("    🗺️  Fetching municipal geometries...")
    geometries = load_geometries(year=year, states=states)

    return percentages, geometries


def build_category_maps(
    percentages: pd.DataFrame,
    geometries: gpd.GeoDataFrame,
    categories: Optional[List[str]] = None,
) -> Dict[str, gpd.GeoDataFrame]:
    """
    Joins each category's percentages onto all geometries.

    Returns:
        Mapping of canonical category key -> GeoDataFrame with one row per
        geometry.
    """
    if categories is None:
        categories = list(RACE_KEYS)

    maps: Dict[str, gpd.GeoDataFrame] = {}
    for category in categories:
        key = race_logic.normalize_category(category)
        maps[key] = ops.join_category(geometries, percentages, key)
    return maps
