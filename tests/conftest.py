import logging

import matplotlib
matplotlib.use("Agg")

import pytest
import pandas as pd
import geopandas as gpd
from shapely.geometry import Polygon

from censoraca.core.catalog.sidra import get_sidra_spec
from censoraca.settings import Settings, logger, set_cache_dir, set_output_dir

SIDRA_HEADER = {
    "NC": "Nível Territorial (Código)",
    "NN": "Nível Territorial",
    "MC": "Unidade de Medida (Código)",
    "MN": "Unidade de Medida",
    "V": "Valor",
    "D1C": "Município (Código)",
    "D1N": "Município",
    "D2C": "Variável (Código)",
    "D2N": "Variável",
    "D3C": "Ano (Código)",
    "D3N": "Ano",
    "D4C": "Cor ou raça (Código)",
    "D4N": "Cor ou raça",
}

# (code, "Name - UF", {category: value})
SIDRA_DATA = [
    ("1100015", "Alta Floresta D'Oeste - RO", {
        "Total": "1000", "Branca": "400", "Preta": "100",
        "Amarela": "-", "Parda": "480", "Indígena": "20",
    }),
    ("1100023", "Ariquemes - RO", {
        "Total": "-", "Branca": "-", "Preta": "-",
        "Amarela": "-", "Parda": "-", "Indígena": "-",
    }),
    ("1200013", "Acrelândia - AC", {
        "Total": "...", "Branca": "...", "Preta": "...",
        "Amarela": "...", "Parda": "...", "Indígena": "...",
    }),
    ("3550308", "São Paulo - SP", {
        "Total": "11000", "Branca": "6000", "Preta": "1500",
        "Amarela": "300", "Parda": "3150", "Indígena": "50",
        "Sem declaração": "5",
    }),
    ("5300108", "Brasília - DF", {
        "Total": "1100", "Branca": "X", "Preta": "200",
        "Amarela": "10", "Parda": "700", "Indígena": "90",
    }),
]


def _square(x0: float, y0: float) -> Polygon:
    return Polygon([(x0, y0), (x0 + 1, y0), (x0 + 1, y0 + 1), (x0, y0 + 1)])


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path):
    """Points cache and output dirs to a temporary folder."""
    Settings.reset()
    set_cache_dir(tmp_path / "cache")
    set_output_dir(tmp_path / "outputs")
    yield
    Settings.reset()
    # The CLI attaches a console handler bound to the runner's stream
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)


@pytest.fixture
def sidra_spec():
    return get_sidra_spec(2022)


@pytest.fixture
def sidra_rows():
    """Returns a SIDRA `/values` payload (header + data rows)."""
    rows = [dict(SIDRA_HEADER)]
    for code, name, values in SIDRA_DATA:
        for category, value in values.items():
            rows.append({
                "NC": "6",
                "NN": "Município",
                "MC": "45",
                "MN": "Pessoas",
                "V": value,
                "D1C": code,
                "D1N": name,
                "D2C": "93",
                "D2N": "População residente",
                "D3C": "2022",
                "D3N": "2022",
                "D4C": category,
                "D4N": category,
            })
    return rows


@pytest.fixture
def observations(sidra_rows, sidra_spec):
    from censoraca.core.logic.race import parse_sidra_rows
    return parse_sidra_rows(sidra_rows, sidra_spec)


@pytest.fixture
def percentages(observations):
    from censoraca.core.logic.race import compute_percentages
    return compute_percentages(observations)


@pytest.fixture
def mock_municipalities_gdf():
    """Returns a minimal GeoDataFrame resembling geobr.read_municipality."""
    df = pd.DataFrame({
        "code_muni": [1100015.0, 1100023.0, 1200013.0, 3550308.0, 5300108.0, 2927408.0],
        "name_muni": [
            "Alta Floresta D'Oeste", "Ariquemes", "Acrelândia",
            "SÃ£o Paulo", "Brasília", "Salvador",
        ],
        "code_state": [11.0, 11.0, 12.0, 35.0, 53.0, 29.0],
        "abbrev_state": ["RO", "RO", "AC", "SP", "DF", "BA"],
        "geometry": [_square(i, 0) for i in range(6)],
    })
    return gpd.GeoDataFrame(df, crs="EPSG:4674")


@pytest.fixture
def geometries(mock_municipalities_gdf):
    from censoraca.core.geo.ops import prepare_municipalities
    return prepare_municipalities(mock_municipalities_gdf)
