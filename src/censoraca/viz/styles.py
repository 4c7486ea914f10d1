"""
CensoRaca - Visualization Styles & Theme Constants.
"""
from typing import Dict, Tuple

from matplotlib.colors import LinearSegmentedColormap

# Color-scale endpoints (low, high) for each race/color map
CATEGORY_STYLES: Dict[str, Tuple[str, str]] = {
    "branca": ("#f7fbff", "#08306b"),
    "preta": ("#fff5eb", "#7f2704"),
    "amarela": ("#ffffe5", "#b8860b"),
    "parda": ("#fff5f0", "#67000d"),
    "indigena": ("#f7fcf5", "#00441b"),
}

# Neutral fill for municipalities without data
NA_COLOR = "#d9d9d9"
NA_LABEL = "Sem dados"

EDGE_COLOR = "#ffffff"
EDGE_WIDTH = 0.05

MAP_FIGSIZE = (8, 8)
FIGURE_DPI = 150

LEGEND_LABEL = "% da população residente"


def build_colormap(low: str, high: str, name: str = "censoraca") -> LinearSegmentedColormap:
    """Two-endpoint linear colormap."""
    return LinearSegmentedColormap.from_list(name, [low, high])

