"""
CensoRaca - Static Choropleth Maps.
"""
import base64
from io import BytesIO
from typing import Optional

import geopandas as gpd
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from censoraca.core.logic.race import normalize_category
from censoraca.core.types import RACE_KEYS, RACE_LABELS
from censoraca.settings import logger
from censoraca.viz.styles import (
    CATEGORY_STYLES,
    EDGE_COLOR,
    EDGE_WIDTH,
    FIGURE_DPI,
    LEGEND_LABEL,
    MAP_FIGSIZE,
    NA_COLOR,
    NA_LABEL,
    build_colormap,
)


def plot_category_choropleth(
    gdf: gpd.GeoDataFrame,
    category: str,
    low: Optional[str] = None,
    high: Optional[str] = None,
    *,
    column: str = "percentual",
    scheme: Optional[str] = None,
    k: int = 5,
    title: Optional[str] = None,
    ax=None,
):
    """
    Renders a choropleth of one race/color category.

    Args:
        gdf: Geometries already joined with the category's percentages.
        category: Category key, label or alias (e.g. 'parda', 'Mixed').
        low, high: Color-scale endpoints. Default to the category style.
        scheme: Optional mapclassify scheme ('quantiles', 'natural_breaks',
                ...). Continuous scale when None.
        k: Number of classes when `scheme` is given.
        title: Map title. Defaults to the category label.
        ax: Existing matplotlib Axes to draw on.

    Returns:
        The matplotlib Figure holding the map.
    """
    key = normalize_category(category)
    default_low, default_high = CATEGORY_STYLES.get(key, ("#f0f0f0", "#252525"))
    cmap = build_colormap(low or default_low, high or default_high, name=f"cmap_{key}")

    if ax is None:
        fig, ax = plt.subplots(figsize=MAP_FIGSIZE)
    else:
        fig = ax.figure

    values = pd.to_numeric(gdf[column], errors="coerce")
    finite = values[np.isfinite(values)]

    plot_kwargs = dict(
        ax=ax,
        edgecolor=EDGE_COLOR,
        linewidth=EDGE_WIDTH,
    )

    if finite.empty:
        logger.warning(f"    ⚠️ No data to plot for '{key}'. Drawing neutral map.")
        gdf.plot(color=NA_COLOR, **plot_kwargs)
    else:
        data = gdf.assign(**{column: values})
        missing_kwds = {"color": NA_COLOR, "label": NA_LABEL}

        # Reduce k if too few distinct values
        k_eff = max(1, min(k, finite.nunique()))
        if scheme and k_eff >= 2:
            data.plot(
                column=column,
                cmap=cmap,
                scheme=scheme,
                k=k_eff,
                legend=True,
                legend_kwds={"title": LEGEND_LABEL, "loc": "lower left", "fontsize": 8},
                missing_kwds=missing_kwds,
                **plot_kwargs,
            )
        else:
            data.plot(
                column=column,
                cmap=cmap,
                vmin=float(finite.min()),
                vmax=float(finite.max()),
                legend=True,
                legend_kwds={"label": LEGEND_LABEL, "shrink": 0.6},
                missing_kwds=missing_kwds,
                **plot_kwargs,
            )

    ax.set_title(title or RACE_LABELS.get(key, key), fontsize=14)
    ax.set_axis_off()
    return fig


def plot_distribution(percentages: pd.DataFrame):
    """
    Boxplot of municipal percentages per race/color category.
    """
    df = percentages.dropna(subset=["percentual"])
    df = df[df["cor_raca"].isin(RACE_KEYS)].copy()
    df["categoria"] = df["cor_raca"].map(RACE_LABELS)

    order = [RACE_LABELS[k] for k in RACE_KEYS]
    palette = {RACE_LABELS[k]: CATEGORY_STYLES[k][1] for k in RACE_KEYS}

    with sns.axes_style("whitegrid"):
        fig, ax = plt.subplots(figsize=(10, 5))
        sns.boxplot(
            data=df,
            x="categoria",
            y="percentual",
            hue="categoria",
            order=order,
            hue_order=order,
            palette=palette,
            legend=False,
            fliersize=1,
            ax=ax,
        )
    ax.set_xlabel("Cor ou raça")
    ax.set_ylabel("% da população do município")
    ax.set_ylim(0, 100)
    ax.set_title("Distribuição dos percentuais municipais")
    return fig


def figure_to_base64_png(fig, dpi: int = FIGURE_DPI) -> str:
    """Serializes a figure to a base64 PNG string and closes it."""
    buffer = BytesIO()
    try:
        fig.savefig(buffer, format="png", dpi=dpi, bbox_inches="tight")
    finally:
        plt.close(fig)
    return base64.b64encode(buffer.getvalue()).decode("ascii")
