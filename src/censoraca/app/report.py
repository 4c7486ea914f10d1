"""
CensoRaca - Application Layer for the HTML Report.

Runs the whole pipeline: fetch, join, compute percentages, render one
choropleth per category plus the interactive table, and write the page.
"""
from pathlib import Path
from typing import Iterable, Optional

from censoraca.app.race import (
    build_category_maps,
    load_geometries,
    load_race_observations,
)
from censoraca.core.logic import race as race_logic
from censoraca.core.types import RACE_LABELS, StateInput
from censoraca.infra.geo.resolver import resolve_states, state_abbrev
from censoraca.settings import get_output_dir, logger

DEFAULT_REPORT_NAME = "relatorio_cor_raca_{year}.html"


def generate_report(
    output_path: Optional[Path] = None,
    *,
    year: int = 2022,
    states: Optional[Iterable[StateInput]] = None,
    decimals: int = 2,
    page_length: int = 10,
    scheme: Optional[str] = None,
    export_csv: bool = False,
    force: bool = False,
) -> Path:
    """
    Builds the race/color report and writes it as a single HTML file.

    Args:
        output_path: Destination file. Defaults to the configured output dir.
        year: Census year.
        states: Optional states to restrict the report (whole country if None).
        decimals: Rounding precision of the percentages.
        page_length: Rows per page in the interactive table.
        scheme: Optional mapclassify scheme for the maps.
        export_csv: Also write the wide percentage table as CSV.
        force: Ignore the download cache.

    Returns:
        Path of the written HTML report.
    """
    from censoraca.viz import maps as viz_maps
    from censoraca.viz.report import render_report_html
    from censoraca.viz.table import build_interactive_table

    if output_path is None:
        output_path = get_output_dir() / DEFAULT_REPORT_NAME.format(year=year)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    uf_codes = resolve_states(states)
    scope = ", ".join(state_abbrev(c) for c in uf_codes) if uf_codes else "Brasil"

    # 1. Data
    observations = load_race_observations(year=year, states=uf_codes, force=force)
    percentages = race_logic.compute_percentages(observations, decimals=decimals)
    summary = race_logic.summarize_composition(observations, decimals=decimals)

    # 2. Geometry + join
    geometries = load_geometries(year=year, states=uf_codes)
    category_maps = build_category_maps(percentages, geometries)

    # 3. Figures
    logger.info(f"    🎨 Rendering {len(category_maps)} choropleths...")
    rendered = []
    for key, gdf in category_maps.items():
        fig = viz_maps.plot_category_choropleth(gdf, key, scheme=scheme)
        rendered.append((RACE_LABELS[key], viz_maps.figure_to_base64_png(fig)))

    distribution = viz_maps.figure_to_base64_png(
        viz_maps.plot_distribution(percentages)
    )

    # 4. Page
    table_html = build_interactive_table(percentages, page_length=page_length)
    page = render_report_html(
        title=f"População residente por cor ou raça, {scope} ({year})",
        maps=rendered,
        table_html=table_html,
        summary=summary,
        extra_figures=[("Distribuição dos percentuais municipais", distribution)],
        metadata={
            "Fonte": "IBGE, Censo Demográfico (SIDRA) e geobr",
            "Municípios": str(len(geometries)),
        },
        decimals=decimals,
    )
    output_path.write_text(page, encoding="utf-8")
    logger.info(f"✅ Report written to {output_path}")

    if export_csv:
        csv_path = output_path.with_suffix(".csv")
        race_logic.pivot_percentages(percentages).to_csv(csv_path, index=False)
        logger.info(f"✅ Percentages exported to {csv_path}")

    return output_path
