from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Optional
import typer
from dotenv import load_dotenv

from .settings import configure_logging

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v")) -> None:
    """Composição por cor ou raça dos municípios (Censo IBGE)."""
    load_dotenv()
    configure_logging(logging.DEBUG if verbose else logging.INFO)


@app.command()
def relatorio(
    ano: int = typer.Option(2022, help="Ano do Censo."),
    uf: Optional[List[str]] = typer.Option(None, help="UF (sigla, código ou nome). Repetível."),
    saida: Optional[Path] = typer.Option(None, help="Arquivo HTML de saída."),
    casas_decimais: int = typer.Option(2, min=0, help="Casas decimais dos percentuais."),
    linhas_por_pagina: int = typer.Option(10, min=1, help="Linhas por página na tabela."),
    esquema: Optional[str] = typer.Option(None, help="Esquema mapclassify (ex.: quantiles)."),
    csv: bool = typer.Option(False, "--csv", help="Exporta também a tabela larga em CSV."),
    forcar_download: bool = typer.Option(False, "--forcar-download", help="Ignora o cache."),
) -> None:
    from .app.report import generate_report

    try:
        out = generate_report(
            saida,
            year=ano,
            states=uf,
            decimals=casas_decimais,
            page_length=linhas_por_pagina,
            scheme=esquema,
            export_csv=csv,
            force=forcar_download,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e))
    typer.echo(f"OK: {out}")


@app.command()
def percentuais(
    ano: int = typer.Option(2022, help="Ano do Censo."),
    uf: Optional[List[str]] = typer.Option(None, help="UF (sigla, código ou nome). Repetível."),
    saida: Optional[Path] = typer.Option(None, help="CSV de saída (stdout se omitido)."),
    casas_decimais: int = typer.Option(2, min=0),
    forcar_download: bool = typer.Option(False, "--forcar-download"),
) -> None:
    from .app.race import load_race_observations
    from .core.logic import race as race_logic

    try:
        observations = load_race_observations(year=ano, states=uf, force=forcar_download)
    except ValueError as e:
        raise typer.BadParameter(str(e))

    wide = race_logic.pivot_percentages(
        race_logic.compute_percentages(observations, decimals=casas_decimais)
    )
    if saida is None:
        typer.echo(wide.to_csv(index=False))
    else:
        wide.to_csv(saida, index=False)
        typer.echo(f"OK: {saida}")


if __name__ == "__main__":
    app()
