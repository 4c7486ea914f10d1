from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from censoraca.cli import app

runner = CliRunner()


def test_relatorio_passes_options(tmp_path):
    target = tmp_path / "r.html"
    with patch("censoraca.app.report.generate_report", return_value=target) as gen:
        result = runner.invoke(app, [
            "relatorio", "--uf", "SP", "--uf", "RJ", "--saida", str(target),
            "--casas-decimais", "1", "--linhas-por-pagina", "50", "--csv",
        ])

    assert result.exit_code == 0, result.output
    assert f"OK: {target}" in result.output
    args, kwargs = gen.call_args
    assert args[0] == Path(target)
    assert kwargs["states"] == ["SP", "RJ"]
    assert kwargs["decimals"] == 1
    assert kwargs["page_length"] == 50
    assert kwargs["export_csv"] is True
    assert kwargs["force"] is False


def test_relatorio_bad_state_is_usage_error():
    with patch("censoraca.app.report.generate_report",
               side_effect=ValueError("Could not resolve state: 'ZZ'.")):
        result = runner.invoke(app, ["relatorio", "--uf", "ZZ"])

    assert result.exit_code == 2


def test_percentuais_prints_csv(observations):
    with patch("censoraca.app.race.load_race_observations", return_value=observations):
        result = runner.invoke(app, ["percentuais"])

    assert result.exit_code == 0, result.output
    header = result.output.splitlines()[0]
    assert header.startswith("id_municipio,nome_municipio,sigla_uf")
    assert "pct_parda" in header


def test_percentuais_writes_file(observations, tmp_path):
    target = tmp_path / "p.csv"
    with patch("censoraca.app.race.load_race_observations", return_value=observations) as load:
        result = runner.invoke(app, ["percentuais", "--uf", "ro", "--saida", str(target)])

    assert result.exit_code == 0, result.output
    assert load.call_args.kwargs["states"] == ["ro"]
    assert target.read_text(encoding="utf-8").startswith("id_municipio")
