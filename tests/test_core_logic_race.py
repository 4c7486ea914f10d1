from typing import get_args

import numpy as np
import pandas as pd
import pytest

from censoraca.core.logic.race import (
    check_total_consistency,
    compute_percentages,
    filter_category,
    normalize_category,
    parse_sidra_rows,
    pivot_percentages,
    summarize_composition,
)
from censoraca.core.types import CategoryKey, RACE_KEYS, RACE_LABELS


def _row(observations, code, category):
    mask = (observations["id_municipio"] == code) & (observations["cor_raca"] == category)
    return observations[mask].iloc[0]

# --- Parsing ---

def test_parse_sidra_rows_structure(observations):
    assert list(observations.columns) == [
        "id_municipio", "nome_municipio", "sigla_uf", "cor_raca", "populacao",
    ]
    # 5 municipalities x (5 categories + total); 'Sem declaração' is dropped
    assert len(observations) == 30
    assert set(observations["cor_raca"]) == set(RACE_KEYS) | {"total"}


def test_parse_sidra_rows_splits_name_and_uf(observations):
    sp = _row(observations, "3550308", "total")
    assert sp["nome_municipio"] == "São Paulo"
    assert sp["sigla_uf"] == "SP"

    alta = _row(observations, "1100015", "branca")
    assert alta["nome_municipio"] == "Alta Floresta D'Oeste"


def test_parse_sidra_rows_value_markers(observations):
    # '-' is an absolute zero
    assert _row(observations, "1100015", "amarela")["populacao"] == 0
    # 'X' and '...' are missing
    assert pd.isna(_row(observations, "5300108", "branca")["populacao"])
    assert pd.isna(_row(observations, "1200013", "parda")["populacao"])


def test_parse_sidra_rows_pads_codes(sidra_rows, sidra_spec):
    sidra_rows[1]["D1C"] = "110001.0"
    df = parse_sidra_rows(sidra_rows, sidra_spec)
    assert "0110001" in set(df["id_municipio"])


def test_parse_sidra_rows_dimension_order_independent(sidra_rows, sidra_spec):
    """Swapping D1/D4 (as SIDRA does when the path order changes) is handled."""
    swapped = []
    for row in sidra_rows:
        new = dict(row)
        new["D1C"], new["D4C"] = row["D4C"], row["D1C"]
        new["D1N"], new["D4N"] = row["D4N"], row["D1N"]
        swapped.append(new)

    expected = parse_sidra_rows(sidra_rows, sidra_spec)
    result = parse_sidra_rows(swapped, sidra_spec)
    pd.testing.assert_frame_equal(result, expected)


def test_parse_sidra_rows_missing_dimension(sidra_rows, sidra_spec):
    sidra_rows[0]["D4N"] = "Sexo"
    with pytest.raises(ValueError, match="Cor ou raça"):
        parse_sidra_rows(sidra_rows, sidra_spec)


def test_parse_sidra_rows_empty_payload(sidra_spec):
    with pytest.raises(ValueError, match="empty"):
        parse_sidra_rows([], sidra_spec)


def test_parse_sidra_rows_header_only(sidra_rows, sidra_spec):
    df = parse_sidra_rows(sidra_rows[:1], sidra_spec)
    assert df.empty
    assert "cor_raca" in df.columns

# --- Percentages ---

def test_percentages_sum_to_100(percentages):
    valid = percentages.dropna(subset=["percentual"])
    sums = valid.groupby("id_municipio")["percentual"].sum()
    assert not sums.empty
    assert np.allclose(sums, 100, atol=0.05)


def test_percentages_exclude_total(percentages):
    assert "total" not in set(percentages["cor_raca"])


def test_percentages_values(percentages):
    alta = percentages[percentages["id_municipio"] == "1100015"].set_index("cor_raca")
    assert alta.loc["branca", "percentual"] == 40.0
    assert alta.loc["parda", "percentual"] == 48.0
    assert alta.loc["amarela", "percentual"] == 0.0
    assert (alta["populacao_total"] == 1000).all()

    sp = percentages[percentages["id_municipio"] == "3550308"].set_index("cor_raca")
    assert sp.loc["branca", "percentual"] == pytest.approx(54.55)
    assert sp.loc["indigena", "percentual"] == pytest.approx(0.45)


def test_percentages_drop_missing_before_aggregation(percentages):
    df = percentages[percentages["id_municipio"] == "5300108"].set_index("cor_raca")
    # 'branca' was suppressed ('X'): denominator is the remaining 1000 people
    assert "branca" not in df.index
    assert df.loc["parda", "percentual"] == 70.0
    # Municipality with every value missing disappears
    assert "1200013" not in set(percentages["id_municipio"])


def test_percentages_zero_population_is_nan(percentages):
    ariquemes = percentages[percentages["id_municipio"] == "1100023"]
    assert len(ariquemes) == 5
    assert ariquemes["percentual"].isna().all()


@pytest.mark.parametrize("decimals", [0, 1, 2])
def test_percentages_rounding_bounds(observations, decimals):
    df = compute_percentages(observations, decimals=decimals)
    valid = df["percentual"].dropna()
    assert (valid >= 0).all()
    assert (valid <= 100).all()
    assert np.allclose(valid, valid.round(decimals))


def test_percentages_one_decimal(observations):
    df = compute_percentages(observations, decimals=1)
    sp = df[df["id_municipio"] == "3550308"].set_index("cor_raca")
    assert sp.loc["branca", "percentual"] == pytest.approx(54.5)


def test_percentages_are_idempotent(observations):
    first = compute_percentages(observations)
    second = compute_percentages(observations)
    pd.testing.assert_frame_equal(first, second)
    # Input is left untouched
    assert "percentual" not in observations.columns


@pytest.mark.parametrize("decimals", [-1, 1.5, "2"])
def test_percentages_invalid_decimals(observations, decimals):
    with pytest.raises(ValueError, match="decimals"):
        compute_percentages(observations, decimals=decimals)


def test_percentages_ignore_negative_counts(observations):
    obs = observations.copy()
    idx = obs[(obs["id_municipio"] == "1100015") & (obs["cor_raca"] == "preta")].index
    obs.loc[idx, "populacao"] = -10
    df = compute_percentages(obs)
    assert (df["percentual"].dropna() >= 0).all()

# --- Filtering ---

@pytest.mark.parametrize("category", list(RACE_KEYS))
def test_filter_category_only_returns_that_category(percentages, category):
    subset = filter_category(percentages, category)
    assert not subset.empty
    assert set(subset["cor_raca"]) == {category}


@pytest.mark.parametrize("label, expected", [
    ("Indígena", "indigena"),
    ("PARDA", "parda"),
    ("Mixed", "parda"),
    ("white", "branca"),
    ("Total", "total"),
])
def test_normalize_category_aliases(label, expected):
    assert normalize_category(label) == expected


def test_normalize_category_keys_match_literal():
    assert set(get_args(CategoryKey)) == set(RACE_KEYS) | {"total"}
    for label in RACE_LABELS.values():
        assert normalize_category(label) in get_args(CategoryKey)


def test_filter_category_unknown(percentages):
    with pytest.raises(ValueError, match="Unknown race/color category"):
        filter_category(percentages, "verde")

# --- Derived tables ---

def test_pivot_percentages(percentages):
    wide = pivot_percentages(percentages)
    assert wide["id_municipio"].is_unique
    assert list(wide.columns) == [
        "id_municipio", "nome_municipio", "sigla_uf", "populacao_total",
        "pct_branca", "pct_preta", "pct_amarela", "pct_parda", "pct_indigena",
    ]
    df = wide.set_index("id_municipio")
    assert df.loc["1100015", "pct_parda"] == 48.0
    assert pd.isna(df.loc["5300108", "pct_branca"])


def test_check_total_consistency(observations):
    mismatched = check_total_consistency(observations)
    assert list(mismatched["id_municipio"]) == ["5300108"]
    assert mismatched.iloc[0]["diferenca"] == 100


def test_check_total_consistency_empty():
    empty = pd.DataFrame(columns=["id_municipio", "cor_raca", "populacao"])
    assert check_total_consistency(empty).empty


def test_summarize_composition(observations):
    summary = summarize_composition(observations)
    assert list(summary["cor_raca"]) == list(RACE_KEYS)
    assert summary["percentual"].sum() == pytest.approx(100, abs=0.05)
    assert summary.set_index("cor_raca").loc["preta", "populacao"] == 1800
