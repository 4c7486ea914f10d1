"""
CensoRaca - HTML Report Assembly.
"""
import html
from datetime import datetime
from typing import Dict, List, Optional, Tuple

import pandas as pd

from censoraca.core.types import RACE_LABELS

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="pt-BR">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
body {{ font-family: "Helvetica Neue", Arial, sans-serif; margin: 2rem auto; max-width: 1100px; color: #222; }}
h1 {{ font-size: 1.8rem; }}
h2 {{ font-size: 1.3rem; margin-top: 2.5rem; border-bottom: 1px solid #ddd; }}
.meta {{ color: #666; font-size: 0.9rem; }}
.maps {{ display: grid; grid-template-columns: repeat(auto-fill, minmax(480px, 1fr)); gap: 1rem; }}
figure {{ margin: 0; }}
figure img {{ width: 100%; }}
figcaption {{ text-align: center; font-size: 0.9rem; color: #444; }}
table.summary {{ border-collapse: collapse; }}
table.summary td, table.summary th {{ padding: 0.3rem 0.8rem; border-bottom: 1px solid #eee; text-align: right; }}
</style>
</head>
<body>
<h1>{title}</h1>
<p class="meta">{meta}</p>
<h2>Composição da área</h2>
{summary}
<h2>Mapas</h2>
<div class="maps">
{maps}
</div>
{extra}
<h2>Tabela</h2>
{table}
</body>
</html>
"""

_FIGURE_TEMPLATE = (
    '<figure><img alt="{alt}" src="data:image/png;base64,{data}">'
    "<figcaption>{caption}</figcaption></figure>"
)


def _figure_html(caption: str, png_b64: str) -> str:
    text = html.escape(caption)
    return _FIGURE_TEMPLATE.format(alt=text, data=png_b64, caption=text)


def _summary_html(summary: Optional[pd.DataFrame], decimals: int = 2) -> str:
    if summary is None or summary.empty:
        return "<p>Sem dados.</p>"
    df = summary.copy()
    df["cor_raca"] = df["cor_raca"].map(RACE_LABELS).fillna(df["cor_raca"])
    df["populacao"] = df["populacao"].round().astype("Int64")
    df = df.rename(columns={
        "cor_raca": "Cor ou raça",
        "populacao": "População",
        "percentual": "Percentual (%)",
    })
    float_format = f"{{:,.{decimals}f}}".format
    return df.to_html(index=False, classes="summary", border=0, float_format=float_format)


def render_report_html(
    title: str,
    maps: List[Tuple[str, str]],
    table_html: str,
    summary: Optional[pd.DataFrame] = None,
    extra_figures: Optional[List[Tuple[str, str]]] = None,
    metadata: Optional[Dict[str, str]] = None,
    decimals: int = 2,
) -> str:
    """
    Assembles the report page.

    Args:
        title: Page title.
        maps: (caption, base64 PNG) pairs, one per category.
        table_html: Interactive table markup.
        summary: Pooled composition (cor_raca, populacao, percentual).
        extra_figures: Additional (caption, base64 PNG) pairs.
        metadata: Key/value pairs shown under the title.
        decimals: Digits shown for the summary percentages.
    """
    meta = dict(metadata or {})
    meta.setdefault("Gerado em", datetime.now().strftime("%Y-%m-%d %H:%M"))
    meta_html = " · ".join(
        f"{html.escape(str(k))}: {html.escape(str(v))}" for k, v in meta.items()
    )

    extra = ""
    if extra_figures:
        extra = "<h2>Resumo</h2>\n" + "\n".join(
            _figure_html(c, d) for c, d in extra_figures
        )

    return _PAGE_TEMPLATE.format(
        title=html.escape(title),
        meta=meta_html,
        summary=_summary_html(summary, decimals),
        maps="\n".join(_figure_html(c, d) for c, d in maps),
        extra=extra,
        table=table_html,
    )
