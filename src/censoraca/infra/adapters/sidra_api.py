"""
CensoRaca - Infrastructure Adapter for SIDRA (IBGE aggregate tables API).

Handles fetching race/color tables via the SIDRA `/values` endpoint.
"""
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from censoraca.core.catalog.sidra import SidraTableSpec
from censoraca.infra.storage.cache import cached_get_json, evict, url_to_filename
from censoraca.settings import get_sidra_base_url, logger


def build_sidra_url(
    spec: SidraTableSpec,
    uf_codes: Optional[Iterable[int]] = None,
) -> str:
    """Full SIDRA URL for the table, restricted to `uf_codes` if given."""
    return get_sidra_base_url() + spec.build_path(uf_codes)


def fetch_sidra_rows(
    spec: SidraTableSpec,
    uf_codes: Optional[Iterable[int]] = None,
    force: bool = False,
) -> List[Dict[str, Any]]:
    """
    Fetches a SIDRA table as a list of JSON rows.

    Args:
        spec: The SIDRA table specification.
        uf_codes: Optional 2-digit state codes to restrict municipalities.
        force: Ignore the cached payload and download again.

    Returns:
        list of dicts. The first element is SIDRA's header row.
    """
    uf_codes = list(uf_codes) if uf_codes else None
    url = build_sidra_url(spec, uf_codes)

    scope = f"UFs {uf_codes}" if uf_codes else "Brasil"
    logger.info(
        f"    ☁️  Querying SIDRA table {spec.table_id} ({spec.year}, {scope})..."
    )

    rel = Path("sidra") / str(spec.table_id) / url_to_filename(url, suffix=".json")
    payload = cached_get_json(url, relpath=rel, force=force)

    # SIDRA answers some bad requests with HTTP 200 and a plain message.
    # Rejected payloads leave the cache so the next run asks SIDRA again.
    if not isinstance(payload, list):
        evict(rel)
        raise RuntimeError(
            f"Unexpected SIDRA response for table {spec.table_id}: {payload!r}"
        )
    if not payload:
        evict(rel)
        raise RuntimeError(f"SIDRA returned no rows for table {spec.table_id}.")

    logger.info(f"    ✅ SIDRA returned {len(payload) - 1} rows.")
    return payload
