"""
CensoRaca - Core Catalog Package.

Exposes the catalog retrievers for the supported SIDRA tables.
"""

from .sidra import SIDRA_CATALOG, SidraTableSpec, get_sidra_spec

__all__ = [
    "SIDRA_CATALOG",
    "SidraTableSpec",
    "get_sidra_spec",
]
