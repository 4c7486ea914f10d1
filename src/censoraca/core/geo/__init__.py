from .ops import prepare_municipalities, join_observations, join_category
from .utils import clean_geometries, standardize_muni_code, fix_encoding

__all__ = [
    "prepare_municipalities", "join_observations", "join_category",
    "clean_geometries", "standardize_muni_code", "fix_encoding",
]
