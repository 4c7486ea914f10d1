"""
Concrete data-source adapters (SIDRA HTTP API).

Important: keep this package import side-effect free.
Do not import adapter modules here.
"""
__all__: list[str] = []
