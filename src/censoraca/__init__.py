__version__ = "0.1.0"

from .settings import configure_logging, set_cache_dir, get_cache_dir

__all__ = [
    "configure_logging",
    "set_cache_dir",
    "get_cache_dir",
    "load_race_observations",
    "load_race_composition",
    "generate_report",
]

import logging
logging.getLogger("censoraca").addHandler(logging.NullHandler())

def __getattr__(name: str):
    if name == "load_race_observations":
        from .app.race import load_race_observations
        return load_race_observations
    if name == "load_race_composition":
        from .app.race import load_race_composition
        return load_race_composition
    if name == "generate_report":
        from .app.report import generate_report
        return generate_report
    raise AttributeError(f"module 'censoraca' has no attribute {name}")

def __dir__():
    return sorted(list(globals().keys()) + __all__)
