"""
CensoRaca - Global Settings & Logging.
"""
import os
import logging
from pathlib import Path

# Define a library-specific logger
logger = logging.getLogger("censoraca")
logger.addHandler(logging.NullHandler()) # Default to silence unless configured

# Environment Variable Names
ENV_CACHE_DIR = "CENSORACA_CACHE_DIR"
ENV_OUTPUT_DIR = "CENSORACA_OUTPUT_DIR"
ENV_SIDRA_URL = "CENSORACA_SIDRA_URL"
ENV_TIMEOUT = "CENSORACA_TIMEOUT"

DEFAULT_SIDRA_URL = "https://apisidra.ibge.gov.br"
DEFAULT_TIMEOUT = 180


class Settings:
    _instance = None

    def __init__(self):
        env_cache = os.getenv(ENV_CACHE_DIR)
        if env_cache:
            self.cache_dir = Path(env_cache)
        else:
            self.cache_dir = Path.cwd() / ".censoraca_cache"

        env_output = os.getenv(ENV_OUTPUT_DIR)
        if env_output:
            self.output_dir = Path(env_output)
        else:
            self.output_dir = Path.cwd() / "outputs"

        self.sidra_base_url: str = (
            os.getenv(ENV_SIDRA_URL) or DEFAULT_SIDRA_URL
        ).rstrip("/")

        raw_timeout = os.getenv(ENV_TIMEOUT)
        try:
            self.timeout: int = int(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ValueError(
                f"Invalid {ENV_TIMEOUT}={raw_timeout!r}. "
                "Expected an integer number of seconds."
            ) from None

    @classmethod
    def _get_instance(cls):
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls):
        """Drops the cached instance so env vars are read again."""
        cls._instance = None

    @classmethod
    def get_cache_dir(cls) -> Path:
        inst = cls._get_instance()
        # Ensure dir exists when requested
        inst.cache_dir.mkdir(parents=True, exist_ok=True)
        return inst.cache_dir

    @classmethod
    def set_cache_dir(cls, path: Path):
        inst = cls._get_instance()
        inst.cache_dir = Path(path)

    @classmethod
    def get_output_dir(cls) -> Path:
        inst = cls._get_instance()
        inst.output_dir.mkdir(parents=True, exist_ok=True)
        return inst.output_dir

    @classmethod
    def set_output_dir(cls, path: Path):
        inst = cls._get_instance()
        inst.output_dir = Path(path)

    @classmethod
    def get_sidra_base_url(cls) -> str:
        return cls._get_instance().sidra_base_url

    @classmethod
    def get_timeout(cls) -> int:
        return cls._get_instance().timeout

# --- Public Helpers (Exposed in __init__.py) ---

def get_cache_dir() -> Path:
    """Retrieves the current cache directory path."""
    return Settings.get_cache_dir()

def set_cache_dir(path: Path):
    """Sets the download cache directory for all subsequent calls."""
    Settings.set_cache_dir(path)

def get_output_dir() -> Path:
    """Retrieves the directory where reports are written by default."""
    return Settings.get_output_dir()

def set_output_dir(path: Path):
    Settings.set_output_dir(path)

def get_sidra_base_url() -> str:
    return Settings.get_sidra_base_url()

def get_timeout() -> int:
    return Settings.get_timeout()

def configure_logging(level: int = logging.INFO):
    """Enable console logging for the library (idempotent)."""
    # Check if a StreamHandler is already attached to avoid duplicates
    has_stream = any(isinstance(h, logging.StreamHandler) for h in logger.handlers)

    if not has_stream:
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
