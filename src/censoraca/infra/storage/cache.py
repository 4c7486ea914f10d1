"""CensoRaca disk cache utilities."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from censoraca.settings import get_cache_dir, get_timeout, logger


def url_to_filename(url: str, *, suffix: str = "") -> str:
    """Generates a filesystem-safe filename from a URL using SHA256."""
    h = hashlib.sha256(url.encode("utf-8")).hexdigest()
    return f"{h}{suffix}"


def _get_robust_session(retries: int = 3, backoff_factor: float = 0.5) -> requests.Session:
    """Creates a requests Session with automatic retries and exponential backoff."""
    session = requests.Session()
    retry = Retry(
        total=retries,
        read=retries,
        connect=retries,
        backoff_factor=backoff_factor,
        status_forcelist=(500, 502, 503, 504),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def cached_download(
    url: str,
    *,
    relpath: Path,
    timeout: int | None = None,
    force: bool = False,
) -> Path:
    """
    Download a URL to the CensoRaca cache directory (or reuse if present).

    Features:
      - Automatic Retries (Network resilience).
      - Streaming Download (Memory efficiency).
      - Atomic Writes (Prevents corrupted partial downloads).
    """
    cache_dir = get_cache_dir()
    out = cache_dir / relpath
    out.parent.mkdir(parents=True, exist_ok=True)

    if out.exists() and not force:
        logger.debug(f"Cache hit for {url}")
        return out

    logger.info(f"    ⬇️  Downloading (cached): {url}")

    session = _get_robust_session()
    temp_out = out.with_suffix(".tmp")

    try:
        with session.get(url, stream=True, timeout=timeout or get_timeout()) as response:
            response.raise_for_status()
            with open(temp_out, "wb") as f:
                for chunk in response.iter_content(chunk_size=8192):
                    if chunk:
                        f.write(chunk)

        # Rename only on success to ensure atomicity
        if temp_out.exists():
            temp_out.replace(out)

    except requests.RequestException as e:
        if temp_out.exists():
            temp_out.unlink()
        raise RuntimeError(f"Failed to download {url} after retries.") from e

    return out


def evict(relpath: Path) -> None:
    """Removes a cached file so the next call downloads it again."""
    path = get_cache_dir() / relpath
    if path.exists():
        logger.debug(f"Evicting cached file {path}")
        path.unlink()


def cached_get_json(
    url: str,
    *,
    relpath: Path,
    timeout: int | None = None,
    force: bool = False,
) -> Any:
    """
    Downloads (or reuses) a JSON payload and decodes it.

    A cached file that is not valid JSON is discarded so the next run
    downloads it again.
    """
    path = cached_download(url, relpath=relpath, timeout=timeout, force=force)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        body = path.read_bytes()[:200].decode("utf-8", errors="replace")
        path.unlink()
        raise RuntimeError(
            f"Response from {url} is not valid JSON: {body!r}"
        ) from e
