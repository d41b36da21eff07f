"""
Demo Catalog — Configuration

Single place where settings are read. Streamlit secrets win, environment
variables are the fallback:

    [supabase] url / key        or  SUPABASE_URL / SUPABASE_KEY
    CATALOG_BACKEND             supabase | memory (default: supabase when
                                credentials exist, else memory)
    CATALOG_POLL_SECONDS        seconds between Supabase polls (default 5)
    CATALOG_SAMPLE_DATA         true -> seed sample demos into the memory backend
    CATALOG_LOG_LEVEL           logging level name (default INFO)
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .backend import MemoryBackend
from .catalog_supabase import CatalogSupabase, DEFAULT_POLL_SECONDS
from .sample_data import seed_sample_catalog

logger = logging.getLogger(__name__)

BACKEND_SUPABASE = "supabase"
BACKEND_MEMORY = "memory"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class CatalogConfig:
    backend: str
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    poll_seconds: float = DEFAULT_POLL_SECONDS
    sample_data: bool = True
    log_level: str = "INFO"


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name, default)
    if v is None:
        return None
    v = v.strip()
    return v if v else None


def _secret(secrets: Optional[Mapping[str, Any]], section: str, key: str) -> Optional[str]:
    """Read secrets[section][key]; st.secrets raises when no secrets.toml exists."""
    if secrets is None:
        return None
    try:
        return secrets[section][key] or None
    except Exception:
        return None


def get_config(secrets: Optional[Mapping[str, Any]] = None) -> CatalogConfig:
    url = _secret(secrets, "supabase", "url") or _getenv("SUPABASE_URL")
    key = _secret(secrets, "supabase", "key") or _getenv("SUPABASE_KEY")

    default_backend = BACKEND_SUPABASE if url and key else BACKEND_MEMORY
    backend = (_getenv("CATALOG_BACKEND", default_backend) or default_backend).lower()
    if backend not in (BACKEND_SUPABASE, BACKEND_MEMORY):
        raise ValueError(f"CATALOG_BACKEND must be '{BACKEND_SUPABASE}' or '{BACKEND_MEMORY}', got '{backend}'")

    poll = _getenv("CATALOG_POLL_SECONDS")
    try:
        poll_seconds = float(poll) if poll else DEFAULT_POLL_SECONDS
    except ValueError:
        raise ValueError(f"CATALOG_POLL_SECONDS must be a number, got '{poll}'")

    return CatalogConfig(
        backend=backend,
        supabase_url=url,
        supabase_key=key,
        poll_seconds=poll_seconds,
        sample_data=(_getenv("CATALOG_SAMPLE_DATA", "true") or "true").lower() == "true",
        log_level=(_getenv("CATALOG_LOG_LEVEL", "INFO") or "INFO").upper(),
    )


def create_backend(config: CatalogConfig):
    """Build the backend the config asks for."""
    if config.backend == BACKEND_MEMORY:
        backend = MemoryBackend()
        if config.sample_data:
            seed_sample_catalog(backend)
        logger.info("Using in-memory catalog backend")
        return backend

    logger.info(f"Using Supabase backend at {config.supabase_url}")
    return CatalogSupabase(config.supabase_url, config.supabase_key, poll_interval=config.poll_seconds)


def configure_logging(level: str = "INFO"):
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
