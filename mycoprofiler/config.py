"""
Runtime configuration for MycoProfiler.

Values come from the environment (optionally a .env file in the working
directory) so remote endpoints can be pointed at mirrors without code changes.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


@dataclass
class Settings:
    """Remote endpoints, cache location and HTTP behaviour"""
    uniprot_url: str = "https://rest.uniprot.org"
    kegg_url: str = "https://rest.kegg.jp"
    go_obo_url: str = "http://purl.obolibrary.org/obo/go/go-basic.obo"
    cache_dir: Path = Path.home() / '.mycoprofiler' / 'cache'
    http_timeout: float = 60.0
    uniprot_batch_size: int = 100
    log_level: str = "INFO"

    @property
    def user_agent(self) -> str:
        from mycoprofiler import __version__
        return f"MycoProfiler/{__version__}"


def get_settings() -> Settings:
    """
    Build settings from MYCOPROFILER_* environment variables.

    Read on every call so tests and long-lived sessions see updated values.
    """
    defaults = Settings()
    cache_dir = os.getenv("MYCOPROFILER_CACHE_DIR")

    return Settings(
        uniprot_url=os.getenv("MYCOPROFILER_UNIPROT_URL", defaults.uniprot_url).rstrip('/'),
        kegg_url=os.getenv("MYCOPROFILER_KEGG_URL", defaults.kegg_url).rstrip('/'),
        go_obo_url=os.getenv("MYCOPROFILER_GO_OBO_URL", defaults.go_obo_url),
        cache_dir=Path(cache_dir).expanduser() if cache_dir else defaults.cache_dir,
        http_timeout=float(os.getenv("MYCOPROFILER_HTTP_TIMEOUT", defaults.http_timeout)),
        uniprot_batch_size=int(os.getenv("MYCOPROFILER_UNIPROT_BATCH_SIZE", defaults.uniprot_batch_size)),
        log_level=os.getenv("MYCOPROFILER_LOG_LEVEL", defaults.log_level).upper(),
    )
