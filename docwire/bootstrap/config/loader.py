import os
from functools import lru_cache
from pathlib import Path

CONFIG_ENV = "DOCWIRE_CONFIG"


@lru_cache
def get_configfile() -> Path | None:
    """
    Return the YAML configuration file named by DOCWIRE_CONFIG, or None
    when the variable is unset and settings come from the environment only.
    """
    raw = os.getenv(CONFIG_ENV)
    if not raw:
        return None

    file = Path(raw)
    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            f"  - Point {CONFIG_ENV} to an existing YAML file\n"
            f"  - Or unset {CONFIG_ENV} and use DOCWIRE_* environment variables."
        )

    return file
