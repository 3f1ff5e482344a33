"""
Settings resolution for DOCKET.

Loads the packaged defaults.yaml and merges an optional user override file.
Environment variables (including those from a .env file) are resolved through
OmegaConf ``${oc.env:...}`` interpolation.

Examples:
    >>> settings = load_settings()
    >>> settings["cache"]["ttl_ms"]
    3600000

    # Point at a custom override file
    >>> settings = load_settings(Path("configs/staging.yaml"))
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()
DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"


def load_settings(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load DOCKET settings as a plain nested dict.

    Args:
        config_path: Optional override YAML (defaults to DOCKET_CONFIG_PATH env variable)

    Returns:
        Resolved settings dict

    Raises:
        FileNotFoundError: If an override path is given but does not exist
    """
    if config_path is None and os.getenv("DOCKET_CONFIG_PATH"):
        config_path = Path(os.getenv("DOCKET_CONFIG_PATH"))

    config = OmegaConf.load(DEFAULTS_PATH)

    if config_path is not None:
        if not Path(config_path).exists():
            raise FileNotFoundError(f"Settings override not found: {config_path}")
        config = OmegaConf.merge(config, OmegaConf.load(config_path))

    return OmegaConf.to_container(config, resolve=True)
