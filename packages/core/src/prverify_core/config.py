from pathlib import Path
from typing import Optional

import yaml

from prverify_core.titles import DEFAULT_DOCS_URL

DEFAULT_CONFIG: dict = {
    "plugins": ["pr-type"],
    "check_name": "PR Type",
    "check_title": "PR type in title",
    "docs_url": DEFAULT_DOCS_URL,
    "log_level": "INFO",
}


def load_config(config_path: str = ".prverify.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prverify.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "plugins": list(DEFAULT_CONFIG["plugins"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return config
