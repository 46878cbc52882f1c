from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "model": "anthropic",
    "base_branch": "develop",
    "exclude": [],  # fnmatch patterns or directory names to skip (e.g. "migrations/", "*.min.js")
    # Resolution priority for extensionless references: typed sources before plain scripts.
    "extensions": [".ts", ".tsx", ".js", ".jsx", ".mjs"],
    "aliases": {"@/": "src/"},
    "history_window": 2,
    "failure_delay": 2.0,
    "max_chars_per_file": 20000,
    "max_retries": 2,
}

# Environment variable holding the credential for each provider.
API_KEY_ENV_VARS = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}


def load_config(config_path: str = ".lgtm.yml", cli_overrides: Optional[dict] = None) -> dict:
    """Return the effective settings for one run.

    Later layers win: built-in defaults, then the YAML file at config_path
    (skipped when absent), then any CLI override that is not None.
    """
    config = {
        **DEFAULT_CONFIG,
        "exclude": list(DEFAULT_CONFIG["exclude"]),
        "extensions": list(DEFAULT_CONFIG["extensions"]),
        "aliases": dict(DEFAULT_CONFIG["aliases"]),
    }

    path = Path(config_path)
    if path.is_file():
        file_config = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(file_config, dict):
            raise ValueError(f"{config_path} must contain a mapping, got {type(file_config).__name__}.")
        config.update(file_config)

    config.update({key: value for key, value in (cli_overrides or {}).items() if value is not None})

    return config
