from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "repo": "langflow-ai/langflow",
    "workflow": "Nightly Build",
    "workflow_path_hint": "nightly_build",  # matched against the workflow file path
    "refresh_hours": [6, 13, 19, 23],  # local time
    "per_page": 50,
    "store": "sqlite",  # sqlite | memory | noop
    "store_path": ".nightlens.db",
    "cache_key": "langflow_incident_data",
}


def load_config(config_path: str = ".nightlens.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .nightlens.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "refresh_hours": list(DEFAULT_CONFIG["refresh_hours"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ValueError(f"{config_path} must contain a mapping, got {type(file_config).__name__}")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return config


def workflow_url(config: dict) -> str:
    """Link to the monitored workflow on github.com."""
    return f"https://github.com/{config['repo']}/actions/workflows/{config['workflow_path_hint']}.yml"
