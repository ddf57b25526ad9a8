from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

CONFIG_DIR = Path(__file__).resolve().parents[3] / "config"


def load_yaml(filename: str, config_dir: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Load a YAML mapping from the repository config directory."""
    file_path = Path(config_dir or CONFIG_DIR) / filename
    with open(file_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}
