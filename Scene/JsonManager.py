import json
from typing import Any, Dict, Optional

from OpenSpaceRoi.Errors import ConfigFailure


def load_json(file_path: str, section: Optional[str] = None) -> Dict[str, Any]:
    """Load JSON file, or only one of its top-level sections."""
    with open(file_path, 'r') as f:
        data = json.load(f)
    if section is None:
        return data
    if section not in data:
        raise ConfigFailure(f"Section '{section}' missing from {file_path}")
    return data[section]
