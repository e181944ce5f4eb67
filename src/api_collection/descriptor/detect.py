"""Auto-detect the format of a descriptor source file."""

from pathlib import Path

import yaml


def detect_format(file_path: Path) -> str:
    """Detect the format of an endpoint source file.

    Returns: 'openapi', 'postman', or 'descriptors'.
    """
    # JSON is YAML, so one parse covers both
    try:
        data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except (UnicodeDecodeError, yaml.YAMLError):
        return "descriptors"

    if isinstance(data, dict):
        if "openapi" in data or "swagger" in data:
            return "openapi"
        info = data.get("info")
        if isinstance(info, dict) and ("_postman_id" in info or "schema" in info):
            return "postman"

    return "descriptors"
