"""JSON document persistence shared by the registry and stores.

Reads degrade to a default with a logged warning when a file is missing or
malformed. Writes raise RegistryWriteError so a lost update is never silent.
"""

import json
import logging
from pathlib import Path
from typing import Any

from grove.core.errors import RegistryWriteError

logger = logging.getLogger(__name__)


def load_json_document(path: Path, default: dict[str, Any]) -> dict[str, Any]:
    """Load a JSON object from disk.

    Args:
        path: File to read
        default: Value returned when the file is missing or unusable

    Returns:
        The parsed object, or `default`
    """
    if not path.exists():
        return default

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read {path}, using defaults: {e}")
        return default

    if not isinstance(data, dict):
        logger.warning(f"Expected a JSON object in {path}, using defaults")
        return default

    return data


def save_json_document(path: Path, data: dict[str, Any]) -> None:
    """Write a JSON object to disk, pretty-printed.

    Raises:
        RegistryWriteError: If the directory or file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise RegistryWriteError(path, e) from e
