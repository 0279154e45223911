"""JSON file helpers for calibration data and exported results."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

logger = logging.getLogger(__name__)


def load_json_robust(filepath: Union[str, Path]) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Load a JSON object, tolerating a UTF-8 byte order mark.

    Files saved by Windows tools often start with a BOM, so utf-8-sig is
    tried before plain utf-8 and latin-1.

    Args:
        filepath: Path to JSON file

    Returns:
        Tuple of (data, error):
        - On success: (dict, None)
        - On failure: (None, error_message)
    """
    filepath = Path(filepath)

    if not filepath.exists():
        return None, f"File not found: {filepath}"

    for encoding in ("utf-8-sig", "utf-8", "latin-1"):
        try:
            with open(filepath, "r", encoding=encoding) as f:
                data = json.load(f)
        except UnicodeDecodeError:
            continue
        except json.JSONDecodeError as e:
            return None, f"JSON error: {str(e)[:100]}"
        except OSError as e:
            return None, f"Error: {str(e)[:100]}"

        if not isinstance(data, dict):
            return None, f"Expected a JSON object in {filepath.name}"
        return data, None

    return None, f"Failed all encodings for: {filepath}"


def save_json(data: Dict[str, Any], filepath: Union[str, Path]) -> Path:
    """Write a dict as indented UTF-8 JSON, creating parent folders."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    logger.debug("Wrote %s", filepath)
    return filepath
