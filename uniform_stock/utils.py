import json
import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_DATE_IN_NAME = re.compile(r"(\d{4}-\d{2}-\d{2})")


def get_date_suffix_for_filename() -> str:
    """Returns the current date as a YYYY-MM-DD string for filenames."""
    return datetime.now().strftime("%Y-%m-%d")


def find_latest_report(directory: Path, prefix: str) -> tuple[Path, date] | None:
    """
    Finds the newest '<prefix>YYYY-MM-DD.json' file in `directory`.
    Files whose name carries no parseable date are ignored.
    """
    if not directory.exists():
        return None

    candidates = []
    for path in directory.glob(f"{prefix}*.json"):
        m = _DATE_IN_NAME.search(path.stem[len(prefix):])
        if not m:
            continue
        try:
            report_date = datetime.strptime(m.group(1), "%Y-%m-%d").date()
        except ValueError:
            continue
        candidates.append((report_date, path))

    if not candidates:
        return None
    report_date, path = max(candidates)
    return path, report_date


def load_json(file_path: Path) -> Any | None:
    """
    Loads an exported API payload with an encoding fallback.
    1. UTF-8 with BOM support ('utf-8-sig').
    2. Latin-1, which can decode any byte sequence.
    Returns None when the file is missing or is not valid JSON.
    """
    try:
        return json.loads(file_path.read_text(encoding="utf-8-sig"))
    except UnicodeDecodeError:
        logger.info(f"UTF-8 decoding failed for {file_path.name}. Retrying with 'latin-1'.")
        try:
            return json.loads(file_path.read_text(encoding="latin-1"))
        except json.JSONDecodeError as e:
            logger.error(f"Could not parse {file_path.name} even with latin-1. Reason: {e}")
            return None
    except FileNotFoundError:
        logger.info(f"Report not found at {file_path}, skipping.")
        return None
    except json.JSONDecodeError as e:
        logger.error(f"{file_path.name} is not valid JSON. Reason: {e}")
        return None
