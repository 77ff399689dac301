"""
Backend utility functions
"""
import base64
import binascii
import json
import logging
import os
import re
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..exceptions import ImagePayloadError

logger = logging.getLogger(__name__)

DATA_URI_PREFIX = re.compile(r"^data:image/\w+;base64,")


def strip_data_uri(payload: str) -> str:
    """
    Remove a leading data URI prefix
    'data:image/jpeg;base64,/9j/4AAQ...' -> '/9j/4AAQ...'
    """
    return DATA_URI_PREFIX.sub("", payload, count=1)


def decode_image_payload(payload: str) -> bytes:
    """
    Decode a base64 image (with or without data URI prefix) to raw bytes
    """
    if not isinstance(payload, str) or not payload.strip():
        raise ImagePayloadError("Missing 'image' in request body")

    cleaned = "".join(strip_data_uri(payload.strip()).split())
    try:
        image_bytes = base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImagePayloadError(f"Image is not valid base64: {e}") from e

    if not image_bytes:
        raise ImagePayloadError("Image payload decoded to zero bytes")
    return image_bytes


def save_json(data, filepath: str, indent: int = 2) -> None:
    """
    Save data as JSON file
    """
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filepath, "w") as f:
        json.dump(data, f, indent=indent, default=str)


def load_json(filepath: str):
    """
    Load JSON file, None if it does not exist
    """
    try:
        with open(filepath, "r") as f:
            return json.load(f)
    except FileNotFoundError:
        return None


def append_json_line(record: Dict, filepath: str) -> None:
    """
    Append one record to a JSON-lines file
    """
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filepath, "a") as f:
        f.write(json.dumps(record, default=str) + "\n")


def write_json_lines(records: List[Dict], filepath: str) -> None:
    """
    Replace a JSON-lines file with the given records
    """
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filepath, "w") as f:
        for record in records:
            f.write(json.dumps(record, default=str) + "\n")


def read_json_lines(filepath: str) -> List[Dict]:
    """
    Read a JSON-lines file; malformed lines are skipped with a warning
    """
    records = []
    if not os.path.isfile(filepath):
        return records

    with open(filepath, "r") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                logger.warning("Skipping malformed line %d in %s: %s", lineno, filepath, e)
                continue
            if isinstance(record, dict):
                records.append(record)
            else:
                logger.warning("Skipping non-object line %d in %s", lineno, filepath)
    return records


def log_to_fallback(record: dict, fallback_path: str = "output/logs/fallback.json") -> bool:
    """
    Fallback JSON logger when the audit log cannot be written
    """
    try:
        logs = load_json(fallback_path)
        if not isinstance(logs, list):
            logs = []

        record = dict(record)
        if "logged_at" not in record:
            record["logged_at"] = datetime.now(timezone.utc).isoformat()

        logs.append(record)
        save_json(logs, fallback_path)
        logger.warning("Fallback: logged scan %s", record.get("scan_id", "UNKNOWN"))
        return True
    except (OSError, ValueError) as e:
        logger.error("Fallback logging failed: %s", e)
        return False


def parse_bearer_token(header: Optional[str]) -> Optional[str]:
    """
    'Bearer abc' -> 'abc', 'abc' -> 'abc' (the dashboard sends the raw token)
    """
    if not header:
        return None
    parts = header.strip().split(None, 1)
    if parts and parts[0].lower() == "bearer":
        return parts[1].strip() if len(parts) == 2 else None
    return header.strip()
