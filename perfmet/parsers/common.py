"""Line grammar and file access shared by all log parsers."""

import json
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from ..exceptions import LogFileError

LOG_LINE_PATTERN = re.compile(r"^(\d{4}-\d{2}-\d{2}T[\d:.-]+Z)\s+-\s+(.+)$")
TRANSFORM_LINE_PATTERN = re.compile(
    r"^(\d{4}-\d{2}-\d{2}T[\d:.-]+Z)\s+-\s+Transform\s+(.+?)\s+stats:\s+(.+)$"
)


def read_file_safely(path: Union[str, Path], description: str) -> str:
    """Read a UTF-8 text file, raising LogFileError with the path on failure.

    Undecodable bytes are replaced, so a torn write only spoils its own line.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise LogFileError(description, file_path)
    try:
        return file_path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise LogFileError(description, file_path, exc) from exc


def read_log_lines(path: Union[str, Path], description: str) -> List[str]:
    """Return the non-blank lines of a log file."""
    content = read_file_safely(path, description)
    return [line for line in content.split("\n") if line.strip()]


def parse_timestamp_ms(raw: str) -> Optional[int]:
    """Convert an ISO-8601 UTC timestamp (``...Z``) to epoch milliseconds."""
    body = raw[:-1] if raw.endswith("Z") else raw
    seconds, dot, fraction = body.partition(".")
    if dot:
        # fromisoformat on 3.10 only takes 3 or 6 fractional digits
        if not fraction.isdigit():
            return None
        body = f"{seconds}.{fraction[:6].ljust(6, '0')}"
    try:
        parsed = datetime.fromisoformat(body + "+00:00")
    except ValueError:
        return None
    return round(parsed.timestamp() * 1000)


def parse_json_object(raw: str) -> Optional[Dict[str, Any]]:
    try:
        data = json.loads(raw)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def iter_log_samples(lines: List[str]) -> Iterator[Tuple[int, Optional[Dict[str, Any]]]]:
    """Yield ``(timestamp_ms, body)`` for lines matching ``<timestamp> - <json>``.

    Lines that do not match or carry an unparsable timestamp are skipped.
    ``body`` is None when the payload is not a JSON object, so callers can
    still account for the sample's timestamp.
    """
    for line in lines:
        match = LOG_LINE_PATTERN.match(line.strip())
        if not match:
            continue
        timestamp = parse_timestamp_ms(match.group(1))
        if timestamp is None:
            continue
        yield timestamp, parse_json_object(match.group(2))


def dig(data: Any, *keys: str) -> Any:
    """Walk nested dicts, returning None as soon as a key is missing."""
    current = data
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value
