"""Flat-directory blob store for uploads and analysis results.

Filenames carry the metadata:

* ``{timestamp_ms}-{original_filename}`` raw upload
* ``{timestamp_ms}-parsed.json`` heuristic parse of that upload
* ``{iso_timestamp}-gemini-analysis.json`` combined AI analysis

There is no index. "Most recent" is recomputed from a directory scan on
every read.
"""
import json
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from . import config
from .exceptions import InvalidResumeDataError, ResumeNotFoundError, StorageError
from .logging_utils import get_logger
from .models import AnalysisResult, ParsedResume

logger = get_logger(__name__)

PARSED_SUFFIX = "-parsed.json"
ANALYSIS_SUFFIX = "-gemini-analysis.json"


def current_timestamp_ms() -> int:
    return int(time.time() * 1000)


def analysis_timestamp(moment: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with ``:`` and ``.`` replaced by ``-``.

    >>> analysis_timestamp(datetime(2024, 5, 1, 12, 34, 56, 789000, tzinfo=timezone.utc))
    '2024-05-01T12-34-56-789Z'
    """
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    iso = moment.strftime("%Y-%m-%dT%H:%M:%S") + f".{moment.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


class BlobStore:
    def __init__(self, root: Union[str, Path, None] = None):
        self.root = Path(root or config.UPLOAD_DIR)

    def _ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def _write(self, name: str, data: bytes) -> Path:
        path = self.root / name
        try:
            self._ensure_root()
            path.write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            raise StorageError(f"Failed to save {name}") from e
        logger.info(f"Saved {path}")
        return path

    def save_upload(self, filename: str, content: bytes, timestamp: Optional[int] = None) -> Path:
        timestamp = timestamp if timestamp is not None else current_timestamp_ms()
        safe_name = os.path.basename(filename) or "resume"
        return self._write(f"{timestamp}-{safe_name}", content)

    def save_parsed(self, timestamp: int, parsed: ParsedResume) -> Path:
        data = json.dumps(parsed.to_json_dict(), indent=2).encode("utf-8")
        return self._write(f"{timestamp}{PARSED_SUFFIX}", data)

    def save_analysis(self, result: AnalysisResult) -> Path:
        data = json.dumps(result.to_json_dict(), indent=2).encode("utf-8")
        return self._write(f"{result.timestamp}{ANALYSIS_SUFFIX}", data)

    def has_uploads(self) -> bool:
        return self.root.is_dir() and any(entry.is_file() for entry in self.root.iterdir())

    def latest(self, suffix: Optional[str] = None) -> Optional[Path]:
        """Most recently created file, optionally restricted to ``suffix``.

        Creation time orders the files; the filename breaks ties.
        """
        if not self.root.is_dir():
            return None

        candidates = []
        for entry in self.root.iterdir():
            if not entry.is_file():
                continue
            if suffix and not entry.name.endswith(suffix):
                continue
            try:
                created = entry.stat().st_ctime
            except FileNotFoundError:
                # Removed between listing and stat.
                continue
            candidates.append((created, entry.name, entry))

        if not candidates:
            return None
        candidates.sort(key=lambda item: (item[0], item[1]), reverse=True)
        return candidates[0][2]

    def load_latest_parsed(self) -> ParsedResume:
        if not self.root.is_dir():
            raise ResumeNotFoundError("No uploads directory found")
        if not self.has_uploads():
            raise ResumeNotFoundError("No resume uploaded yet")

        path = self.latest(PARSED_SUFFIX)
        if path is None:
            raise ResumeNotFoundError("No parsed resume data found")

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Error reading parsed resume {path}: {e}")
            raise StorageError("Failed to parse resume data") from e

        if not isinstance(raw, dict) or not raw.get("text"):
            logger.error(f"No text content found in {path}")
            raise InvalidResumeDataError("Invalid resume data format")

        try:
            return ParsedResume.model_validate(raw)
        except ValidationError as e:
            logger.error(f"Parsed resume {path} does not match the expected shape: {e}")
            raise InvalidResumeDataError("Invalid resume data format") from e

    def load_latest_analysis(self) -> Optional[AnalysisResult]:
        path = self.latest(ANALYSIS_SUFFIX)
        if path is None:
            return None
        try:
            return AnalysisResult.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.error(f"Error reading analysis {path}: {e}")
            raise StorageError("Failed to read saved analysis") from e
