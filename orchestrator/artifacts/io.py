"""
Record IO
File: io.py

Purpose: Read and write distribution and tree records as JSON files.

Files:
- distribution.json: [{token, operators: [{operator, reward}]}]
- trees.json: [{token, tree: <standard-v1 record>}]

Both are written with 2-space indentation and UTF-8 encoding. Tree
contents are not validated here; StandardMerkleTree.load does that per
token so one corrupt tree never hides the others.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.schemas.rewards import DistributionRecord, TreeRecordList


logger = logging.getLogger(__name__)


class RecordIOError(Exception):
    """Error while reading or writing a record file."""

    def __init__(self, message: str, path: str | Path | None = None):
        self.path = str(path) if path is not None else None
        super().__init__(message)


def dump_json(obj: Any) -> str:
    """Serialize a record to indented JSON text."""
    if isinstance(obj, BaseModel):
        data = obj.model_dump(mode="json", by_alias=True)
    else:
        data = obj
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def _read_json_file(path: Path) -> Any:
    if not path.exists():
        raise RecordIOError(f"File not found: {path}", path=path)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise RecordIOError(f"Invalid JSON in {path}: {e}", path=path) from e


def _write_json_file(path: Path, obj: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_json(obj), encoding="utf-8")
    return path


def load_distribution(path: str | Path) -> DistributionRecord:
    """
    Load a distribution record.

    Raises:
        RecordIOError: If the file is missing, not JSON, or not shaped
            like a distribution record
    """
    path = Path(path)
    data = _read_json_file(path)
    try:
        record = DistributionRecord.model_validate(data)
    except PydanticValidationError as e:
        raise RecordIOError(f"Invalid distribution record in {path}: {e}", path=path) from e
    logger.info(f"Loaded distribution for {len(record.root)} tokens from {path}")
    return record


def save_distribution(record: DistributionRecord, path: str | Path) -> Path:
    """Write a distribution record, creating parent directories."""
    out = _write_json_file(Path(path), record)
    logger.info(f"Distribution written to {out}")
    return out


def load_tree_records(path: str | Path) -> TreeRecordList:
    """
    Load a list of per-token tree records.

    Raises:
        RecordIOError: If the file is missing, not JSON, or not a list of
            {token, tree} entries
    """
    path = Path(path)
    data = _read_json_file(path)
    try:
        records = TreeRecordList.model_validate(data)
    except PydanticValidationError as e:
        raise RecordIOError(f"Invalid tree record list in {path}: {e}", path=path) from e
    logger.info(f"Loaded {len(records.root)} tree records from {path}")
    return records


def save_tree_records(records: TreeRecordList, path: str | Path) -> Path:
    """Write per-token tree records, creating parent directories."""
    out = _write_json_file(Path(path), records)
    logger.info(f"Trees written to {out}")
    return out
