"""
Storage for computed payslips.

Each payslip the service generates is saved as one JSON file:

    <data_dir>/records/<id>.json

The id is content-based (first 8 hex chars of a SHA-256 over employee,
timestamp and annual salary), so saving the same computation twice
overwrites rather than duplicates.

Queries scan the directory; results are ordered newest first. Files that
can't be read or don't match the record schema are skipped with a
warning rather than failing the whole listing.
"""

import hashlib
import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import get_data_path

logger = logging.getLogger(__name__)

# IDs are the first 8 hex chars of a SHA-256
_RECORD_ID_RE = re.compile(r"[0-9a-f]{8}")


class PayslipRecord(BaseModel):
    """A stored salary computation."""

    model_config = ConfigDict(extra="forbid")

    id: Optional[str] = None
    timestamp: datetime
    employee_name: str
    annual_salary_cents: int = Field(..., ge=0)
    monthly_income_tax_cents: int = Field(..., ge=0)
    gross_monthly_income_cents: int = Field(..., ge=0)
    net_monthly_income_cents: int = Field(..., ge=0)
    currency_code: str
    tax_strategy_used: Optional[str] = None


def _as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so stored and queried values compare."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def generate_record_id(record: PayslipRecord) -> str:
    """Content-based record ID used as the JSON filename."""
    content = (
        f"{record.employee_name}|{_as_utc(record.timestamp).isoformat()}"
        f"|{record.annual_salary_cents}"
    )
    return hashlib.sha256(content.encode()).hexdigest()[:8]


class RecordStore:
    """JSON-file store of PayslipRecord entries.

    Args:
        records_dir: Directory holding the record files. Defaults to
            <data_dir>/records, resolved on each access so settings
            changes are picked up.
    """

    def __init__(self, records_dir: Optional[Path] = None):
        self._records_dir = Path(records_dir) if records_dir else None

    @property
    def records_dir(self) -> Path:
        records_dir = self._records_dir or (get_data_path() / "records")
        records_dir.mkdir(parents=True, exist_ok=True)
        return records_dir

    def _load_all(self) -> List[PayslipRecord]:
        results = []
        for json_file in self.records_dir.glob("*.json"):
            try:
                with open(json_file) as f:
                    results.append(PayslipRecord.model_validate(json.load(f)))
            except (json.JSONDecodeError, IOError, ValidationError) as e:
                logger.warning(f"Skipping unreadable record {json_file.name}: {e}")
                continue

        results.sort(key=lambda r: _as_utc(r.timestamp), reverse=True)
        return results

    def save(self, record: PayslipRecord) -> PayslipRecord:
        """Persist a record and return it with its id assigned."""
        stored = record.model_copy(update={"id": generate_record_id(record)})
        record_path = self.records_dir / f"{stored.id}.json"

        with open(record_path, "w") as f:
            json.dump(stored.model_dump(mode="json"), f, indent=2)

        logger.debug(f"Saved payslip record {stored.id} for {stored.employee_name}")
        return stored

    def find_all(self) -> List[PayslipRecord]:
        """All records, newest first."""
        return self._load_all()

    def find_by_employee(self, employee_name: str) -> List[PayslipRecord]:
        """Records whose employee name matches exactly, newest first."""
        return [r for r in self._load_all() if r.employee_name == employee_name]

    def find_by_date_range(self, start: datetime, end: datetime) -> List[PayslipRecord]:
        """Records with start <= timestamp <= end, newest first."""
        start_utc, end_utc = _as_utc(start), _as_utc(end)
        return [r for r in self._load_all() if start_utc <= _as_utc(r.timestamp) <= end_utc]

    def count(self) -> int:
        return len(self._load_all())

    def _record_path(self, record_id: str) -> Optional[Path]:
        """Path for a well-formed record ID, None for anything else."""
        if not isinstance(record_id, str) or not _RECORD_ID_RE.fullmatch(record_id):
            return None
        return self.records_dir / f"{record_id}.json"

    def get(self, record_id: str) -> Optional[PayslipRecord]:
        """Get a single record by ID, None if absent, malformed or unreadable."""
        record_path = self._record_path(record_id)
        if record_path is None or not record_path.exists():
            return None
        try:
            with open(record_path) as f:
                return PayslipRecord.model_validate(json.load(f))
        except (json.JSONDecodeError, IOError, ValidationError) as e:
            logger.warning(f"Skipping unreadable record {record_path.name}: {e}")
            return None

    def remove(self, record_id: str) -> bool:
        """Delete a record. Returns True if it existed."""
        record_path = self._record_path(record_id)
        if record_path is None or not record_path.exists():
            return False
        record_path.unlink()
        return True

    def clear(self) -> int:
        """Delete all record files. Returns the number deleted.

        Only *.json files are removed; anything else in the directory stays.
        """
        count = 0
        for json_file in self.records_dir.glob("*.json"):
            json_file.unlink()
            count += 1
        return count
