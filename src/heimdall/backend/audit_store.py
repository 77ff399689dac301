"""
audit_store.py
Scan audit log served to the admin screen.

Records live in memory (newest last) and are optionally appended to a
JSON-lines file so they survive a restart:
    output/logs/audit.jsonl
        {"scan_id": "S-12AB34CD", "zoneId": "Zone-A", "timestamp": "...",
         "violation": true, "message": "Safety Violation Detected",
         "personCount": 1, "details": ["Person ID 1: No Helmet"]}
"""
import logging
import threading
from typing import Dict, List, Optional

from .utils_backend import append_json_line, log_to_fallback, read_json_lines, write_json_lines

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("zoneId", "timestamp", "violation", "message", "personCount", "details")


class AuditLogStore:
    def __init__(self, path: Optional[str] = None, max_entries: int = 1000,
                 fallback_path: str = "output/logs/fallback.json"):
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self.path = path or None
        self.max_entries = max_entries
        self.fallback_path = fallback_path
        self._records: List[Dict] = []
        self._file_lines = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def load(self) -> int:
        """
        Reload records from disk. Returns how many were loaded.
        """
        if not self.path:
            return 0

        loaded = []
        on_disk = read_json_lines(self.path)
        for record in on_disk:
            missing = [k for k in REQUIRED_KEYS if k not in record]
            if missing:
                logger.warning("Skipping audit record %s, missing %s", record.get("scan_id"), missing)
                continue
            loaded.append(record)

        with self._lock:
            self._records = loaded[-self.max_entries:]
            self._file_lines = len(on_disk)
            count = len(self._records)
        logger.info("Loaded %d audit record(s) from %s", count, self.path)
        return count

    def add(self, record: Dict) -> Dict:
        """
        Store one record. A failed disk write goes to the fallback log and
        does not fail the scan.

        The file is only compacted once it holds a tenth more lines than
        `max_entries`, so a full log is not rewritten on every scan.
        """
        with self._lock:
            self._records.append(record)
            if len(self._records) > self.max_entries:
                del self._records[:-self.max_entries]

            if self.path:
                try:
                    append_json_line(record, self.path)
                    self._file_lines += 1
                    if self._file_lines > self.max_entries + max(1, self.max_entries // 10):
                        self._rewrite()
                except OSError as e:
                    logger.error("Could not persist audit record %s: %s", record.get("scan_id"), e)
                    log_to_fallback(record, self.fallback_path)
        return record

    def list(self, search: Optional[str] = None, violation: Optional[bool] = None,
             limit: int = 100) -> List[Dict]:
        """
        Newest first. `search` matches message or zoneId, case-insensitive.
        """
        with self._lock:
            results = list(reversed(self._records))

        if search:
            needle = search.lower()
            results = [
                r for r in results
                if needle in str(r.get("message", "")).lower()
                or needle in str(r.get("zoneId", "")).lower()
            ]

        if violation is not None:
            results = [r for r in results if bool(r.get("violation")) == violation]

        return results[:limit]

    def stats(self) -> Dict[str, int]:
        with self._lock:
            records = list(self._records)

        violations = sum(1 for r in records if r.get("violation"))
        no_worker = sum(1 for r in records if not r.get("personCount"))
        return {
            "total_scans": len(records),
            "violations": violations,
            "compliant": len(records) - violations,
            "no_worker": no_worker,
        }

    def clear(self) -> int:
        """
        Drop every record. The file is emptied first; when that fails the
        records stay in memory and the OSError propagates.
        """
        with self._lock:
            if self.path:
                try:
                    write_json_lines([], self.path)
                except OSError as e:
                    logger.error("Could not clear audit log %s: %s", self.path, e)
                    raise
                self._file_lines = 0
            count = len(self._records)
            self._records = []
        logger.info("Cleared %d audit record(s)", count)
        return count

    def _rewrite(self) -> None:
        # compact the file down to the in-memory records; caller holds the lock
        write_json_lines(self._records, self.path)
        self._file_lines = len(self._records)
