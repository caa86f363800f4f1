"""
Repository pattern for data access.

Persists the fuel log as a single serialized collection in a named slot of
a local key-value store, and provides the collection mutations used by the
controller.
"""

import json
import logging
import sqlite3
import time
from pathlib import Path
from typing import Iterable, List, Optional

from .db import DEFAULT_DB_PATH, get_connection
from .models import FuelEntry

_logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "fuelLogs"

_CREATE_TABLE = """
    CREATE TABLE IF NOT EXISTS kv_store (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL
    )
"""


def initialize_schema(db_path: str = DEFAULT_DB_PATH) -> None:
    """Create the kv_store table if it doesn't exist.
    
    Args:
        db_path: Path to SQLite database file
    """
    conn = get_connection(db_path)
    try:
        conn.execute(_CREATE_TABLE)
        conn.commit()
    finally:
        conn.close()


class LogStore:
    """Load and save the full fuel log from one key-value slot.
    
    The store never recomputes derived fields; callers run the recompute
    engine before saving.
    """
    
    def __init__(self, db_path: str = DEFAULT_DB_PATH, key: str = DEFAULT_STORAGE_KEY):
        """Initialize the store.
        
        Args:
            db_path: Path to SQLite database file
            key: Name of the slot holding the serialized collection
        """
        if not key:
            raise ValueError("storage key cannot be empty")
        self.db_path = db_path
        self.key = key
    
    def load(self) -> List[FuelEntry]:
        """Read the persisted collection.
        
        Fails soft: an absent slot, an unreadable store or an unparsable
        payload yields an empty collection. Records that cannot be coerced
        into entries are skipped.
        
        Returns:
            Entries in persisted order
        """
        try:
            raw = self._read_slot()
        except sqlite3.Error as e:
            _logger.warning("Could not read fuel log from %s: %s", self.db_path, e)
            return []
        
        if raw is None:
            _logger.debug("No fuel log stored under %r", self.key)
            return []
        
        try:
            payload = json.loads(raw)
        except ValueError:
            _logger.warning("Stored fuel log under %r is not valid JSON, starting empty", self.key)
            return []
        
        if not isinstance(payload, list):
            _logger.warning("Stored fuel log under %r is not a list, starting empty", self.key)
            return []
        
        entries = []
        seen_ids = set()
        for index, record in enumerate(payload):
            try:
                entry = FuelEntry.from_record(record)
            except (TypeError, ValueError) as e:
                _logger.warning("Skipping stored record %d: %s", index, e)
                continue
            if entry.id in seen_ids:
                _logger.warning("Skipping stored record %d: duplicate id %d", index, entry.id)
                continue
            seen_ids.add(entry.id)
            entries.append(entry)
        return entries
    
    def save(self, entries: Iterable[FuelEntry]) -> None:
        """Serialize and persist the full collection, replacing prior content.
        
        The write happens in a single transaction so a failed save leaves the
        previous collection intact.
        
        Args:
            entries: The collection to persist
        """
        value = json.dumps([entry.to_record() for entry in entries])
        conn = get_connection(self.db_path)
        try:
            conn.execute(_CREATE_TABLE)
            conn.execute(
                "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                (self.key, value)
            )
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
        _logger.debug("Saved fuel log under %r (%d bytes)", self.key, len(value))
    
    def _read_slot(self) -> Optional[str]:
        if not Path(self.db_path).exists():
            _logger.debug("No fuel log store at %s yet", self.db_path)
            return None
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name='kv_store'"
            )
            if cursor.fetchone() is None:
                _logger.debug("Fuel log store at %s has no kv_store table yet", self.db_path)
                return None
            cursor = conn.execute("SELECT value FROM kv_store WHERE key = ?", (self.key,))
            row = cursor.fetchone()
            return row[0] if row else None
        finally:
            conn.close()


def upsert(entries: List[FuelEntry], entry: FuelEntry) -> List[FuelEntry]:
    """Replace the entry sharing ``entry.id`` in place, or append it.
    
    Args:
        entries: Current collection
        entry: Entry to insert or replace
        
    Returns:
        New collection; the input list is not modified
    """
    result = list(entries)
    for index, existing in enumerate(result):
        if existing.id == entry.id:
            result[index] = entry
            return result
    result.append(entry)
    return result


def remove(entries: List[FuelEntry], entry_id: int) -> List[FuelEntry]:
    """Filter out the entry with ``entry_id``; unknown ids are a no-op."""
    return [entry for entry in entries if entry.id != entry_id]


def find_entry(entries: Iterable[FuelEntry], entry_id: int) -> Optional[FuelEntry]:
    """Return the entry with ``entry_id``, or None."""
    for entry in entries:
        if entry.id == entry_id:
            return entry
    return None


def next_entry_id(entries: Iterable[FuelEntry], now_ms: Optional[int] = None) -> int:
    """Allocate a fresh id for a new entry.
    
    Ids are millisecond timestamps, bumped past the largest existing id so
    they stay unique even when two entries are created in the same
    millisecond or the clock goes backwards.
    """
    candidate = now_ms if now_ms is not None else int(time.time() * 1000)
    existing = [entry.id for entry in entries]
    if existing and candidate <= max(existing):
        candidate = max(existing) + 1
    return candidate
