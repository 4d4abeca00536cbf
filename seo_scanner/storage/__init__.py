"""Persistence boundary between the scanner and the datastore.

The scanner never talks to storage itself. Callers hand a finished
``ScanResult`` to :func:`record_scan`, which writes it through any object
satisfying :class:`AuditStore`. ``SqliteAuditStore`` is the bundled
implementation, used by the API and the CLI.
"""

from seo_scanner.storage.base import (
    AuditStore,
    StoreError,
    agent_run_row,
    audit_rows,
    record_scan,
    scan_summary,
    utcnow,
)
from seo_scanner.storage.db import MEMORY, get_db
from seo_scanner.storage.repos import SqliteAuditStore, open_store

__all__ = [
    "AuditStore",
    "StoreError",
    "agent_run_row",
    "audit_rows",
    "record_scan",
    "scan_summary",
    "utcnow",
    "MEMORY",
    "get_db",
    "SqliteAuditStore",
    "open_store",
]
