"""Audit logging subsystem for orgdedupe.

Main Components
---------------
- AuditLogger: JSONL event logger
- generate_run_id: run identifier helper
"""

from orgdedupe.audit.helpers import generate_run_id, get_package_version
from orgdedupe.audit.logger import AuditLogger
from orgdedupe.audit.models import EventType, LogEvent
from orgdedupe.utils import get_iso_timestamp

__all__ = [
    "AuditLogger",
    "EventType",
    "LogEvent",
    "generate_run_id",
    "get_iso_timestamp",
    "get_package_version",
]
