"""Data models for uamount.

This module exports the core data structures used throughout the application.
"""

from uamount.models.change import ChangeKind, PendingChange, ReconcileResult, ResultStatus
from uamount.models.mount import MountRecord
from uamount.models.rule import RuleFile

__all__ = [
    "ChangeKind",
    "MountRecord",
    "PendingChange",
    "ReconcileResult",
    "ResultStatus",
    "RuleFile",
]
