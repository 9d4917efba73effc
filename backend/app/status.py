from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, Optional


@dataclass
class SyncStatus:
    last_sync: Optional[datetime] = None
    emails: int = 0
    strategies: list[str] = field(default_factory=list)


class SyncStatusStore:
    """Last sync per account, for the accounts view. Process-local only."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._status: Dict[str, SyncStatus] = {}

    def record(self, account: str, *, emails: int, strategies: list[str]) -> None:
        with self._lock:
            self._status[account] = SyncStatus(
                last_sync=datetime.now(timezone.utc),
                emails=emails,
                strategies=list(strategies),
            )

    def snapshot(self, account: str) -> Dict[str, Any]:
        with self._lock:
            status = self._status.get(account) or SyncStatus()
            return {
                "lastSync": status.last_sync.isoformat() if status.last_sync else None,
                "emails": status.emails,
                "strategies": list(status.strategies),
            }

    def clear(self, account: str) -> None:
        with self._lock:
            self._status.pop(account, None)


sync_status_store = SyncStatusStore()
