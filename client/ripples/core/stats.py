"""Client report statistics.

In-memory counters describing the report loop. No framework dependencies.
"""

from __future__ import annotations

import threading
import time


class ClientStats:
    """Thread-safe counters for fixes and report round trips."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._started_at = time.time()

        self.fixes_received: int = 0
        self.fixes_dropped_busy: int = 0
        self.reports_sent: int = 0
        self.reports_succeeded: int = 0
        self.reports_failed: int = 0
        self.decode_errors: int = 0
        self.joins: int = 0
        self.nearby_notifications: int = 0
        self.last_report_ms: float | None = None
        self._last_success_at: float | None = None

    def record_fix(self, *, dropped: bool) -> None:
        with self._lock:
            self.fixes_received += 1
            if dropped:
                self.fixes_dropped_busy += 1
            else:
                self.reports_sent += 1

    def record_success(self, elapsed_ms: float, *, joined: bool, nearby: bool) -> None:
        with self._lock:
            self.reports_succeeded += 1
            self.last_report_ms = round(elapsed_ms, 1)
            self._last_success_at = time.time()
            if joined:
                self.joins += 1
            if nearby:
                self.nearby_notifications += 1

    def record_failure(self, elapsed_ms: float, *, decode_error: bool = False) -> None:
        with self._lock:
            self.reports_failed += 1
            self.last_report_ms = round(elapsed_ms, 1)
            if decode_error:
                self.decode_errors += 1

    def snapshot(self) -> dict:
        """Return a JSON-serializable snapshot of all stats."""
        now = time.time()
        with self._lock:
            since_success = (
                round(now - self._last_success_at, 1)
                if self._last_success_at is not None else None
            )
            return {
                "uptime_seconds": round(now - self._started_at, 1),
                "fixes_received": self.fixes_received,
                "fixes_dropped_busy": self.fixes_dropped_busy,
                "reports_sent": self.reports_sent,
                "reports_succeeded": self.reports_succeeded,
                "reports_failed": self.reports_failed,
                "decode_errors": self.decode_errors,
                "joins": self.joins,
                "nearby_notifications": self.nearby_notifications,
                "last_report_ms": self.last_report_ms,
                "seconds_since_success": since_success,
            }
