"""Single-writer store for the latest system snapshot."""
import threading
from collections import deque
from datetime import datetime
from typing import List, Optional

from ..collectors.system_models import BatteryMetric, CpuMetric, DiskOverview, RamMetric
from ..config.threshold_config import ThresholdConfig
from .alerts import SystemAlert
from .snapshot import HealthStatus, SystemSnapshot
from .status import aggregate

STATUS_ALERT_LEVELS = {
    HealthStatus.EXCELLENT: "INFO",
    HealthStatus.COULD_BE_BETTER: "WARN",
    HealthStatus.CRITICAL: "ERROR",
}


class MetricStore:
    """Owns the system snapshot and the derived health status.

    Every metric setter recomputes the status from the post-update
    snapshot before releasing the lock, so readers never observe a metric
    without its matching status.
    """

    def __init__(self, thresholds: Optional[ThresholdConfig] = None, max_alerts: int = 50):
        """Initialize an empty store."""
        self._lock = threading.Lock()
        self._thresholds = thresholds
        self._ram: Optional[RamMetric] = None
        self._cpu: Optional[CpuMetric] = None
        self._battery: Optional[BatteryMetric] = None
        self._disk: Optional[DiskOverview] = None
        self._last_updated: Optional[datetime] = None
        self._is_loading = False
        self._error: Optional[str] = None
        self._status = HealthStatus.EXCELLENT
        self._alerts = deque(maxlen=max_alerts)

    def _build_snapshot(self) -> SystemSnapshot:
        return SystemSnapshot(
            ram=self._ram,
            cpu=self._cpu,
            battery=self._battery,
            disk=self._disk,
            last_updated=self._last_updated,
            is_loading=self._is_loading,
            error=self._error,
            status=self._status,
        )

    def _recompute_status(self):
        """Caller must hold the lock."""
        previous = self._status
        self._status = aggregate(self._build_snapshot(), self._thresholds)
        if self._status != previous:
            self._alerts.append(SystemAlert(
                STATUS_ALERT_LEVELS[self._status],
                f"Health status changed to {self._status.label}",
                "STATUS",
            ))

    # Readers

    def snapshot(self) -> SystemSnapshot:
        """Get the latest committed snapshot."""
        with self._lock:
            return self._build_snapshot()

    @property
    def status(self) -> HealthStatus:
        with self._lock:
            return self._status

    @property
    def error(self) -> Optional[str]:
        with self._lock:
            return self._error

    @property
    def is_loading(self) -> bool:
        with self._lock:
            return self._is_loading

    def get_alerts(self) -> List[SystemAlert]:
        with self._lock:
            return list(self._alerts)

    # Setters

    def set_ram(self, metric: RamMetric):
        with self._lock:
            self._ram = metric
            self._recompute_status()

    def set_cpu(self, metric: CpuMetric):
        with self._lock:
            self._cpu = metric
            self._recompute_status()

    def set_disk(self, metric: DiskOverview):
        with self._lock:
            self._disk = metric
            self._recompute_status()

    def set_battery(self, metric: Optional[BatteryMetric]):
        """None means the device has no battery."""
        with self._lock:
            self._battery = metric
            self._recompute_status()

    def set_error(self, message: Optional[str]):
        with self._lock:
            self._error = message

    # Refresh cycle entry points

    def begin_refresh(self):
        """Mark a refresh cycle as started."""
        with self._lock:
            self._is_loading = True
            self._error = None

    def commit_refresh(self, ram: RamMetric, cpu: CpuMetric, disk: DiskOverview,
                       battery: Optional[BatteryMetric], timestamp: Optional[datetime] = None):
        """Commit a successful cycle atomically with a single status recompute."""
        with self._lock:
            self._ram = ram
            self._cpu = cpu
            self._disk = disk
            self._battery = battery
            self._last_updated = timestamp or datetime.now()
            self._is_loading = False
            self._recompute_status()

    def fail_refresh(self, message: str):
        """End a failed cycle; previously committed metrics stay authoritative."""
        with self._lock:
            self._is_loading = False
            self._error = message
            self._alerts.append(SystemAlert("ERROR", f"Refresh failed: {message}", "REFRESH"))
