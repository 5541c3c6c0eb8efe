"""Immutable snapshot of the latest committed metrics."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from ..collectors.system_models import BatteryMetric, CpuMetric, DiskOverview, RamMetric


class HealthStatus(str, Enum):
    """Overall health verdict; values match the status indicator contract."""
    EXCELLENT = "excellent"
    COULD_BE_BETTER = "could-be-better"
    CRITICAL = "critical"

    @property
    def label(self) -> str:
        return {
            HealthStatus.EXCELLENT: "Excellent",
            HealthStatus.COULD_BE_BETTER: "Could Be Better",
            HealthStatus.CRITICAL: "Critical",
        }[self]


@dataclass(frozen=True)
class SystemSnapshot:
    """System metrics plus request metadata at one instant."""
    ram: Optional[RamMetric] = None
    cpu: Optional[CpuMetric] = None
    battery: Optional[BatteryMetric] = None
    disk: Optional[DiskOverview] = None
    last_updated: Optional[datetime] = None
    is_loading: bool = False
    error: Optional[str] = None
    status: HealthStatus = HealthStatus.EXCELLENT
