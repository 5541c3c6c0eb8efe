"""Derive a single health verdict from a system snapshot."""
from enum import Enum
from typing import List, Optional

from ..collectors.system_models import PressureLevel
from ..config.threshold_config import ThresholdConfig
from .snapshot import HealthStatus, SystemSnapshot

DEFAULT_THRESHOLDS = ThresholdConfig()


class Severity(str, Enum):
    OK = "ok"
    WARN = "warn"
    CRITICAL = "critical"


def classify(snapshot: SystemSnapshot,
             thresholds: Optional[ThresholdConfig] = None) -> List[Severity]:
    """Classify every present metric dimension.

    Absent metrics contribute nothing. The battery can contribute two
    entries: a warn for a degraded condition and a critical for a nearly
    empty, unplugged battery.
    """
    limits = thresholds or DEFAULT_THRESHOLDS
    severities: List[Severity] = []

    ram = snapshot.ram
    if ram is not None:
        if ram.pressure_level == PressureLevel.CRITICAL:
            severities.append(Severity.CRITICAL)
        elif ram.pressure_level == PressureLevel.WARN:
            severities.append(Severity.WARN)
        else:
            severities.append(Severity.OK)

    cpu = snapshot.cpu
    if cpu is not None:
        if cpu.total_usage_percentage > limits.cpu_critical:
            severities.append(Severity.CRITICAL)
        elif cpu.total_usage_percentage > limits.cpu_warn:
            severities.append(Severity.WARN)
        else:
            severities.append(Severity.OK)

    disk = snapshot.disk
    if disk is not None:
        if disk.total_used_percentage > limits.disk_critical:
            severities.append(Severity.CRITICAL)
        elif disk.total_used_percentage > limits.disk_warn:
            severities.append(Severity.WARN)
        else:
            severities.append(Severity.OK)

    battery = snapshot.battery
    if battery is not None:
        if battery.condition != "Normal":
            severities.append(Severity.WARN)
        if not battery.is_plugged_in and battery.percentage < limits.battery_critical:
            severities.append(Severity.CRITICAL)

    return severities


def aggregate(snapshot: SystemSnapshot,
              thresholds: Optional[ThresholdConfig] = None) -> HealthStatus:
    """Reduce the classifications to one verdict; critical dominates warn."""
    severities = classify(snapshot, thresholds)
    if Severity.CRITICAL in severities:
        return HealthStatus.CRITICAL
    if Severity.WARN in severities:
        return HealthStatus.COULD_BE_BETTER
    return HealthStatus.EXCELLENT
