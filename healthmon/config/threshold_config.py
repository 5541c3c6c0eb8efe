"""Threshold configuration data structure."""
from dataclasses import dataclass


@dataclass
class ThresholdConfig:
    """Limits used to classify metrics into ok, warn and critical."""
    cpu_warn: float = 70.0
    cpu_critical: float = 90.0
    disk_warn: float = 85.0
    disk_critical: float = 95.0
    battery_critical: float = 10.0
    memory_pressure_warn: float = 60.0
    memory_pressure_critical: float = 85.0

    def __post_init__(self):
        """Fix invalid values."""
        if self.cpu_warn <= 0 or self.cpu_warn >= 100:
            self.cpu_warn = 70.0
        if self.cpu_critical <= 0 or self.cpu_critical >= 100:
            self.cpu_critical = 90.0
        if self.disk_warn <= 0 or self.disk_warn >= 100:
            self.disk_warn = 85.0
        if self.disk_critical <= 0 or self.disk_critical >= 100:
            self.disk_critical = 95.0
        if self.battery_critical < 0 or self.battery_critical >= 100:
            self.battery_critical = 10.0
        if self.memory_pressure_warn <= 0 or self.memory_pressure_warn >= 100:
            self.memory_pressure_warn = 60.0
        if self.memory_pressure_critical <= 0 or self.memory_pressure_critical >= 100:
            self.memory_pressure_critical = 85.0

        # A warn limit above its critical limit would hide the warn band
        if self.cpu_warn > self.cpu_critical:
            self.cpu_warn, self.cpu_critical = 70.0, 90.0
        if self.disk_warn > self.disk_critical:
            self.disk_warn, self.disk_critical = 85.0, 95.0
        if self.memory_pressure_warn > self.memory_pressure_critical:
            self.memory_pressure_warn, self.memory_pressure_critical = 60.0, 85.0
