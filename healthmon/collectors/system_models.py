"""System data models exchanged with metric providers."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class PressureLevel(str, Enum):
    """Coarse memory-health classification supplied by the provider."""
    NORMAL = "normal"
    WARN = "warn"
    CRITICAL = "critical"


@dataclass(frozen=True)
class RamMetric:
    total_bytes: int
    used_bytes: int
    available_bytes: int
    used_percentage: float
    pressure_level: PressureLevel


@dataclass(frozen=True)
class LoadAverage:
    one_minute: float
    five_minutes: float
    fifteen_minutes: float


@dataclass(frozen=True)
class CpuMetric:
    model_name: str
    total_cores: int
    total_usage_percentage: float
    per_core_usage: Tuple[float, ...]
    load_average: LoadAverage


@dataclass(frozen=True)
class BatteryMetric:
    percentage: float
    is_charging: bool
    is_plugged_in: bool
    power_source: str
    condition: str  # "Normal", "Service Recommended", "Replace Soon"
    max_capacity_percentage: float
    cycle_count: Optional[int] = None
    time_to_full_minutes: Optional[int] = None
    time_to_empty_minutes: Optional[int] = None
    temperature_celsius: Optional[float] = None
    voltage_volts: Optional[float] = None


@dataclass(frozen=True)
class DiskInfo:
    name: str
    mount_point: str
    total_bytes: int
    available_bytes: int
    used_bytes: int
    used_percentage: float
    file_system: str
    is_removable: bool


@dataclass(frozen=True)
class DiskOverview:
    """Primary disk plus totals across all non-removable disks."""
    primary: Optional[DiskInfo]
    all_disks: Tuple[DiskInfo, ...]
    total_space_bytes: int
    total_available_bytes: int
    total_used_bytes: int
    total_used_percentage: float


@dataclass(frozen=True)
class StorageCategory:
    name: str
    bytes: int
    color: str


@dataclass(frozen=True)
class StorageCategories:
    categories: Tuple[StorageCategory, ...] = field(default_factory=tuple)
    total_categorized: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.categories


@dataclass(frozen=True)
class ProcessMemoryInfo:
    pid: int
    name: str
    path: str
    memory_bytes: int
    memory_percentage: float


@dataclass(frozen=True)
class ProcessCpuInfo:
    pid: int
    name: str
    cpu_percentage: float


@dataclass(frozen=True)
class MemoryCleanResult:
    success: bool
    freed_bytes: int
    message: str


@dataclass(frozen=True)
class ForceQuitResult:
    success: bool
    message: str
