"""Boundary contract between the dashboard core and a metric provider."""
from abc import ABC, abstractmethod
from typing import List

from .system_models import (
    BatteryMetric,
    CpuMetric,
    DiskOverview,
    ForceQuitResult,
    MemoryCleanResult,
    ProcessCpuInfo,
    ProcessMemoryInfo,
    RamMetric,
    StorageCategories,
)

SETTINGS_PANELS = ("storage", "privacy", "accessibility", "full-disk-access")


class MetricProvider(ABC):
    """Asynchronous source of hardware metrics and system actions.

    Every call may fail with ProviderError. get_battery_info raises
    BatteryUnavailableError when the device has no battery. Privileged
    actions report in-band failures through the success flag of their
    result and only raise on transport-level failures.
    """

    @abstractmethod
    async def get_ram_info(self) -> RamMetric:
        ...

    @abstractmethod
    async def get_cpu_info(self) -> CpuMetric:
        ...

    @abstractmethod
    async def get_battery_info(self) -> BatteryMetric:
        ...

    @abstractmethod
    async def get_disk_info(self) -> DiskOverview:
        ...

    @abstractmethod
    async def get_top_memory_processes(self, count: int = 8) -> List[ProcessMemoryInfo]:
        ...

    @abstractmethod
    async def get_top_cpu_processes(self, count: int = 8) -> List[ProcessCpuInfo]:
        ...

    @abstractmethod
    async def purge_memory(self) -> MemoryCleanResult:
        ...

    @abstractmethod
    async def force_quit_process(self, pid: int) -> ForceQuitResult:
        ...

    @abstractmethod
    async def get_storage_categories(self) -> StorageCategories:
        """Return cached categories; empty while a background scan runs."""

    @abstractmethod
    async def refresh_storage_categories(self) -> StorageCategories:
        """Recompute categories now."""

    @abstractmethod
    async def get_system_uptime(self) -> float:
        ...

    @abstractmethod
    async def open_settings_panel(self, panel: str):
        """Open one of SETTINGS_PANELS."""

    @abstractmethod
    async def open_activity_monitor(self):
        ...

    @abstractmethod
    async def open_energy_settings(self):
        ...

    @abstractmethod
    async def open_storage_settings(self):
        ...

    @abstractmethod
    async def update_tray_status(self, status: str):
        """Reflect the overall health status in the status indicator."""
