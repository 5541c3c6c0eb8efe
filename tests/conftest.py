import asyncio

import pytest

from healthmon.collectors.provider import MetricProvider
from healthmon.collectors.system_models import (
    BatteryMetric,
    CpuMetric,
    DiskInfo,
    DiskOverview,
    ForceQuitResult,
    LoadAverage,
    MemoryCleanResult,
    PressureLevel,
    ProcessCpuInfo,
    ProcessMemoryInfo,
    RamMetric,
    StorageCategories,
    StorageCategory,
)
from healthmon.exceptions import BatteryUnavailableError

GB = 1024 ** 3


def make_ram(used_percentage=40.0, pressure=PressureLevel.NORMAL):
    total = 16 * GB
    used = int(total * used_percentage / 100)
    return RamMetric(
        total_bytes=total,
        used_bytes=used,
        available_bytes=total - used,
        used_percentage=used_percentage,
        pressure_level=pressure,
    )


def make_cpu(usage=20.0, cores=4):
    return CpuMetric(
        model_name="Apple M2 Pro",
        total_cores=cores,
        total_usage_percentage=usage,
        per_core_usage=tuple([usage] * cores),
        load_average=LoadAverage(1.5, 1.2, 0.9),
    )


def make_disk(used_percentage=50.0):
    total = 500 * GB
    used = int(total * used_percentage / 100)
    primary = DiskInfo(
        name="disk1s1",
        mount_point="/",
        total_bytes=total,
        available_bytes=total - used,
        used_bytes=used,
        used_percentage=used_percentage,
        file_system="apfs",
        is_removable=False,
    )
    return DiskOverview(
        primary=primary,
        all_disks=(primary,),
        total_space_bytes=total,
        total_available_bytes=total - used,
        total_used_bytes=used,
        total_used_percentage=used_percentage,
    )


def make_battery(percentage=80.0, plugged=True, condition="Normal"):
    return BatteryMetric(
        percentage=percentage,
        is_charging=plugged and percentage < 100,
        is_plugged_in=plugged,
        power_source="AC Adapter" if plugged else "Battery",
        condition=condition,
        max_capacity_percentage=95.0,
        cycle_count=120,
        time_to_full_minutes=45 if plugged else None,
        time_to_empty_minutes=None if plugged else 150,
    )


def make_categories():
    categories = (
        StorageCategory("Documents", 40 * GB, "#22c55e"),
        StorageCategory("Applications", 60 * GB, "#3b82f6"),
        StorageCategory("Music", 0, "#ec4899"),
    )
    return StorageCategories(categories=categories, total_categorized=100 * GB)


class FakeProvider(MetricProvider):
    """In-memory provider whose results and failures are set per test."""

    def __init__(self):
        self.ram = make_ram()
        self.cpu = make_cpu()
        self.disk = make_disk()
        self.battery = make_battery()
        self.failures = {}
        self.delay = 0.0
        self.calls = []
        self.tray_statuses = []
        self.storage_results = [make_categories()]
        self.purge_result = MemoryCleanResult(True, 256 * 1024 * 1024, "ok")
        self.force_quit_result = ForceQuitResult(True, "Process terminated")

    async def _answer(self, name, value):
        self.calls.append(name)
        if self.delay:
            await asyncio.sleep(self.delay)
        if name in self.failures:
            raise self.failures[name]
        return value

    async def get_ram_info(self):
        return await self._answer("ram", self.ram)

    async def get_cpu_info(self):
        return await self._answer("cpu", self.cpu)

    async def get_battery_info(self):
        if self.battery is None:
            self.calls.append("battery")
            raise BatteryUnavailableError("No battery present")
        return await self._answer("battery", self.battery)

    async def get_disk_info(self):
        return await self._answer("disk", self.disk)

    async def get_top_memory_processes(self, count=8):
        processes = [
            ProcessMemoryInfo(101, "Safari", "/Applications/Safari.app", 2 * GB, 12.5),
            ProcessMemoryInfo(202, "Slack", "/Applications/Slack.app", GB, 6.25),
        ]
        return (await self._answer("memory_processes", processes))[:count]

    async def get_top_cpu_processes(self, count=8):
        processes = [ProcessCpuInfo(303, "python", 42.0)]
        return (await self._answer("cpu_processes", processes))[:count]

    async def purge_memory(self):
        return await self._answer("purge", self.purge_result)

    async def force_quit_process(self, pid):
        return await self._answer("force_quit", self.force_quit_result)

    async def get_storage_categories(self):
        result = self.storage_results.pop(0) if len(self.storage_results) > 1 else self.storage_results[0]
        return await self._answer("storage", result)

    async def refresh_storage_categories(self):
        return await self._answer("refresh_storage", make_categories())

    async def get_system_uptime(self):
        return await self._answer("uptime", 90061.0)

    async def open_settings_panel(self, panel):
        if panel not in ("storage", "privacy", "accessibility", "full-disk-access"):
            raise ValueError(f"Unknown panel: {panel}")
        return await self._answer(f"panel:{panel}", None)

    async def open_activity_monitor(self):
        return await self._answer("activity", None)

    async def open_energy_settings(self):
        return await self._answer("energy", None)

    async def open_storage_settings(self):
        return await self._answer("storage_settings", None)

    async def update_tray_status(self, status):
        self.tray_statuses.append(status)
        return await self._answer("tray", None)


@pytest.fixture
def provider():
    return FakeProvider()
