"""System metrics provider for RAM, CPU, battery and disk built on psutil."""
import asyncio
import glob
import logging
import os
import platform
import shutil
import subprocess
import sys
import time
from typing import Dict, List, Optional, Sequence

import psutil
import yaml

from ..config.config import Config
from ..exceptions import BatteryUnavailableError, ProviderError
from .provider import SETTINGS_PANELS, MetricProvider
from .system_models import (
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

logger = logging.getLogger(__name__)

STORAGE_CACHE_TTL = 300.0
POWER_SUPPLY_DIR = "/sys/class/power_supply"
REMOVABLE_PREFIXES = ("/media/", "/run/media/", "/Volumes/")

MACOS_SETTINGS = {
    "storage": ["open", "x-apple.systempreferences:com.apple.settings.Storage"],
    "privacy": ["open", "x-apple.systempreferences:com.apple.preference.security?Privacy"],
    "accessibility": ["open", "x-apple.systempreferences:com.apple.preference.security?Privacy_Accessibility"],
    "full-disk-access": ["open", "x-apple.systempreferences:com.apple.preference.security?Privacy_AllFiles"],
    "energy": ["open", "x-apple.systempreferences:com.apple.preference.battery"],
    "activity": ["open", "-a", "Activity Monitor"],
}

LINUX_SETTINGS = {
    "storage": ["gnome-disks"],
    "privacy": ["gnome-control-center", "privacy"],
    "accessibility": ["gnome-control-center", "universal-access"],
    "energy": ["gnome-control-center", "power"],
    "activity": ["gnome-system-monitor"],
}


def storage_directories() -> List[tuple]:
    """(category, path, color) triples scanned for the storage breakdown."""
    home = os.path.expanduser("~")
    darwin = sys.platform == "darwin"
    return [
        ("Applications", "/Applications" if darwin else "/opt", "#3b82f6"),
        ("Documents", os.path.join(home, "Documents"), "#22c55e"),
        ("Downloads", os.path.join(home, "Downloads"), "#14b8a6"),
        ("Pictures", os.path.join(home, "Pictures"), "#f59e0b"),
        ("Music", os.path.join(home, "Music"), "#ec4899"),
        ("Movies", os.path.join(home, "Movies" if darwin else "Videos"), "#8b5cf6"),
        ("Desktop", os.path.join(home, "Desktop"), "#6366f1"),
    ]


def directory_size(path: str) -> int:
    """Total size in bytes of regular files below path; unreadable entries are skipped."""
    total = 0
    for root, _dirs, files in os.walk(path):
        for name in files:
            try:
                total += os.lstat(os.path.join(root, name)).st_size
            except OSError:
                continue
    return total


def battery_condition(max_capacity_percentage: float) -> str:
    """Map remaining design capacity to a health condition."""
    if max_capacity_percentage >= 80.0:
        return "Normal"
    if max_capacity_percentage >= 50.0:
        return "Service Recommended"
    return "Replace Soon"


def _read_int(path: str) -> Optional[int]:
    try:
        with open(path, 'r') as f:
            return int(f.read().strip())
    except (OSError, ValueError):
        return None


class SystemCollector(MetricProvider):
    """Collects system-level metrics from the local machine.

    Blocking psutil calls run in worker threads so the event loop only
    suspends at provider boundaries.
    """

    def __init__(self, config: Config):
        """Initialize the system collector."""
        self.config = config
        self.tray_status: Optional[str] = None
        self._cpu_model: Optional[str] = None
        self._storage_cache: Optional[StorageCategories] = None
        self._storage_cache_time = 0.0
        self._storage_task: Optional[asyncio.Task] = None
        self._load_storage_cache()

    async def _run(self, func, *args):
        """Run a blocking collection step in a thread, normalizing failures."""
        try:
            return await asyncio.to_thread(func, *args)
        except ProviderError:
            raise
        except (psutil.Error, OSError) as e:
            raise ProviderError(str(e) or type(e).__name__) from e

    # Metrics

    async def get_ram_info(self) -> RamMetric:
        return await self._run(self._collect_ram)

    async def get_cpu_info(self) -> CpuMetric:
        return await self._run(self._collect_cpu)

    async def get_battery_info(self) -> BatteryMetric:
        return await self._run(self._collect_battery)

    async def get_disk_info(self) -> DiskOverview:
        return await self._run(self._collect_disks)

    def _pressure_level(self, used_percentage: float) -> PressureLevel:
        thresholds = self.config.thresholds
        if used_percentage < thresholds.memory_pressure_warn:
            return PressureLevel.NORMAL
        if used_percentage < thresholds.memory_pressure_critical:
            return PressureLevel.WARN
        return PressureLevel.CRITICAL

    def _collect_ram(self) -> RamMetric:
        memory = psutil.virtual_memory()
        total = memory.total
        used = memory.used
        # available can be reported as 0 on some platforms
        available = memory.available or max(total - used, 0)
        used_percentage = (used / total) * 100.0 if total > 0 else 0.0
        return RamMetric(
            total_bytes=total,
            used_bytes=used,
            available_bytes=available,
            used_percentage=used_percentage,
            pressure_level=self._pressure_level(used_percentage),
        )

    def _get_cpu_model(self) -> str:
        if self._cpu_model is None:
            model = None
            try:
                with open("/proc/cpuinfo", 'r') as f:
                    for line in f:
                        if line.lower().startswith("model name"):
                            model = line.split(":", 1)[1].strip()
                            break
            except OSError:
                pass
            self._cpu_model = model or platform.processor() or "Unknown"
        return self._cpu_model

    def _collect_cpu(self) -> CpuMetric:
        per_core = psutil.cpu_percent(interval=0.1, percpu=True)
        total = sum(per_core) / len(per_core) if per_core else 0.0
        try:
            load = psutil.getloadavg()
        except (AttributeError, OSError):
            load = (0.0, 0.0, 0.0)
        return CpuMetric(
            model_name=self._get_cpu_model(),
            total_cores=psutil.cpu_count() or len(per_core),
            total_usage_percentage=total,
            per_core_usage=tuple(per_core),
            load_average=LoadAverage(*load),
        )

    def _read_power_supply(self) -> Dict[str, float]:
        """Read capacity, cycle count and voltage from sysfs when present."""
        details: Dict[str, float] = {}
        batteries = sorted(glob.glob(os.path.join(POWER_SUPPLY_DIR, "BAT*")))
        if not batteries:
            return details
        base = batteries[0]

        for prefix in ("energy", "charge"):
            full = _read_int(os.path.join(base, f"{prefix}_full"))
            design = _read_int(os.path.join(base, f"{prefix}_full_design"))
            if full and design:
                details['max_capacity_percentage'] = min(full / design * 100.0, 100.0)
                break

        cycles = _read_int(os.path.join(base, "cycle_count"))
        if cycles:
            details['cycle_count'] = cycles

        voltage = _read_int(os.path.join(base, "voltage_now"))
        if voltage:
            details['voltage_volts'] = voltage / 1_000_000
        return details

    def _collect_battery(self) -> BatteryMetric:
        sensors_battery = getattr(psutil, "sensors_battery", None)
        battery = sensors_battery() if sensors_battery else None
        if battery is None:
            raise BatteryUnavailableError("No battery present")

        plugged = bool(battery.power_plugged)
        details = self._read_power_supply()
        max_capacity = details.get('max_capacity_percentage', 100.0)

        # secsleft is negative for the unknown/unlimited sentinels
        time_to_empty = None
        if not plugged and battery.secsleft is not None and battery.secsleft >= 0:
            time_to_empty = int(battery.secsleft // 60)

        cycle_count = details.get('cycle_count')
        return BatteryMetric(
            percentage=float(battery.percent),
            is_charging=plugged and battery.percent < 100,
            is_plugged_in=plugged,
            power_source="AC Adapter" if plugged else "Battery",
            condition=battery_condition(max_capacity),
            max_capacity_percentage=max_capacity,
            cycle_count=int(cycle_count) if cycle_count is not None else None,
            time_to_empty_minutes=time_to_empty,
            voltage_volts=details.get('voltage_volts'),
        )

    @staticmethod
    def _is_removable(partition) -> bool:
        if "removable" in (partition.opts or ""):
            return True
        return partition.mountpoint.startswith(REMOVABLE_PREFIXES)

    def _collect_disks(self) -> DiskOverview:
        disks: List[DiskInfo] = []
        seen = set()
        for partition in psutil.disk_partitions(all=False):
            if partition.mountpoint in seen:
                continue
            try:
                usage = psutil.disk_usage(partition.mountpoint)
            except OSError:
                continue
            seen.add(partition.mountpoint)
            disks.append(DiskInfo(
                name=os.path.basename(partition.device) or partition.device,
                mount_point=partition.mountpoint,
                total_bytes=usage.total,
                available_bytes=usage.free,
                used_bytes=usage.used,
                used_percentage=(usage.used / usage.total) * 100.0 if usage.total > 0 else 0.0,
                file_system=partition.fstype,
                is_removable=self._is_removable(partition),
            ))

        primary = next((d for d in disks if d.mount_point == "/"), disks[0] if disks else None)

        fixed = [d for d in disks if not d.is_removable]
        total_space = sum(d.total_bytes for d in fixed)
        total_available = sum(d.available_bytes for d in fixed)
        total_used = sum(d.used_bytes for d in fixed)
        return DiskOverview(
            primary=primary,
            all_disks=tuple(disks),
            total_space_bytes=total_space,
            total_available_bytes=total_available,
            total_used_bytes=total_used,
            total_used_percentage=(total_used / total_space) * 100.0 if total_space > 0 else 0.0,
        )

    # Processes

    async def get_top_memory_processes(self, count: int = 8) -> List[ProcessMemoryInfo]:
        return await self._run(self._collect_memory_processes, count)

    async def get_top_cpu_processes(self, count: int = 8) -> List[ProcessCpuInfo]:
        return await self._run(self._collect_cpu_processes, count)

    def _collect_memory_processes(self, count: int) -> List[ProcessMemoryInfo]:
        total = psutil.virtual_memory().total
        processes = []
        for proc in psutil.process_iter(['pid', 'name', 'exe', 'memory_info']):
            info = proc.info
            memory = info.get('memory_info')
            if memory is None:
                continue
            processes.append(ProcessMemoryInfo(
                pid=info['pid'],
                name=info.get('name') or "",
                path=info.get('exe') or "",
                memory_bytes=memory.rss,
                memory_percentage=(memory.rss / total) * 100.0 if total else 0.0,
            ))
        processes.sort(key=lambda p: p.memory_bytes, reverse=True)
        return processes[:count]

    def _collect_cpu_processes(self, count: int) -> List[ProcessCpuInfo]:
        # The first cpu_percent call per process only primes its counters
        primed = []
        for proc in psutil.process_iter(['pid', 'name']):
            try:
                proc.cpu_percent(None)
                primed.append(proc)
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue

        time.sleep(0.2)

        processes = []
        for proc in primed:
            try:
                cpu = proc.cpu_percent(None)
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
            processes.append(ProcessCpuInfo(
                pid=proc.info['pid'],
                name=proc.info.get('name') or "",
                cpu_percentage=cpu,
            ))
        processes.sort(key=lambda p: p.cpu_percentage, reverse=True)
        return processes[:count]

    async def get_system_uptime(self) -> float:
        return await self._run(lambda: time.time() - psutil.boot_time())

    # Privileged actions

    async def purge_memory(self) -> MemoryCleanResult:
        return await self._run(self._purge_memory)

    async def force_quit_process(self, pid: int) -> ForceQuitResult:
        return await self._run(self._force_quit, pid)

    def _purge_memory(self) -> MemoryCleanResult:
        before = psutil.virtual_memory().used

        if sys.platform == "darwin":
            script = 'do shell script "purge" with administrator privileges'
            output = subprocess.run(["osascript", "-e", script], capture_output=True, text=True)
            if output.returncode != 0:
                if "canceled" in output.stderr.lower():
                    return MemoryCleanResult(False, 0, "Authentication cancelled")
                raise ProviderError(f"Purge failed: {output.stderr.strip()}")
        else:
            try:
                os.sync()
                with open("/proc/sys/vm/drop_caches", 'w') as f:
                    f.write("3\n")
            except PermissionError:
                return MemoryCleanResult(False, 0, "Administrator privileges are required to purge memory")

        # Let memory accounting settle
        time.sleep(0.5)

        after = psutil.virtual_memory().used
        freed = max(before - after, 0)
        return MemoryCleanResult(True, freed, f"Freed {freed} bytes of memory")

    def _force_quit(self, pid: int) -> ForceQuitResult:
        try:
            proc = psutil.Process(pid)
            proc.terminate()
        except psutil.NoSuchProcess:
            return ForceQuitResult(False, "Process not found")
        except psutil.AccessDenied:
            return ForceQuitResult(False, "Permission denied. Try running with elevated privileges.")

        try:
            proc.wait(timeout=0.5)
            return ForceQuitResult(True, "Process terminated")
        except psutil.TimeoutExpired:
            pass

        try:
            proc.kill()
        except psutil.NoSuchProcess:
            return ForceQuitResult(True, "Process terminated")
        return ForceQuitResult(True, "Process force killed")

    # Storage categories

    def _load_storage_cache(self):
        path = self.config.storage_cache_path
        if not path or not os.path.exists(path):
            return
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
            categories = tuple(StorageCategory(**c) for c in data.get('categories', []))
            self._storage_cache = StorageCategories(
                categories=categories,
                total_categorized=sum(c.bytes for c in categories),
            )
            self._storage_cache_time = float(data.get('timestamp', 0.0))
        except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring unreadable storage cache {path}: {e}")

    def _store_storage_cache(self, categories: StorageCategories):
        self._storage_cache = categories
        self._storage_cache_time = time.time()
        path = self.config.storage_cache_path
        if not path:
            return
        data = {
            'timestamp': self._storage_cache_time,
            'categories': [
                {'name': c.name, 'bytes': c.bytes, 'color': c.color}
                for c in categories.categories
            ],
        }
        try:
            os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
            with open(path, 'w') as f:
                yaml.safe_dump(data, f)
        except OSError as e:
            logger.warning(f"Could not write storage cache {path}: {e}")

    async def get_storage_categories(self) -> StorageCategories:
        """Return cached categories, scanning in the background when stale or missing."""
        cached = self._storage_cache
        if cached is not None and time.time() - self._storage_cache_time < STORAGE_CACHE_TTL:
            return cached

        self._schedule_storage_scan()
        return cached if cached is not None else StorageCategories()

    async def refresh_storage_categories(self) -> StorageCategories:
        directories = storage_directories()
        sizes = await asyncio.gather(*(
            self._run(directory_size, path) for _, path, _ in directories
        ))
        categories = tuple(
            StorageCategory(name=name, bytes=size, color=color)
            for (name, _, color), size in zip(directories, sizes)
        )
        result = StorageCategories(
            categories=categories,
            total_categorized=sum(c.bytes for c in categories),
        )
        self._store_storage_cache(result)
        return result

    def _schedule_storage_scan(self):
        if self._storage_task is not None and not self._storage_task.done():
            return
        self._storage_task = asyncio.get_running_loop().create_task(self._background_scan())

    async def _background_scan(self):
        try:
            await self.refresh_storage_categories()
        except ProviderError as e:
            logger.warning(f"Background storage scan failed: {e}")

    # System settings

    async def _launch(self, key: str):
        settings = MACOS_SETTINGS if sys.platform == "darwin" else LINUX_SETTINGS
        command: Optional[Sequence[str]] = settings.get(key)
        if not command or shutil.which(command[0]) is None:
            raise ProviderError(f"Opening '{key}' is not supported on this platform")
        try:
            await asyncio.create_subprocess_exec(
                *command,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise ProviderError(f"Failed to launch {command[0]}: {e}") from e

    async def open_settings_panel(self, panel: str):
        if panel not in SETTINGS_PANELS:
            raise ValueError(f"Unknown panel: {panel}")
        await self._launch(panel)

    async def open_activity_monitor(self):
        await self._launch("activity")

    async def open_energy_settings(self):
        await self._launch("energy")

    async def open_storage_settings(self):
        await self._launch("storage")

    async def update_tray_status(self, status: str):
        """No tray in a terminal; remember the status for the title bar."""
        self.tray_status = status
        logger.info(f"Health status is now {status}")
