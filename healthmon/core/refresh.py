"""Periodic refresh of the metric store from a metric provider."""
import asyncio
import logging
from datetime import datetime
from typing import Optional

from ..collectors.provider import MetricProvider
from ..collectors.system_models import BatteryMetric
from .metric_store import MetricStore
from .snapshot import HealthStatus

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Failed to fetch system info"
CANCELLED_MESSAGE = "Refresh cancelled"


class RefreshOrchestrator:
    """Runs refresh cycles immediately and then on a fixed interval.

    Every cycle runs as a task owned by the orchestrator. Callers wait on
    it through a shield, so cancelling a caller never cancels the cycle.
    A cycle requested while another is still in flight is skipped.
    Stopping cancels the timer only; a cycle already in flight completes
    and commits.
    """

    def __init__(self, provider: MetricProvider, store: MetricStore, interval: float = 3.0):
        """Initialize the orchestrator."""
        self.provider = provider
        self.store = store
        self.interval = interval
        self._timer: Optional[asyncio.Task] = None
        self._cycle: Optional[asyncio.Future] = None
        self._reported_status: Optional[HealthStatus] = None

    @property
    def enabled(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def in_flight(self) -> bool:
        return self._cycle is not None and not self._cycle.done()

    def _launch_cycle(self) -> Optional[asyncio.Future]:
        """Start a cycle task, or return None when one is already running."""
        if self.in_flight:
            logger.debug("Refresh cycle already in flight, skipping")
            return None
        self._cycle = asyncio.ensure_future(self._run_cycle())
        return self._cycle

    async def refresh_all(self) -> bool:
        """Run one cycle. Returns False when skipped because one is in flight."""
        cycle = self._launch_cycle()
        if cycle is None:
            return False
        await asyncio.shield(cycle)
        return True

    async def _fetch_battery(self) -> Optional[BatteryMetric]:
        """A failing battery request means there is no battery."""
        try:
            return await self.provider.get_battery_info()
        except Exception as e:
            logger.debug(f"No battery information: {e}")
            return None

    async def _run_cycle(self):
        self.store.begin_refresh()

        try:
            ram, cpu, disk, battery = await asyncio.gather(
                self.provider.get_ram_info(),
                self.provider.get_cpu_info(),
                self.provider.get_disk_info(),
                self._fetch_battery(),
                return_exceptions=True,
            )
        except asyncio.CancelledError:
            # Loading must not outlive the cycle
            self.store.fail_refresh(CANCELLED_MESSAGE)
            raise

        # Any failure among RAM, CPU and disk fails the whole cycle
        for result in (ram, cpu, disk):
            if isinstance(result, BaseException):
                message = str(result) or DEFAULT_ERROR_MESSAGE
                logger.error(f"Refresh cycle failed: {message}")
                self.store.fail_refresh(message)
                return

        if isinstance(battery, BaseException):
            battery = None

        self.store.commit_refresh(ram, cpu, disk, battery, datetime.now())
        await self._report_status()

    async def _report_status(self):
        """Push the health status to the status indicator when it changes."""
        status = self.store.status
        if status == self._reported_status:
            return
        self._reported_status = status
        try:
            await self.provider.update_tray_status(status.value)
        except Exception as e:
            logger.warning(f"Failed to update status indicator: {e}")

    def start(self):
        """Enable periodic refresh; the first cycle starts immediately."""
        if self.enabled:
            return
        self._timer = asyncio.get_running_loop().create_task(self._schedule())

    def stop(self):
        """Disable periodic refresh without cancelling an in-flight cycle."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def _schedule(self):
        while True:
            self._launch_cycle()
            await asyncio.sleep(self.interval)

    async def wait_idle(self):
        """Wait for the cycle in flight, if any, to finish."""
        if self._cycle is not None:
            await asyncio.shield(self._cycle)
