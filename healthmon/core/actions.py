"""User-triggered system actions with result reporting."""
import logging
from dataclasses import dataclass
from typing import Optional

from ..charts.formatters import fixed
from ..collectors.provider import MetricProvider
from .navigation import View
from .refresh import RefreshOrchestrator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionOutcome:
    success: bool
    message: str


class ActionRunner:
    """Runs privileged and settings actions against the provider.

    Providers report expected failures in-band through a success flag;
    those messages are passed through. A call that raises is reported
    with a generic failure message instead.
    """

    def __init__(self, provider: MetricProvider,
                 orchestrator: Optional[RefreshOrchestrator] = None):
        self.provider = provider
        self.orchestrator = orchestrator

    async def purge_memory(self) -> ActionOutcome:
        try:
            result = await self.provider.purge_memory()
        except Exception as e:
            logger.error(f"Memory purge failed: {e}")
            return ActionOutcome(False, "Failed to free memory")

        if not result.success:
            return ActionOutcome(False, result.message)

        if self.orchestrator is not None:
            await self.orchestrator.refresh_all()
        freed_mb = result.freed_bytes / (1024 * 1024)
        return ActionOutcome(True, f"Freed {fixed(freed_mb, 1)} MB")

    async def force_quit(self, pid: int, name: str) -> ActionOutcome:
        try:
            result = await self.provider.force_quit_process(pid)
        except Exception as e:
            logger.error(f"Force quit of {pid} failed: {e}")
            return ActionOutcome(False, "Failed to terminate process")

        if not result.success:
            return ActionOutcome(False, result.message)
        return ActionOutcome(True, f"Terminated {name}")

    async def open_settings_panel(self, panel: str) -> ActionOutcome:
        try:
            await self.provider.open_settings_panel(panel)
        except Exception as e:
            logger.error(f"Failed to open settings panel {panel}: {e}")
            return ActionOutcome(False, "Failed to open settings")
        return ActionOutcome(True, f"Opened {panel} settings")

    async def open_settings_for(self, view: View) -> ActionOutcome:
        """Open the system tool that matches a detail view."""
        if view is View.MEMORY or view is View.CPU:
            opener, name = self.provider.open_activity_monitor, "activity monitor"
        elif view is View.BATTERY:
            opener, name = self.provider.open_energy_settings, "energy settings"
        elif view is View.STORAGE:
            opener, name = self.provider.open_storage_settings, "storage settings"
        else:
            return ActionOutcome(False, "No settings for this view")

        try:
            await opener()
        except Exception as e:
            logger.error(f"Failed to open {name}: {e}")
            return ActionOutcome(False, f"Failed to open {name}")
        return ActionOutcome(True, f"Opened {name}")
