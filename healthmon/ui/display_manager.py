"""Display management using Textual for the health dashboard."""
import logging
from typing import List, Optional

from textual.app import App
from textual.containers import Vertical
from textual.widgets import Static

from ..collectors.provider import MetricProvider
from ..collectors.system_models import ProcessCpuInfo, ProcessMemoryInfo
from ..config.config import Config
from ..config.setup_state import SetupState
from ..core.actions import ActionRunner
from ..core.metric_store import MetricStore
from ..core.navigation import NavigationStateMachine, View
from ..core.refresh import RefreshOrchestrator
from ..core.snapshot import SystemSnapshot
from ..core.storage import StorageCategoryPoller
from .render import HELP_LINE, Renderer
from .screens import ConfirmScreen, HelpScreen, SetupScreen

logger = logging.getLogger(__name__)

VIEW_KEYS = {
    "d": View.DASHBOARD,
    "m": View.MEMORY,
    "s": View.STORAGE,
    "b": View.BATTERY,
    "c": View.CPU,
}


class DisplayManager(App):
    """Textual dashboard over the metric store with live updates."""

    CSS_PATH = "healthmon.tcss"
    TITLE = "healthmon"

    def __init__(self, config: Config, provider: MetricProvider, store: MetricStore,
                 navigation: NavigationStateMachine, orchestrator: RefreshOrchestrator,
                 setup_state: Optional[SetupState] = None):
        """Initialize the display manager."""
        super().__init__()
        self.config = config
        self.provider = provider
        self.store = store
        self.navigation = navigation
        self.orchestrator = orchestrator
        self.setup_state = setup_state
        self.renderer = Renderer(config.display)
        self.actions = ActionRunner(provider, orchestrator)
        self.storage = StorageCategoryPoller(
            provider, config.storage_poll_interval, config.storage_max_polls)

        self.memory_processes: List[ProcessMemoryInfo] = []
        self.selected_process = 0
        self.cpu_processes: List[ProcessCpuInfo] = []
        self.uptime: Optional[float] = None
        self.storage_pending = False
        self.message: Optional[str] = None

    def compose(self):
        """Create the layout structure."""
        # References are kept so updates reach them while a modal is on top
        self._header = Static("Loading system metrics...", id="header", markup=False)
        self._body = Static("", id="body", markup=False)
        self._alerts = Static("No alerts", id="alerts", markup=False)
        self._help = Static(HELP_LINE, id="help", markup=False)
        with Vertical():
            yield self._header
            yield self._body
            yield self._alerts
            yield self._help

    def on_mount(self):
        """Run setup if needed, then start refreshing and redrawing."""
        if self.setup_state is not None and not self.setup_state.is_complete():
            self.push_screen(SetupScreen(self.actions), self._finish_setup)
        else:
            self.orchestrator.start()
        self.set_interval(self.config.display.redraw_interval, self._update_display)
        self._update_display()

    def on_unmount(self):
        self.orchestrator.stop()

    def _finish_setup(self, completed: Optional[bool] = None):
        """Completing or skipping setup both persist the flag."""
        logger.info(f"Setup {'completed' if completed else 'skipped'}")
        try:
            self.setup_state.mark_complete()
        except OSError as e:
            logger.error(f"Failed to save setup state: {e}")
        self.orchestrator.start()

    def on_key(self, event):
        """Handle key press events."""
        key = event.key
        view = self.navigation.current
        if key == "x" or key == "q":
            self.exit()
        elif key in VIEW_KEYS:
            self.navigation.navigate(VIEW_KEYS[key])
            self._on_view_changed()
        elif key == "backspace" or key == "left":
            self.navigation.go_back()
            self._on_view_changed()
        elif key == "r":
            self.run_worker(self._manual_refresh(), group="refresh")
        elif key == "p" and view is View.MEMORY:
            self.run_worker(self._purge_memory(), group="action")
        elif (key == "up" or key == "down") and view is View.MEMORY:
            self._move_selection(-1 if key == "up" else 1)
        elif key == "k" and view is View.MEMORY:
            self._confirm_force_quit()
        elif key == "f" and view is View.STORAGE:
            self.run_worker(self._refresh_storage(), group="detail", exclusive=True)
        elif key == "o":
            self.run_worker(self._open_settings(view), group="action")
        elif key == "h":
            self.push_screen(HelpScreen())

    def _on_view_changed(self):
        """Load the detail data the new view needs."""
        self.message = None
        view = self.navigation.current
        if view is View.MEMORY:
            self.run_worker(self._load_memory_details(), group="detail", exclusive=True)
        elif view is View.CPU:
            self.run_worker(self._load_cpu_details(), group="detail", exclusive=True)
        elif view is View.STORAGE:
            self.run_worker(self._load_storage(), group="detail", exclusive=True)
        else:
            self.workers.cancel_group(self, "detail")
        self._update_display()

    async def _manual_refresh(self):
        if not await self.orchestrator.refresh_all():
            self.message = "Refresh already in progress"
        self._update_display()

    async def _load_memory_details(self):
        try:
            self.memory_processes = await self.provider.get_top_memory_processes(
                self.config.display.process_count)
            self.selected_process = min(self.selected_process, max(len(self.memory_processes) - 1, 0))
        except Exception as e:
            logger.error(f"Failed to get memory processes: {e}")
        self._update_display()

    async def _load_cpu_details(self):
        try:
            self.cpu_processes = await self.provider.get_top_cpu_processes(
                self.config.display.process_count)
            self.uptime = await self.provider.get_system_uptime()
        except Exception as e:
            logger.error(f"Failed to get CPU details: {e}")
        self._update_display()

    async def _load_storage(self):
        self.storage_pending = True
        self._update_display()
        try:
            await self.storage.load()
        finally:
            self.storage_pending = False
        self._update_display()

    async def _refresh_storage(self):
        self.storage_pending = True
        self.message = "Rescanning storage categories..."
        self._update_display()
        try:
            await self.storage.refresh()
        finally:
            self.storage_pending = False
        self.message = None
        self._update_display()

    async def _purge_memory(self):
        self.message = "Freeing memory..."
        self._update_display()
        outcome = await self.actions.purge_memory()
        self.message = outcome.message
        self._update_display()
        if outcome.success:
            await self._load_memory_details()

    def _move_selection(self, step: int):
        if not self.memory_processes:
            return
        self.selected_process = (self.selected_process + step) % len(self.memory_processes)
        self._update_display()

    def _confirm_force_quit(self):
        if not self.memory_processes:
            self.message = "No process selected"
            self._update_display()
            return
        proc = self.memory_processes[self.selected_process]

        def answered(confirmed: Optional[bool] = None):
            if confirmed:
                self.run_worker(self._force_quit(proc.pid, proc.name), group="action")

        self.push_screen(ConfirmScreen(f"Force quit \"{proc.name}\"?"), answered)

    async def _force_quit(self, pid: int, name: str):
        outcome = await self.actions.force_quit(pid, name)
        self.message = outcome.message
        self._update_display()
        if outcome.success:
            await self._load_memory_details()

    async def _open_settings(self, view: View):
        outcome = await self.actions.open_settings_for(view)
        self.message = outcome.message
        self._update_display()

    def _render_body(self, view: View, snapshot: SystemSnapshot):
        if view is View.DASHBOARD:
            return self.renderer.dashboard(snapshot)
        elif view is View.MEMORY:
            return self.renderer.memory(
                snapshot, self.memory_processes, self.message, self.selected_process)
        elif view is View.STORAGE:
            return self.renderer.storage(
                snapshot, self.storage.segments(), self.storage_pending, self.storage.error)
        elif view is View.BATTERY:
            return self.renderer.battery(snapshot)
        elif view is View.CPU:
            return self.renderer.cpu(snapshot, self.cpu_processes, self.uptime)
        raise ValueError(f"Unknown view: {view}")

    def _update_display(self):
        """Update all display panels with current data."""
        snapshot = self.store.snapshot()
        view = self.navigation.current
        try:
            self._header.update(self.renderer.header(snapshot, view))
            self._body.update(self._render_body(view, snapshot))
            self._alerts.update(self.renderer.alerts(self.store.get_alerts()))
            # The memory view shows action results inline
            show_message = self.message and view is not View.MEMORY
            self._help.update(self.message if show_message else HELP_LINE)
        except Exception as e:
            logger.exception("Display update failed")
            self._header.update(f"Display Error: {e}")
        self.sub_title = snapshot.status.label
