"""Modal dialogs: key help, force-quit confirmation and first-run setup."""
import logging
import os

from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Static

from ..core.actions import ActionRunner
from .render import HELP_LINE

logger = logging.getLogger(__name__)

SETUP_STEPS = (
    ("full-disk-access", "Full Disk Access",
     "Needed to measure storage categories in protected folders."),
    ("accessibility", "Accessibility",
     "Needed to force quit applications that stopped responding."),
)


class Dialog(ModalScreen):
    """Centered dialog with a title, a body and a key hint line.

    Key presses are consumed here so they never reach the dashboard.
    """

    DEFAULT_CSS = """
    Dialog {
        align: center middle;
        background: $background 60%;
    }

    Dialog > Vertical {
        width: 64;
        height: auto;
        border: round $accent;
        background: $panel;
        padding: 1 2;
    }

    Dialog .dialog-title {
        text-style: bold reverse;
        padding: 0 1;
    }

    Dialog .dialog-body {
        margin: 1 0 0 0;
    }

    Dialog .dialog-status {
        color: $warning;
    }

    Dialog .dialog-keys {
        margin: 1 0 0 0;
        color: $text-muted;
    }
    """

    title_text = ""
    keys_text = ""

    def compose(self):
        with Vertical():
            yield Static(self.title_text, classes="dialog-title", markup=False)
            yield Static("", id="dialog_body", classes="dialog-body", markup=False)
            yield Static("", id="dialog_status", classes="dialog-status", markup=False)
            yield Static(self.keys_text, classes="dialog-keys", markup=False)

    def set_body(self, text: str):
        self.query_one("#dialog_body", Static).update(text)

    def set_status(self, text: str):
        self.query_one("#dialog_status", Static).update(text)


class HelpScreen(Dialog):
    """Key reference loaded from help.txt; any key closes it."""

    title_text = "Keys"
    keys_text = "any key closes"

    def on_mount(self):
        help_file = os.path.join(os.path.dirname(__file__), "help.txt")
        try:
            with open(help_file, "r") as f:
                help_text = f.read().rstrip()
        except OSError as e:
            logger.warning(f"Could not read help file: {e}")
            help_text = HELP_LINE
        self.set_body(help_text)

    def on_key(self, event):
        event.stop()
        self.dismiss()


class ConfirmScreen(Dialog):
    """Yes/no question; dismisses with True only for y."""

    title_text = "Confirm"
    keys_text = "y: yes  n / escape: no"

    def __init__(self, question: str):
        super().__init__()
        self.question = question

    def on_mount(self):
        self.set_body(self.question)

    def on_key(self, event):
        event.stop()
        if event.key == "y":
            self.dismiss(True)
        elif event.key in ("n", "escape"):
            self.dismiss(False)


class SetupScreen(Dialog):
    """First-run walkthrough of the permissions the dashboard relies on.

    Dismisses with True when every step was visited and False when the
    user skipped the rest.
    """

    title_text = "Welcome to healthmon"
    keys_text = "o: open settings  n: next  s: skip"

    def __init__(self, actions: ActionRunner):
        super().__init__()
        self.actions = actions
        self.step = 0

    def on_mount(self):
        self._show_step()

    @property
    def panel(self) -> str:
        return SETUP_STEPS[self.step][0]

    def _show_step(self):
        _, title, description = SETUP_STEPS[self.step]
        self.set_body(f"Step {self.step + 1} of {len(SETUP_STEPS)}: {title}\n\n{description}")
        self.set_status("")

    async def on_key(self, event):
        event.stop()
        if event.key == "o":
            outcome = await self.actions.open_settings_panel(self.panel)
            self.set_status(outcome.message)
        elif event.key in ("n", "enter"):
            if self.step + 1 >= len(SETUP_STEPS):
                self.dismiss(True)
            else:
                self.step += 1
                self._show_step()
        elif event.key == "s":
            self.dismiss(False)
