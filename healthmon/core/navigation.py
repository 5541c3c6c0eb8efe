"""View navigation with a single remembered previous view."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class View(str, Enum):
    DASHBOARD = "dashboard"
    MEMORY = "memory"
    STORAGE = "storage"
    BATTERY = "battery"
    CPU = "cpu"


@dataclass(frozen=True)
class ViewState:
    current: View = View.DASHBOARD
    previous: Optional[View] = None


class NavigationStateMachine:
    """Tracks the active view and the one it was reached from.

    Only one level of history is kept: two navigations in a row discard
    the older previous view.
    """

    def __init__(self):
        self._state = ViewState()

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def current(self) -> View:
        return self._state.current

    @property
    def previous(self) -> Optional[View]:
        return self._state.previous

    def navigate(self, target: Union[View, str]) -> ViewState:
        """Move to target; self-navigation is allowed."""
        self._state = ViewState(current=View(target), previous=self._state.current)
        return self._state

    def go_back(self) -> ViewState:
        """Return to the previous view, or the dashboard when there is none."""
        self._state = ViewState(current=self._state.previous or View.DASHBOARD, previous=None)
        return self._state
