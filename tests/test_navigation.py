import pytest

from healthmon.core.navigation import NavigationStateMachine, View, ViewState


def test_starts_on_dashboard():
    nav = NavigationStateMachine()
    assert nav.state == ViewState(View.DASHBOARD, None)


def test_navigate_remembers_previous():
    nav = NavigationStateMachine()
    state = nav.navigate(View.MEMORY)
    assert state.current == View.MEMORY
    assert state.previous == View.DASHBOARD


def test_only_one_level_of_history():
    nav = NavigationStateMachine()
    nav.navigate(View.MEMORY)
    nav.navigate(View.CPU)
    assert nav.previous == View.MEMORY

    nav.go_back()
    assert nav.current == View.MEMORY
    assert nav.previous is None

    nav.go_back()
    assert nav.current == View.DASHBOARD


def test_go_back_without_history_lands_on_dashboard():
    nav = NavigationStateMachine()
    nav.navigate(View.BATTERY)
    nav.go_back()
    nav.go_back()
    assert nav.state == ViewState(View.DASHBOARD, None)


def test_self_navigation_is_allowed():
    nav = NavigationStateMachine()
    nav.navigate(View.STORAGE)
    nav.navigate(View.STORAGE)
    assert nav.state == ViewState(View.STORAGE, View.STORAGE)


def test_navigate_accepts_view_names():
    nav = NavigationStateMachine()
    nav.navigate("cpu")
    assert nav.current is View.CPU

    with pytest.raises(ValueError):
        nav.navigate("network")


@pytest.mark.parametrize("view", list(View))
def test_back_from_any_view_returns_to_dashboard(view):
    nav = NavigationStateMachine()
    nav.navigate(view)
    assert nav.current is view
    nav.go_back()
    assert nav.current is View.DASHBOARD
