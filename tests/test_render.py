from datetime import datetime

import pytest

from conftest import GB, make_battery, make_categories, make_cpu, make_disk, make_ram

from healthmon.charts.geometry import storage_segments
from healthmon.collectors.system_models import ProcessCpuInfo, ProcessMemoryInfo
from healthmon.config.display_config import DisplayConfig
from healthmon.core.alerts import SystemAlert
from healthmon.core.navigation import View
from healthmon.core.snapshot import HealthStatus, SystemSnapshot
from healthmon.ui.render import Renderer, short_model_name


@pytest.fixture
def renderer():
    return Renderer(DisplayConfig())


@pytest.fixture
def snapshot():
    return SystemSnapshot(
        ram=make_ram(),
        cpu=make_cpu(),
        disk=make_disk(),
        battery=make_battery(),
        last_updated=datetime(2024, 1, 1, 9, 30, 0),
    )


def test_meter_fill_follows_value(renderer):
    assert renderer.meter(50).plain == "[" + "█" * 10 + "░" * 10 + "]  50.0%"
    assert renderer.meter(150).plain == "[" + "█" * 20 + "] 100.0%"
    assert renderer.meter(0).plain == "[" + "░" * 20 + "]   0.0%"


def test_meter_without_colors_has_no_styles():
    renderer = Renderer(DisplayConfig(show_colors=False))
    assert renderer.meter(50, "blue").spans == []


def test_header_shows_status_and_error(renderer, snapshot):
    header = renderer.header(snapshot, View.MEMORY).plain
    assert "Memory" in header
    assert "Excellent" in header
    assert "09:30:00" in header

    failing = SystemSnapshot(error="disk unavailable", status=HealthStatus.CRITICAL)
    header = renderer.header(failing, View.DASHBOARD).plain
    assert "Critical" in header
    assert "Error: disk unavailable" in header


def test_dashboard_before_first_refresh(renderer):
    text = renderer.dashboard(SystemSnapshot()).plain
    assert "RAM" in text
    assert "No battery" in text


def test_dashboard_with_metrics(renderer, snapshot):
    text = renderer.dashboard(snapshot).plain
    assert "6.4 GB of 16.0 GB" in text
    assert "250.0 GB free of 500.0 GB" in text
    assert "M2 - 4 cores" in text


def test_memory_view_lists_processes(renderer, snapshot):
    processes = [ProcessMemoryInfo(101, "Safari", "/Applications/Safari.app", 2 * GB, 12.5)]
    text = renderer.memory(snapshot, processes, "Freed 256.0 MB").plain
    assert "Memory Pressure: Normal" in text
    assert "Safari" in text
    assert "2.0 GB" in text
    assert "Freed 256.0 MB" in text


def test_memory_view_marks_selected_process(renderer, snapshot):
    processes = [
        ProcessMemoryInfo(101, "Safari", "/Applications/Safari.app", 2 * GB, 12.5),
        ProcessMemoryInfo(202, "Slack", "/Applications/Slack.app", GB, 6.25),
    ]
    lines = renderer.memory(snapshot, processes, selected=1).plain.splitlines()
    safari = next(line for line in lines if "Safari" in line)
    slack = next(line for line in lines if "Slack" in line)
    assert safari.startswith("  ")
    assert slack.startswith("> ")


def test_cpu_view(renderer, snapshot):
    processes = [ProcessCpuInfo(303, "python", 42.0)]
    text = renderer.cpu(snapshot, processes, 90061.0).plain
    assert "USAGE 20%" in text
    assert "1d 1h 1m" in text
    assert "42.0%" in text


def test_cpu_bars_one_per_core_never_blank(renderer):
    bars = renderer.cpu_bars([0.0, 50.0, 100.0]).plain
    assert len(bars) == 3
    assert " " not in bars
    assert bars[-1] == "█"


def test_battery_view(renderer):
    snapshot = SystemSnapshot(battery=make_battery(35.0, plugged=False))
    text = renderer.battery(snapshot).plain
    assert "2h 30m remaining" in text
    assert "Cycle count   120" in text
    assert renderer.battery(SystemSnapshot()).plain == "No battery detected"


def test_storage_view_states(renderer, snapshot):
    assert "Calculating..." in renderer.storage(snapshot, [], pending=True).plain
    assert "No data" in renderer.storage(snapshot, []).plain
    assert "scan failed" in renderer.storage(snapshot, [], error="scan failed").plain

    text = renderer.storage(snapshot, storage_segments(make_categories().categories)).plain
    assert "Applications" in text
    assert "60.0 GB" in text
    assert "Music" not in text


def test_alerts(renderer):
    assert renderer.alerts([]).plain == "No alerts"
    alert = SystemAlert("ERROR", "Refresh failed: boom", "REFRESH", datetime(2024, 1, 1, 8, 0, 0))
    assert renderer.alerts([alert]).plain == "[ERR] 08:00:00 - Refresh failed: boom"


def test_short_model_name():
    assert short_model_name("Apple M2 Pro") == "M2"
    assert short_model_name("Intel(R) Core(TM) i7-9750H CPU") == "i7-9750H"
