from conftest import make_battery, make_cpu, make_disk, make_ram

from healthmon.collectors.system_models import PressureLevel
from healthmon.config.threshold_config import ThresholdConfig
from healthmon.core.snapshot import HealthStatus, SystemSnapshot
from healthmon.core.status import Severity, aggregate, classify


def test_empty_snapshot_is_excellent():
    assert aggregate(SystemSnapshot()) == HealthStatus.EXCELLENT
    assert classify(SystemSnapshot()) == []


def test_healthy_system_is_excellent():
    snapshot = SystemSnapshot(ram=make_ram(), cpu=make_cpu(), disk=make_disk(), battery=make_battery())
    assert aggregate(snapshot) == HealthStatus.EXCELLENT


def test_memory_pressure_drives_ram_severity():
    assert aggregate(SystemSnapshot(ram=make_ram(pressure=PressureLevel.WARN))) == HealthStatus.COULD_BE_BETTER
    assert aggregate(SystemSnapshot(ram=make_ram(pressure=PressureLevel.CRITICAL))) == HealthStatus.CRITICAL


def test_cpu_thresholds_are_strict():
    assert aggregate(SystemSnapshot(cpu=make_cpu(70.0))) == HealthStatus.EXCELLENT
    assert aggregate(SystemSnapshot(cpu=make_cpu(70.1))) == HealthStatus.COULD_BE_BETTER
    assert aggregate(SystemSnapshot(cpu=make_cpu(90.0))) == HealthStatus.COULD_BE_BETTER
    assert aggregate(SystemSnapshot(cpu=make_cpu(95.0))) == HealthStatus.CRITICAL


def test_disk_thresholds():
    assert aggregate(SystemSnapshot(disk=make_disk(85.0))) == HealthStatus.EXCELLENT
    assert aggregate(SystemSnapshot(disk=make_disk(88.0))) == HealthStatus.COULD_BE_BETTER
    assert aggregate(SystemSnapshot(disk=make_disk(96.0))) == HealthStatus.CRITICAL


def test_degraded_battery_condition_warns():
    snapshot = SystemSnapshot(battery=make_battery(condition="Service Recommended"))
    assert aggregate(snapshot) == HealthStatus.COULD_BE_BETTER


def test_low_unplugged_battery_is_critical():
    assert aggregate(SystemSnapshot(battery=make_battery(5.0, plugged=False))) == HealthStatus.CRITICAL
    assert aggregate(SystemSnapshot(battery=make_battery(5.0, plugged=True))) == HealthStatus.EXCELLENT
    assert aggregate(SystemSnapshot(battery=make_battery(10.0, plugged=False))) == HealthStatus.EXCELLENT


def test_battery_can_contribute_warn_and_critical():
    battery = make_battery(5.0, plugged=False, condition="Replace Soon")
    assert classify(SystemSnapshot(battery=battery)) == [Severity.WARN, Severity.CRITICAL]


def test_critical_dominates_warn():
    snapshot = SystemSnapshot(
        ram=make_ram(pressure=PressureLevel.WARN),
        cpu=make_cpu(95.0),
        disk=make_disk(88.0),
    )
    assert aggregate(snapshot) == HealthStatus.CRITICAL


def test_custom_thresholds():
    thresholds = ThresholdConfig(cpu_warn=30.0, cpu_critical=50.0)
    assert aggregate(SystemSnapshot(cpu=make_cpu(40.0)), thresholds) == HealthStatus.COULD_BE_BETTER
    assert aggregate(SystemSnapshot(cpu=make_cpu(40.0))) == HealthStatus.EXCELLENT


def test_status_labels_and_values():
    assert HealthStatus.COULD_BE_BETTER.value == "could-be-better"
    assert HealthStatus.COULD_BE_BETTER.label == "Could Be Better"
    assert HealthStatus.CRITICAL.label == "Critical"
