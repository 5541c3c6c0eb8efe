from datetime import datetime

from conftest import make_battery, make_cpu, make_disk, make_ram

from healthmon.core.metric_store import MetricStore
from healthmon.core.snapshot import HealthStatus


def test_new_store_is_empty_and_excellent():
    store = MetricStore()
    snapshot = store.snapshot()
    assert snapshot.ram is None
    assert snapshot.last_updated is None
    assert not snapshot.is_loading
    assert snapshot.status == HealthStatus.EXCELLENT
    assert store.get_alerts() == []


def test_each_setter_recomputes_status():
    store = MetricStore()
    store.set_cpu(make_cpu(95.0))
    assert store.status == HealthStatus.CRITICAL
    assert store.snapshot().status == HealthStatus.CRITICAL

    store.set_cpu(make_cpu(75.0))
    assert store.status == HealthStatus.COULD_BE_BETTER

    store.set_battery(make_battery(5.0, plugged=False))
    assert store.status == HealthStatus.CRITICAL

    store.set_battery(None)
    assert store.status == HealthStatus.COULD_BE_BETTER


def test_set_error_leaves_status_alone():
    store = MetricStore()
    store.set_disk(make_disk(96.0))
    store.set_error("boom")
    assert store.error == "boom"
    assert store.status == HealthStatus.CRITICAL


def test_commit_refresh_updates_everything_at_once():
    store = MetricStore()
    store.begin_refresh()
    assert store.is_loading

    stamp = datetime(2024, 1, 1, 12, 0, 0)
    store.commit_refresh(make_ram(), make_cpu(), make_disk(), None, stamp)

    snapshot = store.snapshot()
    assert not snapshot.is_loading
    assert snapshot.error is None
    assert snapshot.last_updated == stamp
    assert snapshot.battery is None
    assert snapshot.disk.primary.mount_point == "/"


def test_fail_refresh_keeps_previous_metrics():
    store = MetricStore()
    store.commit_refresh(make_ram(), make_cpu(), make_disk(), make_battery())
    before = store.snapshot()

    store.begin_refresh()
    store.fail_refresh("disk unavailable")

    after = store.snapshot()
    assert after.error == "disk unavailable"
    assert not after.is_loading
    assert after.ram == before.ram
    assert after.last_updated == before.last_updated
    assert store.get_alerts()[-1].category == "REFRESH"


def test_begin_refresh_clears_error():
    store = MetricStore()
    store.fail_refresh("boom")
    store.begin_refresh()
    assert store.error is None


def test_status_change_raises_alert():
    store = MetricStore()
    store.set_cpu(make_cpu(95.0))
    store.set_cpu(make_cpu(96.0))

    alerts = store.get_alerts()
    assert len(alerts) == 1
    assert alerts[0].level == "ERROR"
    assert alerts[0].message == "Health status changed to Critical"
    assert alerts[0].category == "STATUS"


def test_alert_log_is_bounded():
    store = MetricStore(max_alerts=3)
    for i in range(5):
        store.fail_refresh(f"error {i}")
    messages = [alert.message for alert in store.get_alerts()]
    assert messages == ["Refresh failed: error 2", "Refresh failed: error 3", "Refresh failed: error 4"]
