"""Rich text rendering of the dashboard and detail views."""
from typing import List, Optional, Sequence

from rich.text import Text

from .. import __version__
from ..charts.formatters import (
    format_bytes,
    format_gb,
    format_percent,
    format_time_remaining,
    format_uptime,
)
from ..charts.geometry import DonutGeometry, bar_chart, circular_progress, donut, gauge
from ..collectors.system_models import ProcessCpuInfo, ProcessMemoryInfo
from ..config.display_config import DisplayConfig
from ..core.alerts import SystemAlert
from ..core.navigation import View
from ..core.snapshot import HealthStatus, SystemSnapshot

STATUS_STYLES = {
    HealthStatus.EXCELLENT: "green",
    HealthStatus.COULD_BE_BETTER: "yellow",
    HealthStatus.CRITICAL: "red",
}

PRESSURE_STYLES = {"normal": "green", "warn": "yellow", "critical": "red"}

CONDITION_STYLES = {"Normal": "green", "Service Recommended": "yellow"}

ALERT_LEVELS = {"ERROR": "ERR", "WARN": "WRN", "INFO": "INF"}

VIEW_TITLES = {
    View.DASHBOARD: "Dashboard",
    View.MEMORY: "Memory",
    View.STORAGE: "Storage",
    View.BATTERY: "Battery",
    View.CPU: "CPU",
}

SPARK_LEVELS = " ▁▂▃▄▅▆▇█"

HELP_LINE = "d: dashboard  m: memory  s: storage  b: battery  c: cpu  backspace: back  r: refresh  h: help  q: exit"


def battery_style(percentage: float) -> str:
    if percentage < 20:
        return "red"
    if percentage < 50:
        return "yellow"
    return "green"


def short_model_name(model_name: str) -> str:
    """First word of the CPU model without vendor prefixes."""
    name = model_name.replace("Apple ", "").replace("Intel(R) Core(TM) ", "")
    words = name.split()
    return words[0] if words else model_name


def _truncate(value: str, width: int) -> str:
    return value if len(value) <= width else value[:width - 3] + "..."


class Renderer:
    """Builds Rich Text for each view from committed data."""

    def __init__(self, display: DisplayConfig):
        self.display = display

    def _style(self, style: Optional[str]) -> Optional[str]:
        return style if self.display.show_colors else None

    def meter(self, value: float, style: Optional[str] = None) -> Text:
        """Text progress ring: the filled share follows the ring geometry."""
        ring = circular_progress(value)
        width = self.display.meter_width
        filled = round(ring.fill_fraction * width)
        text = Text("[")
        text.append("█" * filled, style=self._style(style))
        text.append("░" * (width - filled))
        text.append(f"] {ring.value:5.1f}%")
        return text

    def header(self, snapshot: SystemSnapshot, view: View) -> Text:
        text = Text(f"healthmon v{__version__} - {VIEW_TITLES[view]}   Status: ")
        text.append(snapshot.status.label, style=self._style(STATUS_STYLES[snapshot.status]))
        if snapshot.last_updated is not None:
            text.append(f"   Updated {snapshot.last_updated.strftime(self.display.time_format)}")
        if snapshot.is_loading:
            text.append("  refreshing")
        if snapshot.error:
            text.append("\n")
            text.append(f"Error: {snapshot.error}", style=self._style("red"))
        return text

    def dashboard(self, snapshot: SystemSnapshot) -> Text:
        text = Text()

        ram = snapshot.ram
        text.append("RAM      [m]\n", style="bold")
        if ram is not None:
            text.append_text(self.meter(ram.used_percentage, "blue"))
            text.append(f"\n  {format_gb(ram.used_bytes)} of {format_gb(ram.total_bytes)}\n\n")
        else:
            text.append("  --\n\n")

        primary = snapshot.disk.primary if snapshot.disk is not None else None
        text.append("DISK     [s]\n", style="bold")
        if primary is not None:
            text.append_text(self.meter(primary.used_percentage, "yellow"))
            text.append(f"\n  {format_gb(primary.available_bytes)} free of {format_gb(primary.total_bytes)}\n\n")
        else:
            text.append("  --\n\n")

        battery = snapshot.battery
        text.append("BATTERY  [b]\n", style="bold")
        if battery is not None:
            text.append_text(self.meter(battery.percentage, battery_style(battery.percentage)))
            source = "Charging" if battery.is_charging else battery.power_source
            text.append(f"\n  {battery.condition} - {source}\n\n")
        else:
            text.append("  No battery\n\n")

        cpu = snapshot.cpu
        text.append("CPU      [c]\n", style="bold")
        if cpu is not None:
            text.append_text(self.meter(cpu.total_usage_percentage, "magenta"))
            text.append(f"\n  {short_model_name(cpu.model_name)} - {cpu.total_cores} cores\n")
        else:
            text.append("  --\n")
        return text

    def memory(self, snapshot: SystemSnapshot, processes: Sequence[ProcessMemoryInfo],
               message: Optional[str] = None, selected: Optional[int] = None) -> Text:
        ram = snapshot.ram
        text = Text()
        if ram is None:
            text.append("Loading memory metrics...")
            return text

        pressure = str(getattr(ram.pressure_level, "value", ram.pressure_level))
        text.append_text(self.meter(ram.used_percentage, "blue"))
        text.append("\nMemory Pressure: ")
        text.append(pressure.capitalize(), style=self._style(PRESSURE_STYLES.get(pressure)))
        text.append(f"\n\nUsed       {format_gb(ram.used_bytes)}")
        text.append(f"\nAvailable  {format_gb(ram.available_bytes)}")
        text.append(f"\nTotal      {format_gb(ram.total_bytes)}\n")

        if message:
            text.append(f"\n{message}\n", style=self._style("bold"))

        text.append("\nTop Memory Consumers   [p] quick clean  [up/down] select  [k] force quit\n", style="bold")
        if not processes:
            text.append("  no processes yet...\n")
        for index, proc in enumerate(processes):
            line = f"{proc.pid:>7}  {_truncate(proc.name, 28):<28} {format_bytes(proc.memory_bytes):>10}"
            if index == selected:
                text.append("> ")
                text.append(line, style=self._style("reverse"))
                text.append("\n")
            else:
                text.append(f"  {line}\n")
        return text

    def cpu_bars(self, per_core_usage: Sequence[float]) -> Text:
        """One sparkline character per core, never blank."""
        chart = bar_chart(per_core_usage, max_value=100, height=len(SPARK_LEVELS) - 1)
        bars = "".join(SPARK_LEVELS[max(round(bar.height), 1)] for bar in chart.bars)
        return Text(bars, style=self._style("magenta"))

    def cpu(self, snapshot: SystemSnapshot, processes: Sequence[ProcessCpuInfo],
            uptime: Optional[float] = None) -> Text:
        cpu = snapshot.cpu
        text = Text()
        if cpu is None:
            text.append("Loading CPU metrics...")
            return text

        usage = gauge(cpu.total_usage_percentage, label="USAGE")
        text.append_text(self.meter(cpu.total_usage_percentage, "magenta"))
        text.append(f"\n{usage.label} {usage.display_value}  {cpu.model_name}  ({cpu.total_cores} cores)\n")
        text.append("\nPer core  ")
        text.append_text(self.cpu_bars(cpu.per_core_usage))

        load = cpu.load_average
        text.append(f"\nLoad      {load.one_minute:.2f}  {load.five_minutes:.2f}  {load.fifteen_minutes:.2f}")
        text.append(f"\nUptime    {format_uptime(uptime) if uptime is not None else '--'}\n")

        text.append("\nTop CPU Consumers\n", style="bold")
        if not processes:
            text.append("  no processes yet...\n")
        for proc in processes:
            text.append(f"  {proc.pid:>7}  {_truncate(proc.name, 28):<28} {format_percent(proc.cpu_percentage, 1):>7}\n")
        return text

    def battery(self, snapshot: SystemSnapshot) -> Text:
        battery = snapshot.battery
        text = Text()
        if battery is None:
            text.append("No battery detected")
            return text

        text.append_text(self.meter(battery.percentage, battery_style(battery.percentage)))
        text.append("\nCondition: ")
        text.append(battery.condition, style=self._style(CONDITION_STYLES.get(battery.condition, "red")))

        if battery.is_charging:
            estimate = f"{format_time_remaining(battery.time_to_full_minutes)} to full"
        else:
            estimate = f"{format_time_remaining(battery.time_to_empty_minutes)} remaining"
        text.append(f"\nPower source  {'Charging' if battery.is_charging else battery.power_source}")
        text.append(f"\nEstimate      {estimate}")
        text.append(f"\nMax capacity  {format_percent(battery.max_capacity_percentage)}")
        text.append(f"\nCycle count   {battery.cycle_count if battery.cycle_count is not None else '--'}")
        if battery.temperature_celsius is not None:
            text.append(f"\nTemperature   {battery.temperature_celsius:.1f}°C")
        if battery.voltage_volts is not None:
            text.append(f"\nVoltage       {battery.voltage_volts:.2f} V")
        text.append("\n")
        return text

    def donut_bar(self, chart: DonutGeometry) -> Text:
        """Flatten a donut into a proportional stacked bar."""
        width = self.display.meter_width * 2
        text = Text()
        for arc in chart.arcs:
            cells = max(round(arc.fraction * width), 1)
            text.append("█" * cells, style=self._style(arc.segment.color))
        return text

    def storage(self, snapshot: SystemSnapshot, segments, pending: bool = False,
                error: Optional[str] = None) -> Text:
        text = Text()
        primary = snapshot.disk.primary if snapshot.disk is not None else None
        if primary is None:
            text.append("Loading disk metrics...\n")
        else:
            text.append_text(self.meter(primary.used_percentage, "yellow"))
            text.append(f"\n{primary.name} on {primary.mount_point} ({primary.file_system})")
            text.append(f"\nUsed       {format_gb(primary.used_bytes)}")
            text.append(f"\nAvailable  {format_gb(primary.available_bytes)}")
            text.append(f"\nTotal      {format_gb(primary.total_bytes)}\n")

        text.append("\nCategories   [f] rescan\n", style="bold")
        if error:
            text.append(f"  {error}\n", style=self._style("red"))
            return text

        chart = donut(segments)
        if chart.no_data:
            text.append("  Calculating...\n" if pending else "  No data\n")
            return text

        text.append("  ")
        text.append_text(self.donut_bar(chart))
        text.append("\n")
        for arc in chart.arcs:
            text.append("  ■ ", style=self._style(arc.segment.color))
            text.append(f"{arc.segment.label:<14} {format_bytes(arc.segment.value):>10}\n")
        return text

    def alerts(self, alerts: List[SystemAlert]) -> Text:
        if not alerts:
            return Text("No alerts")

        lines = []
        for alert in alerts[-4:]:
            time_str = alert.timestamp.strftime(self.display.time_format)
            level = ALERT_LEVELS.get(alert.level, alert.level)
            line = f"[{level}] {time_str} - {alert.message}"
            lines.append(_truncate(line, 120))
        return Text("\n".join(lines))
