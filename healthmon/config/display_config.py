"""Display configuration data structure."""
from dataclasses import dataclass


@dataclass
class DisplayConfig:
    """Display preferences configuration."""
    show_colors: bool = True
    meter_width: int = 20
    time_format: str = "%H:%M:%S"
    redraw_interval: float = 1.0
    process_count: int = 8

    def __post_init__(self):
        """Fix invalid values."""
        if self.meter_width <= 0:
            self.meter_width = 20
        if self.redraw_interval <= 0:
            self.redraw_interval = 1.0
        if self.process_count <= 0:
            self.process_count = 8
