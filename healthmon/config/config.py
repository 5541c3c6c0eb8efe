"""Main configuration data structure."""
from dataclasses import dataclass, field
from typing import Optional

from .display_config import DisplayConfig
from .threshold_config import ThresholdConfig


@dataclass
class Config:
    """Main configuration class."""
    refresh_rate: float = 3.0
    storage_poll_interval: float = 2.0
    storage_max_polls: int = 30
    storage_cache_path: Optional[str] = None
    max_alerts: int = 50
    state_path: Optional[str] = None
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def __post_init__(self):
        """Fix invalid values."""
        if self.refresh_rate <= 0:
            self.refresh_rate = 3.0
        if self.storage_poll_interval <= 0:
            self.storage_poll_interval = 2.0
        if self.storage_max_polls <= 0:
            self.storage_max_polls = 30
        if self.max_alerts <= 0:
            self.max_alerts = 50
