"""Alert data model for system monitoring."""
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class SystemAlert:
    level: str  # "INFO", "WARN", "ERROR"
    message: str
    category: str  # "STATUS", "REFRESH"
    timestamp: datetime = field(default_factory=datetime.now)
