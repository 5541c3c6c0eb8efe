"""Persisted first-run onboarding flag."""
import logging
import os
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_STATE_PATH = os.path.join("~", ".config", "healthmon", "state.yaml")


class SetupState:
    """Single boolean flag recording whether onboarding has completed."""

    def __init__(self, path: Optional[str] = None):
        self.path = os.path.expanduser(path or DEFAULT_STATE_PATH)

    def is_complete(self) -> bool:
        """Read the flag; an absent or unreadable file means not completed."""
        try:
            with open(self.path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            return False
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not read setup state {self.path}: {e}")
            return False
        return bool(isinstance(data, dict) and data.get('setup_complete'))

    def mark_complete(self):
        """Write the flag once setup is completed or skipped."""
        os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
        with open(self.path, 'w') as f:
            yaml.safe_dump({'setup_complete': True}, f)
