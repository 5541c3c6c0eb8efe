"""Exception hierarchy for healthmon."""


class HealthMonError(Exception):
    """Base exception for all application errors"""
    pass


class ProviderError(HealthMonError):
    """A metric provider call failed"""
    pass


class BatteryUnavailableError(ProviderError):
    """The device has no battery, or it cannot be read"""
    pass


class ConfigurationError(HealthMonError):
    """Invalid or unreadable configuration"""
    pass
