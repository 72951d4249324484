"""Exceptions raised by configuration and the retention core."""


class ConfigError(Exception):
    """Configuration is missing required values or is inconsistent."""


class RetentionConfigError(ConfigError):
    """Retention thresholds are malformed; the classifier refuses to run."""


class ClassificationError(Exception):
    """An issue cannot be classified (e.g. no readable creation timestamp)."""
