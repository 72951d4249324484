"""Retention policy values consumed by the core."""

from pydantic import BaseModel, ConfigDict

from qa_retention.config import RetentionConfig
from qa_retention.exceptions import RetentionConfigError


class RetentionPolicy(BaseModel):
    """Thresholds and label the classifier and selectors work with."""

    model_config = ConfigDict(frozen=True)

    retention_hours: float
    inactivity_threshold_hours: float
    warning_label: str = "retention-warning"
    rewarn_after_rescind: bool = False

    @classmethod
    def from_config(cls, config: RetentionConfig) -> "RetentionPolicy":
        return cls(
            retention_hours=config.retention_hours,
            inactivity_threshold_hours=config.inactivity_threshold_hours,
            warning_label=config.warning_label,
            rewarn_after_rescind=config.rewarn_after_rescind,
        )

    def validate_thresholds(self) -> None:
        """Refuse thresholds that would make issues instantly inactive.

        Raises:
            RetentionConfigError: If a threshold is not positive, the
                inactivity threshold is not below the retention threshold,
                or the warning label is empty.
        """
        if self.retention_hours <= 0:
            raise RetentionConfigError(f"retention_hours must be > 0 (got {self.retention_hours})")
        if self.inactivity_threshold_hours <= 0:
            raise RetentionConfigError(
                f"inactivity_threshold_hours must be > 0 (got {self.inactivity_threshold_hours})"
            )
        if self.inactivity_threshold_hours >= self.retention_hours:
            raise RetentionConfigError(
                f"inactivity_threshold_hours ({self.inactivity_threshold_hours}) must be "
                f"< retention_hours ({self.retention_hours})"
            )
        if not self.warning_label.strip():
            raise RetentionConfigError("warning_label must not be empty")
