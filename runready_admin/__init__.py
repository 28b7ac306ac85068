"""Schedule editing, storage and alert scheduling for RunReady."""
from .config import RunReadyConfig
from .notifications import (
    AlertBackend,
    AlertKey,
    InMemoryAlertBackend,
    JsonAlertBackend,
    NotificationScheduler,
    ScheduledAlert,
)
from .storage import ScheduleStore, TemplateStore

__all__ = [
    "AlertBackend",
    "AlertKey",
    "InMemoryAlertBackend",
    "JsonAlertBackend",
    "NotificationScheduler",
    "RunReadyConfig",
    "ScheduleStore",
    "ScheduledAlert",
    "TemplateStore",
]
