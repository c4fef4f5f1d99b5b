from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from . import config
from .dates import now_utc


def iso_timestamp() -> str:
    """Current UTC time as an ISO string with millisecond precision, e.g. 2024-01-01T09:30:00.000Z."""
    return now_utc().isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class TaskHistoryEntry(BaseModel):
    timestamp: str = Field(default_factory=iso_timestamp)
    action: str
    details: Optional[str] = None


class Task(BaseModel):
    id: int
    title: str
    notes: Optional[str] = None
    # canonical YYYY-MM-DD or None
    due: Optional[str] = None
    priority: str = config.DEFAULT_PRIORITY
    tags: List[str] = Field(default_factory=list)
    # repeat interval like '2 weeks'; used only for previewing next occurrences
    repeat: Optional[str] = None
    status: str = 'open'  # open | done
    created_at: str = Field(default_factory=iso_timestamp)
    updated_at: str = Field(default_factory=iso_timestamp)
    completed_at: Optional[str] = None
    snoozed_until: Optional[str] = None
    history: List[TaskHistoryEntry] = Field(default_factory=list)

    def record(self, action: str, details: Optional[str] = None, timestamp: Optional[str] = None) -> None:
        """Append a history entry and bump updated_at."""
        ts = timestamp or iso_timestamp()
        self.history.append(TaskHistoryEntry(timestamp=ts, action=action, details=details))
        self.updated_at = ts


class AgentState(BaseModel):
    """The whole task document stored in data.json."""
    next_id: int = Field(default=1, ge=1)
    tasks: List[Task] = Field(default_factory=list)

    def find(self, task_id: int) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def allocate_id(self) -> int:
        task_id = self.next_id
        self.next_id += 1
        return task_id


class IntegrationConfig(BaseModel):
    enabled: bool = False
    api_key: Optional[str] = None
    extra: Dict[str, str] = Field(default_factory=dict)


class AgentConfig(BaseModel):
    role: str = config.DEFAULT_ROLE
    theme: str = config.DEFAULT_THEME
    default_priority: str = config.DEFAULT_PRIORITY
    timezone: str = Field(default_factory=lambda: config.DEFAULT_TIMEZONE)
    integrations: Dict[str, IntegrationConfig] = Field(default_factory=dict)
