from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RepeatInterval(BaseModel):
    amount: int = 1
    interval_type: str  # raw word as typed: "day", "weeks", ...


class ParsedTask(BaseModel):
    title: str
    labels: list[str] = Field(default_factory=list)
    assignees: list[str] = Field(default_factory=list)
    project: str | None = None
    priority: int | None = None  # 1..5
    due_date: datetime | None = None  # tz-aware UTC
    repeat_interval: RepeatInterval | None = None


class ParseIn(BaseModel):
    text: str
    now: datetime | None = None  # override the clock, mostly for previews in tests


class QuickAddIn(BaseModel):
    text: str
    project: str | None = None  # default project id or name


class VikunjaTaskOut(BaseModel):
    # Vikunja returns far more; keep what callers look at
    model_config = ConfigDict(extra="ignore")

    id: int
    title: str
    project_id: int
    done: bool = False
    priority: int | None = None
    due_date: datetime | None = None
