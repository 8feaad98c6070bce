"""Data models for jobs, screening questions and application attempts."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

NOT_LISTED = "Not listed"


class WorkType:
    REMOTE = "Remote"
    HYBRID = "Hybrid"
    ON_SITE = "On-site"
    UNSPECIFIED = "Unspecified"


def classify_work_type(raw: str, title: str = "") -> str:
    """Normalize a listing's work-type text, falling back to the raw value."""
    raw = (raw or "").strip()
    text = f"{raw} {title or ''}".lower()
    if "remote" in text:
        return WorkType.REMOTE
    if "hybrid" in text:
        return WorkType.HYBRID
    if "on-site" in text or "onsite" in text or "in office" in text:
        return WorkType.ON_SITE
    if raw:
        return raw
    return WorkType.UNSPECIFIED


@dataclass
class Job:
    title: str
    company: str
    location: str
    url: str
    work_type: str = WorkType.UNSPECIFIED
    salary: str = NOT_LISTED
    applied: bool = False
    applied_at: str | None = None
    platform: str = "seek"
    keyword: str = ""

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "workType": self.work_type,
            "salary": self.salary,
            "url": self.url,
            "applied": self.applied,
            "platform": self.platform,
            "keyword": self.keyword,
        }
        if self.applied_at:
            d["appliedAt"] = self.applied_at
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Job":
        return cls(
            title=d.get("title", ""),
            company=d.get("company", "Unknown"),
            location=d.get("location", "Unknown"),
            url=d.get("url", ""),
            work_type=d.get("workType") or WorkType.UNSPECIFIED,
            salary=d.get("salary") or NOT_LISTED,
            applied=bool(d.get("applied", False)),
            applied_at=d.get("appliedAt"),
            platform=d.get("platform", "seek"),
            keyword=d.get("keyword", ""),
        )


class QuestionKind(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"


@dataclass
class ScreeningQuestion:
    label: str
    kind: QuestionKind = QuestionKind.TEXT
    options: list[str] = field(default_factory=list)
    locator: str = ""

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "ScreeningQuestion":
        """Build from the dict shape returned by the in-page extraction script."""
        try:
            kind = QuestionKind(raw.get("type", "text"))
        except ValueError:
            kind = QuestionKind.TEXT
        return cls(
            label=(raw.get("label") or "").strip().lower(),
            kind=kind,
            options=[o for o in raw.get("options", []) if o],
            locator=raw.get("id", "") or "",
        )


class FlowState(str, Enum):
    START = "start"
    TRIGGERING = "triggering"
    STEP_LOOP = "step_loop"
    SUBMITTED = "submitted"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self in (FlowState.SUBMITTED, FlowState.ABANDONED)


@dataclass
class ApplicationAttempt:
    job: Job
    state: FlowState = FlowState.START
    step: int = 0
    answered: list[tuple[str, str]] = field(default_factory=list)
    reason: str = ""

    @property
    def succeeded(self) -> bool:
        return self.state is FlowState.SUBMITTED
