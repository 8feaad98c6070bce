"""Job catalogue: dedup by URL, applied state, JSON file persistence."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import urlsplit

from applier.errors import PersistenceWriteFailure
from applier.log import get_logger
from applier.models import Job
from applier.storage import write_atomic

log = get_logger(__name__)


def normalize_url(url: str) -> str:
    """Dedup key: scheme and case insensitive, trailing slash ignored."""
    u = (url or "").strip().lower()
    parts = urlsplit(u)
    if parts.scheme in ("http", "https"):
        u = u[len(parts.scheme) + 3:]
    elif u.startswith("//"):
        u = u[2:]
    return u.rstrip("/")


def merge_jobs(existing: list[Job], fresh: list[Job]) -> list[Job]:
    """Append fresh jobs whose URL is not already known. Existing records win."""
    seen = {normalize_url(j.url) for j in existing}
    merged = list(existing)
    for job in fresh:
        key = normalize_url(job.url)
        if not key or key in seen:
            continue
        seen.add(key)
        merged.append(job)
    return merged


class JobCatalogue:
    def __init__(self, path: Path, jobs: list[Job] | None = None) -> None:
        self.path = path
        self.jobs: list[Job] = list(jobs or [])

    @classmethod
    def load(cls, path: Path) -> "JobCatalogue":
        if not path.exists():
            return cls(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.warning("Ignoring unreadable jobs file %s: %s", path.name, exc)
            return cls(path)
        if not isinstance(data, list):
            log.warning("Ignoring jobs file %s: expected a list", path.name)
            return cls(path)
        jobs = [Job.from_dict(d) for d in data if isinstance(d, dict) and d.get("url")]
        log.info("Loaded %d jobs from %s", len(jobs), path.name)
        return cls(path, merge_jobs([], jobs))

    def __len__(self) -> int:
        return len(self.jobs)

    def dumps(self) -> str:
        return json.dumps([j.to_dict() for j in self.jobs], indent=2, ensure_ascii=False)

    def save(self) -> bool:
        """Rewrite the whole file. Returns False (after logging) on failure."""
        try:
            self._write()
        except PersistenceWriteFailure as exc:
            log.error("Could not save jobs: %s", exc)
            return False
        return True

    def _write(self) -> None:
        write_atomic(self.path, self.dumps())

    def merge(self, fresh: list[Job]) -> list[Job]:
        """Merge search results in place; returns the jobs that were new."""
        before = len(self.jobs)
        self.jobs = merge_jobs(self.jobs, fresh)
        added = self.jobs[before:]
        log.info("New jobs this session: %d", len(added))
        return added

    def find(self, url: str) -> Job | None:
        key = normalize_url(url)
        for job in self.jobs:
            if normalize_url(job.url) == key:
                return job
        return None

    def pending(self, limit: int | None = None) -> list[Job]:
        todo = [j for j in self.jobs if not j.applied]
        return todo if limit is None else todo[: max(limit, 0)]

    def record_outcome(self, url: str, success: bool) -> Job | None:
        job = self.find(url)
        if job is None:
            log.warning("No catalogue entry for %s", url)
            return None
        job.applied = success
        job.applied_at = (
            datetime.now(timezone.utc).isoformat(timespec="seconds") if success else None
        )
        self.save()
        return job
