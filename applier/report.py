"""End-of-run summary text."""
from __future__ import annotations

from pathlib import Path

from applier.models import Job

_RULE = "═" * 40


def build_summary(attempted: list[Job], jobs_file: Path | None = None) -> str:
    applied = [j for j in attempted if j.applied]
    failed = len(attempted) - len(applied)

    lines: list[str] = [
        _RULE,
        "           SESSION SUMMARY",
        _RULE,
        f"Successfully applied: {len(applied)}",
        f"Failed / skipped:     {failed}",
        f"Total attempted:      {len(attempted)}",
    ]
    if jobs_file is not None:
        lines.append(f"Saved to:             {jobs_file}")

    if applied:
        lines.append("")
        lines.append("Applied to:")
        lines.extend(f"  • {j.title} at {j.company} ({j.work_type})" for j in applied)

    lines.append(_RULE)
    return "\n".join(lines)
