"""
Job auto-applier.

Runs: login → search → merge into the catalogue → apply to unapplied jobs one
at a time (with a fixed pause between attempts) → summary.
"""
from __future__ import annotations

from typing import Any, Callable

from playwright.sync_api import Error as PlaywrightError

from applier.adapters import PlatformAdapter, get_adapter
from applier.answers import AnswerResolver, AnswerStore
from applier.catalogue import JobCatalogue
from applier.config import ANSWERS_FILE, JOBS_FILE, ensure_dirs, get_profile_dir, load_config, run_headless
from applier.errors import ApplierError, short_message
from applier.flow import ApplicationFlowController
from applier.log import get_logger
from applier.models import Job
from applier.report import build_summary
from applier.session import BrowserSession

log = get_logger(__name__)


def apply_batch(
    jobs: list[Job],
    controller: ApplicationFlowController,
    catalogue: JobCatalogue,
    *,
    delay_ms: int,
    wait: Callable[[int], None],
) -> int:
    """Apply to ``jobs`` strictly in sequence; returns the number submitted."""
    success_count = 0
    for i, job in enumerate(jobs):
        log.info("[%d/%d]", i + 1, len(jobs))
        success = controller.run(job)
        catalogue.record_outcome(job.url, success)
        if success:
            success_count += 1

        if i < len(jobs) - 1:
            log.info("Waiting %.0fs before next application...", delay_ms / 1000)
            wait(delay_ms)
    return success_count


def discover(adapter: PlatformAdapter) -> list[Job]:
    """Log in and search one platform; a failure there yields no jobs, not a crash."""
    try:
        adapter.login()
        return adapter.search()
    except (PlaywrightError, ApplierError) as exc:
        log.error("[%s] login/search failed: %s", adapter.platform, short_message(exc))
        return []


def run(*, keep_open: bool = True, config: dict[str, Any] | None = None) -> dict[str, Any]:
    cfg = config or load_config()
    ensure_dirs()

    search_cfg = cfg["search"]
    app_cfg = cfg["application"]
    log.info("Job types: %s", ", ".join(search_cfg["keywords"]) or "(none)")
    log.info("Location:  %s", search_cfg["location"])
    log.info("Max apps:  %d", app_cfg["max_applications"])

    catalogue = JobCatalogue.load(JOBS_FILE)
    store = AnswerStore.load(ANSWERS_FILE)
    resolver = AnswerResolver(store)

    attempted: list[Job] = []
    applied = 0
    new_count = 0
    session = BrowserSession(get_profile_dir(), headless=run_headless())
    with session as page:
        for platform in search_cfg["platforms"]:
            try:
                adapter = get_adapter(platform, page, cfg)
            except ValueError as exc:
                log.error("%s", exc)
                continue

            new_count += len(catalogue.merge(discover(adapter)))
            catalogue.save()

            remaining = app_cfg["max_applications"] - len(attempted)
            to_apply = [j for j in catalogue.pending() if j.platform == adapter.platform][:max(remaining, 0)]
            log.info("Starting applications for %d %s jobs...", len(to_apply), platform)
            controller = ApplicationFlowController(adapter, resolver)
            applied += apply_batch(
                to_apply,
                controller,
                catalogue,
                delay_ms=int(app_cfg["delay_between_applications"]),
                wait=adapter.pause,
            )
            attempted.extend(to_apply)

        log.info("\n%s", build_summary(attempted, JOBS_FILE))
        if keep_open:
            session.wait_until_closed()

    return {
        "jobs_total": len(catalogue),
        "jobs_new": new_count,
        "attempted": len(attempted),
        "applied": applied,
        "answers_learned": len(store),
    }
