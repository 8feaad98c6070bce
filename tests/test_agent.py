"""Batch loop, discovery, summary and config loading."""
import json
from unittest.mock import MagicMock

import pytest
from playwright.sync_api import Error as PlaywrightError

from applier.adapters import IndeedAdapter, SeekAdapter
from applier.agent import apply_batch, discover
from applier.catalogue import JobCatalogue
from applier.config import DEFAULTS, load_config
from applier.flow import ApplicationFlowController
from applier.models import Job
from applier.report import build_summary


def _jobs(n):
    return [Job(title=f"Dev {i}", company="Acme", location="Sydney", url=f"https://x.com/job/{i}")
            for i in range(n)]


def test_batch_records_each_outcome_and_paces_attempts(scripted, resolver, tmp_path):
    jobs = _jobs(3)
    catalogue = JobCatalogue(tmp_path / "jobs.json", jobs)
    adapter = scripted(submit_steps="always")
    controller = ApplicationFlowController(adapter, resolver)
    waits = []

    applied = apply_batch(jobs, controller, catalogue, delay_ms=30_000, wait=waits.append)

    assert applied == 3
    assert waits == [30_000, 30_000]
    stored = json.loads((tmp_path / "jobs.json").read_text(encoding="utf-8"))
    assert all(d["applied"] for d in stored)


def test_batch_continues_after_a_failed_job(scripted, resolver, tmp_path):
    jobs = _jobs(2)
    catalogue = JobCatalogue(tmp_path / "jobs.json", jobs)
    adapter = scripted(fail_on={"extract": RuntimeError("Target closed")}, submit_steps="always")
    controller = ApplicationFlowController(adapter, resolver)

    applied = apply_batch(jobs, controller, catalogue, delay_ms=0, wait=lambda ms: None)

    assert applied == 0
    assert adapter.names().count("open") == 2
    assert catalogue.pending() == jobs


def test_summary_lists_applied_jobs():
    jobs = _jobs(3)
    jobs[1].applied = True
    jobs[1].work_type = "Hybrid"
    text = build_summary(jobs)
    assert "Successfully applied: 1" in text
    assert "Failed / skipped:     2" in text
    assert "Dev 1 at Acme (Hybrid)" in text


def test_load_config_merges_defaults_and_env(tmp_path, monkeypatch):
    path = tmp_path / "profile.yaml"
    path.write_text(
        "search:\n"
        "  keywords: developer, tester\n"
        "  location: Melbourne\n"
        "application:\n"
        "  max_applications: 3\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("INDEED_EMAIL", "me@example.com")
    monkeypatch.delenv("INDEED_PASSWORD", raising=False)

    cfg = load_config(path)
    assert cfg["search"]["keywords"] == ["developer", "tester"]
    assert cfg["search"]["platforms"] == ["seek"]
    assert cfg["application"]["max_applications"] == 3
    assert cfg["application"]["delay_between_applications"] == 30_000
    assert cfg["login"]["indeed"]["email"] == "me@example.com"
    assert cfg["login"]["indeed"]["password"] == ""


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def _indeed_config():
    cfg = {k: dict(v) for k, v in DEFAULTS.items()}
    cfg["search"].update(keywords=["developer"], location="Sydney")
    cfg["login"] = {"indeed": {"email": "me@example.com", "password": "secret"}}
    return cfg


def test_discover_survives_tab_closed_during_login():
    page = MagicMock()
    page.locator.return_value.first.wait_for.side_effect = PlaywrightError(
        "Target page, context or browser has been closed")
    adapter = IndeedAdapter(page, _indeed_config())

    assert discover(adapter) == []


def test_discover_survives_search_error():
    page = MagicMock()
    adapter = SeekAdapter(page, _indeed_config())
    adapter.login = MagicMock(return_value=True)
    adapter.search = MagicMock(side_effect=PlaywrightError("net::ERR_CONNECTION_RESET"))

    assert discover(adapter) == []


def test_discover_returns_search_results():
    adapter = SeekAdapter(MagicMock(), _indeed_config())
    jobs = _jobs(2)
    adapter.login = MagicMock(return_value=True)
    adapter.search = MagicMock(return_value=jobs)

    assert discover(adapter) == jobs
    adapter.login.assert_called_once()
