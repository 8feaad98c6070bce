#!/usr/bin/env python3
"""Entry point: log in, search, and apply to unapplied jobs.

    python run_agent.py            # keep the browser open afterwards
    python run_agent.py --close    # close the browser when the batch ends
    python run_agent.py --verbose  # show debug output on the console
"""
from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from applier.config import config_path
from applier.log import get_logger, setup_logging

log = get_logger(__name__)


def _check_setup() -> bool:
    """Return True if the config file still needs to be created."""
    path = config_path()
    if not path.exists():
        print()
        print(f"  No config found at {path}.")
        print("  Copy config/profile.example.yaml to config/profile.yaml and fill it in.")
        print()
        return True
    return False


if __name__ == "__main__":
    log_file = setup_logging("DEBUG" if "--verbose" in sys.argv else None)
    if log_file:
        log.info("Writing log to %s", log_file)
    if _check_setup():
        sys.exit(1)

    from applier.agent import run

    try:
        result = run(keep_open="--close" not in sys.argv)
    except Exception as exc:
        log.error("Fatal error: %s", exc)
        sys.exit(1)
    log.info("Run complete.")
    log.info("  Jobs in catalogue: %d (%d new)", result["jobs_total"], result["jobs_new"])
    log.info("  Attempted: %d, applied: %d", result["attempted"], result["applied"])
    log.info("  Saved answers: %d", result["answers_learned"])
