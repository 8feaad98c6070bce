"""Load run configuration from config/profile.yaml and the environment."""
from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from applier.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
CONFIG_PATH: Path = CONFIG_DIR / "profile.yaml"
DATA_DIR: Path = ROOT_DIR / "data"
PROFILE_DIR: Path = ROOT_DIR / "browser-profile"

JOBS_FILE: Path = DATA_DIR / "jobs.json"
ANSWERS_FILE: Path = DATA_DIR / "saved-answers.json"

DEFAULTS: dict[str, Any] = {
    "search": {
        "keywords": [],
        "location": "",
        "max_pages": 1,
        "platforms": ["seek"],
    },
    "personal": {
        "first_name": "",
        "last_name": "",
        "email": "",
        "phone": "",
        "resume_path": "",
    },
    "application": {
        "max_applications": 10,
        "delay_between_applications": 30_000,
    },
    "login": {
        "indeed": {"email": "", "password": ""},
    },
}


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def config_path() -> Path:
    override = get_env("APPLIER_CONFIG")
    return Path(override).expanduser() if override else CONFIG_PATH


def _merge(base: dict, override: dict) -> dict:
    out = copy.deepcopy(base)
    for key, value in override.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def load_config(path: Path | None = None) -> dict[str, Any]:
    path = path or config_path()
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    cfg = _merge(DEFAULTS, data)

    # A single keyword string is accepted as well as a list
    keywords = cfg["search"]["keywords"]
    if isinstance(keywords, str):
        cfg["search"]["keywords"] = [k.strip() for k in keywords.split(",") if k.strip()]

    indeed = cfg["login"]["indeed"]
    indeed["email"] = get_env("INDEED_EMAIL", indeed.get("email") or "")
    indeed["password"] = get_env("INDEED_PASSWORD", indeed.get("password") or "")

    log.debug("Loaded config from %s", path)
    return cfg


def ensure_dirs() -> None:
    for d in (DATA_DIR, PROFILE_DIR):
        d.mkdir(parents=True, exist_ok=True)


def get_profile_dir() -> Path:
    override = get_env("BROWSER_PROFILE_DIR")
    return Path(override).expanduser() if override else PROFILE_DIR


def get_resume_path(cfg: dict[str, Any]) -> Path | None:
    """Configured resume file, if it exists on disk."""
    raw = (cfg.get("personal") or {}).get("resume_path") or ""
    if not raw:
        return None
    p = Path(raw).expanduser()
    return p if p.is_file() else None


def run_headless() -> bool:
    return get_env("RUN_HEADLESS", "false").lower() in ("1", "true", "yes")
