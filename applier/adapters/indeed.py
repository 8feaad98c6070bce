"""Indeed (au.indeed.com) adapter.

Indeed forms ask for contact details before any screening question, so this
adapter also fills personal fields from the config and attaches the resume.
"""
from __future__ import annotations

from urllib.parse import urlencode

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator

from applier.adapters.base import FIELD_VISIBLE_MS, PlatformAdapter
from applier.config import get_resume_path
from applier.errors import short_message
from applier.log import get_logger
from applier.models import Job, classify_work_type

log = get_logger(__name__)

_AVATAR = '[data-testid="user-avatar"], .user-avatar, [aria-label="User"]'
_EMAIL_INPUT = 'input[type="email"], input[id="email"], input[name="email"]'
_PASSWORD_INPUT = 'input[type="password"], input[id="password"], input[name="password"]'


def _field_patterns(label: str) -> list[str]:
    """Selectors tried in order for an input described by ``label``."""
    squashed = label.lower().replace(" ", "")
    return [
        f'input[id*="{squashed}"]',
        f'input[name*="{squashed}"]',
        f'input[placeholder*="{label}" i]',
        f'input[id*="{label.split(" ")[0].lower()}"]',
    ]


def _text(locator: Locator) -> str:
    try:
        return (locator.first.text_content(timeout=FIELD_VISIBLE_MS) or "").strip()
    except PlaywrightError:
        return ""


class IndeedAdapter(PlatformAdapter):
    platform = "indeed"
    base_url = "https://au.indeed.com"

    apply_selectors = (
        'button[data-testid="apply-button"]',
        'button:has-text("Apply now")',
        'button:has-text("Apply")',
    )
    submit_phrases = ("submit application", "send application", "submit")

    def login(self) -> bool:
        creds = self.config.get("login", {}).get("indeed", {})
        email, password = creds.get("email"), creds.get("password")
        if not email or not password:
            log.info("No Indeed login credentials in config, continuing without login")
            return False

        log.info("Logging into Indeed...")
        self.goto(f"{self.base_url}/auth")
        self.page.wait_for_load_state("networkidle")

        avatar = self.page.locator(_AVATAR).first
        if self._visible(avatar, FIELD_VISIBLE_MS):
            log.info("Already logged into Indeed")
            return True

        email_input = self.page.locator(_EMAIL_INPUT).first
        if self._visible(email_input, FIELD_VISIBLE_MS):
            email_input.fill(email)
            self.page.keyboard.press("Enter")
            self.pause(2000)

        password_input = self.page.locator(_PASSWORD_INPUT).first
        if self._visible(password_input, FIELD_VISIBLE_MS):
            password_input.fill(password)
            self.page.keyboard.press("Enter")
            self.pause(3000)

        if self._visible(avatar, FIELD_VISIBLE_MS):
            log.info("Logged into Indeed")
            return True
        log.warning("Indeed login may have failed, continuing anyway")
        return False

    def search(self) -> list[Job]:
        search_cfg = self.config["search"]
        jobs: list[Job] = []
        seen: set[str] = set()

        for keyword in search_cfg["keywords"]:
            query = urlencode({"q": keyword, "l": search_cfg["location"]})
            log.info("Searching Indeed: %r in %s", keyword, search_cfg["location"])
            try:
                self.goto(f"{self.base_url}/jobs?{query}")
                self.page.wait_for_load_state("networkidle")
            except PlaywrightError as exc:
                log.warning("Indeed search for %r failed: %s", keyword, short_message(exc))
                continue

            for card in self.page.locator(".jobsearch-ResultsList > li").all():
                title = _text(card.locator(".jobTitle"))
                try:
                    href = card.locator("a").first.get_attribute("href", timeout=FIELD_VISIBLE_MS) or ""
                except PlaywrightError:
                    href = ""
                if not title or not href:
                    continue
                url = href if href.startswith("http") else f"{self.base_url}{href}"
                if url in seen:
                    continue
                seen.add(url)
                location = _text(card.locator(".companyLocation")) or "Unknown"
                jobs.append(Job(
                    title=title,
                    company=_text(card.locator(".companyName")) or "Unknown",
                    location=location,
                    url=url,
                    work_type=classify_work_type(location, title),
                    platform=self.platform,
                    keyword=keyword,
                ))

        log.info("Total unique Indeed jobs found: %d", len(jobs))
        return jobs

    def fill_profile_fields(self) -> bool:
        personal = self.config.get("personal", {})
        first, last = personal.get("first_name", ""), personal.get("last_name", "")
        fields = [
            ("first name", first),
            ("last name", last),
            ("full name", f"{first} {last}".strip()),
            ("email", personal.get("email", "")),
            ("phone", personal.get("phone", "")),
            ("telephone", personal.get("phone", "")),
        ]
        filled = False
        for label, value in fields:
            if value and self._fill_by_label(label, value):
                filled = True

        resume = get_resume_path(self.config)
        if resume:
            file_input = self.page.locator('input[type="file"]').first
            if self._visible(file_input, FIELD_VISIBLE_MS):
                file_input.set_input_files(str(resume))
                log.info("Attached resume %s", resume.name)
                filled = True
        return filled

    def _fill_by_label(self, label: str, value: str) -> bool:
        for pattern in _field_patterns(label):
            el = self.page.locator(pattern).first
            if self._visible(el, FIELD_VISIBLE_MS):
                el.fill(value)
                return True
        return False
