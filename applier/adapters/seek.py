"""Seek (seek.com.au) — Quick Apply.

Login is manual: the persistent browser profile keeps the session between
runs, and on first use the operator signs in within the wait window.
"""
from __future__ import annotations

from urllib.parse import urlencode

from playwright.sync_api import Error as PlaywrightError

from applier.adapters.base import PlatformAdapter
from applier.errors import short_message
from applier.log import get_logger
from applier.models import NOT_LISTED, Job, classify_work_type

log = get_logger(__name__)

LOGIN_WAIT_MS = 90_000

_LOGGED_IN_SELECTORS = (
    '[data-automation="header-profile"]',
    '[data-testid="header-profile-menu"]',
    '[aria-label="Account menu"]',
)

_EXTRACT_CARDS_JS = """
(kw) => {
  const results = [];
  document.querySelectorAll('article').forEach(card => {
    const titleEl = card.querySelector('h3 a') ||
      card.querySelector('[data-automation="jobTitle"]') ||
      card.querySelector('a[id^="job-title"]');
    const title = titleEl?.textContent?.trim() || '';
    const href = card.querySelector('a[href*="/job/"]')?.getAttribute('href') || '';
    if (!title || !href) return;
    const text = (sel) => card.querySelector(sel)?.textContent?.trim() || '';
    results.push({
      title,
      href,
      keyword: kw,
      company: text('[data-automation="job-list-view-job-advertiser"]') ||
               text('a[data-automation="jobCompany"]') || 'Unknown',
      location: text('[data-automation="job-list-item-location"]') || 'Unknown',
      workType: text('[data-automation="job-list-item-work-type"]'),
      salary: text('[data-automation="job-list-item-salary"]'),
    });
  });
  return results;
}
"""


class SeekAdapter(PlatformAdapter):
    platform = "seek"
    base_url = "https://www.seek.com.au"

    apply_selectors = (
        '[data-automation="job-detail-apply"]',
        'button:has-text("Quick apply")',
        'button:has-text("Apply")',
        'a:has-text("Apply")',
    )

    def _is_logged_in(self) -> bool:
        return bool(self.page.evaluate(
            "(sels) => sels.some(s => !!document.querySelector(s))",
            list(_LOGGED_IN_SELECTORS),
        ))

    def login(self) -> bool:
        log.info("Checking Seek login status...")
        self.goto(self.base_url, timeout=30_000)
        self.pause(3000)
        if self._is_logged_in():
            log.info("Already logged into Seek, skipping login")
            return True

        log.info("Not logged in. Please log into Seek in the browser window (waiting up to %ds)",
                 LOGIN_WAIT_MS // 1000)
        self.goto(f"{self.base_url}/oauth/login")
        try:
            self.page.wait_for_selector(", ".join(_LOGGED_IN_SELECTORS), timeout=LOGIN_WAIT_MS)
        except PlaywrightError:
            log.warning("Could not confirm Seek login, continuing anyway")
            return False
        log.info("Logged in, session saved for next time")
        return True

    def search_url(self, keyword: str, page_num: int) -> str:
        query = urlencode({
            "keywords": keyword,
            "where": self.config["search"]["location"],
            "page": page_num,
        })
        return f"{self.base_url}/jobs?{query}"

    def absolute_url(self, href: str) -> str:
        return href if href.startswith("http") else f"{self.base_url}{href}"

    def search(self) -> list[Job]:
        search_cfg = self.config["search"]
        jobs: list[Job] = []
        seen: set[str] = set()

        for keyword in search_cfg["keywords"]:
            log.info("Searching Seek: %r in %s", keyword, search_cfg["location"])
            for page_num in range(1, int(search_cfg.get("max_pages", 1)) + 1):
                try:
                    self.goto(self.search_url(keyword, page_num))
                except PlaywrightError as exc:
                    log.warning("Search page %d for %r failed: %s", page_num, keyword, short_message(exc))
                    break
                self.pause(3000)

                try:
                    cards = self.page.evaluate(_EXTRACT_CARDS_JS, keyword) or []
                except PlaywrightError as exc:
                    log.warning("Reading page %d for %r failed: %s", page_num, keyword, short_message(exc))
                    break

                added = 0
                for card in cards:
                    url = self.absolute_url(card["href"])
                    if url in seen:
                        continue
                    seen.add(url)
                    job = Job(
                        title=card["title"],
                        company=card.get("company") or "Unknown",
                        location=card.get("location") or "Unknown",
                        url=url,
                        work_type=classify_work_type(card.get("workType", ""), card["title"]),
                        salary=card.get("salary") or NOT_LISTED,
                        platform=self.platform,
                        keyword=keyword,
                    )
                    jobs.append(job)
                    log.debug("  %s — %s | %s | %s", job.title, job.company, job.work_type, job.salary)
                    added += 1
                log.info("  Page %d: %d new jobs extracted", page_num, added)
                if added == 0 and page_num > 1:
                    break

        log.info("Total unique Seek jobs found: %d", len(jobs))
        return jobs
