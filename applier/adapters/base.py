"""Platform adapter interface plus the DOM heuristics most job sites share.

An adapter owns every selector for one site. The flow controller only talks
to the capability methods below; none of them raise when a control is
simply absent, they return False or an empty list instead.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator, Page

from applier.errors import SessionLost, classify_error
from applier.log import get_logger
from applier.matching import (
    COMPLETION_PHRASES,
    CONTINUE_PHRASES,
    COVER_LETTER_SKIP_PHRASES,
    POST_SUBMIT_PHRASES,
    SUBMIT_PHRASES,
    contains_any,
)
from applier.models import Job, QuestionKind, ScreeningQuestion
from applier.retry import retry

log = get_logger(__name__)

NAV_TIMEOUT_MS = 60_000
TRIGGER_VISIBLE_MS = 3_000
FIELD_VISIBLE_MS = 1_000

# Clicks the first enabled clickable whose text (or value) contains a phrase.
# ``dispatch`` fires a synthetic click event instead, which gets through overlays.
_CLICK_BY_TEXT_JS = """
({phrases, dispatch}) => {
  const els = Array.from(document.querySelectorAll(
    'button, [role="button"], input[type="submit"]'));
  const btn = els.find(el => {
    if (el.hasAttribute('disabled') || el.getAttribute('aria-disabled') === 'true') return false;
    const t = (el.textContent?.trim() || el.value || '').toLowerCase();
    return phrases.some(p => t === p || t.includes(p));
  });
  if (!btn) return false;
  if (dispatch) {
    btn.dispatchEvent(new MouseEvent('click', {bubbles: true, cancelable: true}));
  } else {
    btn.click();
  }
  return true;
}
"""

# A label bound to a radio gets its input clicked, not the label text node.
_SKIP_COVER_LETTER_JS = """
(phrases) => {
  const els = Array.from(document.querySelectorAll('label, button, [role="button"]'));
  const target = els.find(el => {
    const t = el.textContent?.toLowerCase() || '';
    return phrases.some(p => t.includes(p));
  });
  if (!target) return false;
  const forId = target.getAttribute('for');
  if (forId) {
    const input = document.getElementById(forId);
    if (input) { input.click(); return true; }
  }
  const nested = target.querySelector('input[type="radio"]');
  (nested || target).click();
  return true;
}
"""

_EXTRACT_QUESTIONS_JS = """
() => {
  const results = [];
  const grouped = new Set();
  const labelText = (el) => el?.textContent?.trim() || '';

  // Radio groups: one question per fieldset / radiogroup, options from each radio's label
  document.querySelectorAll('fieldset, [role="radiogroup"]').forEach(group => {
    const radios = Array.from(group.querySelectorAll('input[type="radio"]'));
    if (!radios.length) return;
    const legend = group.querySelector('legend') ||
      (group.getAttribute('aria-labelledby') &&
       document.getElementById(group.getAttribute('aria-labelledby')));
    const options = radios.map(r => {
      grouped.add(r);
      const lbl = (r.id && document.querySelector(`label[for="${CSS.escape(r.id)}"]`)) || r.closest('label');
      return labelText(lbl) || r.value || '';
    });
    results.push({
      label: labelText(legend).toLowerCase(),
      type: 'radio',
      id: radios[0].id || '',
      name: radios[0].name || '',
      options,
    });
  });

  document.querySelectorAll('label').forEach(label => {
    const text = labelText(label).toLowerCase();
    const forId = label.getAttribute('for') || '';
    const input = forId ? document.getElementById(forId)
                        : label.querySelector('input, select, textarea');
    if (!input || grouped.has(input)) return;

    const tag = input.tagName.toLowerCase();
    const inputType = (input.type || '').toLowerCase();
    if (inputType === 'file' || inputType === 'hidden') return;

    let type = 'text';
    if (tag === 'select') type = 'select';
    else if (inputType === 'radio') type = 'radio';
    else if (inputType === 'checkbox') type = 'checkbox';
    else if (tag === 'textarea') type = 'textarea';

    const options = [];
    if (type === 'select') {
      input.querySelectorAll('option').forEach(o => {
        if (o.value) options.push(o.textContent?.trim() || '');
      });
    }
    results.push({label: text, type, id: input.id || '', name: input.name || '', options});
  });
  return results;
}
"""

_CLICK_RADIO_JS = """
({name, answer}) => {
  const scope = name
    ? Array.from(document.getElementsByName(name))
    : Array.from(document.querySelectorAll('input[type="radio"]'));
  const want = answer.toLowerCase();
  for (const radio of scope) {
    if (radio.type !== 'radio') continue;
    const lbl = (radio.id && document.querySelector(`label[for="${CSS.escape(radio.id)}"]`)) ||
                radio.closest('label') || radio.parentElement;
    if ((lbl?.textContent || '').toLowerCase().includes(want)) {
      radio.click();
      return true;
    }
  }
  return false;
}
"""

_WAIT_FOR_TEXT_JS = """
(phrases) => {
  const body = (document.body?.innerText || '').toLowerCase();
  return phrases.some(p => body.includes(p));
}
"""

_YES_ANSWERS = {"yes", "true", "y"}


def _by_id(element_id: str) -> str:
    return f'[id="{element_id}"]'


class PlatformAdapter(ABC):
    """One instance per site, bound to the live page for the whole run."""

    platform: str = ""
    base_url: str = ""

    # Tried in order; the first visible match is the apply trigger
    apply_selectors: tuple[str, ...] = ()

    continue_phrases: tuple[str, ...] = CONTINUE_PHRASES
    submit_phrases: tuple[str, ...] = SUBMIT_PHRASES
    cover_letter_phrases: tuple[str, ...] = COVER_LETTER_SKIP_PHRASES
    completion_phrases: tuple[str, ...] = COMPLETION_PHRASES
    post_submit_phrases: tuple[str, ...] = POST_SUBMIT_PHRASES

    def __init__(self, page: Page, config: dict[str, Any]) -> None:
        self.page = page
        self.config = config

    # -- session -------------------------------------------------------------

    @abstractmethod
    def login(self) -> bool:
        """Make sure the session is signed in. Returns False if unconfirmed."""

    @abstractmethod
    def search(self) -> list[Job]:
        """Run every configured keyword and return the jobs found."""

    @retry(max_attempts=2, base_delay=2.0, retryable=(PlaywrightError,))
    def goto(self, url: str, *, timeout: int = NAV_TIMEOUT_MS) -> None:
        self.page.goto(url, wait_until="domcontentloaded", timeout=timeout)

    def open_job(self, job: Job) -> None:
        self.page.goto(job.url, wait_until="domcontentloaded", timeout=NAV_TIMEOUT_MS)
        self.pause(2000)

    # -- flow capabilities ---------------------------------------------------

    def find_apply_trigger(self) -> bool:
        for sel in self.apply_selectors:
            btn = self.page.locator(sel).first
            if self._visible(btn, TRIGGER_VISIBLE_MS):
                log.info("Clicking Apply (%s)", sel)
                btn.click()
                self.pause(3000)
                return True
        return False

    def skip_cover_letter(self) -> bool:
        skipped = bool(self.page.evaluate(_SKIP_COVER_LETTER_JS, list(self.cover_letter_phrases)))
        if skipped:
            log.info("Selected \"Don't include a cover letter\"")
            self.pause(1500)
        return skipped

    def fill_profile_fields(self) -> bool:
        """Fill personal details outside the screening questions. No-op by default."""
        return False

    def extract_screening_questions(self) -> list[ScreeningQuestion]:
        raw = self.page.evaluate(_EXTRACT_QUESTIONS_JS) or []
        questions = []
        for item in raw:
            q = ScreeningQuestion.from_raw(item)
            # radios are addressed by group name; an empty name scans every radio
            if q.kind is QuestionKind.RADIO:
                q.locator = item.get("name") or ""
            questions.append(q)
        return questions

    def apply_answer(self, question: ScreeningQuestion, answer: str) -> bool:
        try:
            if question.kind is QuestionKind.SELECT:
                return self._apply_select(question, answer)
            if question.kind is QuestionKind.RADIO:
                return bool(self.page.evaluate(
                    _CLICK_RADIO_JS, {"name": question.locator, "answer": answer}))
            if question.kind is QuestionKind.CHECKBOX:
                return self._apply_checkbox(question, answer)
            return self._apply_text(question, answer)
        except PlaywrightError as exc:
            err = classify_error(exc)
            if isinstance(err, SessionLost):
                raise err from exc
            log.debug("Could not answer %r: %s", question.label, err)
            return False

    def reveal(self) -> None:
        self.page.evaluate("() => window.scrollTo(0, document.body.scrollHeight)")
        self.pause(1500)

    def find_continue_trigger(self) -> bool:
        return self._click_by_text(self.continue_phrases)

    def find_submit_trigger(self) -> bool:
        return self._click_by_text(self.submit_phrases, dispatch=True)

    def detect_completion_signal(self) -> bool:
        body = self.page.evaluate("() => document.body ? document.body.innerText : ''")
        return contains_any(body, self.completion_phrases)

    def wait_for_completion(self, timeout_ms: int = 15_000) -> bool:
        try:
            self.page.wait_for_function(
                _WAIT_FOR_TEXT_JS, arg=list(self.post_submit_phrases), timeout=timeout_ms)
            return True
        except PlaywrightError as exc:
            err = classify_error(exc)
            if isinstance(err, SessionLost):
                raise err from exc
            return False

    def pause(self, ms: int) -> None:
        self.page.wait_for_timeout(ms)

    # -- helpers -------------------------------------------------------------

    def _visible(self, locator: Locator, timeout: int = TRIGGER_VISIBLE_MS) -> bool:
        """Wait briefly for visibility; absence is an answer, not an error."""
        try:
            locator.wait_for(state="visible", timeout=timeout)
            return True
        except PlaywrightError as exc:
            err = classify_error(exc)
            if isinstance(err, SessionLost):
                raise err from exc
            return False

    def _click_by_text(self, phrases: tuple[str, ...], *, dispatch: bool = False) -> bool:
        return bool(self.page.evaluate(
            _CLICK_BY_TEXT_JS, {"phrases": [p.lower() for p in phrases], "dispatch": dispatch}))

    def _apply_select(self, question: ScreeningQuestion, answer: str) -> bool:
        if not question.locator:
            return False
        sel = _by_id(question.locator)
        if not self._visible(self.page.locator(sel).first, FIELD_VISIBLE_MS):
            return False
        try:
            self.page.select_option(sel, label=answer, timeout=FIELD_VISIBLE_MS)
        except PlaywrightError:
            self.page.select_option(sel, value=answer, timeout=FIELD_VISIBLE_MS)
        return True

    def _apply_text(self, question: ScreeningQuestion, answer: str) -> bool:
        if not question.locator:
            return False
        el = self.page.locator(_by_id(question.locator)).first
        if not self._visible(el, FIELD_VISIBLE_MS):
            return False
        el.fill(answer)
        return True

    def _apply_checkbox(self, question: ScreeningQuestion, answer: str) -> bool:
        if not question.locator or answer.strip().lower() not in _YES_ANSWERS:
            return False
        el = self.page.locator(_by_id(question.locator)).first
        if not self._visible(el, FIELD_VISIBLE_MS):
            return False
        el.check()
        return True
