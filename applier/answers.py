"""Screening-question answers: the learned store and the resolver on top of it."""
from __future__ import annotations

import json
from pathlib import Path

from applier.errors import PersistenceWriteFailure
from applier.log import get_logger
from applier.matching import is_yes_no, match_phrase, reconcile_option
from applier.storage import write_atomic

log = get_logger(__name__)

# Order matters: the first fragment contained in the label wins.
SCREENING_ANSWERS: dict[str, str] = {
    "right to work": "Yes",
    "work in australia": "Yes",
    "australian citizen": "Yes",
    "visa": "Yes",
    "salary": "65000",
    "expected salary": "65000",
    "salary expectation": "65000",
    "years of experience": "2",
    "how many years": "2",
    "experience": "2",
    "notice period": "2 weeks",
    "available": "Immediately",
    "start date": "Immediately",
    "full time": "Yes",
    "part time": "Yes",
}

BINARY_DEFAULT = "Yes"


class AnswerStore:
    """Question label -> answer, persisted as a JSON object.

    Entries are only ever added or overwritten for the same exact label.
    Every write is flushed to disk straight away; a failed flush is logged
    and the in-memory copy stays authoritative for the rest of the run.
    """

    def __init__(self, path: Path | None = None, answers: dict[str, str] | None = None) -> None:
        self.path = path
        self._answers: dict[str, str] = dict(answers or {})

    @classmethod
    def load(cls, path: Path) -> "AnswerStore":
        store = cls(path)
        if not path.exists():
            log.debug("No saved answers at %s, starting empty", path)
            return store
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.warning("Ignoring unreadable answers file %s: %s", path.name, exc)
            return store
        if not isinstance(data, dict):
            log.warning("Ignoring answers file %s: expected an object", path.name)
            return store
        store._answers = {str(k): str(v) for k, v in data.items()}
        log.info("Loaded %d saved answers from previous sessions", len(store._answers))
        return store

    def __len__(self) -> int:
        return len(self._answers)

    def __contains__(self, label: object) -> bool:
        return label in self._answers

    def get(self, label: str) -> str | None:
        return self._answers.get(label)

    def items(self):
        return self._answers.items()

    def remember(self, label: str, answer: str) -> None:
        self._answers[label] = answer
        try:
            self.flush()
        except PersistenceWriteFailure as exc:
            log.warning("Could not save answer for %r: %s", label, exc)

    def flush(self) -> None:
        if self.path is None:
            return
        write_atomic(self.path, json.dumps(self._answers, indent=2, ensure_ascii=False))


class AnswerResolver:
    """Pick an answer for a screening question, or None to leave it alone.

    Lookup order: learned answers, then the rule table (reconciled against
    the option list when there is one), then "Yes" for plain Yes/No
    questions. Whatever gets picked is written back to the store.
    """

    def __init__(self, store: AnswerStore, rules: dict[str, str] | None = None) -> None:
        self.store = store
        self.rules = SCREENING_ANSWERS if rules is None else rules

    def resolve(self, label: str, options: list[str] | None = None) -> str | None:
        options = list(options or [])
        answer = self._lookup(label, options)
        if answer is not None:
            self.store.remember(label, answer)
        return answer

    def _lookup(self, label: str, options: list[str]) -> str | None:
        learned = match_phrase(label, dict(self.store.items()))
        if learned:
            log.debug("Learned answer for %r via %r", label, learned[0])
            return learned[1]

        rule = match_phrase(label, self.rules)
        if rule:
            phrase, value = rule
            log.debug("Rule %r matched %r", phrase, label)
            if options:
                return reconcile_option(value, options)
            return value

        if is_yes_no(options):
            return BINARY_DEFAULT
        return None
